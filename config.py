import os
import json

# Default location of the configuration file, next to the function source
CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')

def load_config(config_path=None):
    """Load config.json from disk. Raises if the file is missing or not valid JSON."""
    path = config_path or os.environ.get('GTM_TOOLS_CONFIG', CONFIG_FILE)
    with open(path, 'r') as f:
        return json.load(f)

def is_valid_container_id(gtm_container):
    """Container entries must look like '<accountId>_<containerId>'."""
    if not isinstance(gtm_container, str):
        return False
    parts = gtm_container.split('_')
    return len(parts) == 2 and all(parts)

def validate_config(config):
    """
    Check that the config has all the required components.

    Returns a dict with 'error' (bool) and 'errorMessage' (the failure codes,
    each terminated with ';').
    """
    msg = ''
    gcs = config.get('gcs')
    slack_output = config.get('slackOutput')

    # A section set to null or of the wrong type counts as missing
    if not isinstance(gcs, dict):
        msg += 'config_missing_gcs;'
    else:
        if not gcs.get('bucketName'):
            msg += 'config_missing_gcs_bucketName;'
        if not gcs.get('fileName'):
            msg += 'config_missing_gcs_fileName;'
    if not isinstance(slack_output, list):
        msg += 'config_missing_slackOutput;'
    elif len(slack_output) == 0:
        msg += 'config_missing_slackOutput_items;'
    else:
        entries = [s if isinstance(s, dict) else {} for s in slack_output]
        valid_items = [s for s in entries if s.get('slackWebhookUrl') and isinstance(s.get('gtmContainers'), list) and s['gtmContainers']]
        if len(valid_items) != len(entries):
            msg += 'invalid_items_in_slackOutput;'
        # Only judge the container IDs of entries that have a list at all
        container_ids = [c for s in entries if isinstance(s.get('gtmContainers'), list) for c in s['gtmContainers']]
        if not all(is_valid_container_id(c) for c in container_ids):
            msg += 'invalid_gtm_container_ids;'

    return {
        'error': msg != '',
        'errorMessage': msg
    }

def log(config, msg):
    """Print a message only if verbose logging is enabled in the config."""
    if config.get('verboseLogging'):
        print(msg)
