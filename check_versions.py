import sys
import time
from auth import initialize_gtm_service
from config import validate_config, log
from gtm_service import get_live_version
from slack_service import WebhookRegistry, send_slack_message
from state_store import load_state, save_state

def current_time_ms():
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)

def add_container_to_state(gtm_state, account_id, container_id):
    """Make sure the state object has an entry for the account and container."""
    # Account ID missing (or not an object in a hand-edited state), adding it to state
    if not isinstance(gtm_state.get(account_id), dict):
        gtm_state[account_id] = {}
    # Container ID missing, adding it to state
    if not isinstance(gtm_state[account_id].get(container_id), dict):
        gtm_state[account_id][container_id] = {}
    return gtm_state

def check_published_version_against_state(config, gtm_service, webhook, gtm_state, account_id, container_id, now=current_time_ms):
    """
    Fetch the live version from the GTM API and compare its version ID with the one in the state object.

    Sends a Slack message through the webhook if a new version was published
    since the previous check. The stored version ID is always replaced with
    the live one.
    """
    label = f"{account_id}_{container_id}"
    container_state = gtm_state[account_id][container_id]

    live_version = get_live_version(gtm_service, account_id, container_id)
    version_id = live_version['containerVersionId']
    previous_version_id = container_state.get('containerVersionId')

    if not previous_version_id:
        # Container hasn't been previously polled
        log(config, f"{label}: Previous entry missing, setting the current version as the new entry.")
    elif previous_version_id != version_id:
        log(config, f"{label}: New version published since previous entry ({previous_version_id} -> {version_id}), notifying Slack.")
        send_slack_message(webhook, container_state.get('lastChecked'), live_version, now())
    else:
        log(config, f"{label}: Published version same as previous entry.")

    # Update the latest version in the state object to the new, published version ID
    container_state['containerVersionId'] = version_id
    return gtm_state

def check_versions(config, gtm_service=None, storage_client=None, now=current_time_ms, webhooks=None):
    """
    Check every configured container for a new published version and notify Slack.

    Returns False if the config is invalid, True after the state was saved.
    Errors from the GTM API, Slack or the final state write are not caught.
    """
    print("Validating config.json")
    validated = validate_config(config)
    if validated['error']:
        print(f"Invalid config.json: {validated['errorMessage']}", file=sys.stderr)
        return False
    print("Validation successful.")

    bucket_name = config['gcs']['bucketName']
    file_name = config['gcs']['fileName']
    backend = config['gcs'].get('backend', 'gcs')

    print("Loading state from Cloud Storage.")
    gtm_state = load_state(bucket_name, file_name, storage_client=storage_client, backend=backend)

    if gtm_service is None:
        gtm_service = initialize_gtm_service(config.get('credentialsFile'))

    # Webhook senders only live for this run
    if webhooks is None:
        webhooks = WebhookRegistry()

    for slack in config['slackOutput']:
        webhook_url = slack['slackWebhookUrl']
        log(config, f"Starting operation for webhook URL {webhook_url}")
        webhook = webhooks.get(webhook_url)

        for gtm_container in slack['gtmContainers']:
            account_id, container_id = gtm_container.split('_')
            log(config, f"{account_id}_{container_id}: Checking version state.")

            # Make sure the container has an entry in the state object
            add_container_to_state(gtm_state, account_id, container_id)

            # Live version ID check against stored ID
            check_published_version_against_state(config, gtm_service, webhook, gtm_state, account_id, container_id, now)

            # Update the last checked time for the container in question to the current time
            gtm_state[account_id][container_id]['lastChecked'] = now()

    print("Writing new state to Cloud Storage.")
    save_state(gtm_state, bucket_name, file_name, storage_client=storage_client, backend=backend)
    return True
