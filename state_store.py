import os
import json
from google.cloud import storage
from google.api_core.exceptions import NotFound

def _parse_state(data, source):
    """Parse the state document, falling back to an empty state if it is not a JSON object."""
    try:
        state = json.loads(data)
    except json.JSONDecodeError:
        print(f"Error parsing {source}, starting with empty version history.")
        return {}
    if not isinstance(state, dict):
        print(f"State in {source} is not a JSON object, starting with empty version history.")
        return {}
    return state

def _get_blob(storage_client, bucket_name, file_name):
    client = storage_client or storage.Client()
    return client.bucket(bucket_name).blob(file_name)

def load_state(bucket_name, file_name, storage_client=None, backend='gcs'):
    """
    Load the version state object.

    Any problem reading the state (missing object, API error, malformed
    content) results in an empty state so that the run can start over.
    """
    if backend == 'local':
        if not os.path.exists(file_name):
            print(f"{file_name} not found, creating a new one.")
            return {}
        try:
            with open(file_name, 'r', encoding='utf-8') as f:
                data = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {file_name}: {e}. Starting with empty version history.")
            return {}
        state = _parse_state(data, file_name)
        print(f"State file {file_name} found and loaded successfully.")
        return state

    source = f"gs://{bucket_name}/{file_name}"
    try:
        data = _get_blob(storage_client, bucket_name, file_name).download_as_text()
    except NotFound:
        print(f"State file {source} not found, creating a new one.")
        return {}
    except Exception as e:
        print(f"Error loading state from {source}: {e}. Starting with empty version history.")
        return {}
    state = _parse_state(data, source)
    print(f"State file {source} loaded successfully.")
    return state

def save_state(state, bucket_name, file_name, storage_client=None, backend='gcs'):
    """Write the full state object back, overwriting whatever is stored."""
    data = json.dumps(state, indent=1)

    if backend == 'local':
        with open(file_name, 'w') as f:
            f.write(data)
        print(f"Updated {file_name} with latest GTM container versions.")
        return

    _get_blob(storage_client, bucket_name, file_name).upload_from_string(
        data,
        content_type='application/json'
    )
    print(f"Updated gs://{bucket_name}/{file_name} with latest GTM container versions.")
