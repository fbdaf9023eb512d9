import json
import pytest
from unittest.mock import MagicMock
from google.api_core.exceptions import NotFound

from slack_service import WebhookRegistry

NOW = 1600000000000

class FakeBlob:
    def __init__(self, store, key):
        self.store = store
        self.key = key
        self.content_types = []

    def download_as_text(self):
        if self.key not in self.store:
            raise NotFound(f"No such object: {self.key}")
        return self.store[self.key]

    def upload_from_string(self, data, content_type=None):
        self.content_types.append(content_type)
        self.store[self.key] = data

class FakeStorageClient:
    """In-memory stand-in for google.cloud.storage.Client."""

    def __init__(self):
        self.store = {}
        self.blobs = {}

    def bucket(self, bucket_name):
        client = self

        class _Bucket:
            def blob(self, file_name):
                key = f"{bucket_name}/{file_name}"
                return client.blobs.setdefault(key, FakeBlob(client.store, key))

        return _Bucket()

    def put_json(self, bucket_name, file_name, state):
        self.store[f"{bucket_name}/{file_name}"] = json.dumps(state)

    def get_json(self, bucket_name, file_name):
        return json.loads(self.store[f"{bucket_name}/{file_name}"])

class FakeWebhook:
    def __init__(self, url, sent):
        self.url = url
        self.sent = sent

    def send(self, payload):
        self.sent.append((self.url, payload))

def make_version(version_id, name='Release', public_id='GTM-ABC123', container_name='example.com'):
    return {
        'containerVersionId': version_id,
        'name': name,
        'container': {'publicId': public_id, 'name': container_name},
        'tagManagerUrl': f"https://tagmanager.google.com/#/versions/{version_id}"
    }

def make_gtm_service(live_versions):
    """Mock Tag Manager service answering live() by container path. Values may be exceptions."""
    service = MagicMock()

    def live(parent):
        request = MagicMock()
        result = live_versions[parent]
        if isinstance(result, Exception):
            request.execute.side_effect = result
        else:
            request.execute.return_value = result
        return request

    service.accounts.return_value.containers.return_value.versions.return_value.live.side_effect = live
    return service

def live_calls(service):
    live = service.accounts.return_value.containers.return_value.versions.return_value.live
    return [c.kwargs['parent'] for c in live.call_args_list]

@pytest.fixture
def storage_client():
    return FakeStorageClient()

@pytest.fixture
def sent():
    return []

@pytest.fixture
def webhooks(sent):
    return WebhookRegistry(factory=lambda url: FakeWebhook(url, sent))

@pytest.fixture
def config():
    return {
        'gcs': {'bucketName': 'gtm-state', 'fileName': 'state.json'},
        'verboseLogging': False,
        'slackOutput': [
            {
                'slackWebhookUrl': 'https://hooks.slack.com/services/T000/B000/XXX',
                'gtmContainers': ['1001_2001']
            }
        ]
    }
