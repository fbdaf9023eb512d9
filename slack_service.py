import time
from datetime import timedelta
import humanize
import requests

# Attachment colour and footer identifying messages sent by this tool
SLACK_COLOR = '#36a64f'
SLACK_FOOTER = 'by GTM Tools'

def format_elapsed(delta_ms):
    """Render a duration in milliseconds, e.g. '1 hour, 2 minutes and 3 seconds'."""
    return humanize.precisedelta(timedelta(milliseconds=delta_ms), minimum_unit='seconds', format='%0.1f')

def build_slack_message(last_checked, version, now_ms):
    """
    Compose the Slack message for a newly published container version.

    last_checked is the epoch millis of the previous check, or None if the
    container was never checked. version is the live version resource from
    the GTM API.
    """
    version_id = version.get('containerVersionId')
    container = version.get('container', {})

    if last_checked is None or last_checked > now_ms:
        # Only reachable with hand-edited state, don't show a bogus duration
        text = 'New published version found (time since last check unknown).'
    else:
        text = f"New published version found since last check ({format_elapsed(now_ms - last_checked)} ago)."

    return {
        'attachments': [{
            'fallback': f"Container version {version_id} was recently published",
            'color': SLACK_COLOR,
            'pretext': 'A container version was recently published!',
            'author_name': f"{container.get('publicId')}: {container.get('name')}",
            'title': f"{version_id}: {version.get('name') or '(no name)'}",
            'title_link': version.get('tagManagerUrl'),
            'text': text,
            'mrkdwn_in': ['text'],
            'footer': SLACK_FOOTER,
            'ts': now_ms / 1000
        }]
    }

class IncomingWebhook:
    """Sends messages to a single Slack incoming webhook URL."""

    def __init__(self, url, session=None, timeout=10):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, payload):
        response = self.session.post(self.url, json=payload, timeout=self.timeout)
        # Delivery failures abort the run, nothing is retried
        response.raise_for_status()
        return response

class WebhookRegistry:
    """Webhook senders keyed by URL, scoped to a single run."""

    def __init__(self, factory=IncomingWebhook):
        self._factory = factory
        self._webhooks = {}

    def get(self, url):
        if url not in self._webhooks:
            self._webhooks[url] = self._factory(url)
        return self._webhooks[url]

    def __len__(self):
        return len(self._webhooks)

def send_slack_message(webhook, last_checked, version, now_ms=None):
    """Format and send the notification for a new version through the given webhook."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return webhook.send(build_slack_message(last_checked, version, now_ms))
