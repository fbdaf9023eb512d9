import google.auth
from google.oauth2 import service_account
from googleapiclient.discovery import build

# Read-only access is enough to fetch live container versions
SCOPES = [
    'https://www.googleapis.com/auth/tagmanager.readonly'
]

def get_credentials(credentials_file=None):
    """
    Get credentials for the Tag Manager API.

    Uses the service account key file if one is given, otherwise falls back to
    Application Default Credentials (the function's runtime service account).
    """
    try:
        if credentials_file:
            creds = service_account.Credentials.from_service_account_file(
                credentials_file, scopes=SCOPES)
            print(f"Authenticated with service account key {credentials_file}")
        else:
            creds, _ = google.auth.default(scopes=SCOPES)
            print("Authenticated with application default credentials")
        return creds

    except Exception as e:
        print(f"Error authenticating with Google: {e}")
        raise

def initialize_gtm_service(credentials_file=None):
    """Initialize and return the GTM API service."""
    credentials = get_credentials(credentials_file)
    return build('tagmanager', 'v2', credentials=credentials, cache_discovery=False)
