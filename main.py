import argparse
import functions_framework
from config import load_config
from check_versions import check_versions

@functions_framework.cloud_event
def get_gtm_info(cloud_event):
    """Entry point for the Cloud Function. Triggered with a Pub/Sub topic, the message itself is ignored."""
    check_versions(load_config())

def main():
    """Run a single version check locally."""
    parser = argparse.ArgumentParser(description='Check GTM containers for newly published versions and notify Slack')
    parser.add_argument('--config', type=str, help='Path to config.json (defaults to the one next to this file)')
    args = parser.parse_args()

    print("GTM Version Change Notifier")
    print("--------------------------------------------------")

    if not check_versions(load_config(args.config)):
        raise SystemExit(1)

    print("Finished checking GTM containers.")

if __name__ == "__main__":
    main()
