def get_container_path(account_id, container_id):
    """Build the API path of a container."""
    return f"accounts/{account_id}/containers/{container_id}"

def get_live_version(service, account_id, container_id):
    """
    Get the currently published version of a GTM container.

    Errors from the API (auth, not found, network) are not caught here; a
    failed fetch aborts the run.
    """
    return service.accounts().containers().versions().live(
        parent=get_container_path(account_id, container_id)
    ).execute()
