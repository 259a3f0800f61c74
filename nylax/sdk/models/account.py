from .base import APIObject


class Account(APIObject):
    """The account the access token belongs to. Read-only, fetched from ``/account``."""

    collection_name = "account"
    attrs = (
        "id", "object", "account_id", "name", "email_address", "provider",
        "organization_unit", "sync_state", "linked_at",
    )
