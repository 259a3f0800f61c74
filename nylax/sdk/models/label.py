from .base import APIObject


class Label(APIObject):
    collection_name = "labels"
    attrs = ("id", "object", "account_id", "name", "display_name")
