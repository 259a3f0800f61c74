from typing import Any, Dict

from .base import APIObject
from ..exceptions import MissingFieldError


class Event(APIObject):
    """
    A calendar event.

    Creation needs a ``calendar_id``; events created through
    ``calendar.events`` take it from the calendar.
    """

    collection_name = "events"
    attrs = (
        "id", "namespace_id", "title", "description", "location",
        "read_only", "when", "busy", "participants", "calendar_id",
        "recurrence", "status", "master_event_id", "original_start_time",
    )
    read_only_attrs = ("id", "namespace_id", "read_only")

    @classmethod
    def prepare_create(cls, data: dict, parent=None) -> Dict[str, Any]:
        sanitized = super().prepare_create(data, parent)
        if not sanitized.get("calendar_id"):
            if parent is not None and parent.collection_name == "calendars" and parent.id:
                sanitized["calendar_id"] = parent.id
            else:
                raise MissingFieldError("Missing calendar_id")
        return sanitized
