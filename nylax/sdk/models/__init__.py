"""Typed value objects for each API resource."""

from .base import APIObject, attr_name
from .collection import ModelCollection
from .account import Account
from .thread import Thread
from .message import Message
from .draft import Draft
from .label import Label
from .file import File
from .contact import Contact
from .calendar import Calendar
from .event import Event

# Resource name (as used by the CLI and MCP tools) -> model class
RESOURCES = {
    "threads": Thread,
    "messages": Message,
    "drafts": Draft,
    "labels": Label,
    "files": File,
    "contacts": Contact,
    "calendars": Calendar,
    "events": Event,
}

__all__ = [
    "APIObject",
    "attr_name",
    "ModelCollection",
    "Account",
    "Thread",
    "Message",
    "Draft",
    "Label",
    "File",
    "Contact",
    "Calendar",
    "Event",
    "RESOURCES",
]
