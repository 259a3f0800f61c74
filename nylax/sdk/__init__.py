"""NYLAX SDK - Core library for Nylas email/calendar API access.

This SDK maps resource handles (threads, messages, drafts, labels, files,
contacts, calendars, events) onto REST calls and decodes the JSON responses
into typed objects. It can be used by:
- The nylax CLI
- The nylax MCP server
- Third-party applications

Example usage:
    from nylax.sdk import get_client

    client = get_client()            # token from env or active profile
    print(client.account().email_address)

    for thread in client.threads.where(unread=True).all(limit=5):
        print(thread.subject)

    calendar = client.calendars.first()
    calendar.events.create(title="Standup", when={"time": 1700000000})
"""

from . import config
from . import profiles
from . import auth
from . import models
from .client import APIClient, get_client

__all__ = ["config", "profiles", "auth", "models", "APIClient", "get_client"]
