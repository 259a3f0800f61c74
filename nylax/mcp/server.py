"""NYLAX MCP Server - Exposes Nylas email/calendar operations via MCP.

This server uses the NYLAX SDK and whatever access token is currently
configured (NYLAS_ACCESS_TOKEN or the active profile), just like the CLI.

Profile operations are read-only (no creation, no token changes).
"""

import json
import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from nylax.sdk import get_client, profiles
from nylax.sdk.models import RESOURCES

logger = logging.getLogger(__name__)

# Create the MCP server
mcp = FastMCP("nylax")

RESOURCE_NAMES = ", ".join(sorted(RESOURCES))


def _model(resource: str):
    model_cls = RESOURCES.get(resource)
    if model_cls is None:
        raise ValueError(f"Unknown resource '{resource}'. Expected one of: {RESOURCE_NAMES}")
    return model_cls


@mcp.tool()
async def get_account() -> dict[str, Any]:
    """
    Get the connected account (email address, provider, sync state).

    Returns:
        Dict with the account fields
    """
    try:
        with get_client() as client:
            return client.account().as_json()
    except Exception as e:
        logger.error(f"Error getting account: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_resources(
    resource: str,
    filters: Optional[dict[str, Any]] = None,
    limit: int = 25,
    offset: Optional[int] = None,
) -> dict[str, Any]:
    """
    List threads, messages, drafts, labels, files, contacts, calendars or events.

    Args:
        resource: Collection name, e.g. 'threads' or 'events'
        filters: Optional query filters passed straight to the API, e.g.
                 {"unread": true}, {"thread_id": "..."}, {"calendar_id": "..."}
        limit: Maximum items to return (default 25)
        offset: Optional number of items to skip

    Returns:
        Dict with an 'items' list and its 'count'
    """
    try:
        model_cls = _model(resource)
        with get_client() as client:
            items = client.collection(model_cls).where(**(filters or {})).all(
                limit=limit, offset=offset)
        return {"items": [i.as_json() for i in items], "count": len(items)}
    except Exception as e:
        logger.error(f"Error listing {resource}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def get_resource(resource: str, resource_id: str) -> dict[str, Any]:
    """
    Get a single resource by ID.

    Args:
        resource: Collection name, e.g. 'messages'
        resource_id: The resource ID

    Returns:
        Dict with the resource fields
    """
    try:
        model_cls = _model(resource)
        with get_client() as client:
            return client.collection(model_cls).find(resource_id).as_json()
    except Exception as e:
        logger.error(f"Error getting {resource} {resource_id}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def create_resource(resource: str, data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a resource. Only fields the resource accepts are sent.

    Events need a 'calendar_id'. Files cannot be created here (binary upload).

    Args:
        resource: Collection name, e.g. 'drafts' or 'events'
        data: Fields of the new resource

    Returns:
        Dict with the created resource fields
    """
    try:
        model_cls = _model(resource)
        if resource == "files":
            return {"error": "Files must be uploaded with the CLI: nylax files upload <path>"}
        with get_client() as client:
            return client.collection(model_cls).create(**data).as_json()
    except Exception as e:
        logger.error(f"Error creating {resource}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def update_resource(resource: str, resource_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """
    Update a resource. Only writable fields are sent.

    For threads and messages the writable fields are unread, starred,
    label_ids and folder_id.

    Args:
        resource: Collection name
        resource_id: The resource ID
        data: Fields to change

    Returns:
        Dict with the updated resource fields
    """
    try:
        model_cls = _model(resource)
        with get_client() as client:
            obj = model_cls(client, id=resource_id)
            return obj.update(**data).as_json()
    except Exception as e:
        logger.error(f"Error updating {resource} {resource_id}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def delete_resource(resource: str, resource_id: str) -> dict[str, Any]:
    """
    Delete a resource by ID.

    Args:
        resource: Collection name
        resource_id: The resource ID

    Returns:
        Dict with success status
    """
    try:
        model_cls = _model(resource)
        with get_client() as client:
            client.collection(model_cls).delete(resource_id)
        return {"success": True, "id": resource_id}
    except Exception as e:
        logger.error(f"Error deleting {resource} {resource_id}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def send_draft(draft_id: str) -> dict[str, Any]:
    """
    Send an existing draft.

    Args:
        draft_id: The draft ID

    Returns:
        Dict with the sent message fields
    """
    try:
        with get_client() as client:
            draft = client.drafts.find(draft_id)
            return draft.send().as_json()
    except Exception as e:
        logger.error(f"Error sending draft {draft_id}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_profiles() -> dict[str, Any]:
    """
    List configured access-token profiles (tokens are never returned).

    Returns:
        Dict with a 'profiles' list and the 'active' profile name
    """
    try:
        return {
            "profiles": profiles.list_profiles(),
            "active": profiles.get_active_profile_name(),
        }
    except Exception as e:
        logger.error(f"Error listing profiles: {e}")
        return {"error": str(e)}


# =============================================================================
# Resources (read-only data access)
# =============================================================================

@mcp.resource("nylax://profiles")
async def profiles_resource() -> str:
    """List of available access-token profiles."""
    result = await list_profiles()
    return json.dumps(result, indent=2)


# =============================================================================
# Server entry point
# =============================================================================

def run_server():
    """Run the MCP server with stdio transport."""
    mcp.run()


if __name__ == "__main__":
    run_server()
