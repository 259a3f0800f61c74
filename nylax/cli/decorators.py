"""CLI decorators for token checking.

Also contains shared display and parsing helpers for the command modules.
"""

import json
import logging
import sys
from datetime import datetime
from functools import wraps

import click

from nylax.sdk.auth import ACCESS_TOKEN_ENV, get_access_token
from nylax.sdk.exceptions import NotConfiguredError, ProfileNotFoundError
from nylax.sdk.profiles import get_profile_status, list_profiles

logger = logging.getLogger(__name__)


# =============================================================================
# Shared Display Helpers (used by profiles_commands.py, __main__.py, decorators)
# =============================================================================

def format_time_ago(iso_timestamp: str) -> str:
    """Format an ISO timestamp as a human-readable 'time ago' string."""
    if not iso_timestamp:
        return "never"
    try:
        dt = datetime.fromisoformat(iso_timestamp)
    except (TypeError, ValueError):
        return "unknown"
    delta = datetime.now() - dt
    if delta.days > 0:
        return f"{delta.days}d ago"
    elif delta.seconds >= 3600:
        return f"{delta.seconds // 3600}h ago"
    elif delta.seconds >= 60:
        return f"{delta.seconds // 60}m ago"
    return "just now"


def format_status(status: dict, width: int = 0) -> str:
    """Format a profile status dict as a colored string.

    Args:
        status: Profile status dict with 'valid' and 'status' keys
        width: If > 0, pad the text to this width BEFORE applying color
               (ANSI codes don't count toward visible width)
    """
    if status["valid"]:
        text, color = "valid", "green"
    elif status["status"] == "unvalidated":
        text, color = "unvalidated", "yellow"
    else:
        text, color = "MISSING", "red"

    if width > 0:
        text = text.ljust(width)
    return click.style(text, fg=color)


def show_profile_guidance(has_active: bool = False, has_any: bool = False):
    """Show guidance when no usable access token is configured."""
    if not has_active and has_any:
        click.secho("No active profile selected.", fg="yellow")
        click.echo("\nTo activate a profile:")
        click.echo("  nylax profiles use <name>")
    elif not has_active:
        click.secho("No profiles configured.", fg="red")
        click.echo("\nTo get started:")
        click.echo("  nylax profiles add <name> --token <access-token>")
        click.echo("  nylax auth url --redirect-uri <uri>    # Or run the OAuth flow")
        click.echo(f"\nOr export {ACCESS_TOKEN_ENV}.")


def echo_json(data):
    """Print a model, list of models or plain data as indented JSON."""

    def _plain(item):
        return item.as_json() if hasattr(item, "as_json") else item

    if isinstance(data, list):
        data = [_plain(i) for i in data]
    else:
        data = _plain(data)
    click.echo(json.dumps(data, indent=2, default=str))


def coerce_value(value: str):
    """Basic type conversion for booleans and numbers given on the command line."""
    if value.lower() in ['true', 'false']:
        return value.lower() == 'true'
    if value.isdigit():
        return int(value)
    if value.replace('.', '', 1).isdigit():
        return float(value)
    return value


def parse_pairs(pairs) -> dict:
    """Turn ('key=value', ...) into a dict with coerced values."""
    parsed = {}
    for pair in pairs:
        if '=' not in pair:
            raise click.BadParameter(f"Expected key=value, got '{pair}'")
        key, value = pair.split('=', 1)
        parsed[key.strip()] = coerce_value(value.strip())
    return parsed


# =============================================================================
# Decorators
# =============================================================================

def require_token(f):
    """
    Decorator to ensure an access token can be resolved before a command runs.
    The profile comes from the global --profile option when given.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        ctx = click.get_current_context()
        profile = (ctx.obj or {}).get("profile")
        try:
            get_access_token(profile)
        except ProfileNotFoundError as e:
            click.secho(f"Error: {e}", fg="red")
            click.echo("\nList available profiles with:")
            click.echo("  nylax profiles list")
            sys.exit(1)
        except NotConfiguredError:
            click.secho("Error: No access token configured.", fg="red")
            profiles = list_profiles()
            show_profile_guidance(
                has_active=False,
                has_any=any(get_profile_status(p["name"])["exists"] for p in profiles),
            )
            sys.exit(1)
        return f(*args, **kwargs)
    return decorated_function
