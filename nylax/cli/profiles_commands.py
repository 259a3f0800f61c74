"""CLI commands for profile management."""

import sys
import click
from click_option_group import optgroup, RequiredMutuallyExclusiveOptionGroup

from nylax.sdk import get_client
from nylax.sdk.exceptions import NylaxError
from nylax.sdk.profiles import (
    list_profiles,
    get_active_profile,
    set_active_profile,
    profile_exists,
    delete_profile,
    create_profile,
    get_profile_status,
    get_profile_token,
    is_valid_profile_name,
    update_profile_metadata,
)
from .decorators import format_time_ago, format_status, show_profile_guidance


@click.group()
def profiles():
    """Manage access-token profiles for multiple connected accounts."""
    pass


@profiles.command("list")
def list_cmd():
    """List all available profiles."""
    profile_list = list_profiles()

    if not profile_list:
        show_profile_guidance(has_active=False, has_any=False)
        return

    click.echo()
    click.echo(f"{'PROFILE':<16}  {'STATUS':<12}  {'EMAIL':<28}  {'VALIDATED':<10}")
    click.echo("-" * 74)

    for p in profile_list:
        status = get_profile_status(p["name"])

        # pad BEFORE coloring
        if p["is_active"]:
            name_col = click.style(f"* {p['name']}".ljust(16), fg="green", bold=True)
        else:
            name_col = f"  {p['name']}".ljust(16)

        email = p.get("email") or "-"
        if len(email) > 28:
            email = email[:25] + "..."

        click.echo(f"{name_col}  {format_status(status, width=12)}  {email.ljust(28)}  "
                   f"{format_time_ago(p.get('last_validated')).ljust(10)}")

    click.echo("-" * 74)
    if not any(p["is_active"] for p in profile_list):
        show_profile_guidance(has_active=False, has_any=True)


@profiles.command("current")
def current_cmd():
    """Show the currently active profile and its status."""
    profile = get_active_profile()
    if not profile:
        show_profile_guidance(has_active=False, has_any=bool(list_profiles()))
        sys.exit(1)

    status = get_profile_status(profile["name"])
    click.echo(f"Active Profile: {profile['name']}")
    click.echo(f"  Status: {format_status(status)}")
    if profile.get("email"):
        click.echo(f"  Email: {profile['email']}")
    if profile.get("provider"):
        click.echo(f"  Provider: {profile['provider']}")


def _validate_token(access_token: str) -> dict:
    """Call /account with the token and return its details."""
    with get_client(access_token=access_token) as client:
        account = client.account()
    return {
        "email": account.email_address,
        "account_id": account.account_id or account.id,
        "provider": account.provider,
    }


@profiles.command("add")
@click.argument("name")
@optgroup.group("Token source", cls=RequiredMutuallyExclusiveOptionGroup)
@optgroup.option("--token", "access_token", help="An existing access token.")
@optgroup.option("--code", help="An OAuth authorization code to exchange for a token.")
@click.option("--no-validate", is_flag=True, help="Store the token without calling the API.")
@click.option("--activate/--no-activate", default=True, help="Make the new profile active.")
def add_cmd(name, access_token, code, no_validate, activate):
    """Create a profile from an access token or an OAuth code."""
    if not is_valid_profile_name(name):
        raise click.UsageError(
            f"Invalid profile name '{name}'. Use letters, digits, '-' or '_' (max 32)."
        )

    try:
        if code:
            with get_client(require_token=False) as client:
                access_token = client.get_auth_token(code)
            if not access_token:
                click.secho("Error: the code exchange returned no access token.", fg="red")
                sys.exit(1)

        details = {} if no_validate else _validate_token(access_token)
        create_profile(name, access_token, **details)
    except NylaxError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    click.secho(f"✓ Created profile '{name}'", fg="green")
    if details.get("email"):
        click.echo(f"  Email: {details['email']}")
    if activate:
        set_active_profile(name)
        click.echo("  Now active.")


@profiles.command("use")
@click.argument("name")
def use_cmd(name):
    """Switch the active profile."""
    if not set_active_profile(name):
        click.secho(f"Error: Profile '{name}' not found.", fg="red")
        sys.exit(1)
    click.secho(f"✓ Active profile: {name}", fg="green")


@profiles.command("remove")
@click.argument("name")
@click.confirmation_option(prompt="Delete this profile and its access token?")
def remove_cmd(name):
    """Delete a profile."""
    if not delete_profile(name):
        click.secho(f"Error: Profile '{name}' not found.", fg="red")
        sys.exit(1)
    click.echo(f"✓ Deleted profile '{name}'")


@profiles.command("validate")
@click.argument("name", required=False)
def validate_cmd(name):
    """Check a profile's token against the API (defaults to the active one)."""
    if not name:
        active = get_active_profile()
        if not active:
            show_profile_guidance(has_active=False, has_any=bool(list_profiles()))
            sys.exit(1)
        name = active["name"]

    if not profile_exists(name):
        click.secho(f"Error: Profile '{name}' not found.", fg="red")
        sys.exit(1)

    try:
        details = _validate_token(get_profile_token(name))
    except NylaxError as e:
        click.secho(f"✗ {name}: {e}", fg="red")
        sys.exit(1)

    update_profile_metadata(name, **details)
    click.secho(f"✓ {name}: {details['email']} ({details['provider']})", fg="green")
