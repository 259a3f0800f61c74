"""NYLAX CLI - Command-line interface for Nylas Access."""

import logging
import os
import sys
from dotenv import load_dotenv
import click

from nylax import __version__
from nylax.sdk import get_client
from nylax.sdk.auth import ACCESS_TOKEN_ENV, create_auth_url
from nylax.sdk.config import get_api_settings, get_config_file_path
from nylax.sdk.exceptions import NylaxError
from nylax.sdk.profiles import get_active_profile, get_profile_status, list_profiles

from .config_commands import config_group as config_module
from .profiles_commands import profiles as profiles_module
from .resource_commands import groups as resource_groups


# Configure logging at the application level
if not logging.root.handlers:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                        format='%(asctime)s - %(levelname)s - %(message)s')
# Suppress per-request INFO logs from httpx
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


from .decorators import echo_json, format_status, require_token, show_profile_guidance


@click.group()
@click.version_option(__version__, prog_name="nylax")
@click.option('--profile', default=None, help='Profile to use instead of the active one.')
@click.pass_context
def nylax(ctx, profile):
    """Nylas Access (NYLAX) CLI.

    Read and manage email, contacts and calendars of a connected account.
    """
    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile


# Status command - shows current configuration and profile status
@click.command()
@click.option('--check', is_flag=True, help='Call the API to confirm the token works.')
@click.pass_context
def status(ctx, check):
    """Show current configuration and profile status."""
    settings = get_api_settings()

    click.echo("\n" + "=" * 50)
    click.echo("nylax Status")
    click.echo("=" * 50)
    click.echo(f"\nConfig file: {get_config_file_path()}")
    click.echo(f"API server:  {settings['api_server']}")
    click.echo(f"App ID:      {settings['app_id'] or '-'}")

    explicit = ctx.obj.get("profile")
    if os.getenv(ACCESS_TOKEN_ENV) and not explicit:
        click.echo(f"\nToken source: {ACCESS_TOKEN_ENV} environment variable")
    else:
        active = {"name": explicit} if explicit else get_active_profile()
        if not active:
            click.echo()
            show_profile_guidance(has_active=False, has_any=bool(list_profiles()))
            sys.exit(1)
        profile_status = get_profile_status(active["name"])
        click.echo(f"\nProfile: {active['name']}")
        click.echo(f"  Status: {format_status(profile_status)}")
        if not profile_status["exists"]:
            click.echo(f"  Reason: {profile_status['reason']}")
            sys.exit(1)
        if profile_status.get("email"):
            click.echo(f"  Email: {profile_status['email']}")

    if check:
        click.echo("\nCalling /account...")
        try:
            with get_client(profile=explicit) as client:
                account = client.account()
            click.secho(f"  ✓ {account.email_address} ({account.provider}, "
                        f"sync: {account.sync_state})", fg="green")
        except NylaxError as e:
            click.secho(f"  ✗ {e}", fg="red")
            sys.exit(1)

    click.echo("\n" + "=" * 50)


@click.command()
@require_token
@click.pass_context
def account(ctx):
    """Show the account the access token belongs to."""
    try:
        with get_client(profile=ctx.obj.get("profile")) as client:
            echo_json(client.account())
    except Exception as e:
        logger.critical(f"An error occurred fetching the account: {e}", exc_info=True)
        sys.exit(1)


# Auth group
@click.group()
def auth():
    """Hosted OAuth helpers."""
    pass


@auth.command('url')
@click.option('--redirect-uri', required=True, help='Where the provider redirects with ?code=...')
@click.option('--login-hint', default=None, help='Email address to prefill.')
def auth_url(redirect_uri, login_hint):
    """Print the URL a user visits to connect an account."""
    settings = get_api_settings()
    if not settings["app_id"]:
        click.secho("Error: api.app_id is not configured.", fg="red")
        click.echo("\nTo fix:")
        click.echo("  nylax config set api.app_id <client-id>")
        sys.exit(1)
    click.echo(create_auth_url(settings["api_server"], settings["app_id"], redirect_uri,
                               login_hint=login_hint))


@auth.command('exchange')
@click.argument('code')
def auth_exchange(code):
    """Exchange an authorization code and print the access token."""
    try:
        with get_client(require_token=False) as client:
            token = client.get_auth_token(code)
    except NylaxError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)
    if not token:
        click.secho("Error: the code exchange returned no access token.", fg="red")
        sys.exit(1)
    click.echo(token)
    click.echo("\nStore it as a profile with:", err=True)
    click.echo("  nylax profiles add <name> --token <token>", err=True)


# Add commands to groups using add_command()
nylax.add_command(status, name='status')
nylax.add_command(account, name='account')
nylax.add_command(auth, name='auth')
nylax.add_command(config_module, name='config')
nylax.add_command(profiles_module, name='profiles')
for _name, _group in resource_groups.items():
    nylax.add_command(_group, name=_name)


def main():
    """Entry point for the CLI."""
    load_dotenv()
    nylax(obj={})


if __name__ == "__main__":
    main()
