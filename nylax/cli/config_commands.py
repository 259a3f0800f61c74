import click
import yaml

from nylax.sdk import config

# Define the schema of allowed configuration keys
ALLOWED_CONFIG = {
    "api.server": {"type": str},
    "api.app_id": {"type": str},
    "api.app_secret": {"type": str, "secret": True},
    "api.timeout": {"type": float},
}


@click.group()
def config_group():
    """Commands for managing nylax configuration."""
    pass


@config_group.command('view')
def view_config():
    """Displays the current nylax configuration (secrets masked)."""
    config_data = config.load_config()
    api = config_data.get("api") or {}
    if api.get("app_secret"):
        api["app_secret"] = "********"
    click.echo(yaml.dump(config_data, default_flow_style=False))


@config_group.command('set')
@click.argument('key')
@click.argument('value')
def set_config(key, value):
    """
    Sets a configuration value for a supported key.

    \b
    Supported Keys:
      - api.server:     Base URL of the API (default https://api.nylas.com)
      - api.app_id:     Application client ID (needed for OAuth)
      - api.app_secret: Application client secret (needed for OAuth)
      - api.timeout:    Request timeout in seconds

    \b
    Examples:
      nylax config set api.app_id abc123
      nylax config set api.timeout 60
    """
    if key not in ALLOWED_CONFIG:
        raise click.UsageError(f"Configuration key '{key}' is not supported.")

    key_schema = ALLOWED_CONFIG[key]
    if key_schema["type"] is float:
        try:
            value = float(value)
        except ValueError:
            raise click.UsageError(f"Invalid value '{value}' for key '{key}': expected a number.")

    config.set_config_value(key, value)
    shown = "********" if key_schema.get("secret") else value
    click.echo(f"✓ Set '{key}' to: {shown}")
