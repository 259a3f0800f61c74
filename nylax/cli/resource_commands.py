"""Resource commands for NYLAX CLI.

Every resource gets the same list/get/create/update/delete group; a few
resources add commands of their own (raw MIME, send, upload, download).
"""

import json
import logging
from pathlib import Path

import click

from nylax.sdk import get_client
from nylax.sdk.models import RESOURCES, Calendar, File, Message, Thread
from nylax.sdk.models.file import upload
from .decorators import echo_json, parse_pairs, require_token

logger = logging.getLogger(__name__)


def _client():
    ctx = click.get_current_context()
    return get_client(profile=(ctx.obj or {}).get("profile"))


def _load_data(data, fields) -> dict:
    """Merge a JSON object given with --data and key=value --set pairs."""
    payload = {}
    if data:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"--data is not valid JSON: {e}")
        if not isinstance(payload, dict):
            raise click.BadParameter("--data must be a JSON object")
    payload.update(parse_pairs(fields))
    return payload


def _fail(action: str, e: Exception):
    logger.debug(f"{action} failed", exc_info=True)
    click.echo(f"Error: {e}", err=True)
    raise SystemExit(1)


def make_resource_group(name: str, model_cls) -> click.Group:
    """Build the standard CRUD command group for one resource type."""

    @click.group(name=name, help=f"Operations on {name}.")
    def group():
        pass

    @group.command('list')
    @click.option('--filter', '-f', 'filters', multiple=True,
                  help='Filter as key=value (repeatable), passed through as query parameters.')
    @click.option('--limit', type=int, default=None, help='Maximum items to return.')
    @click.option('--offset', type=int, default=None, help='Items to skip.')
    @require_token
    def list_cmd(filters, limit, offset):
        """List resources."""
        try:
            with _client() as client:
                items = client.collection(model_cls).where(**parse_pairs(filters)).all(
                    limit=limit, offset=offset)
            logger.info(f"Found {len(items)} {name}")
            echo_json(items)
        except click.BadParameter:
            raise
        except Exception as e:
            _fail(f"{name} list", e)

    @group.command('get')
    @click.argument('resource_id')
    @require_token
    def get_cmd(resource_id):
        """Get one resource by ID."""
        try:
            with _client() as client:
                echo_json(client.collection(model_cls).find(resource_id))
        except Exception as e:
            _fail(f"{name} get", e)

    @group.command('delete')
    @click.argument('resource_id')
    @require_token
    def delete_cmd(resource_id):
        """Delete a resource by ID."""
        try:
            with _client() as client:
                client.collection(model_cls).delete(resource_id)
            click.echo(f"✓ Deleted {name[:-1]} {resource_id}")
        except Exception as e:
            _fail(f"{name} delete", e)

    if model_cls is File:
        return group

    @group.command('create')
    @click.option('--data', default=None, help='JSON object with the fields to set.')
    @click.option('--set', 'fields', multiple=True, help='Field as key=value (repeatable).')
    @require_token
    def create_cmd(data, fields):
        """Create a resource."""
        payload = _load_data(data, fields)
        try:
            with _client() as client:
                echo_json(client.collection(model_cls).create(**payload))
        except Exception as e:
            _fail(f"{name} create", e)

    @group.command('update')
    @click.argument('resource_id')
    @click.option('--data', default=None, help='JSON object with the fields to change.')
    @click.option('--set', 'fields', multiple=True, help='Field as key=value (repeatable).')
    @require_token
    def update_cmd(resource_id, data, fields):
        """Update a resource by ID."""
        payload = _load_data(data, fields)
        try:
            with _client() as client:
                obj = model_cls(client)
                obj.id = resource_id
                echo_json(obj.update(**payload))
        except Exception as e:
            _fail(f"{name} update", e)

    return group


groups = {name: make_resource_group(name, model_cls) for name, model_cls in RESOURCES.items()}


@groups["messages"].command('raw')
@click.argument('message_id')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
              help='Write the MIME message to this file instead of stdout.')
@require_token
def message_raw(message_id, output):
    """Fetch a message as raw RFC-822 MIME."""
    try:
        with _client() as client:
            message = Message(client)
            message.id = message_id
            data = message.raw()
        if output:
            Path(output).write_bytes(data)
            click.echo(f"✓ Saved {len(data)} bytes to {output}")
        else:
            click.echo(data.decode('utf-8', errors='replace'))
    except Exception as e:
        _fail("messages raw", e)


@groups["drafts"].command('send')
@click.argument('draft_id')
@require_token
def draft_send(draft_id):
    """Send an existing draft."""
    try:
        with _client() as client:
            draft = client.drafts.find(draft_id)
            echo_json(draft.send())
    except Exception as e:
        _fail("drafts send", e)


@groups["files"].command('upload')
@click.argument('local_path', type=click.Path(exists=True, dir_okay=False))
@require_token
def file_upload(local_path):
    """Upload a local file."""
    try:
        with _client() as client:
            echo_json(upload(client.files, local_path))
    except Exception as e:
        _fail("files upload", e)


@groups["files"].command('download')
@click.argument('file_id')
@click.argument('save_path', type=click.Path(dir_okay=False))
@require_token
def file_download(file_id, save_path):
    """Download a file.

    FILE_ID: The file ID to download
    SAVE_PATH: Local path where the file should be saved
    """
    try:
        with _client() as client:
            f = File(client)
            f.id = file_id
            data = f.download()
        Path(save_path).write_bytes(data)
        echo_json({"path": save_path, "size": len(data)})
    except Exception as e:
        _fail("files download", e)


@groups["threads"].command('messages')
@click.argument('thread_id')
@click.option('--limit', type=int, default=None, help='Maximum messages to return.')
@require_token
def thread_messages(thread_id, limit):
    """List the messages in a thread."""
    try:
        with _client() as client:
            thread = Thread(client)
            thread.id = thread_id
            echo_json(thread.messages.all(limit=limit))
    except Exception as e:
        _fail("threads messages", e)


@groups["calendars"].command('events')
@click.argument('calendar_id')
@click.option('--filter', '-f', 'filters', multiple=True, help='Filter as key=value (repeatable).')
@click.option('--limit', type=int, default=None, help='Maximum events to return.')
@require_token
def calendar_events(calendar_id, filters, limit):
    """List the events on a calendar."""
    try:
        with _client() as client:
            calendar = Calendar(client)
            calendar.id = calendar_id
            echo_json(calendar.events.where(**parse_pairs(filters)).all(limit=limit))
    except click.BadParameter:
        raise
    except Exception as e:
        _fail("calendars events", e)

