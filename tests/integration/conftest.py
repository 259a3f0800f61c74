"""
Fixtures for integration tests against the live API.

These tests need a real access token in NYLAS_ACCESS_TOKEN (or an active
profile). They are skipped otherwise.
"""

import json
import os
import subprocess
from typing import Any, Dict, List

import pytest

from nylax.sdk import get_client
from nylax.sdk.exceptions import NotConfiguredError, ProfileNotFoundError


@pytest.fixture(scope="session", autouse=True)
def require_live_token():
    """Skip the whole session unless an access token can be resolved."""
    try:
        client = get_client()
    except (NotConfiguredError, ProfileNotFoundError):
        pytest.skip("No access token configured; set NYLAS_ACCESS_TOKEN to run integration tests")
    client.close()


@pytest.fixture(scope="session")
def live_client():
    with get_client() as client:
        yield client


@pytest.fixture(scope="session")
def cli_runner():
    """
    Factory fixture that executes CLI commands via subprocess.

    Returns a dict with returncode, stdout, stderr and json (parsed stdout,
    or None when stdout isn't JSON).
    """
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

    def run_command(command_args: List[str]) -> Dict[str, Any]:
        result = subprocess.run(
            ["python3", "-m", "nylax.cli"] + command_args,
            capture_output=True,
            text=True,
            timeout=60,
            cwd=project_root,
        )
        try:
            json_data = json.loads(result.stdout) if result.stdout.strip() else None
        except json.JSONDecodeError:
            json_data = None
        return {
            "returncode": result.returncode,
            "stdout": result.stdout,
            "stderr": result.stderr,
            "json": json_data,
        }

    return run_command
