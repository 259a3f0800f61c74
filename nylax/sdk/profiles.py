"""Access-token profiles for switching between connected accounts.

A profile is one YAML file, ``profiles/<name>/profile.yaml`` beside the
config file, holding the access token plus whatever the last ``/account``
call reported about it (email, account id, provider, when it was checked).
The active profile name lives in the main config under ``active_profile``.
"""

import re
import yaml
import shutil
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional, List, Dict, Any

from .config import get_config_value, set_config_value, get_config_file_path
from .exceptions import InvalidProfileNameError, ProfileNotFoundError

logger = logging.getLogger(__name__)

PROFILE_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9_-]{0,31}$')

PROFILE_FILE = "profile.yaml"

# Account details recorded when a token is checked against /account
ACCOUNT_FIELDS = ("email", "account_id", "provider")


def is_valid_profile_name(name: str) -> bool:
    return bool(PROFILE_NAME_PATTERN.match(name or ""))


def _profiles_root() -> Path:
    return get_config_file_path().parent / "profiles"


def _profile_file(name: str) -> Path:
    return _profiles_root() / name / PROFILE_FILE


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def load_profile_metadata(name: str) -> dict:
    """Read a profile's YAML record; {} when the name is invalid or nothing is stored."""
    if not is_valid_profile_name(name):
        return {}
    path = _profile_file(name)
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable profile '{name}': {e}")
        return {}
    return data if isinstance(data, dict) else {}


def save_profile_metadata(name: str, metadata: dict):
    path = _profile_file(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(metadata, default_flow_style=False))


def profile_exists(name: str) -> bool:
    """A profile only counts once it holds an access token."""
    return bool(load_profile_metadata(name).get("access_token"))


def get_profile_token(name: str) -> str:
    """
    Return the access token stored under ``name``.

    Raises:
        ProfileNotFoundError: If there is no such profile or it holds no token
    """
    token = load_profile_metadata(name).get("access_token")
    if not token:
        raise ProfileNotFoundError(f"Profile '{name}' not found")
    return token


def _summary(name: str, record: dict, active: Optional[str]) -> Dict[str, Any]:
    # never include the token itself
    return {
        "name": name,
        "is_active": name == active,
        "email": record.get("email"),
        "provider": record.get("provider"),
        "last_validated": record.get("last_validated"),
    }


def list_profiles() -> List[Dict[str, Any]]:
    """
    Summaries of every stored profile, sorted by name.

    Each entry has name, is_active, email, provider and last_validated.
    Access tokens are not included.
    """
    root = _profiles_root()
    if not root.is_dir():
        return []
    active = get_active_profile_name()
    names = sorted(p.name for p in root.iterdir() if p.is_dir() and is_valid_profile_name(p.name))
    return [_summary(n, load_profile_metadata(n), active) for n in names]


def get_active_profile_name() -> Optional[str]:
    return get_config_value("active_profile")


def get_active_profile() -> Optional[Dict[str, Any]]:
    """Summary of the active profile, or None when none is selected or it was removed."""
    active = get_active_profile_name()
    if not active:
        return None
    record = load_profile_metadata(active)
    if not record:
        return None
    return _summary(active, record, active)


def set_active_profile(name: str) -> bool:
    """Select ``name`` as the active profile. Returns False if it doesn't exist."""
    if not profile_exists(name):
        return False
    set_config_value("active_profile", name)
    logger.debug(f"Active profile is now '{name}'")
    return True


def get_profile_status(name: str) -> dict:
    """
    Describe whether a profile is usable.

    Returns a dict with:
        - exists: the profile holds an access token
        - valid: the token has been checked against /account at least once
        - status: 'valid', 'unvalidated' or 'missing'
        - reason: why it isn't valid, else None
        - email: account email recorded at the last check
    """
    record = load_profile_metadata(name)
    if not record.get("access_token"):
        status, reason = "missing", f"Profile '{name}' does not exist"
    elif not record.get("last_validated"):
        status, reason = "unvalidated", f"Profile '{name}' has never been validated"
    else:
        status, reason = "valid", None
    return {
        "exists": status != "missing",
        "valid": status == "valid",
        "status": status,
        "reason": reason,
        "email": record.get("email"),
    }


def create_profile(name: str, access_token: str, email: Optional[str] = None,
                   account_id: Optional[str] = None,
                   provider: Optional[str] = None) -> dict:
    """
    Store ``access_token`` under ``name``, replacing any existing profile.

    Passing the account email marks the token as validated.

    Raises:
        InvalidProfileNameError: If the name doesn't match PROFILE_NAME_PATTERN
    """
    if not is_valid_profile_name(name):
        raise InvalidProfileNameError(
            f"Invalid profile name '{name}': use letters, digits, '-' or '_' (max 32)"
        )

    record = {"access_token": access_token, "created": _now()}
    if email:
        record.update(email=email, account_id=account_id, provider=provider,
                      last_validated=_now())
    save_profile_metadata(name, record)
    logger.info(f"Saved profile '{name}'")
    return record


def update_profile_metadata(name: str, **details):
    """Record account details (email, account_id, provider) after a successful check."""
    record = load_profile_metadata(name)
    if not record:
        raise ProfileNotFoundError(f"Profile '{name}' not found")
    for field in ACCOUNT_FIELDS:
        if details.get(field) is not None:
            record[field] = details[field]
    record["last_validated"] = _now()
    save_profile_metadata(name, record)


def delete_profile(name: str) -> bool:
    """Remove a profile and its token. Returns False if there was nothing to remove."""
    if not is_valid_profile_name(name):
        return False
    folder = _profile_file(name).parent
    if not folder.is_dir():
        return False
    shutil.rmtree(folder)
    logger.info(f"Removed profile '{name}'")
    if get_active_profile_name() == name:
        set_config_value("active_profile", None)
    return True
