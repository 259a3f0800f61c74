"""Authentication helpers for NYLAX SDK.

Covers the hosted OAuth flow (authorize URL and code exchange) and
resolution of the access token used for API calls.
"""

import os
import uuid
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from .exceptions import APIError, NotConfiguredError, TransportError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "NYLAS_ACCESS_TOKEN"


def generate_state() -> str:
    """Random opaque value used as the OAuth ``state`` parameter."""
    return str(uuid.uuid4())


def create_auth_url(
    api_server: str,
    app_id: str,
    redirect_uri: str,
    login_hint: Optional[str] = None,
    state: Optional[str] = None,
) -> str:
    """
    Build the URL a user visits to authorize this application.

    Args:
        api_server: Base URL of the API (e.g. https://api.nylas.com)
        app_id: Application client ID
        redirect_uri: Where the user is sent back with ``?code=...``
        login_hint: Optional email address to prefill
        state: Optional state value; a fresh UUID is generated if omitted

    Returns:
        Fully encoded authorize URL
    """
    args = {
        "client_id": app_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": "email",
        "login_hint": login_hint,
        "state": state or generate_state(),
    }
    query = urlencode({k: v for k, v in args.items() if v is not None})
    return f"{api_server.rstrip('/')}/oauth/authorize?{query}"


def exchange_code(
    api_server: str,
    app_id: str,
    app_secret: str,
    code: str,
    http: Optional[httpx.Client] = None,
) -> Optional[str]:
    """
    Exchange an authorization code for an access token.

    Args:
        api_server: Base URL of the API
        app_id: Application client ID
        app_secret: Application client secret
        code: The ``code`` query parameter from the redirect
        http: Optional httpx client to send the request with

    Returns:
        The access token, or None if the response carried none

    Raises:
        APIError: If the token endpoint answers with an error status
        TransportError: If the token endpoint can't be reached
    """
    if not app_id or not app_secret:
        raise NotConfiguredError("app_id and app_secret are required to exchange a code")

    url = f"{api_server.rstrip('/')}/oauth/token"
    form = {
        "client_id": app_id,
        "client_secret": app_secret,
        "grant_type": "authorization_code",
        "code": code,
    }
    headers = {"Accept": "application/json"}

    owns_client = http is None
    client = http or httpx.Client(timeout=30.0)
    try:
        response = client.post(url, data=form, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise APIError(
            f"Token exchange failed: {e.response.text}",
            status_code=e.response.status_code,
        ) from e
    except httpx.RequestError as e:
        raise TransportError(f"Failed to reach {url}: {e}") from e
    finally:
        if owns_client:
            client.close()

    try:
        body = response.json()
    except ValueError as e:
        raise APIError(f"Invalid JSON from token endpoint: {e}",
                       status_code=response.status_code) from e

    token = body.get("access_token") if isinstance(body, dict) else None
    logger.debug(f"Token exchange {'succeeded' if token else 'returned no token'}")
    return token


def get_access_token(profile: Optional[str] = None) -> str:
    """
    Resolve the access token for API calls.

    Order: an explicit profile, then the NYLAS_ACCESS_TOKEN environment
    variable, then the active profile.

    Raises:
        ProfileNotFoundError: If an explicit profile doesn't exist
        NotConfiguredError: If no token can be found
    """
    from .profiles import get_active_profile_name, get_profile_token

    if profile:
        logger.debug(f"Using access token from profile '{profile}'")
        return get_profile_token(profile)

    env_token = os.getenv(ACCESS_TOKEN_ENV)
    if env_token:
        logger.debug(f"Using access token from {ACCESS_TOKEN_ENV}")
        return env_token

    active = get_active_profile_name()
    if active:
        logger.debug(f"Using access token from active profile '{active}'")
        return get_profile_token(active)

    raise NotConfiguredError(
        f"No access token configured. Set {ACCESS_TOKEN_ENV} or run 'nylax profiles add <name>'."
    )
