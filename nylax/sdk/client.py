"""HTTP dispatcher shared by every resource type.

APIClient turns (namespace, model class, id, filters) into a URL, sends the
request with Basic auth built from the access token, and decodes the JSON
body into model instances.
"""

import base64
import logging
import time
from typing import Any, Dict, List, Optional, Type

import httpx

from . import auth
from .config import DEFAULT_API_SERVER, get_api_settings
from .exceptions import (
    APIError,
    AuthenticationError,
    NotConfiguredError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .models import (
    Account,
    APIObject,
    Calendar,
    Contact,
    Draft,
    Event,
    File,
    Label,
    Message,
    ModelCollection,
    Thread,
)

logger = logging.getLogger(__name__)

WRAPPER_NAME = "python"


class APIClient:
    """
    Client for the Nylas REST API.

    Example usage:
        with APIClient(app_id, app_secret, access_token) as client:
            for thread in client.threads.where(unread=True).all(limit=10):
                print(thread.subject)
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        access_token: Optional[str] = None,
        api_server: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.app_id = app_id
        self.app_secret = app_secret
        self.access_token = access_token
        self.api_server = (api_server or DEFAULT_API_SERVER).rstrip("/")
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "authenticated" if self.access_token else "anonymous"
        return f"<APIClient {self.api_server} ({state})>"

    def close(self) -> None:
        self._http.close()

    # -------------------------------------------------------------------------
    # Request plumbing
    # -------------------------------------------------------------------------

    def create_headers(self) -> Dict[str, str]:
        """Default headers: Basic auth with the token as username, empty password."""
        token = base64.b64encode(f"{self.access_token or ''}:".encode()).decode()
        return {
            "Authorization": f"Basic {token}",
            "X-Nylas-API-Wrapper": WRAPPER_NAME,
        }

    def build_url(self, namespace: Optional[str], cls: Optional[Type[APIObject]],
                  id: Optional[str] = None, extra: Optional[str] = None) -> str:
        """
        api_server [/api_root/namespace] [/collection] [/id] [/extra]
        """
        url = self.api_server
        if namespace:
            api_root = cls.api_root if cls is not None else APIObject.api_root
            url += f"/{api_root}/{namespace}"
        if cls is not None:
            url += f"/{cls.collection_name}"
        if id:
            url += f"/{id}"
        if extra:
            url += f"/{extra}"
        return url

    @staticmethod
    def encode_filters(filters: Optional[dict]) -> Dict[str, Any]:
        """Query parameters from filters: None dropped, booleans as true/false."""
        params = {}
        for key, value in (filters or {}).items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = value
        return params

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = self.create_headers()
        headers.update(kwargs.pop("headers", None) or {})

        start_time = time.perf_counter()
        try:
            response = self._http.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"Failed to reach {self.api_server}: {e}") from e
        duration = time.perf_counter() - start_time
        logger.debug(f"{method} {response.url} -> {response.status_code} ({duration:.4f}s)")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._error_from_response(e.response) from e
        return response

    @staticmethod
    def _error_from_response(response: httpx.Response) -> APIError:
        message = response.text or response.reason_phrase
        error_type = None
        body = None
        try:
            body = response.json()
        except ValueError:
            pass
        if isinstance(body, dict):
            message = body.get("message", message)
            error_type = body.get("type")

        status = response.status_code
        if status == 404:
            error_cls = NotFoundError
        elif status in (401, 403):
            error_cls = AuthenticationError
        else:
            error_cls = APIError
        return error_cls(message, status_code=status, error_type=error_type, body=body)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON in response: {e}",
                           status_code=response.status_code) from e

    @staticmethod
    def _split_filters(filters: Optional[dict], *pseudo: str):
        """Pop pseudo-filters (e.g. 'extra', 'headers') out of a copy of filters."""
        remaining = dict(filters or {})
        popped = [remaining.pop(name, None) for name in pseudo]
        return remaining, popped

    # -------------------------------------------------------------------------
    # Generic CRUD
    # -------------------------------------------------------------------------

    def get_resources(self, namespace: Optional[str], cls: Type[APIObject],
                      filters: Optional[dict] = None) -> List[APIObject]:
        url = self.build_url(namespace, cls)
        response = self._request("GET", url, params=self.encode_filters(filters))
        data = self._decode(response) or []
        if isinstance(data, dict):
            data = [data]
        return [cls.from_dict(self, namespace, item) for item in data]

    def get_resource_raw(self, namespace: Optional[str], cls: Type[APIObject],
                         id: Optional[str], filters: Optional[dict] = None) -> Optional[dict]:
        filters, (extra,) = self._split_filters(filters, "extra")
        url = self.build_url(namespace, cls, id, extra)
        response = self._request("GET", url, params=self.encode_filters(filters))
        return self._decode(response)

    def get_resource(self, namespace: Optional[str], cls: Type[APIObject],
                     id: Optional[str], filters: Optional[dict] = None) -> APIObject:
        data = self.get_resource_raw(namespace, cls, id, filters)
        return cls.from_dict(self, namespace, data)

    def get_resource_data(self, namespace: Optional[str], cls: Type[APIObject],
                          id: Optional[str], filters: Optional[dict] = None) -> bytes:
        """Fetch an undecoded body (file downloads, raw MIME)."""
        filters, (extra, headers) = self._split_filters(filters, "extra", "headers")
        url = self.build_url(namespace, cls, id, extra)
        response = self._request("GET", url, params=self.encode_filters(filters),
                                 headers=headers)
        return response.content

    def create_resource(self, namespace: Optional[str], cls: Type[APIObject],
                        data: dict) -> APIObject:
        url = self.build_url(namespace, cls)
        if cls.collection_name == "files":
            # httpx sets the multipart boundary itself
            response = self._request("POST", url, files=data)
        else:
            response = self._request("POST", url, json=data)
        result = self._decode(response)
        # File uploads answer with a list of the created files
        if isinstance(result, list):
            result = result[0] if result else None
        return cls.from_dict(self, namespace, result)

    def update_resource_raw(self, namespace: Optional[str], cls: Type[APIObject],
                            id: str, data: dict) -> Optional[dict]:
        if cls.collection_name == "files":
            raise ValidationError("Files cannot be updated")
        url = self.build_url(namespace, cls, id)
        return self._decode(self._request("PUT", url, json=data))

    def update_resource(self, namespace: Optional[str], cls: Type[APIObject],
                        id: str, data: dict) -> APIObject:
        return cls.from_dict(self, namespace, self.update_resource_raw(namespace, cls, id, data))

    def delete_resource(self, namespace: Optional[str], cls: Type[APIObject],
                        id: str) -> Optional[dict]:
        url = self.build_url(namespace, cls, id)
        return self._decode(self._request("DELETE", url))

    def call_resource_action(self, namespace: Optional[str], cls: Optional[Type[APIObject]],
                             id: Optional[str], action: str,
                             data: Optional[dict] = None) -> Any:
        """POST to /<collection>/<id>/<action>, or to /<action> when cls is None."""
        url = self.build_url(namespace, cls, id, action)
        return self._decode(self._request("POST", url, json=data or {}))

    # -------------------------------------------------------------------------
    # Resource handles
    # -------------------------------------------------------------------------

    def account(self, namespace: Optional[str] = None) -> Account:
        return self.get_resource(namespace, Account, None, {})

    def collection(self, cls: Type[APIObject], namespace: Optional[str] = None) -> ModelCollection:
        return ModelCollection(cls, self, namespace)

    @property
    def threads(self) -> ModelCollection:
        return self.collection(Thread)

    @property
    def messages(self) -> ModelCollection:
        return self.collection(Message)

    @property
    def drafts(self) -> ModelCollection:
        return self.collection(Draft)

    @property
    def labels(self) -> ModelCollection:
        return self.collection(Label)

    @property
    def files(self) -> ModelCollection:
        return self.collection(File)

    @property
    def contacts(self) -> ModelCollection:
        return self.collection(Contact)

    @property
    def calendars(self) -> ModelCollection:
        return self.collection(Calendar)

    @property
    def events(self) -> ModelCollection:
        return self.collection(Event)

    # -------------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------------

    def create_auth_url(self, redirect_uri: str, login_hint: Optional[str] = None) -> str:
        return auth.create_auth_url(self.api_server, self.app_id, redirect_uri,
                                    login_hint=login_hint)

    def get_auth_token(self, code: str) -> Optional[str]:
        """Exchange a code and keep the resulting token on this client."""
        token = auth.exchange_code(self.api_server, self.app_id, self.app_secret, code,
                                   http=self._http)
        if token:
            self.access_token = token
        return self.access_token


def get_client(profile: Optional[str] = None, require_token: bool = True,
               **overrides) -> APIClient:
    """
    Build an APIClient from configuration.

    Args:
        profile: Optional profile name to take the access token from
        require_token: When False, a missing token is allowed (OAuth helpers)
        **overrides: Keyword arguments passed straight to APIClient

    Raises:
        NotConfiguredError: If require_token and no token can be resolved
    """
    settings = get_api_settings()
    settings.update(overrides)
    if "access_token" not in settings:
        if require_token:
            settings["access_token"] = auth.get_access_token(profile)
        else:
            try:
                settings["access_token"] = auth.get_access_token(profile)
            except NotConfiguredError:
                settings["access_token"] = None
    logger.debug(f"Building API client for {settings['api_server']}")
    return APIClient(**settings)
