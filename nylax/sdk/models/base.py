"""Base value object shared by every API resource.

Resources are plain attribute holders. The ``attrs`` whitelist decides which
JSON keys are copied onto an instance when decoding, and which keys are sent
back when creating or updating. Keys that collide with Python keywords
(``from``) are exposed with a trailing underscore (``from_``).
"""

import keyword
import logging
from typing import Any, Dict, Optional, Tuple

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def attr_name(key: str) -> str:
    """Python attribute name for an API key."""
    return f"{key}_" if keyword.iskeyword(key) else key


class APIObject:
    """
    Intended to be subclassed per resource type.

    Subclasses set ``collection_name`` (the URL segment) and ``attrs``.
    ``read_only_attrs`` are decoded from responses but never sent.
    """

    collection_name: Optional[str] = None
    api_root: str = "n"
    attrs: Tuple[str, ...] = ("id",)
    read_only_attrs: Tuple[str, ...] = ("id", "object", "account_id", "namespace_id")

    def __init__(self, api=None, namespace: Optional[str] = None, **data):
        self.api = api
        self.namespace = namespace
        for key in self.attrs:
            setattr(self, attr_name(key), None)
        self._update(data)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"

    def __eq__(self, other) -> bool:
        if not isinstance(other, APIObject):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return (self.collection_name, self.id) == (other.collection_name, other.id)

    def __hash__(self) -> int:
        if self.id is None:
            return id(self)
        return hash((self.collection_name, self.id))

    @classmethod
    def from_dict(cls, api, namespace: Optional[str], data: Optional[dict]) -> "APIObject":
        """Decode a JSON object, keeping only whitelisted keys."""
        obj = cls(api, namespace)
        obj._update(data or {})
        return obj

    @classmethod
    def _pick(cls, data: dict, key: str):
        """Look up an API key, accepting its Python spelling as well."""
        if key in data:
            return True, data[key]
        alias = attr_name(key)
        if alias != key and alias in data:
            return True, data[alias]
        return False, None

    @classmethod
    def sanitize(cls, data: dict) -> Dict[str, Any]:
        """Keep only writable, whitelisted keys, in their API spelling."""
        sanitized = {}
        for key in cls.attrs:
            if key in cls.read_only_attrs:
                continue
            found, value = cls._pick(data, key)
            if found:
                sanitized[key] = value
        dropped = set(data) - set(sanitized) - {attr_name(k) for k in sanitized}
        if dropped:
            logger.debug(f"Dropped non-writable {cls.__name__} fields: {sorted(dropped)}")
        return sanitized

    @classmethod
    def prepare_create(cls, data: dict, parent=None) -> Dict[str, Any]:
        """Build the create payload. Subclasses fill in or validate fields."""
        return cls.sanitize(data)

    def _update(self, data: dict) -> None:
        for key in self.attrs:
            found, value = self._pick(data, key)
            if found:
                setattr(self, attr_name(key), value)

    def as_json(self) -> Dict[str, Any]:
        """Whitelisted, non-None values keyed by their API names."""
        out = {}
        for key in self.attrs:
            value = getattr(self, attr_name(key), None)
            if value is not None:
                out[key] = value
        return out

    def _require_api(self):
        if self.api is None:
            raise ValidationError(f"{self.__class__.__name__} is not bound to an API client")
        return self.api

    def _require_id(self) -> str:
        if not self.id:
            raise ValidationError(f"{self.__class__.__name__} has no id")
        return self.id

    def update(self, **data) -> "APIObject":
        """Send whitelisted changes and refresh self from the response."""
        api = self._require_api()
        sanitized = self.sanitize(data)
        data = api.update_resource_raw(self.namespace, self.__class__, self._require_id(),
                                       sanitized)
        # explicit nulls in the response clear local values
        self._update(data if isinstance(data, dict) else {})
        return self

    def save(self) -> "APIObject":
        """Create the resource if it has no id, otherwise update it."""
        api = self._require_api()
        if not self.id:
            payload = self.prepare_create(self.as_json())
            created = api.create_resource(self.namespace, self.__class__, payload)
            self._update(created.as_json())
            return self
        return self.update(**self.as_json())

    def delete(self):
        api = self._require_api()
        return api.delete_resource(self.namespace, self.__class__, self._require_id())

    def refresh(self) -> "APIObject":
        """Pull from upstream to update any fields that may have changed."""
        api = self._require_api()
        data = api.get_resource_raw(self.namespace, self.__class__, self._require_id(), {})
        self._update(data or {})
        return self
