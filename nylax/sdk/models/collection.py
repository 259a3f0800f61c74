"""Filterable handle on one resource collection."""

import logging
from typing import Iterator, List, Optional, Type

from .base import APIObject

logger = logging.getLogger(__name__)


class ModelCollection:
    """
    A lazily evaluated view of ``/<collection_name>`` with filters.

    Nothing is fetched until ``all``, ``first``, ``find`` or iteration.
    ``parent`` is the object the collection hangs off (a thread for its
    messages, a calendar for its events) and is handed to the model's
    ``prepare_create`` hook.
    """

    def __init__(self, model_cls: Type[APIObject], api, namespace: Optional[str] = None,
                 filters: Optional[dict] = None, parent: Optional[APIObject] = None):
        self.model_cls = model_cls
        self.api = api
        self.namespace = namespace
        self.filters = dict(filters or {})
        self.parent = parent

    def __repr__(self) -> str:
        return f"<ModelCollection {self.model_cls.collection_name} filters={self.filters!r}>"

    def __iter__(self) -> Iterator[APIObject]:
        return iter(self.all())

    def where(self, **filters) -> "ModelCollection":
        """Return a new collection with extra filters merged in."""
        merged = dict(self.filters)
        merged.update(filters)
        return ModelCollection(self.model_cls, self.api, self.namespace, merged, self.parent)

    def all(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[APIObject]:
        filters = dict(self.filters)
        if limit is not None:
            filters["limit"] = limit
        if offset is not None:
            filters["offset"] = offset
        return self.api.get_resources(self.namespace, self.model_cls, filters)

    def first(self) -> Optional[APIObject]:
        items = self.all(limit=1)
        return items[0] if items else None

    def find(self, id: str) -> APIObject:
        return self.api.get_resource(self.namespace, self.model_cls, id, {})

    get = find

    def create(self, **data) -> APIObject:
        payload = self.model_cls.prepare_create(data, self.parent)
        return self.api.create_resource(self.namespace, self.model_cls, payload)

    def delete(self, id: str):
        return self.api.delete_resource(self.namespace, self.model_cls, id)
