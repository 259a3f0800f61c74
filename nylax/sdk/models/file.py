"""Attachments: multipart upload and binary download."""

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict

from .base import APIObject
from ..exceptions import MissingFieldError

logger = logging.getLogger(__name__)


class File(APIObject):
    """
    An uploaded or attached file.

    Create with ``client.files.create(file=(filename, content, content_type))``
    or with ``upload(path)``; the payload goes out as multipart/form-data.
    """

    collection_name = "files"
    attrs = (
        "id", "object", "account_id", "content_type", "size", "filename",
        "message_ids", "content_id", "content_disposition",
    )

    @classmethod
    def prepare_create(cls, data: dict, parent=None) -> Dict[str, Any]:
        if "file" not in data:
            raise MissingFieldError("Missing file: pass file=(filename, content, content_type)")
        return {"file": data["file"]}

    def download(self) -> bytes:
        api = self._require_api()
        logger.debug(f"Downloading file {self.id}")
        return api.get_resource_data(self.namespace, self.__class__, self._require_id(),
                                     {"extra": "download"})


def file_part(path) -> tuple:
    """Build the (filename, content, content_type) multipart tuple for a local file."""
    path = Path(path)
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return (path.name, path.read_bytes(), content_type)


def upload(collection, path) -> File:
    """Upload a local file through a files collection."""
    logger.debug(f"Uploading {path}")
    return collection.create(file=file_part(path))
