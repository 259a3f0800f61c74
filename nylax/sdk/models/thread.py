from .base import APIObject
from .collection import ModelCollection
from .draft import Draft
from .message import Message


class Thread(APIObject):
    collection_name = "threads"
    attrs = (
        "id", "object", "account_id", "subject", "participants",
        "last_message_timestamp", "last_message_received_timestamp",
        "last_message_sent_timestamp", "first_message_timestamp", "snippet",
        "unread", "starred", "has_attachments", "message_ids", "draft_ids",
        "labels", "folders", "version", "label_ids", "folder_id",
    )
    read_only_attrs = APIObject.read_only_attrs + (
        "subject", "participants", "last_message_timestamp",
        "last_message_received_timestamp", "last_message_sent_timestamp",
        "first_message_timestamp", "snippet", "has_attachments",
        "message_ids", "draft_ids", "labels", "folders", "version",
    )

    @property
    def messages(self) -> ModelCollection:
        return ModelCollection(Message, self._require_api(), self.namespace,
                               {"thread_id": self._require_id()}, parent=self)

    @property
    def drafts(self) -> ModelCollection:
        return ModelCollection(Draft, self._require_api(), self.namespace,
                               {"thread_id": self._require_id()}, parent=self)

    def mark_as_read(self) -> "Thread":
        return self.update(unread=False)

    def mark_as_unread(self) -> "Thread":
        return self.update(unread=True)

    def star(self) -> "Thread":
        return self.update(starred=True)

    def unstar(self) -> "Thread":
        return self.update(starred=False)
