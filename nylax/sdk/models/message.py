import logging

from .base import APIObject

logger = logging.getLogger(__name__)


class Message(APIObject):
    """
    A received or sent message.

    Only ``unread``, ``starred``, ``label_ids`` and ``folder_id`` can be
    changed through ``update``. The sender is exposed as ``from_``.
    """

    collection_name = "messages"
    attrs = (
        "id", "object", "account_id", "thread_id", "subject", "from", "to",
        "cc", "bcc", "reply_to", "date", "snippet", "body", "unread",
        "starred", "files", "events", "labels", "folders", "label_ids",
        "folder_id",
    )
    read_only_attrs = APIObject.read_only_attrs + (
        "thread_id", "subject", "from", "to", "cc", "bcc", "reply_to", "date",
        "snippet", "body", "files", "events", "labels", "folders",
    )

    def raw(self) -> bytes:
        """Fetch the message as RFC-822 MIME."""
        api = self._require_api()
        logger.debug(f"Fetching raw MIME for message {self.id}")
        return api.get_resource_data(
            self.namespace, self.__class__, self._require_id(),
            {"headers": {"Accept": "message/rfc822"}},
        )

    def mark_as_read(self) -> "Message":
        return self.update(unread=False)

    def mark_as_unread(self) -> "Message":
        return self.update(unread=True)

    def star(self) -> "Message":
        return self.update(starred=True)

    def unstar(self) -> "Message":
        return self.update(starred=False)
