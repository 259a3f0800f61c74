import logging

from .base import APIObject
from .message import Message

logger = logging.getLogger(__name__)


class Draft(APIObject):
    """An unsent message. ``version`` must be echoed back when sending."""

    collection_name = "drafts"
    attrs = (
        "id", "object", "account_id", "thread_id", "subject", "from", "to",
        "cc", "bcc", "reply_to", "reply_to_message_id", "date", "snippet",
        "body", "unread", "starred", "files", "file_ids", "labels", "folders",
        "version", "tracking",
    )
    read_only_attrs = APIObject.read_only_attrs + (
        "thread_id", "date", "snippet", "unread", "starred", "files", "labels",
        "folders",
    )

    def send(self) -> Message:
        """Send this draft. Unsaved drafts are saved first."""
        api = self._require_api()
        if not self.id:
            self.save()
        data = {"draft_id": self.id, "version": self.version}
        logger.debug(f"Sending draft {self.id} (version {self.version})")
        response = api.call_resource_action(self.namespace, None, None, "send", data)
        return Message.from_dict(api, self.namespace, response)
