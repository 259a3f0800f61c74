from .base import APIObject
from .collection import ModelCollection
from .event import Event


class Calendar(APIObject):
    collection_name = "calendars"
    attrs = (
        "id", "object", "account_id", "name", "description", "location",
        "timezone", "read_only", "is_primary",
    )
    read_only_attrs = APIObject.read_only_attrs + ("read_only", "is_primary")

    @property
    def events(self) -> ModelCollection:
        """Events on this calendar. ``create`` fills in ``calendar_id``."""
        return ModelCollection(Event, self._require_api(), self.namespace,
                               {"calendar_id": self._require_id()}, parent=self)
