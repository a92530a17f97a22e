"""Repository for the HandlingEvent aggregate."""

from protean.exceptions import ObjectNotFoundError

from cargotracking.domain import cargotracking
from cargotracking.handling.handling_event import HandlingEvent
from cargotracking.handling.history import HandlingHistory


@cargotracking.repository(part_of=HandlingEvent)
class HandlingEventRepository:
    def lookup_handling_history_of_cargo(self, tracking_id: str) -> HandlingHistory:
        """All handling events registered for a cargo, as a HandlingHistory."""
        results = self._dao.query.filter(tracking_id=str(tracking_id)).all()
        return HandlingHistory(results.items)

    def find_existing(self, handling_event_id: str) -> HandlingEvent | None:
        try:
            return self.get(handling_event_id)
        except ObjectNotFoundError:
            return None
