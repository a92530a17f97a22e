"""Ordered, de-duplicated handling events of one cargo."""

from collections.abc import Iterable, Iterator

from protean.exceptions import ValidationError

from cargotracking.handling.handling_event import HandlingEvent, HandlingEventType
from cargotracking.shared.clock import as_utc
from cargotracking.shared.specification import PredicateSpecification, Specification

NOT_CUSTOMS = PredicateSpecification(
    lambda event: HandlingEventType(event.event_type) != HandlingEventType.CUSTOMS,
    name="not customs",
)


class HandlingHistory:
    """Handling events of a single cargo in completion order.

    Events are kept in a total order on (completion time, registration time,
    insertion sequence), so the most recent event is well defined even when
    events arrive out of order or share a completion instant. Records sharing
    an identity collapse into the one registered last, so a later correction
    replaces an earlier report of the same fact.
    """

    def __init__(self, handling_events: Iterable[HandlingEvent] = ()) -> None:
        distinct: dict[str, tuple[int, HandlingEvent]] = {}
        tracking_ids = set()
        for sequence, event in enumerate(handling_events):
            tracking_ids.add(str(event.tracking_id))
            key = str(event.handling_event_id)
            kept = distinct.get(key)
            if kept is None or as_utc(event.registered_at) >= as_utc(kept[1].registered_at):
                distinct[key] = (sequence, event)

        if len(tracking_ids) > 1:
            raise ValidationError({"tracking_id": [f"Handling history mixes cargoes: {sorted(tracking_ids)}"]})

        ordered = sorted(
            distinct.values(),
            key=lambda entry: (as_utc(entry[1].completed_at), as_utc(entry[1].registered_at), entry[0]),
        )
        self._events: tuple[HandlingEvent, ...] = tuple(event for _, event in ordered)

    @classmethod
    def empty(cls) -> "HandlingHistory":
        return cls()

    def distinct_events_by_completion_time(self) -> list[HandlingEvent]:
        return list(self._events)

    def most_recently_completed_event(self, matching: Specification | None = None) -> HandlingEvent | None:
        """The latest event, optionally only among events satisfying a specification."""
        for event in reversed(self._events):
            if matching is None or matching.is_satisfied_by(event):
                return event
        return None

    def most_recent_plan_event(self) -> HandlingEvent | None:
        """The latest event that advances the route plan; customs clearance does not."""
        return self.most_recently_completed_event(NOT_CUSTOMS)

    def filter(self, specification: Specification) -> list[HandlingEvent]:
        return [event for event in self._events if specification.is_satisfied_by(event)]

    def __iter__(self) -> Iterator[HandlingEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)
