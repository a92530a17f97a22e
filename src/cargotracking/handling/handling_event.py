"""HandlingEvent aggregate — a recorded physical fact about a cargo.

A handling event says that a cargo was received, loaded, unloaded, cleared by
customs or claimed at a location at a point in time. Loading and unloading
always happen on a voyage; the other types never do.

An event's identity is derived from the cargo, the completion time and the
type, so the same physical fact reported twice (perhaps with a different
registration time) is one logical event. A later report that places the fact
elsewhere or on another voyage corrects the stored record.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid5

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from cargotracking.domain import cargotracking
from cargotracking.handling.events import HandlingEventRegistered
from cargotracking.shared.clock import as_utc


class HandlingEventType(Enum):
    RECEIVE = "Receive"
    LOAD = "Load"
    UNLOAD = "Unload"
    CUSTOMS = "Customs"
    CLAIM = "Claim"


_VOYAGE_REQUIRED = {HandlingEventType.LOAD, HandlingEventType.UNLOAD}

_HANDLING_EVENT_NAMESPACE = UUID("5b0b6c8e-7f39-4a43-9a55-2f1d2c6e4a10")


def handling_event_type(value) -> HandlingEventType:
    """Accept a HandlingEventType or its value."""
    if isinstance(value, HandlingEventType):
        return value
    try:
        return HandlingEventType(value)
    except ValueError as exc:
        raise ValidationError({"event_type": [f"Unknown handling event type: {value!r}"]}) from exc


def handling_event_identity(tracking_id: str, completed_at: datetime, event_type) -> str:
    """Deterministic identity of the fact (cargo, completion time in UTC, type)."""
    completed_at = as_utc(completed_at)
    kind = handling_event_type(event_type)
    return str(uuid5(_HANDLING_EVENT_NAMESPACE, f"{tracking_id}|{completed_at.isoformat()}|{kind.value}"))


def _check_voyage(kind: HandlingEventType, voyage_number: str | None) -> None:
    if kind in _VOYAGE_REQUIRED and not voyage_number:
        raise ValidationError({"voyage_number": [f"Missing voyage: {kind.value} events require a voyage"]})
    if kind not in _VOYAGE_REQUIRED and voyage_number:
        raise ValidationError({"voyage_number": [f"Unexpected voyage: {kind.value} events cannot have a voyage"]})


@cargotracking.aggregate
class HandlingEvent:
    handling_event_id = Identifier(identifier=True)
    tracking_id = Identifier(required=True)
    event_type = String(required=True, choices=HandlingEventType)
    location = String(required=True, max_length=5)
    voyage_number = String(max_length=20)
    completed_at = DateTime(required=True)
    registered_at = DateTime(required=True)

    def defaults(self):
        self.completed_at = as_utc(self.completed_at)
        self.registered_at = as_utc(self.registered_at)

    @invariant.post
    def voyage_must_match_event_type(self):
        if self.event_type:
            _check_voyage(HandlingEventType(self.event_type), self.voyage_number)

    @classmethod
    def register(
        cls,
        tracking_id: str,
        event_type,
        location: str,
        completed_at: datetime,
        registered_at: datetime | None = None,
        voyage_number: str | None = None,
    ):
        """Record a handling fact. Fails before construction on a type/voyage mismatch."""
        kind = handling_event_type(event_type)
        _check_voyage(kind, voyage_number)
        completed_at = as_utc(completed_at)
        registered_at = as_utc(registered_at) or datetime.now(UTC)

        handling_event = cls(
            handling_event_id=handling_event_identity(tracking_id, completed_at, kind),
            tracking_id=tracking_id,
            event_type=kind.value,
            location=location,
            voyage_number=voyage_number,
            completed_at=completed_at,
            registered_at=registered_at,
        )
        handling_event.raise_(
            HandlingEventRegistered(
                handling_event_id=handling_event.handling_event_id,
                tracking_id=tracking_id,
                event_type=kind.value,
                location=location,
                voyage_number=voyage_number,
                completed_at=completed_at,
                registered_at=registered_at,
            )
        )
        return handling_event

    @property
    def handling_type(self) -> HandlingEventType:
        return HandlingEventType(self.event_type)

    def is_same_fact_as(self, other: "HandlingEvent") -> bool:
        """Same identity, location and voyage; registration time may differ."""
        return (
            self.handling_event_id == other.handling_event_id
            and self.location == other.location
            and (self.voyage_number or None) == (other.voyage_number or None)
        )

    def correct(self, reported: "HandlingEvent") -> None:
        """Take over the location and voyage of a later report of this fact."""
        with atomic_change(self):
            self.location = reported.location
            self.voyage_number = reported.voyage_number
            self.registered_at = reported.registered_at

        self.raise_(
            HandlingEventRegistered(
                handling_event_id=self.handling_event_id,
                tracking_id=self.tracking_id,
                event_type=self.event_type,
                location=self.location,
                voyage_number=self.voyage_number,
                completed_at=self.completed_at,
                registered_at=self.registered_at,
            )
        )
