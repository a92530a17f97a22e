"""Delivery value objects — the derived transport state of a cargo.

A Delivery is never edited. Every change to a cargo's itinerary, route
specification or handling history produces a new Delivery that replaces the
old one (see cargotracking.cargo.derivation). Absent values stand for
"unknown": no last known location, no current voyage, no estimated time of
arrival, no next expected activity.
"""

from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, ValueObject

from cargotracking.domain import cargotracking
from cargotracking.handling.handling_event import HandlingEventType
from cargotracking.shared.clock import as_utc


class TransportStatus(Enum):
    NOT_RECEIVED = "Not_Received"
    IN_PORT = "In_Port"
    ONBOARD_CARRIER = "Onboard_Carrier"
    CLAIMED = "Claimed"
    UNKNOWN = "Unknown"


class RoutingStatus(Enum):
    NOT_ROUTED = "Not_Routed"
    ROUTED = "Routed"
    MISROUTED = "Misrouted"


@cargotracking.value_object(part_of="Cargo")
class HandlingActivity:
    """A handling the cargo is expected to undergo next."""

    activity_type: String(required=True, choices=HandlingEventType)
    location: String(required=True, max_length=5)
    voyage_number: String(max_length=20)


@cargotracking.value_object(part_of="Cargo")
class LastHandlingEvent:
    """Snapshot of the handling event a Delivery was derived from."""

    handling_event_id: Identifier(required=True)
    event_type: String(required=True, choices=HandlingEventType)
    location: String(required=True, max_length=5)
    voyage_number: String(max_length=20)
    completed_at: DateTime(required=True)
    registered_at: DateTime(required=True)

    def defaults(self):
        self.completed_at = as_utc(self.completed_at)
        self.registered_at = as_utc(self.registered_at)

    @classmethod
    def of(cls, event) -> "LastHandlingEvent | None":
        if event is None or isinstance(event, cls):
            return event
        return cls(
            handling_event_id=str(event.handling_event_id),
            event_type=event.event_type,
            location=event.location,
            voyage_number=event.voyage_number,
            completed_at=event.completed_at,
            registered_at=event.registered_at,
        )


@cargotracking.value_object(part_of="Cargo")
class Delivery:
    transport_status: String(required=True, choices=TransportStatus)
    last_known_location: String(max_length=5)
    current_voyage: String(max_length=20)
    is_misdirected: Boolean(default=False)
    estimated_time_of_arrival: DateTime()
    next_expected_activity: ValueObject(HandlingActivity)
    is_unloaded_at_destination: Boolean(default=False)
    routing_status: String(required=True, choices=RoutingStatus)
    last_event: ValueObject(LastHandlingEvent)
    # Most recent event other than customs clearance; drives the next expected activity
    last_plan_event: ValueObject(LastHandlingEvent)

    def defaults(self):
        self.estimated_time_of_arrival = as_utc(self.estimated_time_of_arrival)

    @property
    def is_on_track(self) -> bool:
        return self.routing_status == RoutingStatus.ROUTED.value and not self.is_misdirected
