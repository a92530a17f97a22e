"""Cargo domain events: facts about bookings, routing and delivery progress.

All events are past tense, versioned, and carry the tracking id of the cargo
they concern.
"""

from protean.fields import DateTime, Identifier, String, Text

from cargotracking.domain import cargotracking


@cargotracking.event(part_of="Cargo")
class CargoBooked:
    """A new cargo was booked."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    origin = String(required=True)
    destination = String(required=True)
    arrival_deadline = DateTime(required=True)
    booked_at = DateTime(required=True)


@cargotracking.event(part_of="Cargo")
class CargoAssignedToRoute:
    """A cargo was assigned an itinerary."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    legs = Text(required=True)  # JSON list of leg dicts
    routing_status = String(required=True)
    estimated_time_of_arrival = DateTime()
    assigned_at = DateTime(required=True)


@cargotracking.event(part_of="Cargo")
class RouteSpecificationChanged:
    """The destination or arrival deadline of a cargo changed."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    origin = String(required=True)
    destination = String(required=True)
    arrival_deadline = DateTime(required=True)
    routing_status = String(required=True)
    changed_at = DateTime(required=True)


@cargotracking.event(part_of="Cargo")
class CargoWasMisdirected:
    """The latest handling of a cargo does not fit its itinerary."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    handling_event_id = Identifier()
    last_known_location = String()
    detected_at = DateTime(required=True)


@cargotracking.event(part_of="Cargo")
class CargoWasMisrouted:
    """The itinerary of a cargo no longer satisfies its route specification."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    destination = String(required=True)
    arrival_deadline = DateTime(required=True)
    detected_at = DateTime(required=True)


@cargotracking.event(part_of="Cargo")
class CargoHasArrived:
    """A cargo was unloaded at the final destination of its itinerary."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    location = String(required=True)
    arrived_at = DateTime(required=True)
