"""Cargo aggregate: the root of booking, routing and delivery progress.

A cargo is booked with a route specification whose origin is fixed for life.
It is later assigned an itinerary, may have its destination or deadline
changed, and accumulates handling events (kept in their own aggregate and
referenced by tracking id).

The Delivery is derived, never edited: every operation below replaces it with
a fresh derivation from the current itinerary, route specification and
handling history before returning.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, ValueObject

from cargotracking.cargo.delivery import Delivery, RoutingStatus
from cargotracking.cargo.derivation import derive_delivery, rederive_delivery
from cargotracking.cargo.events import (
    CargoAssignedToRoute,
    CargoBooked,
    CargoHasArrived,
    CargoWasMisdirected,
    CargoWasMisrouted,
    RouteSpecificationChanged,
)
from cargotracking.cargo.itinerary import Itinerary
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.domain import cargotracking
from cargotracking.handling.history import HandlingHistory
from cargotracking.location.location import UnLocode


@cargotracking.aggregate
class Cargo:
    tracking_id = Identifier(identifier=True)
    origin = String(required=True, max_length=5)
    route_specification = ValueObject(RouteSpecification, required=True)
    itinerary = ValueObject(Itinerary)
    delivery = ValueObject(Delivery, required=True)
    booked_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def origin_is_fixed(self):
        if self.route_specification and self.origin != self.route_specification.origin:
            raise ValidationError({"origin": ["Route specification origin must match the cargo origin"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def book(cls, tracking_id: str, route_specification: RouteSpecification):
        """Book a new, not yet routed cargo."""
        now = datetime.now(UTC)
        cargo = cls(
            tracking_id=tracking_id,
            origin=route_specification.origin,
            route_specification=route_specification,
            delivery=derive_delivery(None, route_specification, HandlingHistory.empty()),
            booked_at=now,
            updated_at=now,
        )
        cargo.raise_(
            CargoBooked(
                tracking_id=tracking_id,
                origin=route_specification.origin,
                destination=route_specification.destination,
                arrival_deadline=route_specification.arrival_deadline,
                booked_at=now,
            )
        )
        return cargo

    # -------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------
    def assign_to_route(self, itinerary: Itinerary) -> None:
        """Attach a new itinerary, replacing any previous one."""
        previous = self.delivery
        now = datetime.now(UTC)
        with atomic_change(self):
            self.itinerary = itinerary
            self.delivery = rederive_delivery(previous, itinerary, self.route_specification)
            self.updated_at = now

        self.raise_(
            CargoAssignedToRoute(
                tracking_id=self.tracking_id,
                legs=json.dumps(itinerary.as_data()),
                routing_status=self.delivery.routing_status,
                estimated_time_of_arrival=self.delivery.estimated_time_of_arrival,
                assigned_at=now,
            )
        )
        self._raise_delivery_transitions(previous, now)

    def specify_new_route(self, route_specification: RouteSpecification) -> None:
        """Replace the routing requirement; only destination and deadline may change."""
        if route_specification.origin != self.origin:
            raise ValidationError({"origin": [f"Cargo origin {self.origin} cannot be changed"]})

        previous = self.delivery
        now = datetime.now(UTC)
        with atomic_change(self):
            self.route_specification = route_specification
            self.delivery = rederive_delivery(previous, self.itinerary, route_specification)
            self.updated_at = now

        self.raise_(
            RouteSpecificationChanged(
                tracking_id=self.tracking_id,
                origin=route_specification.origin,
                destination=route_specification.destination,
                arrival_deadline=route_specification.arrival_deadline,
                routing_status=self.delivery.routing_status,
                changed_at=now,
            )
        )
        self._raise_delivery_transitions(previous, now)

    def change_destination(self, destination: str) -> None:
        self.specify_new_route(
            RouteSpecification(
                origin=self.origin,
                destination=UnLocode.of(destination).code,
                arrival_deadline=self.route_specification.arrival_deadline,
            )
        )

    def change_deadline(self, arrival_deadline: datetime) -> None:
        self.specify_new_route(
            RouteSpecification.create(
                origin=self.origin,
                destination=self.route_specification.destination,
                arrival_deadline=arrival_deadline,
            )
        )

    # -------------------------------------------------------------------
    # Delivery progress
    # -------------------------------------------------------------------
    def derive_delivery_progress(self, history: HandlingHistory) -> None:
        """Re-derive the delivery after handling events were registered."""
        foreign = {str(e.tracking_id) for e in history} - {str(self.tracking_id)}
        if foreign:
            raise ValidationError(
                {"tracking_id": [f"Handling history of {sorted(foreign)} cannot update cargo {self.tracking_id}"]}
            )

        previous = self.delivery
        now = datetime.now(UTC)
        with atomic_change(self):
            self.delivery = derive_delivery(self.itinerary, self.route_specification, history)
            self.updated_at = now

        self._raise_delivery_transitions(previous, now)

    def _raise_delivery_transitions(self, previous: Delivery | None, now: datetime) -> None:
        current = self.delivery
        was_misdirected = previous is not None and previous.is_misdirected
        was_misrouted = previous is not None and previous.routing_status == RoutingStatus.MISROUTED.value
        had_arrived = previous is not None and previous.is_unloaded_at_destination

        if current.is_misdirected and not was_misdirected:
            self.raise_(
                CargoWasMisdirected(
                    tracking_id=self.tracking_id,
                    handling_event_id=current.last_event.handling_event_id if current.last_event else None,
                    last_known_location=current.last_known_location,
                    detected_at=now,
                )
            )
        if current.routing_status == RoutingStatus.MISROUTED.value and not was_misrouted:
            self.raise_(
                CargoWasMisrouted(
                    tracking_id=self.tracking_id,
                    destination=self.route_specification.destination,
                    arrival_deadline=self.route_specification.arrival_deadline,
                    detected_at=now,
                )
            )
        if current.is_unloaded_at_destination and not had_arrived:
            self.raise_(
                CargoHasArrived(
                    tracking_id=self.tracking_id,
                    location=current.last_known_location,
                    arrived_at=now,
                )
            )
