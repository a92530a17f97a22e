"""The routing requirement of a cargo.

A route specification names an origin, a destination and an arrival deadline.
It is satisfied by an itinerary that starts at the origin, ends at the
destination and unloads there on or before the deadline.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from cargotracking.cargo.itinerary import Itinerary
from cargotracking.domain import cargotracking
from cargotracking.location.location import UnLocode
from cargotracking.shared.clock import as_utc
from cargotracking.shared.specification import PredicateSpecification, Specification


def departs_from(origin: str) -> Specification[Itinerary]:
    return PredicateSpecification(
        lambda itinerary: itinerary.initial_departure_location == origin,
        name=f"departs from {origin}",
    )


def arrives_at(destination: str) -> Specification[Itinerary]:
    return PredicateSpecification(
        lambda itinerary: itinerary.final_arrival_location == destination,
        name=f"arrives at {destination}",
    )


def arrives_by(deadline: datetime) -> Specification[Itinerary]:
    deadline = as_utc(deadline)
    return PredicateSpecification(
        lambda itinerary: as_utc(itinerary.final_arrival_time) <= deadline,
        name=f"arrives by {deadline.isoformat()}",
    )


@cargotracking.value_object(part_of="Cargo")
class RouteSpecification:
    origin: String(required=True, max_length=5)
    destination: String(required=True, max_length=5)
    arrival_deadline: DateTime(required=True)

    def defaults(self):
        self.arrival_deadline = as_utc(self.arrival_deadline)

    @invariant.post
    def origin_and_destination_must_differ(self):
        if self.origin and self.origin == self.destination:
            raise ValidationError({"destination": ["Origin and destination cannot be the same"]})

    @classmethod
    def create(
        cls,
        origin: str,
        destination: str,
        arrival_deadline: datetime,
        now: datetime | None = None,
    ) -> "RouteSpecification":
        """Build a new routing requirement; the deadline must lie in the future."""
        arrival_deadline = as_utc(arrival_deadline)
        now = as_utc(now) or datetime.now(UTC)
        if arrival_deadline <= now:
            raise ValidationError({"arrival_deadline": ["Arrival deadline must be in the future"]})

        return cls(
            origin=UnLocode.of(origin).code,
            destination=UnLocode.of(destination).code,
            arrival_deadline=arrival_deadline,
        )

    def as_specification(self) -> Specification[Itinerary]:
        return departs_from(self.origin) & arrives_at(self.destination) & arrives_by(self.arrival_deadline)

    def is_satisfied_by(self, itinerary: Itinerary | None) -> bool:
        if itinerary is None:
            return False
        return self.as_specification().is_satisfied_by(itinerary)
