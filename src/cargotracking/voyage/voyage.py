"""Voyage aggregate: a carrier's scheduled sequence of port-to-port movements.

A voyage is identified by its voyage number and owns a Schedule: the ordered
carrier movements of one vessel. Movements chain: each departs from the port
where the previous one arrived, and not before it arrived.
"""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, List, String, ValueObject

from cargotracking.domain import cargotracking
from cargotracking.shared.clock import as_utc


@cargotracking.value_object(part_of="Voyage")
class CarrierMovement:
    """A vessel voyage from one location to another."""

    departure_location: String(required=True, max_length=5)
    arrival_location: String(required=True, max_length=5)
    departure_time: DateTime(required=True)
    arrival_time: DateTime(required=True)

    def defaults(self):
        self.departure_time = as_utc(self.departure_time)
        self.arrival_time = as_utc(self.arrival_time)

    @invariant.post
    def arrival_must_follow_departure(self):
        if self.departure_location == self.arrival_location:
            raise ValidationError({"arrival_location": ["Departure and arrival locations must differ"]})
        if self.departure_time and self.arrival_time and self.arrival_time < self.departure_time:
            raise ValidationError({"arrival_time": ["Arrival time cannot precede departure time"]})


@cargotracking.value_object(part_of="Voyage")
class Schedule:
    """Ordered carrier movements of a voyage."""

    carrier_movements: List(content_type=ValueObject(CarrierMovement), required=True)

    @invariant.post
    def movements_must_chain(self):
        movements = self.carrier_movements or []
        if not movements:
            raise ValidationError({"carrier_movements": ["A schedule needs at least one carrier movement"]})
        for previous, current in zip(movements, movements[1:]):
            if previous.arrival_location != current.departure_location:
                raise ValidationError(
                    {
                        "carrier_movements": [
                            f"Movement departing {current.departure_location} does not continue "
                            f"from {previous.arrival_location}"
                        ]
                    }
                )
            if current.departure_time < previous.arrival_time:
                raise ValidationError(
                    {"carrier_movements": [f"Movement from {current.departure_location} departs before arrival"]}
                )


@cargotracking.aggregate
class Voyage:
    voyage_number: String(identifier=True, max_length=20)
    schedule: ValueObject(Schedule, required=True)

    @property
    def carrier_movements(self) -> list[CarrierMovement]:
        return list(self.schedule.carrier_movements)

    @property
    def departure_location(self) -> str:
        return self.schedule.carrier_movements[0].departure_location

    @property
    def arrival_location(self) -> str:
        return self.schedule.carrier_movements[-1].arrival_location


class VoyageBuilder:
    """Fluent builder for voyages: start at a port, then add movements in order.

        voyage = (
            VoyageBuilder("V100", departure_location="USCHI")
            .add_movement("USNYC", departure_time=t0, arrival_time=t1)
            .add_movement("DEHAM", departure_time=t2, arrival_time=t3)
            .build()
        )
    """

    def __init__(self, voyage_number: str, departure_location: str) -> None:
        self.voyage_number = voyage_number
        self._current_location = departure_location
        self._movements: list[CarrierMovement] = []

    def add_movement(self, arrival_location: str, departure_time: datetime, arrival_time: datetime) -> "VoyageBuilder":
        self._movements.append(
            CarrierMovement(
                departure_location=self._current_location,
                arrival_location=arrival_location,
                departure_time=departure_time,
                arrival_time=arrival_time,
            )
        )
        self._current_location = arrival_location
        return self

    def build(self) -> Voyage:
        return Voyage(
            voyage_number=self.voyage_number,
            schedule=Schedule(carrier_movements=self._movements),
        )
