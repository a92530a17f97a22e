"""Itinerary and Leg value objects — the planned route of a cargo.

An itinerary is an ordered, non-empty list of legs. Consecutive legs chain:
each leg loads where the previous one unloaded, and not before it unloaded.
A cargo without a route simply has no itinerary.
"""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, List, String, ValueObject

from cargotracking.domain import cargotracking
from cargotracking.handling.handling_event import HandlingEventType
from cargotracking.shared.clock import as_utc


@cargotracking.value_object(part_of="Cargo")
class Leg:
    """One voyage segment between a load and an unload location."""

    voyage_number: String(required=True, max_length=20)
    load_location: String(required=True, max_length=5)
    unload_location: String(required=True, max_length=5)
    load_time: DateTime(required=True)
    unload_time: DateTime(required=True)

    def defaults(self):
        self.load_time = as_utc(self.load_time)
        self.unload_time = as_utc(self.unload_time)

    @invariant.post
    def unload_must_follow_load(self):
        if self.load_location == self.unload_location:
            raise ValidationError({"unload_location": ["Load and unload locations must differ"]})
        if self.load_time and self.unload_time and self.unload_time < self.load_time:
            raise ValidationError({"unload_time": ["Unload time cannot precede load time"]})

    def as_data(self) -> dict:
        return {
            "voyage_number": self.voyage_number,
            "load_location": self.load_location,
            "unload_location": self.unload_location,
            "load_time": self.load_time.isoformat(),
            "unload_time": self.unload_time.isoformat(),
        }


@cargotracking.value_object(part_of="Cargo")
class Itinerary:
    legs: List(content_type=ValueObject(Leg), required=True)

    @invariant.post
    def legs_must_chain(self):
        legs = self.legs or []
        if not legs:
            raise ValidationError({"legs": ["An itinerary needs at least one leg"]})
        for previous, current in zip(legs, legs[1:]):
            if previous.unload_location != current.load_location:
                raise ValidationError(
                    {
                        "legs": [
                            f"Leg on voyage {current.voyage_number} loads at {current.load_location}, "
                            f"but the previous leg unloads at {previous.unload_location}"
                        ]
                    }
                )
            if current.load_time < previous.unload_time:
                raise ValidationError(
                    {"legs": [f"Leg on voyage {current.voyage_number} loads before the previous leg unloads"]}
                )

    @classmethod
    def from_legs_data(cls, legs_data: list[dict]) -> "Itinerary":
        return cls(legs=[Leg(**leg_data) for leg_data in legs_data])

    def as_data(self) -> list[dict]:
        return [leg.as_data() for leg in self.legs]

    @property
    def initial_departure_location(self) -> str:
        return self.legs[0].load_location

    @property
    def final_arrival_location(self) -> str:
        return self.legs[-1].unload_location

    @property
    def final_arrival_time(self) -> datetime:
        return self.legs[-1].unload_time

    def index_of_leg_loading_at(self, location: str, voyage_number: str | None) -> int | None:
        for index, leg in enumerate(self.legs):
            if leg.load_location == location and leg.voyage_number == voyage_number:
                return index
        return None

    def index_of_leg_unloading_at(self, location: str, voyage_number: str | None) -> int | None:
        for index, leg in enumerate(self.legs):
            if leg.unload_location == location and leg.voyage_number == voyage_number:
                return index
        return None

    def is_expected(self, event) -> bool:
        """Whether a handling event fits this plan.

        Works on anything carrying ``event_type``, ``location`` and
        ``voyage_number``: handling events and the snapshots kept in a Delivery.
        """
        kind = HandlingEventType(event.event_type)

        if kind == HandlingEventType.RECEIVE:
            return event.location == self.initial_departure_location
        if kind == HandlingEventType.LOAD:
            return self.index_of_leg_loading_at(event.location, event.voyage_number) is not None
        if kind == HandlingEventType.UNLOAD:
            return self.index_of_leg_unloading_at(event.location, event.voyage_number) is not None
        if kind == HandlingEventType.CLAIM:
            return event.location == self.final_arrival_location

        # Customs clearance does not constrain the plan
        return True
