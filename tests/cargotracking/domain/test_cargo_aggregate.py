"""Tests for the Cargo aggregate."""

import json
from datetime import timedelta

import pytest
from cargotracking.cargo.cargo import Cargo
from cargotracking.cargo.events import (
    CargoAssignedToRoute,
    CargoBooked,
    CargoHasArrived,
    CargoWasMisdirected,
    CargoWasMisrouted,
    RouteSpecificationChanged,
)
from cargotracking.cargo.itinerary import Itinerary, Leg
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.handling.handling_event import HandlingEvent
from cargotracking.handling.history import HandlingHistory
from protean.exceptions import ValidationError


def _event_types(cargo):
    return [type(event) for event in cargo._events]


@pytest.fixture()
def booked(chicago_to_stockholm_spec):
    cargo = Cargo.book("ABC123", chicago_to_stockholm_spec)
    cargo._events.clear()
    return cargo


@pytest.fixture()
def routed(booked, chicago_to_stockholm):
    booked.assign_to_route(chicago_to_stockholm)
    booked._events.clear()
    return booked


class TestBooking:
    def test_book_new_cargo(self, chicago_to_stockholm_spec):
        cargo = Cargo.book("ABC123", chicago_to_stockholm_spec)

        assert cargo.tracking_id == "ABC123"
        assert cargo.origin == "USCHI"
        assert cargo.itinerary is None
        assert cargo.delivery.transport_status == "Not_Received"
        assert cargo.delivery.routing_status == "Not_Routed"
        assert cargo.booked_at is not None

    def test_booking_raises_cargo_booked(self, chicago_to_stockholm_spec):
        cargo = Cargo.book("ABC123", chicago_to_stockholm_spec)

        assert _event_types(cargo) == [CargoBooked]
        event = cargo._events[0]
        assert event.origin == "USCHI"
        assert event.destination == "SESTO"


class TestRouteAssignment:
    def test_assignment_routes_cargo(self, booked, chicago_to_stockholm, day):
        booked.assign_to_route(chicago_to_stockholm)

        assert booked.itinerary == chicago_to_stockholm
        assert booked.delivery.routing_status == "Routed"
        assert booked.delivery.estimated_time_of_arrival == day(13)
        assert booked.delivery.next_expected_activity.activity_type == "Receive"

    def test_assignment_raises_event_with_legs(self, booked, chicago_to_stockholm):
        booked.assign_to_route(chicago_to_stockholm)

        assert _event_types(booked) == [CargoAssignedToRoute]
        legs = json.loads(booked._events[0].legs)
        assert [leg["voyage_number"] for leg in legs] == ["V100", "V200"]

    def test_assigning_a_non_satisfying_itinerary_misroutes(self, chicago_to_stockholm, day):
        spec = RouteSpecification.create(origin="USCHI", destination="SESTO", arrival_deadline=day(12))
        cargo = Cargo.book("ABC123", spec)
        cargo._events.clear()

        cargo.assign_to_route(chicago_to_stockholm)

        assert cargo.delivery.routing_status == "Misrouted"
        assert _event_types(cargo) == [CargoAssignedToRoute, CargoWasMisrouted]


class TestRouteSpecificationChanges:
    def test_origin_cannot_change(self, routed, day):
        new_spec = RouteSpecification.create(origin="DEHAM", destination="SESTO", arrival_deadline=day(20))
        with pytest.raises(ValidationError) as exc:
            routed.specify_new_route(new_spec)
        assert "cannot be changed" in str(exc.value)
        assert routed.route_specification.origin == "USCHI"

    def test_destination_change_misroutes_without_touching_itinerary(self, routed, chicago_to_stockholm):
        routed.change_destination("FIHEL")

        assert routed.route_specification.destination == "FIHEL"
        assert routed.itinerary == chicago_to_stockholm
        assert routed.delivery.routing_status == "Misrouted"
        assert _event_types(routed) == [RouteSpecificationChanged, CargoWasMisrouted]

    def test_misrouted_is_raised_only_on_transition(self, routed):
        routed.change_destination("FIHEL")
        routed._events.clear()

        routed.change_destination("USNYC")

        assert _event_types(routed) == [RouteSpecificationChanged]

    def test_deadline_change_keeps_destination(self, routed, day):
        routed.change_deadline(day(30))

        assert routed.route_specification.destination == "SESTO"
        assert routed.route_specification.arrival_deadline == day(30)
        assert routed.delivery.routing_status == "Routed"

    def test_deadline_must_be_in_the_future(self, routed, base):
        with pytest.raises(ValidationError):
            routed.change_deadline(base - timedelta(days=2))

    def test_destination_cannot_become_origin(self, routed):
        with pytest.raises(ValidationError):
            routed.change_destination("USCHI")


class TestDeliveryProgress:
    def test_progress_from_history(self, routed, day):
        history = HandlingHistory(
            [
                HandlingEvent.register("ABC123", "Receive", "USCHI", completed_at=day(0) - timedelta(hours=3)),
                HandlingEvent.register("ABC123", "Load", "USCHI", completed_at=day(0), voyage_number="V100"),
            ]
        )

        routed.derive_delivery_progress(history)

        assert routed.delivery.transport_status == "Onboard_Carrier"
        assert routed.delivery.current_voyage == "V100"
        assert routed._events == []

    def test_misdirection_raises_event(self, routed, day):
        history = HandlingHistory([HandlingEvent.register("ABC123", "Receive", "DEHAM", completed_at=day(0))])

        routed.derive_delivery_progress(history)

        assert routed.delivery.is_misdirected is True
        assert _event_types(routed) == [CargoWasMisdirected]
        assert routed._events[0].last_known_location == "DEHAM"

    def test_arrival_raises_event(self, routed, day):
        history = HandlingHistory(
            [HandlingEvent.register("ABC123", "Unload", "SESTO", completed_at=day(13), voyage_number="V200")]
        )

        routed.derive_delivery_progress(history)

        assert routed.delivery.is_unloaded_at_destination is True
        assert _event_types(routed) == [CargoHasArrived]

    def test_history_of_another_cargo_is_rejected(self, routed, day):
        history = HandlingHistory([HandlingEvent.register("XYZ789", "Receive", "USCHI", completed_at=day(0))])
        with pytest.raises(ValidationError) as exc:
            routed.derive_delivery_progress(history)
        assert "tracking_id" in exc.value.messages

    def test_reroute_keeps_handling_progress(self, routed, day):
        history = HandlingHistory(
            [HandlingEvent.register("ABC123", "Unload", "DEHAM", completed_at=day(10), voyage_number="V100")]
        )
        routed.derive_delivery_progress(history)

        routed.change_destination("FIHEL")
        assert routed.delivery.routing_status == "Misrouted"
        assert routed.delivery.last_known_location == "DEHAM"

        routed.assign_to_route(
            Itinerary(
                legs=[
                    Leg(voyage_number="V200", load_location="DEHAM", unload_location="FIHEL", load_time=day(11), unload_time=day(15)),
                ]
            )
        )
        # A new itinerary starting mid-way no longer departs from the cargo's origin
        assert routed.delivery.routing_status == "Misrouted"
        assert routed.delivery.last_known_location == "DEHAM"
