"""Shared BDD fixtures and step definitions for cargo tracking."""

import pytest
from cargotracking.cargo.cargo import Cargo
from cargotracking.cargo.itinerary import Itinerary, Leg
from cargotracking.cargo.route_specification import RouteSpecification
from pytest_bdd import given, parsers, then, when

# Days after the base date at which each voyage loads and unloads, per leg
_LEG_DAYS = {"V100": (0, 10), "V200": (11, 13), "V300": (4, 14), "V400": (15, 16)}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def handled():
    """Handling events registered for the cargo so far."""
    return []


def build_itinerary(route, day):
    """Parse "USCHI-DEHAM:V100,DEHAM-SESTO:V200" into an Itinerary."""
    legs = []
    for part in route.split(","):
        locations, voyage_number = part.split(":")
        load_location, unload_location = locations.split("-")
        loads, unloads = _LEG_DAYS[voyage_number]
        legs.append(
            Leg(
                voyage_number=voyage_number,
                load_location=load_location,
                unload_location=unload_location,
                load_time=day(loads),
                unload_time=day(unloads),
            )
        )
    return Itinerary(legs=legs)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a cargo booked from "{origin}" to "{destination}"'), target_fixture="cargo")
def booked_cargo(origin, destination, day):
    cargo = Cargo.book(
        "BDD00001",
        RouteSpecification.create(origin=origin, destination=destination, arrival_deadline=day(20)),
    )
    cargo._events.clear()
    return cargo


@given(parsers.cfparse('the cargo is routed via "{route}"'), target_fixture="cargo")
@when(parsers.cfparse('the cargo is routed via "{route}"'), target_fixture="cargo")
def routed_cargo(cargo, route, day):
    cargo.assign_to_route(build_itinerary(route, day))
    cargo._events.clear()
    return cargo


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the transport status is "{status}"'))
def transport_status_is(cargo, status):
    assert cargo.delivery.transport_status == status


@then(parsers.cfparse('the routing status is "{status}"'))
def routing_status_is(cargo, status):
    assert cargo.delivery.routing_status == status


@then("the estimated time of arrival is unknown")
def eta_unknown(cargo):
    assert cargo.delivery.estimated_time_of_arrival is None


@then("no activity is expected")
def no_activity(cargo):
    assert cargo.delivery.next_expected_activity is None


@then("the cargo is misdirected")
def misdirected(cargo):
    assert cargo.delivery.is_misdirected is True


@then("the cargo is not misdirected")
def not_misdirected(cargo):
    assert cargo.delivery.is_misdirected is False


@then("the cargo has arrived")
def arrived(cargo):
    assert cargo.delivery.is_unloaded_at_destination is True


@then(parsers.cfparse('the last known location is "{location}"'))
def last_known_location_is(cargo, location):
    assert cargo.delivery.last_known_location == location


@then(parsers.cfparse('the next expected activity is "{activity_type}" at "{location}" on voyage "{voyage_number}"'))
def next_activity_on_voyage(cargo, activity_type, location, voyage_number):
    activity = cargo.delivery.next_expected_activity
    assert activity.activity_type == activity_type
    assert activity.location == location
    assert activity.voyage_number == voyage_number


@then(parsers.re(r'the next expected activity is "(?P<activity_type>\w+)" at "(?P<location>\w+)"$'))
def next_activity(cargo, activity_type, location):
    activity = cargo.delivery.next_expected_activity
    assert activity.activity_type == activity_type
    assert activity.location == location
    assert activity.voyage_number is None


@then(parsers.cfparse('the registration fails with "{message}"'))
def registration_fails(error, message):
    assert error["exc"] is not None
    assert message in str(error["exc"])

