from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture

from cargotracking.cargo.itinerary import Itinerary, Leg
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.routing import reset_routing_service


@pytest.fixture(scope="session")
def cargotracking_bed():
    from cargotracking.domain import cargotracking

    bed = DomainFixture(cargotracking)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(cargotracking_bed):
    with cargotracking_bed.domain_context():
        yield
    reset_routing_service()


@pytest.fixture()
def base():
    """Midnight UTC tomorrow; sample schedules and deadlines are laid out in days from here."""
    return datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)


@pytest.fixture()
def day(base):
    def _day(offset: int) -> datetime:
        return base + timedelta(days=offset)

    return _day


@pytest.fixture()
def chicago_to_stockholm(day):
    """USCHI -> DEHAM on V100, then DEHAM -> SESTO on V200."""
    return Itinerary(
        legs=[
            Leg(voyage_number="V100", load_location="USCHI", unload_location="DEHAM", load_time=day(0), unload_time=day(10)),
            Leg(voyage_number="V200", load_location="DEHAM", unload_location="SESTO", load_time=day(11), unload_time=day(13)),
        ]
    )


@pytest.fixture()
def chicago_to_stockholm_spec(day):
    return RouteSpecification.create(origin="USCHI", destination="SESTO", arrival_deadline=day(20))


@pytest.fixture()
def sample_world(base):
    """Sample locations and voyages stored in the active domain."""
    from cargotracking.sample.locations import seed_locations
    from cargotracking.sample.voyages import seed_voyages

    return {"locations": seed_locations(), "voyages": seed_voyages(base)}
