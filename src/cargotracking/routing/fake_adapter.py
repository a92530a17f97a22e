"""Fake routing service with configurable candidates, for testing and development."""

from cargotracking.cargo.itinerary import Itinerary
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.routing.port import RoutingService
from cargotracking.shared.errors import RoutingServiceUnavailableError


class FakeRoutingService(RoutingService):
    """Returns whatever candidates it was configured with; answers nothing by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Routing service unavailable"
        self.candidates: list[Itinerary] = []
        self.requests: list[RouteSpecification] = []

    def configure(
        self,
        should_succeed: bool = True,
        candidates: list[Itinerary] | None = None,
        failure_reason: str = "Routing service unavailable",
    ):
        """Configure the fake routing service behavior for testing."""
        self.should_succeed = should_succeed
        self.candidates = list(candidates or [])
        self.failure_reason = failure_reason

    def fetch_routes_for_specification(self, route_specification: RouteSpecification) -> list[Itinerary]:
        self.requests.append(route_specification)
        if not self.should_succeed:
            raise RoutingServiceUnavailableError(self.failure_reason)
        return list(self.candidates)
