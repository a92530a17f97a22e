"""Routing service port — abstract interface for route-finding collaborators.

The booking handlers program against the port; adapters are swapped via
configuration (see cargotracking.routing).
"""

from abc import ABC, abstractmethod

from cargotracking.cargo.itinerary import Itinerary
from cargotracking.cargo.route_specification import RouteSpecification


class RoutingService(ABC):
    """Abstract routing service interface."""

    @abstractmethod
    def fetch_routes_for_specification(self, route_specification: RouteSpecification) -> list[Itinerary]:
        """Return candidate itineraries for a route specification.

        The list may be empty. Adapters raise RoutingServiceUnavailableError
        when they cannot answer at all.
        """
        ...
