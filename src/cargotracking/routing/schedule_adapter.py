"""Finds itineraries in the published voyage schedules.

Treats every carrier movement of every known voyage as an edge between two
locations and searches depth first from the origin. A path may only board a
movement that departs after the previous one arrived, and never calls at the
same location twice. Consecutive movements of one voyage become a single leg.

Paths reaching the destination are kept only if the resulting itinerary
satisfies the route specification, and are returned earliest arrival first.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from cargotracking.cargo.itinerary import Itinerary, Leg
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.routing.port import RoutingService
from cargotracking.voyage.voyage import Voyage

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Edge:
    voyage_number: str
    departure_location: str
    arrival_location: str
    departure_time: datetime
    arrival_time: datetime


class ScheduleRoutingService(RoutingService):
    def __init__(self, max_movements: int = 6, max_candidates: int = 10):
        self.max_movements = max_movements
        self.max_candidates = max_candidates

    def fetch_routes_for_specification(self, route_specification: RouteSpecification) -> list[Itinerary]:
        edges_by_departure = self._edges_by_departure()

        paths: list[list[_Edge]] = []
        self._search(
            location=route_specification.origin,
            destination=route_specification.destination,
            ready_at=None,
            path=[],
            visited={route_specification.origin},
            edges_by_departure=edges_by_departure,
            found=paths,
        )

        candidates = []
        for path in paths:
            itinerary = self._to_itinerary(path)
            if itinerary is None:
                continue
            if route_specification.is_satisfied_by(itinerary):
                candidates.append(itinerary)
            else:
                logger.debug(
                    "Route candidate discarded",
                    voyages=[leg.voyage_number for leg in itinerary.legs],
                    final_arrival_time=itinerary.final_arrival_time.isoformat(),
                    arrival_deadline=route_specification.arrival_deadline.isoformat(),
                )

        candidates.sort(key=lambda itinerary: itinerary.final_arrival_time)
        logger.info(
            "Routes searched",
            origin=route_specification.origin,
            destination=route_specification.destination,
            paths=len(paths),
            candidates=len(candidates),
        )
        return candidates[: self.max_candidates]

    def _edges_by_departure(self) -> dict[str, list[_Edge]]:
        edges: dict[str, list[_Edge]] = {}
        for voyage in current_domain.repository_for(Voyage).find_all():
            for movement in voyage.carrier_movements:
                edges.setdefault(movement.departure_location, []).append(
                    _Edge(
                        voyage_number=voyage.voyage_number,
                        departure_location=movement.departure_location,
                        arrival_location=movement.arrival_location,
                        departure_time=movement.departure_time,
                        arrival_time=movement.arrival_time,
                    )
                )
        for departures in edges.values():
            departures.sort(key=lambda edge: edge.departure_time)
        return edges

    def _search(self, location, destination, ready_at, path, visited, edges_by_departure, found) -> None:
        if location == destination and path:
            found.append(list(path))
            return
        if len(path) >= self.max_movements:
            return

        for edge in edges_by_departure.get(location, []):
            if ready_at is not None and edge.departure_time < ready_at:
                continue
            if edge.arrival_location in visited:
                continue
            path.append(edge)
            visited.add(edge.arrival_location)
            self._search(
                edge.arrival_location,
                destination,
                edge.arrival_time,
                path,
                visited,
                edges_by_departure,
                found,
            )
            visited.discard(edge.arrival_location)
            path.pop()

    @staticmethod
    def _to_itinerary(path: list[_Edge]) -> Itinerary | None:
        legs_data = []
        for edge in path:
            current = legs_data[-1] if legs_data else None
            if current is not None and current["voyage_number"] == edge.voyage_number:
                current["unload_location"] = edge.arrival_location
                current["unload_time"] = edge.arrival_time
                continue
            legs_data.append(
                {
                    "voyage_number": edge.voyage_number,
                    "load_location": edge.departure_location,
                    "unload_location": edge.arrival_location,
                    "load_time": edge.departure_time,
                    "unload_time": edge.arrival_time,
                }
            )

        try:
            return Itinerary(legs=[Leg(**leg_data) for leg_data in legs_data])
        except ValidationError as exc:
            logger.debug("Route candidate rejected", reason=exc.messages)
            return None
