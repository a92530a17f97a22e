"""Cargo booking — commands and handler for booking and rerouting cargo.

Locations named by a command must be known; unknown UN/LOCODEs fail with
UnknownLocationError before any cargo is touched.
"""

import json

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from cargotracking.cargo.cargo import Cargo
from cargotracking.cargo.itinerary import Itinerary
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.domain import cargotracking
from cargotracking.location.location import Location, UnLocode
from cargotracking.routing import get_routing_service

logger = structlog.get_logger(__name__)


@cargotracking.command(part_of="Cargo")
class BookNewCargo:
    """Book a cargo from origin to destination, to arrive by the deadline."""

    origin = String(required=True, max_length=5)
    destination = String(required=True, max_length=5)
    arrival_deadline = DateTime(required=True)


@cargotracking.command(part_of="Cargo")
class AssignCargoToRoute:
    tracking_id = Identifier(required=True)
    legs = Text(required=True)  # JSON list of leg dicts


@cargotracking.command(part_of="Cargo")
class ChangeDestination:
    tracking_id = Identifier(required=True)
    destination = String(required=True, max_length=5)


@cargotracking.command(part_of="Cargo")
class ChangeDeadline:
    tracking_id = Identifier(required=True)
    arrival_deadline = DateTime(required=True)


def _resolve_location(unlocode: str) -> str:
    code = UnLocode.of(unlocode).code
    return current_domain.repository_for(Location).find_by_unlocode(code).unlocode


@cargotracking.command_handler(part_of=Cargo)
class BookingHandler:
    @handle(BookNewCargo)
    def book_new_cargo(self, command):
        route_specification = RouteSpecification.create(
            origin=_resolve_location(command.origin),
            destination=_resolve_location(command.destination),
            arrival_deadline=command.arrival_deadline,
        )
        repo = current_domain.repository_for(Cargo)
        cargo = Cargo.book(repo.next_tracking_id(), route_specification)
        repo.add(cargo)

        logger.info(
            "Cargo booked",
            tracking_id=cargo.tracking_id,
            origin=route_specification.origin,
            destination=route_specification.destination,
        )
        return cargo.tracking_id

    @handle(AssignCargoToRoute)
    def assign_cargo_to_route(self, command):
        legs_data = json.loads(command.legs) if isinstance(command.legs, str) else command.legs
        itinerary = Itinerary.from_legs_data(legs_data)

        repo = current_domain.repository_for(Cargo)
        cargo = repo.find_by_tracking_id(command.tracking_id)
        cargo.assign_to_route(itinerary)
        repo.add(cargo)

        logger.info(
            "Cargo assigned to route",
            tracking_id=cargo.tracking_id,
            legs=len(itinerary.legs),
            routing_status=cargo.delivery.routing_status,
        )

    @handle(ChangeDestination)
    def change_destination(self, command):
        destination = _resolve_location(command.destination)

        repo = current_domain.repository_for(Cargo)
        cargo = repo.find_by_tracking_id(command.tracking_id)
        cargo.change_destination(destination)
        repo.add(cargo)

        logger.info(
            "Cargo destination changed",
            tracking_id=cargo.tracking_id,
            destination=destination,
            routing_status=cargo.delivery.routing_status,
        )

    @handle(ChangeDeadline)
    def change_deadline(self, command):
        repo = current_domain.repository_for(Cargo)
        cargo = repo.find_by_tracking_id(command.tracking_id)
        cargo.change_deadline(command.arrival_deadline)
        repo.add(cargo)


def request_possible_routes_for_cargo(tracking_id: str) -> list[Itinerary]:
    """Ask the routing service for itineraries satisfying the cargo's route specification."""
    cargo = current_domain.repository_for(Cargo).find_by_tracking_id(tracking_id)
    candidates = get_routing_service().fetch_routes_for_specification(cargo.route_specification)

    logger.info("Route candidates fetched", tracking_id=cargo.tracking_id, candidates=len(candidates))
    return candidates
