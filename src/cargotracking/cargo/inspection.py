"""Brings a cargo's delivery up to date with its handling history.

Reacts to HandlingEventRegistered from the handling stream. The handling event
is already stored when this runs; inspection reads the full history of the
cargo, re-derives its delivery and stores the cargo.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from cargotracking.cargo.cargo import Cargo
from cargotracking.domain import cargotracking
from cargotracking.handling.events import HandlingEventRegistered
from cargotracking.handling.handling_event import HandlingEvent
from cargotracking.utils.logging import bind_cargo_context, clear_context

logger = structlog.get_logger(__name__)


def inspect_cargo(tracking_id: str) -> Cargo:
    """Re-derive and store the delivery of a cargo from its full handling history."""
    bind_cargo_context(str(tracking_id))
    try:
        cargo_repo = current_domain.repository_for(Cargo)
        cargo = cargo_repo.find_by_tracking_id(tracking_id)
        history = current_domain.repository_for(HandlingEvent).lookup_handling_history_of_cargo(tracking_id)

        cargo.derive_delivery_progress(history)
        cargo_repo.add(cargo)

        delivery = cargo.delivery
        if delivery.is_misdirected:
            logger.warning(
                "Cargo is misdirected",
                last_known_location=delivery.last_known_location,
                transport_status=delivery.transport_status,
            )
        elif delivery.is_unloaded_at_destination:
            logger.info("Cargo has arrived", location=delivery.last_known_location)
        else:
            logger.info(
                "Cargo inspected",
                transport_status=delivery.transport_status,
                routing_status=delivery.routing_status,
                handling_events=len(history),
            )
        return cargo
    finally:
        clear_context()


@cargotracking.event_handler(part_of=Cargo, stream_category="cargotracking::handling_event")
class CargoInspectionHandler:
    """Re-derives delivery progress whenever a handling event is registered."""

    @handle(HandlingEventRegistered)
    def on_handling_event_registered(self, event: HandlingEventRegistered) -> None:
        inspect_cargo(str(event.tracking_id))
