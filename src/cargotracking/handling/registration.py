"""Handling event registration — command and handler.

Registration is idempotent. A handling event's identity is derived from the
cargo, the completion time and the type, so reporting the same physical fact
again resolves to an event that is already stored. An identical report is
dropped; a conflicting one is a correction and replaces the stored location
and voyage.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from cargotracking.domain import cargotracking
from cargotracking.handling.factory import HandlingEventFactory
from cargotracking.handling.handling_event import HandlingEvent, HandlingEventType

logger = structlog.get_logger(__name__)


@cargotracking.command(part_of="HandlingEvent")
class RegisterHandlingEvent:
    """Report that a cargo was handled at a location."""

    tracking_id = Identifier(required=True)
    event_type = String(required=True, choices=HandlingEventType)
    unlocode = String(required=True, max_length=5)
    voyage_number = String(max_length=20)
    completed_at = DateTime(required=True)


@cargotracking.command_handler(part_of=HandlingEvent)
class HandlingEventRegistrationHandler:
    @handle(RegisterHandlingEvent)
    def register_handling_event(self, command):
        handling_event = HandlingEventFactory().create_handling_event(
            registered_at=datetime.now(UTC),
            completed_at=command.completed_at,
            tracking_id=command.tracking_id,
            voyage_number=command.voyage_number,
            unlocode=command.unlocode,
            event_type=command.event_type,
        )

        repo = current_domain.repository_for(HandlingEvent)
        existing = repo.find_existing(handling_event.handling_event_id)
        if existing is not None:
            if existing.is_same_fact_as(handling_event):
                logger.info(
                    "Handling event already registered",
                    handling_event_id=existing.handling_event_id,
                    tracking_id=existing.tracking_id,
                )
                return existing.handling_event_id

            logger.warning(
                "Handling event corrected",
                handling_event_id=existing.handling_event_id,
                tracking_id=existing.tracking_id,
                registered_location=existing.location,
                reported_location=handling_event.location,
                registered_voyage=existing.voyage_number,
                reported_voyage=handling_event.voyage_number,
            )
            existing.correct(handling_event)
            repo.add(existing)
            return existing.handling_event_id

        repo.add(handling_event)
        logger.info(
            "Handling event registered",
            handling_event_id=handling_event.handling_event_id,
            tracking_id=handling_event.tracking_id,
            event_type=handling_event.event_type,
            location=handling_event.location,
        )
        return handling_event.handling_event_id
