"""Builds handling events from raw registration input.

Every reference in the input is resolved before the event is constructed: the
cargo by tracking id, the voyage by voyage number (when one is given) and the
location by UN/LOCODE. A reference that does not resolve fails with the
matching UnknownIdentityError subclass; nothing is built.
"""

from datetime import datetime

from protean.utils.globals import current_domain

from cargotracking.cargo.cargo import Cargo
from cargotracking.handling.handling_event import HandlingEvent
from cargotracking.location.location import Location, UnLocode
from cargotracking.voyage.voyage import Voyage


class HandlingEventFactory:
    def create_handling_event(
        self,
        registered_at: datetime,
        completed_at: datetime,
        tracking_id: str,
        voyage_number: str | None,
        unlocode: str,
        event_type,
    ) -> HandlingEvent:
        # Malformed codes are a validation failure, not an unknown location
        code = UnLocode.of(unlocode).code

        cargo = current_domain.repository_for(Cargo).find_by_tracking_id(tracking_id)
        voyage = current_domain.repository_for(Voyage).find_by_voyage_number(voyage_number) if voyage_number else None
        location = current_domain.repository_for(Location).find_by_unlocode(code)

        return HandlingEvent.register(
            tracking_id=cargo.tracking_id,
            event_type=event_type,
            location=location.unlocode,
            completed_at=completed_at,
            registered_at=registered_at,
            voyage_number=voyage.voyage_number if voyage else None,
        )
