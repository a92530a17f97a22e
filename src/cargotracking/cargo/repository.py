"""Repository for the Cargo aggregate."""

from uuid import uuid4

from protean.exceptions import ObjectNotFoundError

from cargotracking.cargo.cargo import Cargo
from cargotracking.domain import cargotracking
from cargotracking.shared.errors import UnknownCargoError


@cargotracking.repository(part_of=Cargo)
class CargoRepository:
    def next_tracking_id(self) -> str:
        return uuid4().hex[:8].upper()

    def find_by_tracking_id(self, tracking_id: str) -> Cargo:
        """Resolve a tracking id, raising UnknownCargoError when no such cargo was booked."""
        try:
            return self.get(tracking_id)
        except ObjectNotFoundError as exc:
            raise UnknownCargoError(tracking_id) from exc

    def find_misdirected(self) -> list[Cargo]:
        return [cargo for cargo in self._dao.query.all().items if cargo.delivery.is_misdirected]
