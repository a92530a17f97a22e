"""Repository for the Voyage aggregate."""

from protean.exceptions import ObjectNotFoundError

from cargotracking.domain import cargotracking
from cargotracking.shared.errors import UnknownVoyageError
from cargotracking.voyage.voyage import Voyage


@cargotracking.repository(part_of=Voyage)
class VoyageRepository:
    def find_by_voyage_number(self, voyage_number: str) -> Voyage:
        """Resolve a voyage number, raising UnknownVoyageError when no such voyage exists."""
        try:
            return self.get(voyage_number)
        except ObjectNotFoundError as exc:
            raise UnknownVoyageError(voyage_number) from exc

    def find_all(self) -> list[Voyage]:
        return self._dao.query.all().items
