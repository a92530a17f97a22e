"""Repository for the Location aggregate."""

from protean.exceptions import ObjectNotFoundError

from cargotracking.domain import cargotracking
from cargotracking.location.location import Location, UnLocode
from cargotracking.shared.errors import UnknownLocationError


@cargotracking.repository(part_of=Location)
class LocationRepository:
    def find_by_unlocode(self, unlocode: str) -> Location:
        """Resolve a UN/LOCODE, raising UnknownLocationError when no such location exists."""
        code = UnLocode.of(unlocode).code
        try:
            return self.get(code)
        except ObjectNotFoundError as exc:
            raise UnknownLocationError(code) from exc
