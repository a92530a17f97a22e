"""Location aggregate and the UnLocode value object.

Locations are identified by their UN/LOCODE, a five character code made of a
two letter country code and a three character location code (letters and the
digits 2-9). Every other element refers to a location by this code.
"""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String, ValueObject

from cargotracking.domain import cargotracking

UNLOCODE_PATTERN = re.compile(r"^[a-zA-Z]{2}[a-zA-Z2-9]{3}$")


@cargotracking.value_object
class UnLocode:
    """United Nations location code, normalised to upper case."""

    code: String(required=True)

    @invariant.post
    def code_must_be_valid_unlocode(self):
        if not UNLOCODE_PATTERN.match(self.code or ""):
            raise ValidationError({"unlocode": [f"Invalid UN/LOCODE: {self.code!r}"]})

    @classmethod
    def of(cls, code: str) -> "UnLocode":
        return cls(code=(code or "").strip().upper())

    def __str__(self) -> str:
        return self.code


@cargotracking.value_object(part_of="Location")
class GeoCoordinates:
    """Latitude/longitude pair of a port."""

    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)

    @invariant.post
    def both_coordinates_required(self):
        if self.latitude is None or self.longitude is None:
            raise ValidationError({"coordinates": ["Both latitude and longitude are required"]})


@cargotracking.aggregate
class Location:
    """A port or terminal where cargo can be handled."""

    unlocode: String(identifier=True, max_length=5)
    name: String(required=True, max_length=100)
    geo_coordinates: ValueObject(GeoCoordinates)

    @classmethod
    def create(cls, unlocode: str, name: str, latitude: float | None = None, longitude: float | None = None):
        code = UnLocode.of(unlocode).code
        coordinates = None
        if latitude is not None or longitude is not None:
            coordinates = GeoCoordinates(latitude=latitude, longitude=longitude)
        return cls(unlocode=code, name=name, geo_coordinates=coordinates)
