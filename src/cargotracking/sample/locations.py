"""Sample ports used to seed development domains and tests."""

from protean.utils.globals import current_domain

from cargotracking.location.location import Location

SAMPLE_LOCATIONS = [
    # (unlocode, name, latitude, longitude)
    ("USCHI", "Chicago", 41.88, -87.63),
    ("SESTO", "Stockholm", 59.33, 18.07),
    ("HKHKG", "Hongkong", 22.30, 114.17),
    ("USNYC", "New York", 40.71, -74.01),
    ("DEHAM", "Hamburg", 53.55, 9.99),
    ("FIHEL", "Helsinki", 60.17, 24.94),
    ("CNSHA", "Shanghai", 31.23, 121.47),
    ("JNTKO", "Tokyo", 35.68, 139.69),
    ("NLRTM", "Rotterdam", 51.92, 4.48),
    ("SEGOT", "Gothenburg", 57.71, 11.97),
    ("AUMEL", "Melbourne", -37.81, 144.96),
    ("USDAL", "Dallas", 32.78, -96.80),
]


def sample_locations() -> list[Location]:
    return [
        Location.create(unlocode, name, latitude=latitude, longitude=longitude)
        for unlocode, name, latitude, longitude in SAMPLE_LOCATIONS
    ]


def seed_locations() -> list[Location]:
    """Store the sample locations in the active domain."""
    repo = current_domain.repository_for(Location)
    locations = sample_locations()
    for location in locations:
        repo.add(location)
    return locations
