"""Sample voyages, scheduled in days relative to a base date.

    V100  USCHI -> USNYC -> DEHAM
    V200  DEHAM -> SESTO -> FIHEL
    V300  USNYC -> NLRTM -> SEGOT
    V400  SEGOT -> SESTO
    V500  HKHKG -> JNTKO -> USDAL
    V600  USDAL -> USCHI
"""

from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from cargotracking.voyage.voyage import Voyage, VoyageBuilder

# voyage number -> (departure location, [(arrival location, departure day, arrival day), ...])
SAMPLE_SCHEDULES = {
    "V100": ("USCHI", [("USNYC", 0, 2), ("DEHAM", 3, 10)]),
    "V200": ("DEHAM", [("SESTO", 11, 13), ("FIHEL", 14, 15)]),
    "V300": ("USNYC", [("NLRTM", 4, 11), ("SEGOT", 12, 14)]),
    "V400": ("SEGOT", [("SESTO", 15, 16)]),
    "V500": ("HKHKG", [("JNTKO", 0, 3), ("USDAL", 4, 14)]),
    "V600": ("USDAL", [("USCHI", 15, 17)]),
}


def day(base: datetime, offset: int) -> datetime:
    return base + timedelta(days=offset)


def sample_voyages(base: datetime | None = None) -> list[Voyage]:
    if base is None:
        base = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)

    voyages = []
    for voyage_number, (departure_location, movements) in SAMPLE_SCHEDULES.items():
        builder = VoyageBuilder(voyage_number, departure_location)
        for arrival_location, departs, arrives in movements:
            builder.add_movement(arrival_location, day(base, departs), day(base, arrives))
        voyages.append(builder.build())
    return voyages


def seed_voyages(base: datetime | None = None) -> list[Voyage]:
    """Store the sample voyages in the active domain."""
    repo = current_domain.repository_for(Voyage)
    voyages = sample_voyages(base)
    for voyage in voyages:
        repo.add(voyage)
    return voyages
