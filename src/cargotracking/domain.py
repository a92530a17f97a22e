"""Cargo tracking bounded context — Booking, Routing and Handling of ocean cargo.

Tracks cargo from booking through route assignment, port handling and claim.
Every change to a cargo's route plan, routing requirement or handling history
re-derives its delivery status.
"""

from protean.domain import Domain

from cargotracking.utils.logging import configure_logging

configure_logging()

cargotracking = Domain(name="cargotracking")
