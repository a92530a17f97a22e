"""Routing service factory.

Provides get_routing_service() / set_routing_service() to swap implementations:
- ScheduleRoutingService searching the stored voyage schedules (default)
- FakeRoutingService for testing

The default adapter is chosen by the ROUTING_SERVICE environment variable
("schedule" or "fake").
"""

import os

from cargotracking.routing.fake_adapter import FakeRoutingService
from cargotracking.routing.port import RoutingService
from cargotracking.routing.schedule_adapter import ScheduleRoutingService

_current_service: RoutingService | None = None


def get_routing_service() -> RoutingService:
    """Return the current routing service (singleton)."""
    global _current_service
    if _current_service is None:
        adapter = os.environ.get("ROUTING_SERVICE", "schedule")
        if adapter == "schedule":
            _current_service = ScheduleRoutingService()
        elif adapter == "fake":
            _current_service = FakeRoutingService()
        else:
            raise ValueError(f"Unknown routing service: {adapter}")
    return _current_service


def set_routing_service(service: RoutingService) -> None:
    """Override the active routing service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_routing_service() -> None:
    """Reset to the configured default."""
    global _current_service
    _current_service = None
