"""Computes a cargo's Delivery from its plan, requirement and history.

Derivation is a pure function of (itinerary, route specification, handling
history). It holds no state, performs no I/O and always yields an equal
Delivery for equal inputs, so it can be re-run at any time, from any thread.

Only two events of the history matter: the most recent one, which fixes
transport status, location, voyage and misdirection, and the most recent one
that advances the plan (anything but customs clearance), which fixes the next
expected activity. A Delivery keeps snapshots of both, which lets
``rederive_delivery`` recompute after a route change without the history.
"""

from cargotracking.cargo.delivery import (
    Delivery,
    HandlingActivity,
    LastHandlingEvent,
    RoutingStatus,
    TransportStatus,
)
from cargotracking.cargo.itinerary import Itinerary
from cargotracking.cargo.route_specification import RouteSpecification
from cargotracking.handling.handling_event import HandlingEventType
from cargotracking.handling.history import HandlingHistory

_TRANSPORT_STATUS_BY_EVENT_TYPE = {
    HandlingEventType.RECEIVE: TransportStatus.IN_PORT,
    HandlingEventType.LOAD: TransportStatus.ONBOARD_CARRIER,
    HandlingEventType.UNLOAD: TransportStatus.IN_PORT,
    HandlingEventType.CUSTOMS: TransportStatus.IN_PORT,
    HandlingEventType.CLAIM: TransportStatus.CLAIMED,
}


def derive_delivery(
    itinerary: Itinerary | None,
    route_specification: RouteSpecification,
    history: HandlingHistory,
) -> Delivery:
    """Derive the delivery state of a cargo from scratch."""
    return _derive(
        itinerary,
        route_specification,
        LastHandlingEvent.of(history.most_recently_completed_event()),
        LastHandlingEvent.of(history.most_recent_plan_event()),
    )


def rederive_delivery(
    delivery: Delivery | None,
    itinerary: Itinerary | None,
    route_specification: RouteSpecification,
) -> Delivery:
    """Derive again after the itinerary or route specification changed, keeping the event references."""
    if delivery is None:
        return _derive(itinerary, route_specification, None, None)
    return _derive(itinerary, route_specification, delivery.last_event, delivery.last_plan_event)


def routing_status_of(itinerary: Itinerary | None, route_specification: RouteSpecification) -> RoutingStatus:
    if itinerary is None:
        return RoutingStatus.NOT_ROUTED
    if route_specification.is_satisfied_by(itinerary):
        return RoutingStatus.ROUTED
    return RoutingStatus.MISROUTED


def transport_status_of(last_event: LastHandlingEvent | None) -> TransportStatus:
    if last_event is None:
        return TransportStatus.NOT_RECEIVED
    return _TRANSPORT_STATUS_BY_EVENT_TYPE[HandlingEventType(last_event.event_type)]


def is_misdirected(itinerary: Itinerary | None, last_event: LastHandlingEvent | None) -> bool:
    """Misdirection reflects the latest fact only; an on-plan event clears it."""
    if last_event is None or itinerary is None:
        return False
    return not itinerary.is_expected(last_event)


def next_expected_activity(
    itinerary: Itinerary | None,
    on_track: bool,
    last_event: LastHandlingEvent | None,
    plan_event: LastHandlingEvent | None,
) -> HandlingActivity | None:
    if not on_track or itinerary is None:
        return None
    if last_event is not None and HandlingEventType(last_event.event_type) == HandlingEventType.CLAIM:
        return None

    if plan_event is None:
        return HandlingActivity(
            activity_type=HandlingEventType.RECEIVE.value,
            location=itinerary.initial_departure_location,
        )
    if not itinerary.is_expected(plan_event):
        return None

    kind = HandlingEventType(plan_event.event_type)
    legs = itinerary.legs

    if kind == HandlingEventType.RECEIVE:
        first_leg = legs[0]
        return HandlingActivity(
            activity_type=HandlingEventType.LOAD.value,
            location=first_leg.load_location,
            voyage_number=first_leg.voyage_number,
        )

    if kind == HandlingEventType.LOAD:
        leg = legs[itinerary.index_of_leg_loading_at(plan_event.location, plan_event.voyage_number)]
        return HandlingActivity(
            activity_type=HandlingEventType.UNLOAD.value,
            location=leg.unload_location,
            voyage_number=leg.voyage_number,
        )

    if kind == HandlingEventType.UNLOAD:
        index = itinerary.index_of_leg_unloading_at(plan_event.location, plan_event.voyage_number)
        if index == len(legs) - 1:
            return HandlingActivity(
                activity_type=HandlingEventType.CLAIM.value,
                location=legs[index].unload_location,
            )
        next_leg = legs[index + 1]
        return HandlingActivity(
            activity_type=HandlingEventType.LOAD.value,
            location=next_leg.load_location,
            voyage_number=next_leg.voyage_number,
        )

    return None


def _derive(
    itinerary: Itinerary | None,
    route_specification: RouteSpecification,
    last_event: LastHandlingEvent | None,
    plan_event: LastHandlingEvent | None,
) -> Delivery:
    routing_status = routing_status_of(itinerary, route_specification)
    misdirected = is_misdirected(itinerary, last_event)
    on_track = routing_status == RoutingStatus.ROUTED and not misdirected

    last_type = HandlingEventType(last_event.event_type) if last_event is not None else None

    return Delivery(
        transport_status=transport_status_of(last_event).value,
        last_known_location=last_event.location if last_event is not None else None,
        current_voyage=last_event.voyage_number if last_type == HandlingEventType.LOAD else None,
        is_misdirected=misdirected,
        estimated_time_of_arrival=itinerary.final_arrival_time if on_track else None,
        next_expected_activity=next_expected_activity(itinerary, on_track, last_event, plan_event),
        is_unloaded_at_destination=(
            last_type == HandlingEventType.UNLOAD
            and itinerary is not None
            and last_event.location == itinerary.final_arrival_location
        ),
        routing_status=routing_status.value,
        last_event=last_event,
        last_plan_event=plan_event,
    )
