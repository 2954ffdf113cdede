"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from eventdesk.service.booking.app.command import (
    cancel_or_expire_booking_use_case,
    confirm_booking_use_case,
    create_pending_booking_use_case,
    publish_event_use_case,
)
from eventdesk.service.booking.app.query import get_booking_use_case
from eventdesk.service.proximity.app.query import search_nearby_events_use_case
from eventdesk.service.proximity.driving_adapter.http_controller import nearby_event_controller


WIRE_MODULES: list[ModuleType] = [
    create_pending_booking_use_case,
    confirm_booking_use_case,
    cancel_or_expire_booking_use_case,
    publish_event_use_case,
    get_booking_use_case,
    search_nearby_events_use_case,
    nearby_event_controller,
]
