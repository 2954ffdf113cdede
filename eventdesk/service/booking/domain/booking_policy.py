"""
Booking rules that need no I/O

validate_booking_request: admission checks for a seat request
compute_price: deterministic subtotal / platform fee / total
generate_booking_reference: human-friendly booking code
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
import secrets
import string
from typing import Optional

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.booking.domain.booking_errors import (
    BookingWindowClosedError,
    CapacityExceededError,
    EventNotBookableError,
    PerUserLimitExceededError,
)
from eventdesk.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


DEFAULT_MAX_TICKETS_PER_USER = 10

# ISO 4217 currencies without a minor unit
ZERO_DECIMAL_CURRENCIES = frozenset({'JPY', 'KRW', 'VND', 'CLP', 'ISK', 'UGX', 'XAF', 'XOF'})

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def validate_booking_request(
    event: Event,
    requested_quantity: int,
    user_existing_quantity: int = 0,
    *,
    now: Optional[datetime] = None,
    default_max_tickets_per_user: int = DEFAULT_MAX_TICKETS_PER_USER,
) -> None:
    """
    Check whether a user may hold `requested_quantity` seats of `event`

    Raises:
        DomainError: quantity below 1
        EventNotBookableError: event not published
        BookingWindowClosedError: `now` outside the booking window
        CapacityExceededError: not enough seats left
        PerUserLimitExceededError: per-user ticket limit reached
    """
    if requested_quantity < 1:
        raise DomainError('quantity must be at least 1')
    if not event.is_discoverable:
        raise EventNotBookableError()
    if now is not None and not event.booking_window_open(now):
        raise BookingWindowClosedError()
    if requested_quantity > event.available_seats:
        raise CapacityExceededError(
            requested=requested_quantity, available=event.available_seats
        )

    limit = event.ticket_limit(default_max_tickets_per_user)
    if requested_quantity + user_existing_quantity > limit:
        raise PerUserLimitExceededError(
            requested=requested_quantity, existing=user_existing_quantity, limit=limit
        )


def currency_quantum(currency: str) -> Decimal:
    return Decimal('1') if currency.upper() in ZERO_DECIMAL_CURRENCIES else Decimal('0.01')


def compute_price(
    unit_price: Decimal | int | str,
    quantity: int,
    fee_rate: Decimal | str,
    currency: str = 'INR',
) -> PriceBreakdown:
    if quantity < 1:
        raise DomainError('quantity must be at least 1')
    unit_price = Decimal(unit_price)
    fee_rate = Decimal(fee_rate)
    if unit_price < 0:
        raise DomainError('unit_price cannot be negative')
    if fee_rate < 0:
        raise DomainError('fee_rate cannot be negative')

    quantum = currency_quantum(currency)
    subtotal = (unit_price * quantity).quantize(quantum, rounding=ROUND_HALF_UP)
    platform_fee = (subtotal * fee_rate).quantize(quantum, rounding=ROUND_HALF_UP)
    return PriceBreakdown(
        unit_price=unit_price,
        quantity=quantity,
        subtotal=subtotal,
        platform_fee=platform_fee,
        total_amount=subtotal + platform_fee,
        currency=currency.upper(),
    )


def generate_booking_reference(prefix: str = 'BK', length: int = 8) -> str:
    return prefix + ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(length))
