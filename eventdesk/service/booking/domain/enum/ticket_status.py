from enum import StrEnum


class TicketStatus(StrEnum):
    ACTIVE = 'active'
    USED = 'used'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'
