from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Booking and proximity search metrics collector

    Tracks seat hold outcomes, booking state transitions and nearby search latency.
    """

    def __init__(self):
        # ========== Booking Metrics ==========
        self.booking_requests = Counter(
            'eventdesk_booking_requests_total',
            'Total pending booking requests',
            ['result'],  # result: created/capacity_exceeded/limit_exceeded/rejected
        )

        self.booking_transitions = Counter(
            'eventdesk_booking_transitions_total',
            'Booking state transitions',
            ['to_status'],
        )

        self.seats_held = Counter(
            'eventdesk_seats_held_total',
            'Seats decremented by pending bookings',
        )

        self.seats_released = Counter(
            'eventdesk_seats_released_total',
            'Seats restored by cancelled or expired bookings',
            ['reason'],
        )

        self.booking_duration = Histogram(
            'eventdesk_booking_duration_seconds',
            'Pending booking creation time',
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
        )

        # ========== Proximity Metrics ==========
        self.nearby_search_duration = Histogram(
            'eventdesk_nearby_search_duration_seconds',
            'Nearby event search time',
            ['location_known'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        self.location_resolutions = Counter(
            'eventdesk_location_resolutions_total',
            'Location resolution outcomes per source',
            ['source'],  # device_high/device_low/ip/manual/unavailable
        )

    # ========== Helper Methods ==========

    def record_booking_request(self, *, result: str, duration: float) -> None:
        self.booking_requests.labels(result=result).inc()
        self.booking_duration.observe(duration)

    def record_transition(self, *, to_status: str) -> None:
        self.booking_transitions.labels(to_status=to_status).inc()

    def record_seats_held(self, *, quantity: int) -> None:
        self.seats_held.inc(quantity)

    def record_seats_released(self, *, reason: str, quantity: int) -> None:
        self.seats_released.labels(reason=reason).inc(quantity)

    def record_nearby_search(self, *, location_known: bool, duration: float) -> None:
        self.nearby_search_duration.labels(location_known=str(location_known).lower()).observe(
            duration
        )

    def record_location_resolution(self, *, source: str) -> None:
        self.location_resolutions.labels(source=source).inc()


# Global metrics instance
metrics = BookingMetrics()
