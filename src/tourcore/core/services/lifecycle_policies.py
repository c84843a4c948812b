"""Time-window status policies for lifecycle records.

Each policy maps ``(now, start_time, end_time, status)`` to the status a
record should have. CANCELLED is absorbing in every policy.
"""

from collections.abc import Sequence
from datetime import datetime

from tourcore.core.entities.lifecycle import (
    BookingStatus,
    FlightStatus,
    FollowUpWrite,
    LifecycleRecord,
    TourStatus,
)


class TourStatusPolicy:
    """Tours move UPCOMING -> ONGOING -> COMPLETED as their dates pass.

    A tour whose start date has been moved into the future goes back to
    UPCOMING.
    """

    name = "tour-status"
    candidate_statuses = (TourStatus.UPCOMING, TourStatus.ONGOING)

    def desired_status(self, record: LifecycleRecord, now: datetime) -> TourStatus | None:
        if record.status == TourStatus.CANCELLED:
            return None

        if now >= record.end_time:
            return TourStatus.COMPLETED
        if record.start_time <= now:
            return TourStatus.ONGOING
        if record.status in (TourStatus.ONGOING, TourStatus.COMPLETED):
            return TourStatus.UPCOMING
        return None

    def follow_up_writes(self, record: LifecycleRecord) -> Sequence[FollowUpWrite]:
        return ()


class FlightStatusPolicy:
    """Flights move SCHEDULED/DELAYED -> DEPARTED -> LANDED.

    ``start_time`` is the departure and ``end_time`` the arrival. A DELAYED
    flight keeps its status until it departs.
    """

    name = "flight-status"
    candidate_statuses = (
        FlightStatus.SCHEDULED,
        FlightStatus.DEPARTED,
        FlightStatus.DELAYED,
    )

    def desired_status(self, record: LifecycleRecord, now: datetime) -> FlightStatus | None:
        if record.status == FlightStatus.CANCELLED:
            return None

        if now >= record.end_time:
            return FlightStatus.LANDED
        if record.start_time <= now:
            return FlightStatus.DEPARTED
        if record.status in (FlightStatus.DEPARTED, FlightStatus.LANDED):
            return FlightStatus.SCHEDULED
        return None

    def follow_up_writes(self, record: LifecycleRecord) -> Sequence[FollowUpWrite]:
        return ()


class BookingDeadlinePolicy:
    """Pending bookings are cancelled once their payment deadline passes.

    ``end_time`` is the payment deadline.
    """

    name = "booking-deadline"
    candidate_statuses = (BookingStatus.PENDING,)

    def desired_status(self, record: LifecycleRecord, now: datetime) -> BookingStatus | None:
        if record.status == BookingStatus.PENDING and now >= record.end_time:
            return BookingStatus.CANCELLED
        return None

    def follow_up_writes(self, record: LifecycleRecord) -> Sequence[FollowUpWrite]:
        """Release the places a cancelled booking was holding.

        Reads ``tour_id``, ``flight_id`` and ``number_of_guests`` from the
        record's extra fields. The tour's ``guests_booked`` goes down and the
        flight's ``seats_available`` goes up by the number of guests.
        """
        guests = int(record.extra.get("number_of_guests", 0))
        if guests <= 0:
            return ()

        writes = []
        tour_id = record.extra.get("tour_id")
        if tour_id is not None:
            writes.append(FollowUpWrite("tour", tour_id, "guests_booked", -guests))
        flight_id = record.extra.get("flight_id")
        if flight_id is not None:
            writes.append(FollowUpWrite("flight", flight_id, "seats_available", guests))
        return writes
