from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.cancel_or_expire_booking_use_case import (
    CancelOrExpireBookingUseCase,
)
from eventdesk.service.booking.app.command.confirm_booking_use_case import ConfirmBookingUseCase
from eventdesk.service.booking.app.command.create_pending_booking_use_case import (
    CreatePendingBookingUseCase,
)
from eventdesk.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo
from eventdesk.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingDetailResponse,
    BookingResponse,
    CancelBookingRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    use_case: CreatePendingBookingUseCase = Depends(CreatePendingBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('event_id', str(request.event_id))
        span.set_attribute('quantity', request.quantity)

        booking = await use_case.create_pending_booking(
            event_id=request.event_id,
            user_id=request.user_id,
            user_email=request.user_email,
            quantity=request.quantity,
            attendee_info=AttendeeInfo(
                names=request.attendee_info.names,
                emails=request.attendee_info.emails,
                phones=request.attendee_info.phones,
            ),
        )
        span.set_attribute('booking.reference', booking.booking_reference)
        return BookingResponse.from_entity(booking)


@router.get('/{booking_reference}')
@Logger.io
async def get_booking(
    booking_reference: str,
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingDetailResponse:
    result = await use_case.get_booking(booking_reference=booking_reference)
    return BookingDetailResponse.from_dto(result)


@router.post('/{booking_reference}/confirm')
@Logger.io
async def confirm_booking(
    booking_reference: str,
    use_case: ConfirmBookingUseCase = Depends(ConfirmBookingUseCase.depends),
) -> BookingDetailResponse:
    """Payment provider callback: the booking is paid, issue its tickets"""
    result = await use_case.confirm_booking(booking_reference=booking_reference)
    return BookingDetailResponse.from_dto(result)


@router.post('/{booking_reference}/cancel')
@Logger.io
async def cancel_booking(
    booking_reference: str,
    request: CancelBookingRequest = CancelBookingRequest(),
    use_case: CancelOrExpireBookingUseCase = Depends(CancelOrExpireBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel_or_expire_booking(
        booking_reference=booking_reference, reason=BookingStatus(request.reason)
    )
    return BookingResponse.from_entity(booking)
