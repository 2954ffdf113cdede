from uuid import UUID

from fastapi import APIRouter, Depends

from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.publish_event_use_case import PublishEventUseCase
from eventdesk.service.shared_kernel.driving_adapter.schema.event_schema import EventResponse


router = APIRouter()


@router.post('/{event_id}/publish')
@Logger.io
async def publish_event(
    event_id: UUID,
    use_case: PublishEventUseCase = Depends(PublishEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.publish(event_id=event_id))


@router.post('/{event_id}/unpublish')
@Logger.io
async def unpublish_event(
    event_id: UUID,
    use_case: PublishEventUseCase = Depends(PublishEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.unpublish(event_id=event_id))
