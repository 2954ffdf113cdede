from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Callable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.platform.database.time_utils import as_utc
from eventdesk.service.proximity.app.interface.i_event_location_query_repo import (
    IEventLocationQueryRepo,
)
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event
from eventdesk.service.shared_kernel.domain.enum.event_status import EventStatus
from eventdesk.service.shared_kernel.driven_adapter.model.event_model import (
    EventModel,
    event_model_to_entity,
)


class EventLocationQueryRepoImpl(IEventLocationQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    async def list_discoverable_events(self, *, ends_after: datetime) -> List[Event]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(EventModel)
                .where(
                    EventModel.is_published.is_(True),
                    EventModel.status == str(EventStatus.PUBLISHED),
                    EventModel.end_date >= as_utc(ends_after),
                )
                .order_by(EventModel.start_date)
            )
            return [event_model_to_entity(model) for model in result.scalars().all()]
