from contextlib import AbstractAsyncContextManager
from typing import Callable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.platform.database.time_utils import as_utc
from eventdesk.platform.exception.exceptions import ConflictError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.interface.i_event_repo import IEventRepo
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event
from eventdesk.service.shared_kernel.driven_adapter.model.event_model import (
    EventModel,
    event_entity_to_model,
    event_model_to_entity,
)


class EventRepoImpl(IEventRepo):
    def __init__(
        self, session_factory: Callable[..., AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    async def add_event(self, event: Event) -> Event:
        async with self.session_factory() as session:
            async with session.begin():
                session.add(event_entity_to_model(event))
        return event

    async def get_by_id(self, *, event_id: UUID) -> Event | None:
        async with self.session_factory() as session:
            model = await session.get(EventModel, event_id)
            return event_model_to_entity(model) if model else None

    @Logger.io
    async def save_publication_state(self, *, event: Event) -> Event:
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(EventModel)
                    .where(EventModel.id == event.id)
                    .values(
                        is_published=event.is_published,
                        status=str(event.status),
                        updated_at=as_utc(event.updated_at),
                    )
                    .returning(EventModel.id)
                    .execution_options(synchronize_session=False)
                )
                if result.scalar_one_or_none() is None:
                    raise ConflictError(f'Event {event.id} no longer exists')

            result = await session.execute(select(EventModel).where(EventModel.id == event.id))
            return event_model_to_entity(result.scalar_one())
