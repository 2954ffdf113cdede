from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventdesk.platform.config.di import Container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.interface.i_event_repo import IEventRepo
from eventdesk.service.booking.domain.booking_errors import EventNotFoundError
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class PublishEventUseCase:
    """Toggle whether an event is visible for booking and nearby search"""

    def __init__(self, *, event_repo: IEventRepo) -> None:
        self.event_repo = event_repo

    @classmethod
    @inject
    def depends(cls, event_repo: IEventRepo = Depends(Provide[Container.event_repo])) -> Self:
        return cls(event_repo=event_repo)

    async def _load(self, event_id: UUID) -> Event:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @Logger.io
    async def publish(self, *, event_id: UUID) -> Event:
        event = (await self._load(event_id)).publish()
        saved = await self.event_repo.save_publication_state(event=event)
        Logger.base.info(f'📣 [EVENT] {event_id} published')
        return saved

    @Logger.io
    async def unpublish(self, *, event_id: UUID) -> Event:
        event = (await self._load(event_id)).unpublish()
        saved = await self.event_repo.save_publication_state(event=event)
        Logger.base.info(f'🙈 [EVENT] {event_id} unpublished')
        return saved
