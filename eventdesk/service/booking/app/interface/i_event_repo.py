from abc import ABC, abstractmethod
from uuid import UUID

from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class IEventRepo(ABC):
    @abstractmethod
    async def add_event(self, event: Event) -> Event:
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> Event | None:
        pass

    @abstractmethod
    async def save_publication_state(self, *, event: Event) -> Event:
        """Persist is_published / status only (seat counters are never touched here)"""
        pass
