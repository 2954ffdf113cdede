from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class IEventLocationQueryRepo(ABC):
    @abstractmethod
    async def list_discoverable_events(self, *, ends_after: datetime) -> List[Event]:
        """Published events that have not ended yet, with or without coordinates"""
        pass
