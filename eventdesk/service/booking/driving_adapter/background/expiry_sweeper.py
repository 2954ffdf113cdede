import anyio
from anyio.abc import TaskGroup

from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.expire_stale_bookings_use_case import (
    ExpireStaleBookingsUseCase,
)


class ExpirySweeper:
    """Periodically expire pending bookings whose seat hold ran out"""

    def __init__(
        self,
        *,
        use_case: ExpireStaleBookingsUseCase,
        interval_seconds: float = 60.0,
    ) -> None:
        self.use_case = use_case
        self.interval_seconds = interval_seconds
        self.runs = 0

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)
        Logger.base.info(f'⏰ [Expiry Sweeper] Started, every {self.interval_seconds:g}s')

    async def sweep_once(self) -> int:
        self.runs += 1
        return await self.use_case.expire_stale_bookings()

    async def _sweep_loop(self) -> None:
        while True:
            try:
                await self.sweep_once()
            except Exception as e:
                # Keep sweeping; the next run retries whatever failed
                Logger.base.error(f'❌ [Expiry Sweeper] Sweep failed: {e}')
            await anyio.sleep(self.interval_seconds)
