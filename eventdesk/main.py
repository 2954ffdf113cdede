"""
Production FastAPI Application

Booking + nearby search API with the booking-expiry sweeper running in the background.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from eventdesk.platform.app_factory import create_app
from eventdesk.platform.config.di import container
from eventdesk.platform.config.wire_modules import WIRE_MODULES
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.expire_stale_bookings_use_case import (
    ExpireStaleBookingsUseCase,
)
from eventdesk.service.booking.driving_adapter.background.expiry_sweeper import ExpirySweeper


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Eventdesk] Starting up...')
    settings = container.config_service()

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Eventdesk] Dependency injection wired')

    if settings.STORAGE_BACKEND == 'postgres':
        await container.database().create_db_and_tables()
        Logger.base.info('🗄️  [Eventdesk] Database ready')

    async with anyio.create_task_group() as tg:
        sweeper = ExpirySweeper(
            use_case=ExpireStaleBookingsUseCase(
                booking_command_repo=container.booking_command_repo()
            ),
            interval_seconds=settings.EXPIRY_SWEEP_INTERVAL_SECONDS,
        )
        await sweeper.start(task_group=tg)
        Logger.base.info(f'✅ [Eventdesk] Ready ({settings.STORAGE_BACKEND} storage)')

        yield

        Logger.base.info('🛑 [Eventdesk] Shutting down...')
        tg.cancel_scope.cancel()

    await container.ip_geolocation_http_client().aclose()
    await container.database().dispose()
    container.unwire()

    Logger.base.info('👋 [Eventdesk] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
