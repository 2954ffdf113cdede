"""
Test application for HTTP tests.

Same routers, handlers and wiring as production; the expiry sweeper is not
started so tests drive expiry explicitly.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from eventdesk.platform.app_factory import create_app
from eventdesk.platform.config.di import container
from eventdesk.platform.config.wire_modules import WIRE_MODULES


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    container.wire(modules=WIRE_MODULES)
    yield
    container.unwire()


app = create_app(lifespan=lifespan, title_suffix=' (Test)')

__all__ = ['app']
