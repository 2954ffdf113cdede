"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers
import httpx

from eventdesk.platform.config.core_setting import Settings
from eventdesk.platform.database.orm_db_setting import Database
from eventdesk.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from eventdesk.service.booking.driven_adapter.repo.event_repo_impl import EventRepoImpl
from eventdesk.service.booking.driven_adapter.repo.in_memory_booking_store import (
    InMemoryBookingStore,
)
from eventdesk.service.proximity.driven_adapter.repo.event_location_query_repo_impl import (
    EventLocationQueryRepoImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine is created lazily, never touched by the memory backend)
    database = providers.Singleton(Database)

    # Single-process storage: one store backs events, bookings and the nearby query
    in_memory_store = providers.Singleton(InMemoryBookingStore)

    # Repositories, selected by STORAGE_BACKEND (memory | postgres)
    event_repo = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=in_memory_store,
        postgres=providers.Singleton(EventRepoImpl, session_factory=database.provided.session),
    )
    booking_command_repo = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=in_memory_store,
        postgres=providers.Singleton(
            BookingCommandRepoImpl, session_factory=database.provided.session
        ),
    )
    event_location_query_repo = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=in_memory_store,
        postgres=providers.Singleton(
            EventLocationQueryRepoImpl, session_factory=database.provided.session
        ),
    )

    # Outbound HTTP client for IP geolocation
    ip_geolocation_http_client = providers.Singleton(
        httpx.AsyncClient,
        timeout=config_service.provided.IP_GEOLOCATION_TIMEOUT_SECONDS,
        follow_redirects=True,
    )


container = Container()
