"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from slot_booking.platform.config.core_setting import Settings
from slot_booking.platform.database.orm_db_setting import Database
from slot_booking.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from slot_booking.platform.state.distributed_lock import RedisLockManager
from slot_booking.platform.state.redis_client import redis_client
from slot_booking.service.booking.driven_adapter.event.booking_event_publisher_impl import (
    BookingEventPublisherImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (AsyncEngineManager behind Database.session)
    database = providers.Singleton(Database)

    # Background task group (set by the app lifespan / scheduler job)
    # Used for fire-and-forget event publishing
    task_group = providers.Object(None)

    # One unit of work per transaction; use cases receive the provider itself
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Slot lock leases (Redis SET NX EX + Lua release)
    lock_manager = providers.Singleton(
        RedisLockManager, client_getter=providers.Object(redis_client.get_client)
    )

    # Post-commit booking events (Redis Pub/Sub)
    booking_event_publisher = providers.Factory(
        BookingEventPublisherImpl,
        task_group=task_group,
        client_getter=providers.Object(redis_client.get_client),
    )


container = Container()
