"""
Booking Event Publisher Implementation

Publishes committed booking events to Redis Pub/Sub.
Channel format: {BOOKING_EVENT_CHANNEL_PREFIX}:{event_type}

Delivery runs in the background task group installed by the app lifespan
(or the scheduler job); without one it falls back to a loop task.
"""

import asyncio
from typing import Any, Callable, Optional, Set

from anyio.abc import TaskGroup
import orjson
from redis.asyncio import Redis

from slot_booking.platform.config.core_setting import settings
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.platform.state.redis_client import redis_client
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    BookingDomainEvent,
)


class BookingEventPublisherImpl(IBookingEventPublisher):
    def __init__(
        self,
        *,
        task_group: Optional[TaskGroup] = None,
        client_getter: Callable[[], Redis] = redis_client.get_client,
        channel_prefix: str = settings.BOOKING_EVENT_CHANNEL_PREFIX,
    ) -> None:
        self._task_group = task_group
        self._client_getter = client_getter
        self._channel_prefix = channel_prefix
        # Strong refs so pending loop tasks are not garbage collected
        self._pending: Set[asyncio.Task[Any]] = set()

    def channel_for(self, event: BookingDomainEvent) -> str:
        return f'{self._channel_prefix}:{event.event_type.value}'

    def publish_nowait(self, *, event: BookingDomainEvent) -> None:
        if self._task_group is not None:
            self._task_group.start_soon(self._publish, event)
            return

        task = asyncio.get_running_loop().create_task(self._publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish(self, event: BookingDomainEvent) -> None:
        channel = self.channel_for(event)
        try:
            await self._client_getter().publish(channel, orjson.dumps(event.to_payload()))
            Logger.base.debug(
                f'📡 [BookingEvent] Published to {channel}: session_id={event.session_id}'
            )
        except Exception as e:
            Logger.base.warning(f'⚠️ [BookingEvent] Publish to {channel} failed: {e}')
