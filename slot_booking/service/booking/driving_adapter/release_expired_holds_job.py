"""
One-shot expired-hold reconciliation for an external scheduler (cron, k8s CronJob).

Usage:
    slot-booking-release-expired-holds
    slot-booking-release-expired-holds --mentor-id <uuid>
"""

from functools import partial
from typing import Optional
from uuid import UUID

import anyio
import click

from slot_booking.platform.config.di import container
from slot_booking.platform.database.orm_db_setting import dispose_engine
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.platform.state.redis_client import redis_client
from slot_booking.service.booking.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)


async def run(*, mentor_id: Optional[UUID] = None) -> int:
    await redis_client.initialize()
    try:
        # Pending event publishes finish before the task group exits
        async with anyio.create_task_group() as tg:
            container.task_group.override(tg)
            use_case = ReleaseExpiredHoldsUseCase(
                uow_factory=container.unit_of_work,
                event_publisher=container.booking_event_publisher(),
            )
            result = await use_case.execute(mentor_id=mentor_id)
    finally:
        container.task_group.reset_override()
        await redis_client.disconnect()
        await dispose_engine()

    Logger.base.info(f'🧹 [Sweep Job] Released {result.released} expired hold(s)')
    return result.released


@click.command(help='Release lapsed slot holds once and exit.')
@click.option('--mentor-id', type=click.UUID, default=None, help="Only sweep this mentor's slots.")
def main(mentor_id: Optional[UUID]) -> None:
    released = anyio.run(partial(run, mentor_id=mentor_id))
    click.echo(f'released={released}')


if __name__ == '__main__':
    main()
