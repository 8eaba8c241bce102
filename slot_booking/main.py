"""
Booking API entry point

Usage:
    uvicorn slot_booking.main:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from slot_booking.platform.app_factory import create_app
from slot_booking.platform.config.di import container
from slot_booking.platform.config.wire_modules import WIRE_MODULES
from slot_booking.platform.database.orm_db_setting import create_db_and_tables, dispose_engine
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.platform.state.redis_client import redis_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    Logger.base.info('🚀 [Booking API] Starting...')

    container.wire(modules=WIRE_MODULES)

    await create_db_and_tables()
    Logger.base.info('🗄️ [Booking API] Database tables ensured')

    # Redis backs the slot lock leases and the booking event channel (fail-fast)
    await redis_client.initialize()
    Logger.base.info('📡 [Booking API] Redis initialized')

    # Background task group for fire-and-forget event publishing
    async with anyio.create_task_group() as tg:
        container.task_group.override(tg)
        Logger.base.info('✅ [Booking API] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Booking API] Shutting down...')
        tg.cancel_scope.cancel()

    container.task_group.reset_override()

    await redis_client.disconnect()
    Logger.base.info('📡 [Booking API] Redis disconnected')

    await dispose_engine()
    Logger.base.info('🗄️ [Booking API] Database engine disposed')

    container.unwire()
    Logger.base.info('👋 [Booking API] Shutdown complete')


app = create_app(lifespan=lifespan)
