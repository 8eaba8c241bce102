"""
Distributed Lock using Redis

Lease = `SET key token NX EX ttl`; release = Lua compare-and-delete so a
caller whose lease already expired can never delete a newer owner's lease.
"""

from typing import Callable, Optional
from uuid import uuid4

from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.platform.state.lock_manager import LOCK_TTL_SECONDS, LockManager
from slot_booking.platform.state.redis_client import redis_client


RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class RedisLockManager(LockManager):
    """
    Lease store shared by every API process.

    A Redis outage on acquire propagates so callers never mistake it for
    contention; on release it is logged and the lease TTL cleans up.
    """

    def __init__(self, *, client_getter: Callable[[], AsyncRedis] = redis_client.get_client):
        self._client_getter = client_getter

    async def acquire(self, *, key: str, ttl: int = LOCK_TTL_SECONDS) -> Optional[str]:
        token = str(uuid4())

        try:
            acquired = await self._client_getter().set(key, token, nx=True, ex=ttl)
        except RedisError as e:
            Logger.base.error(f'❌ [LOCK] Error acquiring lock {key}: {e}')
            raise

        if acquired:
            Logger.base.debug(f'🔒 [LOCK] Acquired lock: {key} (ttl={ttl}s)')
            return token

        Logger.base.debug(f'⏳ [LOCK] Failed to acquire lock: {key} (already locked)')
        return None

    async def release(self, *, key: str, token: str) -> bool:
        try:
            removed = await self._client_getter().eval(RELEASE_SCRIPT, 1, key, token)  # type: ignore
        except RedisError as e:
            Logger.base.error(f'❌ [LOCK] Error releasing lock {key}: {e}')
            return False

        if removed:
            Logger.base.debug(f'🔓 [LOCK] Released lock: {key}')
            return True

        Logger.base.warning(f'⚠️ [LOCK] Lock {key} not released (ownership mismatch or expired)')
        return False
