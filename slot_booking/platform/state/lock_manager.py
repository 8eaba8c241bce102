"""
Keyed mutual exclusion with expiring leases.

Concrete stores implement `acquire` / `release`; `with_lock` is the scoped
form every caller uses so the lease is released on every exit path.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import attrs


T = TypeVar('T')

LOCK_TTL_SECONDS = 10
LOCK_CONTENDED_MESSAGE = 'Resource is currently locked. Please try again.'


@attrs.define(frozen=True)
class LockResult(Generic[T]):
    success: bool
    result: Optional[T] = None
    error: Optional[str] = None


class LockManager(ABC):
    @abstractmethod
    async def acquire(self, *, key: str, ttl: int = LOCK_TTL_SECONDS) -> Optional[str]:
        """
        Create the lease for `key` only if none exists.

        Returns:
            Ownership token, or None when someone else holds the lease

        Raises:
            Store errors; an unreachable store is not contention
        """
        pass

    @abstractmethod
    async def release(self, *, key: str, token: str) -> bool:
        """
        Delete the lease only if it still carries `token`.

        Returns:
            True if this call removed the lease
        """
        pass

    async def with_lock(self, *, key: str, fn: Callable[[], Awaitable[T]]) -> LockResult[T]:
        token = await self.acquire(key=key)
        if token is None:
            return LockResult(success=False, error=LOCK_CONTENDED_MESSAGE)

        try:
            return LockResult(success=True, result=await fn())
        finally:
            await self.release(key=key, token=token)
