"""
Caller identity forwarded by the gateway.

Authentication happens upstream; this service trusts `X-User-Id` and
`X-User-Role` as set by the gateway.
"""

from typing import Optional
from uuid import UUID

import attrs
from fastapi import Depends, Header

from slot_booking.platform.exception.exceptions import AuthenticationError, ForbiddenError


ADMIN_ROLE = 'admin'


@attrs.define(frozen=True)
class CallerIdentity:
    user_id: UUID
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


async def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CallerIdentity:
    if not x_user_id:
        raise AuthenticationError('Missing caller identity')
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise AuthenticationError('Invalid caller identity')
    return CallerIdentity(user_id=user_id, role=x_user_role)


async def require_admin(caller: CallerIdentity = Depends(get_caller)) -> CallerIdentity:
    if not caller.is_admin:
        raise ForbiddenError('Admin role required')
    return caller
