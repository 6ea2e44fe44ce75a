"""Authorization gate: caller identity and role checks.

The bearer token is the only source of identity. Its claims are trusted as
issued; no user lookup happens here.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.portfolio.core.exceptions import ForbiddenError
from src.portfolio.core.logging import bind_caller_context
from src.portfolio.core.security import ACCESS_TOKEN_TYPE, Caller, decode_token
from src.portfolio.models import UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_caller(
    authorization: Annotated[str | None, Header()] = None,
) -> Caller:
    """Validate the access token and return the caller it identifies."""
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("Missing or invalid authorization header")

    payload = decode_token(authorization[7:])
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError as e:
        raise _unauthorized("Invalid user_id in token") from e

    try:
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise _unauthorized("Invalid role in token") from e

    bind_caller_context(user_uuid, role.value)
    return Caller(user_id=user_uuid, role=role)


CurrentCaller = Annotated[Caller, Depends(get_current_caller)]


async def require_creator(caller: CurrentCaller) -> Caller:
    """Require a role that may submit and edit projects."""
    if not caller.can_create:
        raise ForbiddenError("Your role cannot submit projects")
    return caller


CreatorCaller = Annotated[Caller, Depends(require_creator)]


async def require_moderator(caller: CurrentCaller) -> Caller:
    """Require a moderator role (team leader or admin)."""
    if not caller.is_moderator:
        raise ForbiddenError("Team Leader or Admin role required for this operation")
    return caller


ModeratorCaller = Annotated[Caller, Depends(require_moderator)]
