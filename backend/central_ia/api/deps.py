"""FastAPI dependencies for authentication and data access."""

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from central_ia.core.clock import Clock, system_clock
from central_ia.core.exceptions import AuthenticationError
from central_ia.core.notices import NoticeBoard
from central_ia.db.store import DataStore
from central_ia.db.supabase import SupabaseClient, SupabaseStore

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Any:
    """Extract and validate the current user from the Supabase JWT.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        Validated user object from Supabase.

    Raises:
        HTTPException: If authentication fails.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        client = SupabaseClient.get_client()
        response = client.auth.get_user(credentials.credentials)

        if response is None or response.user is None:
            raise AuthenticationError("Invalid authentication token")

        return response.user

    except AuthenticationError as e:
        logger.warning("AUTH: AuthenticationError - %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    except Exception as e:
        logger.exception("AUTH: Unexpected error during token validation")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def get_store() -> DataStore:
    """Data store used by request handlers."""
    return SupabaseStore()


def get_notice_board() -> NoticeBoard:
    """Fresh notice board per request."""
    return NoticeBoard()


def get_clock() -> Clock:
    return system_clock


CurrentUser = Annotated[Any, Depends(get_current_user)]
Store = Annotated[DataStore, Depends(get_store)]
Notices = Annotated[NoticeBoard, Depends(get_notice_board)]
RequestClock = Annotated[Clock, Depends(get_clock)]
