from typing import Optional

from fastapi import Header, HTTPException, status

from skillswap_sessions.services.profile_service import DatabaseProfileProvider, ProfileProvider


def get_current_user_id(x_user_id: Optional[int] = Header(None)) -> int:
    """
    Caller identity, as asserted by the identity provider's gateway.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id


def get_profile_provider() -> ProfileProvider:
    return DatabaseProfileProvider()
