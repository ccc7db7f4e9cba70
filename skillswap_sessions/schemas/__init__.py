from .session import (
    SessionRequest,
    SessionStatusUpdate,
    SessionResponse,
    Participant,
    EnrichedSession,
    RoleFilter,
)
from .review import (
    ReviewCreate,
    ReviewResponse,
    ReviewEligibilityResponse,
    RatingDrift,
    RatingRecalculationResponse,
)
from .user import UserProfileResponse, BanRequest

__all__ = [
    "SessionRequest",
    "SessionStatusUpdate",
    "SessionResponse",
    "Participant",
    "EnrichedSession",
    "RoleFilter",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewEligibilityResponse",
    "RatingDrift",
    "RatingRecalculationResponse",
    "UserProfileResponse",
    "BanRequest",
]
