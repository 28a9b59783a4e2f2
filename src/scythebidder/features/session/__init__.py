"""Session feature: service layer, schemas, and API router."""

from .router import create_session_router
from .schemas import AuctionView, BidResult, CombinationPayload, LogPayload, SeatPayload
from .service import SessionConfig, SessionManager

__all__ = [
    "AuctionView",
    "BidResult",
    "CombinationPayload",
    "LogPayload",
    "SeatPayload",
    "SessionConfig",
    "SessionManager",
    "create_session_router",
]
