from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

__all__ = [
    "AuctionView",
    "BidResult",
    "CombinationPayload",
    "LogPayload",
    "SeatPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SeatPayload(_APIModel):
    index: int
    name: str
    position: int
    holding: bool


class CombinationPayload(_APIModel):
    faction: str
    mat: str
    current_bid: int
    minimum_bid: int
    holder: int | None = None
    holder_name: str | None = None


class AuctionView(_APIModel):
    session: str
    variant: str
    seed: int
    done: bool
    combinations: list[CombinationPayload]
    play_order: list[SeatPayload]
    current_seat: int | None = None
    current_name: str | None = None
    log: list[str]


class BidResult(_APIModel):
    accepted: bool
    message: str
    view: AuctionView


class LogPayload(_APIModel):
    log: list[str]
