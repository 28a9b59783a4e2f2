from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, model_validator

from ...core.errors import (
    AuctionClosed,
    BidError,
    ConfigurationError,
    GenerationExhausted,
    NotYourTurn,
    UnknownFaction,
)
from .service import SessionConfig, SessionManager

__all__ = ["BidRequest", "CreateAuctionRequest", "create_session_router"]

_DEFAULT_SEATS = 2


class CreateAuctionRequest(BaseModel):
    players: list[str] | None = None
    seats: int | None = None
    seed: int | None = None
    variant: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: dict[str, object]) -> dict[str, object]:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for field in ("seats", "seed"):
            value = cleaned.get(field)
            if value in (None, ""):
                cleaned[field] = None
                continue
            if isinstance(value, str):
                # Unparseable strings stay as-is so field validation reports them.
                try:
                    cleaned[field] = int(value)
                except ValueError:
                    pass
        return cleaned

    @model_validator(mode="after")
    def _normalize(self) -> CreateAuctionRequest:
        if self.players:
            self.players = [name.strip() for name in self.players]
            self.seats = len(self.players)
        else:
            self.players = None
            self.seats = self.seats if self.seats is not None else _DEFAULT_SEATS
        if self.variant is not None:
            self.variant = self.variant.strip().lower() or None
        return self

    def to_config(self) -> SessionConfig:
        players = self.players if self.players else self.seats
        return SessionConfig(players=players, seed=self.seed, variant=self.variant)


class BidRequest(BaseModel):
    seat: int
    faction: str
    # Passed through untouched; the auction core decides what counts as a bid.
    amount: Any


class _SessionController:
    def __init__(self, manager: SessionManager) -> None:
        self.manager = manager

    def _json_response(self, data: dict[str, object]) -> JSONResponse:
        return JSONResponse(data)

    async def create(self, body: CreateAuctionRequest) -> JSONResponse:
        try:
            session_id = await self.manager.create_session_async(body.to_config())
        except ConfigurationError as exc:
            raise HTTPException(400, str(exc)) from exc
        except GenerationExhausted as exc:
            raise HTTPException(503, str(exc)) from exc
        return self._json_response({"session": session_id})

    async def view(self, sid: str) -> JSONResponse:
        try:
            payload = await self.manager.get_view_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return self._json_response(payload.to_dict())

    async def bid(self, sid: str, body: BidRequest) -> JSONResponse:
        try:
            result = await self.manager.bid_async(sid, body.seat, body.faction, body.amount)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except UnknownFaction as exc:
            raise HTTPException(404, str(exc)) from exc
        except (NotYourTurn, AuctionClosed) as exc:
            raise HTTPException(409, str(exc)) from exc
        except (BidError, ConfigurationError) as exc:
            raise HTTPException(400, str(exc)) from exc
        return self._json_response(result.to_dict())

    async def log(self, sid: str) -> JSONResponse:
        try:
            payload = await self.manager.event_log_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return self._json_response(payload.to_dict())


def create_session_router(manager: SessionManager) -> APIRouter:
    controller = _SessionController(manager)
    router = APIRouter(prefix="/api/v1/auction", tags=["auction"])

    @router.post("")
    async def create_auction(body: CreateAuctionRequest) -> JSONResponse:
        return await controller.create(body)

    @router.get("/{sid}")
    async def get_auction(sid: str) -> JSONResponse:
        return await controller.view(sid)

    @router.post("/{sid}/bid")
    async def post_bid(sid: str, body: BidRequest) -> JSONResponse:
        return await controller.bid(sid, body)

    @router.get("/{sid}/log")
    async def get_log(sid: str) -> JSONResponse:
        return await controller.log(sid)

    return router
