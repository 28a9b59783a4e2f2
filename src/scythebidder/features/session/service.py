from __future__ import annotations

import logging
import random
import secrets
import string
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ...core import settings
from ...core.auction import event_log, setup, submit_bid
from ...core.catalog import Catalog, catalog_for
from ...core.errors import AuctionClosed, NotYourTurn
from ...core.models import AuctionState
from ...dynamic.seating import holds_combination, next_eligible_position
from .concurrency import run_blocking
from .schemas import AuctionView, BidResult, CombinationPayload, LogPayload, SeatPayload

__all__ = [
    "Bidder",
    "SessionConfig",
    "SessionManager",
    "SessionState",
    "_view",
]

logger = logging.getLogger(__name__)

# Receives the current view and the session RNG; returns (faction, amount).
Bidder = Callable[[AuctionView, random.Random], tuple[str, int]]


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for one auction."""

    players: int | Sequence[str]
    seed: int | None = None
    variant: str | None = None
    max_attempts: int | None = None

    @property
    def seat_names(self) -> list[str] | None:
        if isinstance(self.players, int):
            return None
        return [str(name) for name in self.players]

    @property
    def seat_count(self) -> int:
        if isinstance(self.players, int):
            return self.players
        return len(self.players)


@dataclass
class SessionState:
    config: SessionConfig
    catalog: Catalog
    seed: int
    rng: random.Random
    auction: AuctionState
    position: int = 0

    @property
    def current_seat(self) -> int | None:
        if self.auction.complete:
            return None
        return self.auction.play_order[self.position]


class SessionManager:
    """Owns auction sessions and enforces whose turn it is."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def create_session(self, config: SessionConfig) -> str:
        catalog = catalog_for(config.variant or settings.current().variant)
        catalog.validate_players(config.seat_count)
        seed = config.seed if config.seed is not None else secrets.SystemRandom().getrandbits(32)
        rng = random.Random(seed)
        auction = setup(
            catalog.factions,
            catalog.mats,
            config.seat_count,
            rng,
            max_attempts=config.max_attempts,
            seat_names=config.seat_names,
        )
        session_id = _sid()
        state = SessionState(config=config, catalog=catalog, seed=seed, rng=rng, auction=auction)
        with self._lock:
            self._sessions[session_id] = state
        logger.info(
            "Auction session created",
            extra={"session_id": session_id, "variant": catalog.name, "seats": config.seat_count, "seed": seed},
        )
        return session_id

    async def create_session_async(self, config: SessionConfig) -> str:
        return await run_blocking(self.create_session, config)

    def get_view(self, session_id: str) -> AuctionView:
        with self._lock:
            return _view(session_id, self._require_session(session_id))

    async def get_view_async(self, session_id: str) -> AuctionView:
        return await run_blocking(self.get_view, session_id)

    def bid(self, session_id: str, seat: int, faction: str, amount: object) -> BidResult:
        with self._lock:
            state = self._require_session(session_id)
            acting = state.current_seat
            if acting is None:
                raise AuctionClosed("the auction has ended")
            if seat != acting:
                raise NotYourTurn(seat, acting)
            receipt = submit_bid(state.auction, seat, faction, amount)
            if not receipt.completed:
                state.position = next_eligible_position(
                    state.auction.combinations, state.auction.play_order, state.position
                )
            message = state.auction.log[-2] if receipt.completed else state.auction.log[-1]
            view = _view(session_id, state)
        logger.debug("Bid applied", extra={"session_id": session_id, "seat": seat, "done": view.done})
        return BidResult(accepted=True, message=message, view=view)

    async def bid_async(self, session_id: str, seat: int, faction: str, amount: object) -> BidResult:
        return await run_blocking(self.bid, session_id, seat, faction, amount)

    def event_log(self, session_id: str) -> LogPayload:
        with self._lock:
            state = self._require_session(session_id)
            return LogPayload(log=list(event_log(state.auction)))

    async def event_log_async(self, session_id: str) -> LogPayload:
        return await run_blocking(self.event_log, session_id)

    def drive_session(
        self,
        session_id: str,
        bidder: Bidder,
        *,
        max_turns: int = 1_000,
        cleanup: bool = False,
    ) -> AuctionView:
        """Play out an auction by asking ``bidder`` for each acting seat's bid.

        Rejected bids propagate to the caller.  Returns the final view.
        """

        for _ in range(max_turns):
            with self._lock:
                state = self._require_session(session_id)
                view = _view(session_id, state)
                rng = state.rng
            if view.done:
                if cleanup:
                    with self._lock:
                        self._sessions.pop(session_id, None)
                return view
            faction, amount = bidder(view, rng)
            self.bid(session_id, view.current_seat, faction, amount)
        raise RuntimeError(f"auction {session_id} did not finish within {max_turns} turns")

    def _require_session(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise KeyError(f"session '{session_id}' not found")
        return state


def _sid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _view(session_id: str, state: SessionState) -> AuctionView:
    auction = state.auction
    combinations = [
        CombinationPayload(
            faction=combo.faction.value,
            mat=combo.mat.value,
            current_bid=combo.current_bid,
            minimum_bid=combo.minimum_bid,
            holder=combo.current_holder,
            holder_name=auction.seats[combo.current_holder].name if combo.current_holder is not None else None,
        )
        for combo in auction.combinations
    ]
    play_order = [
        SeatPayload(
            index=seat_index,
            name=auction.seats[seat_index].name,
            position=position,
            holding=holds_combination(seat_index, auction.combinations),
        )
        for position, seat_index in enumerate(auction.play_order)
    ]
    current = state.current_seat
    return AuctionView(
        session=session_id,
        variant=state.catalog.name,
        seed=state.seed,
        done=auction.complete,
        combinations=combinations,
        play_order=play_order,
        current_seat=current,
        current_name=auction.seats[current].name if current is not None else None,
        log=list(auction.log),
    )
