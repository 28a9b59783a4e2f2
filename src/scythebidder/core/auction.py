"""Auction lifecycle: setup, bid resolution and completion.

These functions are the whole interface the session layer relies on.  Every
check in :func:`submit_bid` runs before the first write, so a rejected bid
leaves the state exactly as it was.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Any

from ..dynamic.generator import generate_combinations
from ..dynamic.seating import order_combinations, shuffle_play_order
from . import settings
from .catalog import DEFAULT_RULES, Faction, GenerationRules, PlayerMat
from .errors import AuctionClosed, BidTooLow, ConfigurationError, NonIntegerBid, UnknownFaction
from .models import AuctionState, BidReceipt, Combination, Seat

__all__ = [
    "AUCTION_ENDED",
    "AUCTION_STARTED",
    "event_log",
    "holdings",
    "is_complete",
    "setup",
    "submit_bid",
]

logger = logging.getLogger(__name__)

AUCTION_STARTED = "Auction start!"
AUCTION_ENDED = "Auction ended"


def _seats(seat_count: int, seat_names: Sequence[str] | None) -> tuple[Seat, ...]:
    if seat_names is None:
        return tuple(Seat(index=i, name=f"Player {i + 1}") for i in range(seat_count))
    if len(seat_names) != seat_count:
        raise ConfigurationError(f"expected {seat_count} seat names, got {len(seat_names)}")
    seats: list[Seat] = []
    for i, raw in enumerate(seat_names):
        name = str(raw).strip() or f"Player {i + 1}"
        seats.append(Seat(index=i, name=name))
    return tuple(seats)


def setup(
    factions: Sequence[Faction],
    mats: Sequence[PlayerMat],
    seat_count: int,
    rng: random.Random,
    *,
    rules: GenerationRules = DEFAULT_RULES,
    max_attempts: int | None = None,
    seat_names: Sequence[str] | None = None,
) -> AuctionState:
    seats = _seats(seat_count, seat_names)
    cap = max_attempts if max_attempts is not None else settings.current().max_attempts
    combinations = generate_combinations(factions, mats, seat_count, rng, rules=rules, max_attempts=cap)
    state = AuctionState(
        combinations=order_combinations(combinations, factions, mats),
        seats=seats,
        play_order=shuffle_play_order(seat_count, rng),
        log=[AUCTION_STARTED],
    )
    logger.debug(
        "Auction set up",
        extra={"seats": seat_count, "combinations": [c.label for c in state.combinations]},
    )
    return state


def is_complete(state: AuctionState) -> bool:
    return all(combo.current_holder is not None for combo in state.combinations)


def event_log(state: AuctionState) -> tuple[str, ...]:
    return tuple(state.log)


def holdings(state: AuctionState) -> dict[int, list[Combination]]:
    """Map each seat index to the combinations it currently holds."""

    result: dict[int, list[Combination]] = {seat.index: [] for seat in state.seats}
    for combo in state.combinations:
        if combo.current_holder is not None:
            result.setdefault(combo.current_holder, []).append(combo)
    return result


def _coerce_amount(amount: Any, combination: Combination) -> int:
    """Return ``amount`` as an int, checking the minimum before integrality."""

    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise NonIntegerBid(amount)
    if amount < combination.minimum_bid:
        raise BidTooLow(combination.minimum_bid, label=combination.label)
    if isinstance(amount, float) and not amount.is_integer():
        raise NonIntegerBid(amount)
    return int(amount)


def _resolve(state: AuctionState, faction: Faction | str) -> Combination:
    try:
        key = Faction.parse(faction)
    except ValueError:
        raise UnknownFaction(faction) from None
    combination = state.combination_for(key)
    if combination is None:
        raise UnknownFaction(faction)
    return combination


def submit_bid(state: AuctionState, seat: int, faction: Faction | str, amount: Any) -> BidReceipt:
    """Validate and apply a bid from ``seat`` on ``faction``'s combination.

    Raises a :class:`~scythebidder.core.errors.BidError` subclass when the bid
    is rejected.  Whether ``seat`` is allowed to act right now is not checked
    here; turn enforcement belongs to the caller.
    """

    if state.complete:
        raise AuctionClosed("the auction has ended")
    combination = _resolve(state, faction)
    value = _coerce_amount(amount, combination)
    bidder = state.seat(seat)
    if bidder is None:
        raise ConfigurationError(f"seat {seat} is not part of this auction")

    previous_holder = combination.current_holder
    previous_bid = combination.current_bid
    combination.current_bid = value
    combination.current_holder = bidder.index

    entry = f"{bidder.name} bid ${value} on {combination.label}"
    if previous_holder is not None and previous_holder != bidder.index:
        entry += f", outbidding {state.seats[previous_holder].name}"
    state.log.append(entry)

    completed = is_complete(state)
    if completed:
        state.complete = True
        state.log.append(AUCTION_ENDED)
    logger.debug(
        "Bid accepted",
        extra={"seat": bidder.index, "combination": combination.label, "amount": value, "completed": completed},
    )
    return BidReceipt(
        state=state,
        combination=combination,
        seat=bidder,
        amount=value,
        previous_holder=previous_holder,
        previous_bid=previous_bid,
        completed=completed,
    )
