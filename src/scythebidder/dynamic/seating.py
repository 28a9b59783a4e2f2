"""Turn ordering helpers for the auction.

Two separate orders exist.  The combination order mirrors how the game will
actually be played once the auction is over: the mat with the best starting
priority goes first, and the rest follow clockwise by faction home base.  The
bidding order is a shuffled sequence of seats fixed at setup; during the
auction the turn passes along it, skipping any seat currently holding a
combination.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..core.catalog import Faction, PlayerMat
from ..core.errors import AuctionClosed, ConfigurationError
from ..core.models import AuctionState, Combination

__all__ = [
    "PlayOrder",
    "holds_combination",
    "next_eligible_position",
    "next_eligible_seat",
    "order_combinations",
    "shuffle_play_order",
]


def order_combinations(
    combinations: Sequence[Combination],
    factions: Sequence[Faction],
    mats: Sequence[PlayerMat],
) -> list[Combination]:
    if not combinations:
        return []
    priority = {mat: idx for idx, mat in enumerate(mats)}
    first = min(combinations, key=lambda combo: priority[combo.mat])
    start = factions.index(first.faction)
    by_faction = {combo.faction: combo for combo in combinations}
    ordered: list[Combination] = []
    for offset in range(len(factions)):
        combo = by_faction.get(factions[(start + offset) % len(factions)])
        if combo is not None:
            ordered.append(combo)
    return ordered


def shuffle_play_order(seat_count: int, rng: random.Random) -> tuple[int, ...]:
    seats = list(range(seat_count))
    rng.shuffle(seats)
    return tuple(seats)


@dataclass(frozen=True)
class PlayOrder:
    """Fixed bidding order of seat indices."""

    seats: tuple[int, ...]

    def __post_init__(self) -> None:
        if sorted(self.seats) != list(range(len(self.seats))):
            raise ConfigurationError("Play order must contain every seat exactly once")

    def __len__(self) -> int:
        return len(self.seats)

    def seat_at(self, position: int) -> int:
        return self.seats[position % len(self.seats)]

    def position_of(self, seat: int) -> int:
        return self.seats.index(seat)


def holds_combination(seat: int, combinations: Iterable[Combination]) -> bool:
    return any(combo.current_holder == seat for combo in combinations)


def next_eligible_position(
    combinations: Sequence[Combination],
    play_order: Sequence[int],
    position: int,
) -> int:
    """Return the play-order position of the next seat without a holding.

    Only valid while the auction is incomplete.  The scan is limited to one
    lap of the table and raises :class:`AuctionClosed` if no seat qualifies.
    """

    count = len(play_order)
    candidate = position
    for _ in range(count):
        candidate = (candidate + 1) % count
        if not holds_combination(play_order[candidate], combinations):
            return candidate
    raise AuctionClosed("every seat already holds a combination")


def next_eligible_seat(state: AuctionState, play_order: Sequence[int], position: int) -> int:
    return play_order[next_eligible_position(state.combinations, play_order, position)]
