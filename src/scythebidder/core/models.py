from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import Faction, PlayerMat

__all__ = ["AuctionState", "BidReceipt", "Combination", "Seat", "NO_BID"]

NO_BID = -1


@dataclass
class Combination:
    faction: Faction
    mat: PlayerMat
    current_bid: int = NO_BID
    # Seat index of the highest bidder; the seat itself lives on AuctionState.
    current_holder: int | None = None

    @property
    def label(self) -> str:
        return f"{self.faction} {self.mat}"

    @property
    def has_holder(self) -> bool:
        return self.current_holder is not None

    @property
    def minimum_bid(self) -> int:
        return self.current_bid + 1


@dataclass(frozen=True)
class Seat:
    index: int
    name: str


@dataclass
class AuctionState:
    combinations: list[Combination]
    seats: tuple[Seat, ...]
    play_order: tuple[int, ...]
    complete: bool = False
    log: list[str] = field(default_factory=list)

    def combination_for(self, faction: Faction) -> Combination | None:
        for combination in self.combinations:
            if combination.faction == faction:
                return combination
        return None

    def seat(self, index: int) -> Seat | None:
        if 0 <= index < len(self.seats):
            return self.seats[index]
        return None


@dataclass(frozen=True)
class BidReceipt:
    """Outcome of an accepted bid, used by callers to advance the turn."""

    state: AuctionState
    combination: Combination
    seat: Seat
    amount: int
    previous_holder: int | None
    previous_bid: int
    completed: bool
