"""Exception hierarchy for the auction core and the session layer.

Setup failures (``ConfigurationError``, ``GenerationExhausted``) are fatal to
the call that raised them.  ``BidError`` subclasses are raised before any state
is written, so a rejected bid never leaves a partially applied move behind.
"""

from __future__ import annotations

__all__ = [
    "AuctionClosed",
    "AuctionError",
    "BidError",
    "BidTooLow",
    "ConfigurationError",
    "GenerationExhausted",
    "NonIntegerBid",
    "NotYourTurn",
    "UnknownFaction",
]


class AuctionError(Exception):
    """Base class for every error raised by the bidder."""


class ConfigurationError(AuctionError, ValueError):
    """Invalid setup parameters (seat count, catalog, seat names)."""


class GenerationExhausted(AuctionError, RuntimeError):
    """No valid combination batch was found within the attempt cap."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"no valid combination batch found after {attempts} attempts")
        self.attempts = attempts


class BidError(AuctionError, ValueError):
    """A bid was rejected; auction state is unchanged."""


class UnknownFaction(BidError, LookupError):
    def __init__(self, faction: object) -> None:
        super().__init__(f"no combination in play for faction '{faction}'")
        self.faction = faction


class BidTooLow(BidError):
    def __init__(self, minimum: int, *, label: str | None = None) -> None:
        if minimum > 0 and label:
            message = f"The current bid for {label} is {minimum - 1}. You must bid at least {minimum}."
        else:
            message = f"You must bid at least {minimum}."
        super().__init__(message)
        self.minimum = minimum


class NonIntegerBid(BidError):
    def __init__(self, amount: object) -> None:
        super().__init__("Your bid must be an integer.")
        self.amount = amount


class AuctionClosed(BidError):
    """The auction is complete; no further bids are accepted."""


class NotYourTurn(BidError):
    def __init__(self, seat: int, expected: int) -> None:
        super().__init__(f"seat {seat} cannot bid; it is seat {expected}'s turn")
        self.seat = seat
        self.expected = expected
