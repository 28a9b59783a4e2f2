"""Faction and player-mat catalogs.

Faction order is the clockwise seating around the board; mat order is the
printed starting priority (index 0 plays first).  Both orders drive turn
ordering, so the tuples below must not be re-sorted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigurationError

__all__ = [
    "BASE",
    "CATALOGS",
    "Catalog",
    "DEFAULT_RULES",
    "Faction",
    "GenerationRules",
    "IFA",
    "PlayerMat",
    "catalog_for",
]


class Faction(str, Enum):
    POLANIA = "Polania"
    ALBION = "Albion"
    NORDIC = "Nordic"
    RUSVIET = "Rusviet"
    TOGAWA = "Togawa"
    CRIMEA = "Crimea"
    SAXONY = "Saxony"

    @classmethod
    def parse(cls, raw: Faction | str) -> Faction:
        if isinstance(raw, cls):
            return raw
        key = str(raw).strip().lower()
        for member in cls:
            if member.value.lower() == key or member.name.lower() == key:
                return member
        raise ValueError(f"unknown faction '{raw}'")

    def __str__(self) -> str:
        return self.value


class PlayerMat(str, Enum):
    INDUSTRIAL = "Industrial"
    ENGINEERING = "Engineering"
    MILITANT = "Militant"
    PATRIOTIC = "Patriotic"
    INNOVATIVE = "Innovative"
    MECHANICAL = "Mechanical"
    AGRICULTURAL = "Agricultural"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Catalog:
    """A playable variant: factions, mats and supported player counts."""

    name: str
    factions: tuple[Faction, ...]
    mats: tuple[PlayerMat, ...]
    min_players: int = 2
    max_players: int | None = None

    @property
    def player_limit(self) -> int:
        limit = min(len(self.factions), len(self.mats))
        if self.max_players is not None:
            limit = min(limit, self.max_players)
        return limit

    def validate_players(self, count: int) -> None:
        if not (self.min_players <= count <= self.player_limit):
            raise ConfigurationError(
                f"{self.name} supports {self.min_players}-{self.player_limit} players, got {count}"
            )


@dataclass(frozen=True)
class GenerationRules:
    """Constraints applied while drawing combinations."""

    banned_pairs: frozenset[tuple[Faction, PlayerMat]] = field(
        default_factory=lambda: frozenset(
            {
                (Faction.RUSVIET, PlayerMat.INDUSTRIAL),
                (Faction.CRIMEA, PlayerMat.PATRIOTIC),
            }
        )
    )
    contested_mats: frozenset[PlayerMat] = field(
        default_factory=lambda: frozenset({PlayerMat.INDUSTRIAL, PlayerMat.PATRIOTIC})
    )
    fairness_rate: float = 0.1425

    def is_banned(self, faction: Faction, mat: PlayerMat) -> bool:
        return (faction, mat) in self.banned_pairs

    def contested_count(self, mats: Iterable[PlayerMat]) -> int:
        return sum(1 for mat in mats if mat in self.contested_mats)


DEFAULT_RULES = GenerationRules()

BASE = Catalog(
    name="base",
    factions=(Faction.POLANIA, Faction.NORDIC, Faction.RUSVIET, Faction.CRIMEA, Faction.SAXONY),
    mats=(
        PlayerMat.INDUSTRIAL,
        PlayerMat.ENGINEERING,
        PlayerMat.PATRIOTIC,
        PlayerMat.MECHANICAL,
        PlayerMat.AGRICULTURAL,
    ),
    max_players=5,
)

# Invaders from Afar adds Albion and Togawa plus the Militant and Innovative mats.
IFA = Catalog(
    name="ifa",
    factions=(
        Faction.POLANIA,
        Faction.ALBION,
        Faction.NORDIC,
        Faction.RUSVIET,
        Faction.TOGAWA,
        Faction.CRIMEA,
        Faction.SAXONY,
    ),
    mats=tuple(PlayerMat),
    max_players=7,
)

CATALOGS: dict[str, Catalog] = {catalog.name: catalog for catalog in (BASE, IFA)}


def catalog_for(name: str | None) -> Catalog:
    key = (name or IFA.name).strip().lower()
    try:
        return CATALOGS[key]
    except KeyError:
        raise ConfigurationError(f"unknown variant '{name}'; expected one of {sorted(CATALOGS)}") from None
