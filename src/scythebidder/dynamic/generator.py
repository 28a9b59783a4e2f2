"""Random faction/mat combination generation.

Each attempt draws a full batch: ``seat_count`` factions and ``seat_count``
mats, sampled without replacement and paired by seat.  A batch is thrown away
entirely when it contains a banned pairing, and additionally with probability
``fairness_rate * k`` where ``k`` counts pairings on a contested mat.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from ..core.catalog import DEFAULT_RULES, Faction, GenerationRules, PlayerMat
from ..core.errors import ConfigurationError, GenerationExhausted
from ..core.models import Combination

__all__ = [
    "draw_batch",
    "fairness_rejection_probability",
    "generate_combinations",
    "has_banned_pairing",
]

logger = logging.getLogger(__name__)


def draw_batch(
    factions: Sequence[Faction],
    mats: Sequence[PlayerMat],
    seat_count: int,
    rng: random.Random,
) -> list[Combination]:
    picked_factions = rng.sample(list(factions), seat_count)
    picked_mats = rng.sample(list(mats), seat_count)
    return [Combination(faction=f, mat=m) for f, m in zip(picked_factions, picked_mats, strict=True)]


def has_banned_pairing(combinations: Sequence[Combination], rules: GenerationRules = DEFAULT_RULES) -> bool:
    return any(rules.is_banned(combo.faction, combo.mat) for combo in combinations)


def fairness_rejection_probability(
    combinations: Sequence[Combination],
    rules: GenerationRules = DEFAULT_RULES,
) -> float:
    """Probability of discarding an otherwise valid batch (may exceed 1)."""

    return rules.fairness_rate * rules.contested_count(combo.mat for combo in combinations)


def generate_combinations(
    factions: Sequence[Faction],
    mats: Sequence[PlayerMat],
    seat_count: int,
    rng: random.Random,
    *,
    rules: GenerationRules = DEFAULT_RULES,
    max_attempts: int = 10_000,
) -> list[Combination]:
    if len(set(factions)) != len(factions) or len(set(mats)) != len(mats):
        raise ConfigurationError("faction and mat catalogs must not contain duplicates")
    if seat_count < 1:
        raise ConfigurationError(f"seat count must be positive, got {seat_count}")
    if seat_count > len(factions) or seat_count > len(mats):
        raise ConfigurationError(
            f"cannot seat {seat_count} players with {len(factions)} factions and {len(mats)} mats"
        )
    if max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be positive, got {max_attempts}")

    banned = fair_rejected = 0
    for attempt in range(1, max_attempts + 1):
        batch = draw_batch(factions, mats, seat_count, rng)
        if has_banned_pairing(batch, rules):
            banned += 1
            continue
        if rng.random() < fairness_rejection_probability(batch, rules):
            fair_rejected += 1
            continue
        logger.debug(
            "Generated combinations",
            extra={"attempts": attempt, "banned_rejections": banned, "fairness_rejections": fair_rejected},
        )
        return batch

    logger.warning(
        "Combination generation exhausted after %s attempts (%s banned, %s fairness)",
        max_attempts,
        banned,
        fair_rejected,
    )
    raise GenerationExhausted(max_attempts)
