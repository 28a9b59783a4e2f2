from __future__ import annotations

import random
from collections import Counter

import pytest

from scythebidder.core.catalog import BASE, DEFAULT_RULES, IFA, Faction, GenerationRules, PlayerMat
from scythebidder.core.errors import ConfigurationError, GenerationExhausted
from scythebidder.core.models import Combination
from scythebidder.dynamic.generator import (
    fairness_rejection_probability,
    generate_combinations,
    has_banned_pairing,
)


@pytest.mark.parametrize("catalog", [BASE, IFA], ids=lambda c: c.name)
def test_generated_batches_respect_uniqueness_and_bans(catalog) -> None:
    rng = random.Random(20240611)
    for seats in range(1, len(catalog.factions) + 1):
        for _ in range(40):
            combos = generate_combinations(catalog.factions, catalog.mats, seats, rng)

            assert len(combos) == seats
            assert len({c.faction for c in combos}) == seats
            assert len({c.mat for c in combos}) == seats
            assert all(c.faction in catalog.factions and c.mat in catalog.mats for c in combos)
            assert not has_banned_pairing(combos)
            assert all(c.current_bid == -1 and c.current_holder is None for c in combos)


def test_full_table_uses_every_faction_and_mat() -> None:
    combos = generate_combinations(IFA.factions, IFA.mats, 7, random.Random(3))

    assert {c.faction for c in combos} == set(IFA.factions)
    assert {c.mat for c in combos} == set(IFA.mats)


def test_same_seed_reproduces_batch() -> None:
    first = generate_combinations(IFA.factions, IFA.mats, 4, random.Random(99))
    second = generate_combinations(IFA.factions, IFA.mats, 4, random.Random(99))

    assert [(c.faction, c.mat) for c in first] == [(c.faction, c.mat) for c in second]


@pytest.mark.parametrize("seats", [0, -1, 6])
def test_invalid_seat_count_fails_fast(seats: int) -> None:
    with pytest.raises(ConfigurationError):
        generate_combinations(BASE.factions, BASE.mats, seats, random.Random(1))


def test_seat_count_limited_by_smaller_catalog() -> None:
    with pytest.raises(ConfigurationError):
        generate_combinations(IFA.factions, BASE.mats, 6, random.Random(1))


def test_non_positive_attempt_cap_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        generate_combinations(IFA.factions, IFA.mats, 2, random.Random(1), max_attempts=0)


def test_exhaustion_when_every_batch_is_rejected_for_fairness() -> None:
    rules = GenerationRules(banned_pairs=frozenset(), contested_mats=frozenset(IFA.mats), fairness_rate=0.6)

    with pytest.raises(GenerationExhausted) as excinfo:
        generate_combinations(IFA.factions, IFA.mats, 2, random.Random(5), rules=rules, max_attempts=25)

    assert excinfo.value.attempts == 25


def test_exhaustion_when_every_pairing_is_banned() -> None:
    banned = frozenset((f, m) for f in BASE.factions for m in BASE.mats)
    rules = GenerationRules(banned_pairs=banned, contested_mats=frozenset())

    with pytest.raises(GenerationExhausted):
        generate_combinations(BASE.factions, BASE.mats, 1, random.Random(5), rules=rules, max_attempts=10)


def test_fairness_probability_scales_with_contested_mats() -> None:
    none = [Combination(Faction.NORDIC, PlayerMat.MECHANICAL), Combination(Faction.SAXONY, PlayerMat.MILITANT)]
    one = [Combination(Faction.NORDIC, PlayerMat.INDUSTRIAL), Combination(Faction.SAXONY, PlayerMat.MILITANT)]
    two = [Combination(Faction.NORDIC, PlayerMat.INDUSTRIAL), Combination(Faction.SAXONY, PlayerMat.PATRIOTIC)]

    assert fairness_rejection_probability(none) == 0.0
    assert fairness_rejection_probability(one) == pytest.approx(0.1425)
    assert fairness_rejection_probability(two) == pytest.approx(0.285)


def test_default_banned_pairings() -> None:
    assert DEFAULT_RULES.is_banned(Faction.RUSVIET, PlayerMat.INDUSTRIAL)
    assert DEFAULT_RULES.is_banned(Faction.CRIMEA, PlayerMat.PATRIOTIC)
    assert not DEFAULT_RULES.is_banned(Faction.RUSVIET, PlayerMat.PATRIOTIC)
    assert has_banned_pairing([Combination(Faction.CRIMEA, PlayerMat.PATRIOTIC)])


def _mat_frequencies(seats: int, runs: int, rng: random.Random, rules: GenerationRules) -> dict[PlayerMat, float]:
    counts: Counter[PlayerMat] = Counter()
    for _ in range(runs):
        for combo in generate_combinations(IFA.factions, IFA.mats, seats, rng, rules=rules):
            counts[combo.mat] += 1
    return {mat: counts[mat] / runs for mat in IFA.mats}


def test_mat_marginals_are_uniform_without_constraints() -> None:
    rules = GenerationRules(banned_pairs=frozenset(), contested_mats=frozenset())
    freqs = _mat_frequencies(3, 4000, random.Random(11), rules)

    expected = 3 / 7
    for mat, freq in freqs.items():
        assert abs(freq - expected) < 0.04, mat


def test_mat_marginals_stay_near_uniform_with_default_rules() -> None:
    freqs = _mat_frequencies(5, 3000, random.Random(2024), DEFAULT_RULES)

    expected = 5 / 7
    for mat, freq in freqs.items():
        assert abs(freq - expected) < 0.1, (mat, freq)
