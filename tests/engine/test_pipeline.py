"""
Tests for the cap, reroll and drop pipeline.
"""

import pytest

from dice_roller.engine.models import AdvancedOptions, DroppedDie, RerolledDie
from dice_roller.engine.roll_engine import cap_rolls


def test_no_options_keeps_everything(engine):
    result = engine.apply_advanced_options([4, 1, 6])
    assert result.kept_rolls == [4, 1, 6]
    assert result.dropped_rolls == []
    assert result.rerolled_rolls == []


def test_capping_clamps_each_die(engine):
    result = engine.apply_advanced_options(
        [1, 3, 6], AdvancedOptions(min_cap=2, max_cap=5)
    )
    assert result.kept_rolls == [2, 3, 5]


def test_capping_with_a_single_bound():
    assert cap_rolls([1, 6], min_cap=3, max_cap=None) == [3, 6]
    assert cap_rolls([1, 6], min_cap=None, max_cap=4) == [1, 4]
    assert cap_rolls([1, 6], min_cap=None, max_cap=None) == [1, 6]


def test_reroll_lowest_picks_first_of_equal_values(scripted_engine, d6_rng):
    d6_rng.queue(6)
    result = scripted_engine.apply_advanced_options(
        [4, 2, 2, 5], AdvancedOptions(sides=6, reroll_lowest=1)
    )
    assert result.rerolled_rolls == [RerolledDie(original=2, new=6, index=1)]
    assert result.kept_rolls == [4, 6, 2, 5]


def test_reroll_lowest_then_highest(scripted_engine, d6_rng):
    d6_rng.queue(3, 1)
    result = scripted_engine.apply_advanced_options(
        [4, 2, 5], AdvancedOptions(sides=6, reroll_lowest=1, reroll_highest=1)
    )
    assert result.rerolled_rolls == [
        RerolledDie(original=2, new=3, index=1),
        RerolledDie(original=5, new=1, index=2),
    ]
    assert result.kept_rolls == [4, 3, 1]


def test_overlapping_reroll_windows_reroll_a_die_twice(scripted_engine, d6_rng):
    d6_rng.queue(6, 1, 4)
    result = scripted_engine.apply_advanced_options(
        [2, 5], AdvancedOptions(sides=6, reroll_lowest=2, reroll_highest=1)
    )
    assert result.rerolled_rolls == [
        RerolledDie(original=2, new=6, index=0),
        RerolledDie(original=5, new=1, index=1),
        RerolledDie(original=1, new=4, index=1),
    ]
    assert result.kept_rolls == [6, 4]


def test_reroll_ranks_capped_values(scripted_engine, d6_rng):
    # Capped to [3, 6] the pool is [3, 3, 4]; index 0 ranks lowest.
    d6_rng.queue(5)
    result = scripted_engine.apply_advanced_options(
        [2, 1, 4], AdvancedOptions(sides=6, min_cap=3, reroll_lowest=1)
    )
    assert result.rerolled_rolls == [RerolledDie(original=3, new=5, index=0)]
    assert result.kept_rolls == [5, 3, 4]


def test_reroll_count_is_capped_to_pool_size(scripted_engine, d6_rng):
    d6_rng.queue(1, 2)
    result = scripted_engine.apply_advanced_options(
        [6, 5], AdvancedOptions(sides=6, reroll_lowest=10)
    )
    assert len(result.rerolled_rolls) == 2
    assert result.kept_rolls == [2, 1]


def test_drop_lowest(engine):
    result = engine.apply_advanced_options([4, 1, 6, 3], AdvancedOptions(drop_lowest=1))
    assert result.dropped_rolls == [DroppedDie(value=1, index=1)]
    assert result.kept_rolls == [4, 6, 3]


def test_drop_lowest_breaks_ties_by_index(engine):
    result = engine.apply_advanced_options([3, 3, 5], AdvancedOptions(drop_lowest=1))
    assert result.dropped_rolls == [DroppedDie(value=3, index=0)]
    assert result.kept_rolls == [3, 5]


def test_drop_highest_and_lowest_in_rank_order(engine):
    result = engine.apply_advanced_options(
        [2, 6, 4, 1], AdvancedOptions(drop_lowest=1, drop_highest=1)
    )
    assert result.dropped_rolls == [
        DroppedDie(value=1, index=3),
        DroppedDie(value=6, index=1),
    ]
    assert result.kept_rolls == [2, 4]


def test_drop_counts_always_leave_one_die(engine):
    result = engine.apply_advanced_options(
        [2, 5, 3], AdvancedOptions(drop_lowest=100, drop_highest=100)
    )
    assert len(result.dropped_rolls) == 2
    assert len(result.kept_rolls) == 1
    assert result.kept_rolls == [5]


def test_drop_on_single_die_keeps_it(engine):
    result = engine.apply_advanced_options([4], AdvancedOptions(drop_highest=3))
    assert result.kept_rolls == [4]
    assert result.dropped_rolls == []


def test_drop_uses_rerolled_values(scripted_engine, d6_rng):
    d6_rng.queue(6)
    result = scripted_engine.apply_advanced_options(
        [6, 1, 3], AdvancedOptions(sides=6, reroll_lowest=1, drop_lowest=1)
    )
    assert result.dropped_rolls == [DroppedDie(value=3, index=2)]
    assert result.kept_rolls == [6, 6]


@pytest.mark.parametrize(
    "drop_lowest, drop_highest",
    [(0, 0), (1, 0), (0, 2), (2, 2), (4, 1), (10, 10)],
)
def test_kept_and_dropped_account_for_every_die(engine, drop_lowest, drop_highest):
    rolls = [5, 2, 6, 2, 3]
    result = engine.apply_advanced_options(
        rolls, AdvancedOptions(drop_lowest=drop_lowest, drop_highest=drop_highest)
    )
    assert len(result.kept_rolls) + len(result.dropped_rolls) == len(rolls)
    assert len(result.kept_rolls) >= 1
    if drop_lowest + drop_highest < len(rolls):
        assert len(result.dropped_rolls) == drop_lowest + drop_highest


def test_options_accept_a_mapping(engine):
    result = engine.apply_advanced_options([4, 1, 6], {"dropLowest": 1})
    assert result.kept_rolls == [4, 6]
    assert result.dropped_rolls == [DroppedDie(value=1, index=1)]

    result = engine.apply_advanced_options([1, 3, 6], {"min_cap": 2, "maxCap": 5})
    assert result.kept_rolls == [2, 3, 5]
