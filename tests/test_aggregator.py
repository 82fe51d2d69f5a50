import threading
import time
from fractions import Fraction

import pytest

from PW_battle.engine.aggregator import BattleOutcome, aggregate, resolve_worker_count
from PW_battle.engine.contracts import BattleOptions
from PW_battle.engine.rules import Cancelled, InvalidOptions, NoLegalMoves, SimulationFailed

from .stubs import AlwaysDraw, AlwaysSideOne, FailOnCall, Recording, SeedParity, Slow, UnknownWinner


def test_always_side_one(pikachu, charmander):
    outcome = aggregate(pikachu, charmander, BattleOptions(), 100, AlwaysSideOne(), max_workers=1)
    assert outcome.total_battles == 100
    assert outcome.creature1_wins == 100
    assert outcome.creature2_wins == 0
    assert outcome.win_rate == 1


def test_draws_count_toward_total_only(pikachu, charmander):
    outcome = aggregate(pikachu, charmander, BattleOptions(), 30, AlwaysDraw(), max_workers=1)
    assert outcome.draws == 30
    assert outcome.creature1_wins == outcome.creature2_wins == 0
    assert outcome.win_rate == 0


@pytest.mark.parametrize("workers", [1, 4])
def test_counts_add_up(pikachu, charmander, workers):
    outcome = aggregate(pikachu, charmander, BattleOptions(), 97, SeedParity(), seed=11, max_workers=workers)
    assert outcome.creature1_wins + outcome.creature2_wins + outcome.draws == 97
    assert outcome.win_rate == Fraction(outcome.creature1_wins, 97)
    assert 0 <= outcome.win_rate <= 1


def test_pooled_matches_serial_for_same_seed(pikachu, charmander):
    """Completion order must not change the tally."""
    serial = aggregate(pikachu, charmander, BattleOptions(), 200, SeedParity(), seed=42, max_workers=1)
    pooled = aggregate(pikachu, charmander, BattleOptions(), 200, SeedParity(), seed=42, max_workers=8)
    assert (serial.creature1_wins, serial.creature2_wins) == (pooled.creature1_wins, pooled.creature2_wins)
    assert serial.combatant1 == pooled.combatant1


def test_competitive_specs_are_reported(pikachu, charmander):
    options = BattleOptions(moveset="competitive", pokemon1_level=70, pokemon2_level=30)
    outcome = aggregate(pikachu, charmander, options, 10, AlwaysSideOne(), max_workers=1)
    assert outcome.combatant1.moves == pikachu.competitive_moves
    assert outcome.combatant1.level == 70
    assert outcome.combatant2.level == 30
    assert outcome.options == options


def test_failing_trial_aborts_with_its_index(pikachu, charmander):
    with pytest.raises(SimulationFailed) as exc:
        aggregate(pikachu, charmander, BattleOptions(), 10, FailOnCall(fail_at=3), max_workers=1)
    assert exc.value.details["trial_index"] == 3
    assert exc.value.status == 502


def test_failing_trial_aborts_pooled_run(pikachu, charmander):
    with pytest.raises(SimulationFailed):
        aggregate(pikachu, charmander, BattleOptions(), 50, FailOnCall(fail_at=0), max_workers=4)


def test_unknown_winner_is_a_failure(pikachu, charmander):
    with pytest.raises(SimulationFailed):
        aggregate(pikachu, charmander, BattleOptions(), 5, UnknownWinner(), max_workers=1)


@pytest.mark.parametrize("workers", [1, 4])
def test_cancelled_before_start(pikachu, charmander, workers):
    event = threading.Event()
    event.set()
    with pytest.raises(Cancelled) as exc:
        aggregate(pikachu, charmander, BattleOptions(), 20, AlwaysSideOne(), max_workers=workers,
                  cancel_event=event)
    assert exc.value.details["trials_total"] == 20


def test_timeout_cancels(pikachu, charmander):
    with pytest.raises(Cancelled):
        aggregate(pikachu, charmander, BattleOptions(), 40, Slow(delay=0.05), max_workers=2, timeout=0.1)


def test_builder_errors_propagate(pikachu, moveless):
    with pytest.raises(NoLegalMoves):
        aggregate(pikachu, moveless, BattleOptions(), 10, AlwaysSideOne(), max_workers=1)


@pytest.mark.parametrize("count", [0, -5, True, 2.5])
def test_trial_count_must_be_positive(pikachu, charmander, count):
    with pytest.raises(InvalidOptions):
        aggregate(pikachu, charmander, BattleOptions(), count, AlwaysSideOne())


def test_outcome_rejects_impossible_counts(pikachu, charmander):
    outcome = aggregate(pikachu, charmander, BattleOptions(), 5, AlwaysSideOne(), max_workers=1)
    with pytest.raises(ValueError):
        BattleOutcome(outcome.combatant1, outcome.combatant2, outcome.options, 5, 4, 2)
    with pytest.raises(ValueError):
        BattleOutcome(outcome.combatant1, outcome.combatant2, outcome.options, 0, 0, 0)


def test_resolve_worker_count():
    assert resolve_worker_count(3) == 3
    assert resolve_worker_count(0) == 1
    assert resolve_worker_count(None) >= 1


def test_unknown_ai_difficulty(pikachu, charmander):
    with pytest.raises(InvalidOptions):
        aggregate(pikachu, charmander, BattleOptions(ai_difficulty="godlike"), 5, AlwaysSideOne(), max_workers=1)


def test_timeout_does_not_wait_for_running_trials(pikachu, charmander):
    start = time.monotonic()
    with pytest.raises(Cancelled):
        aggregate(pikachu, charmander, BattleOptions(), 8, Slow(delay=2.0), max_workers=2, timeout=0.1)
    assert time.monotonic() - start < 1.0


def test_random_policy_rebuilds_each_trial(pikachu, charmander):
    executor = Recording()
    aggregate(pikachu, charmander, BattleOptions(), 50, executor, seed=1, max_workers=1)
    assert len(executor.movesets) == 50
    assert len(set(executor.movesets)) > 1


@pytest.mark.parametrize("workers", [1, 4])
def test_competitive_policy_reuses_one_spec(pikachu, charmander, workers):
    executor = Recording()
    options = BattleOptions(moveset="competitive")
    aggregate(pikachu, charmander, options, 50, executor, seed=1, max_workers=workers)
    assert set(executor.movesets) == {pikachu.competitive_moves}
