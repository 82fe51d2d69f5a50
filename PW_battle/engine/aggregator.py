"""
Simulation aggregator: run N independent trials and tally wins per side.

Trials share nothing mutable. Each one gets its own seed from a master
stream, so a seeded aggregation gives the same counts whatever order the
worker threads finish in.
"""
from __future__ import annotations

import concurrent.futures
import logging
import os
import random
import threading
import time
from collections import Counter
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from . import kits
from .contracts import DRAW, SIDE_ONE, SIDE_TWO, WINNERS, BattleExecutor, BattleOptions, CombatantSpec
from .rules import AI_DIFFICULTIES, Cancelled, InvalidOptions, SimulationFailed, validate_choice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BattleOutcome:
    """An aggregation result that has not been stored yet."""
    combatant1: CombatantSpec
    combatant2: CombatantSpec
    options: BattleOptions
    total_battles: int
    creature1_wins: int
    creature2_wins: int
    execution_ms: int = 0

    def __post_init__(self):
        if self.total_battles < 1:
            raise ValueError("total_battles must be at least 1")
        if min(self.creature1_wins, self.creature2_wins) < 0 or self.draws < 0:
            raise ValueError("win counts must be non-negative and sum to at most total_battles")

    @property
    def draws(self) -> int:
        return self.total_battles - self.creature1_wins - self.creature2_wins

    @property
    def win_rate(self) -> Fraction:
        return Fraction(self.creature1_wins, self.total_battles)


@dataclass(frozen=True)
class _Trial:
    index: int
    seed: int


class _TrialCancelled(Exception):
    pass


def resolve_worker_count(max_workers: Optional[int]) -> int:
    if max_workers is not None:
        try:
            return max(1, int(max_workers))
        except (TypeError, ValueError):
            pass
    return max(1, os.cpu_count() or 1)


def _specs_for(record1, record2, options: BattleOptions, fixed, rng: random.Random):
    if fixed is not None:
        return fixed
    return (
        kits.build(record1, options.side(SIDE_ONE), rng),
        kits.build(record2, options.side(SIDE_TWO), rng),
    )


def _run_trial(trial: _Trial, record1, record2, options: BattleOptions, fixed,
               executor: BattleExecutor, cancel_event: threading.Event) -> int:
    if cancel_event.is_set():
        raise _TrialCancelled()

    rng = random.Random(trial.seed)
    spec1, spec2 = _specs_for(record1, record2, options, fixed, rng)

    try:
        winner = executor.simulate_one(spec1, spec2, options.ruleset, seed=rng.getrandbits(32))
    except Exception as e:
        raise SimulationFailed(
            message=f"Battle simulation failed on trial {trial.index}: {e}",
            details={"trial_index": trial.index},
        ) from e

    if winner not in WINNERS:
        raise SimulationFailed(
            message=f"Executor returned an unknown winner {winner!r} on trial {trial.index}.",
            details={"trial_index": trial.index, "winner": repr(winner)},
        )
    return winner


def aggregate(record1, record2, options: BattleOptions, trial_count: int, executor: BattleExecutor, *,
              seed: Optional[int] = None, max_workers: Optional[int] = None,
              timeout: Optional[float] = None,
              cancel_event: Optional[threading.Event] = None) -> BattleOutcome:
    """
    Run `trial_count` battles between the two catalog records.

    Builder errors propagate unchanged. Any failing trial aborts the whole
    run with SimulationFailed; a cancel or timeout raises Cancelled. No
    partial outcome is ever returned.
    """
    if isinstance(trial_count, bool) or not isinstance(trial_count, int) or trial_count < 1:
        raise InvalidOptions(
            message="trial count must be a positive integer.",
            details={"trial_count": trial_count},
        )
    validate_choice(options.ai_difficulty, AI_DIFFICULTIES, "aiDifficulty")

    start = time.monotonic()
    cancel_event = cancel_event or threading.Event()
    master = random.Random(seed)

    # built once up front: fails fast on builder errors and gives the "as simulated" specs
    first = (
        kits.build(record1, options.side(SIDE_ONE), random.Random(master.getrandbits(64))),
        kits.build(record2, options.side(SIDE_TWO), random.Random(master.getrandbits(64))),
    )
    reusable = kits.is_reusable(options.side(SIDE_ONE))
    fixed = first if reusable else None

    trials = [_Trial(index=i, seed=master.getrandbits(64)) for i in range(trial_count)]
    tally: Counter = Counter()

    workers = resolve_worker_count(max_workers)
    if workers < 2:
        for trial in trials:
            if timeout is not None and time.monotonic() - start > timeout:
                cancel_event.set()
            try:
                tally[_run_trial(trial, record1, record2, options, fixed, executor, cancel_event)] += 1
            except _TrialCancelled:
                raise _cancelled(trial_count, sum(tally.values()))
    else:
        _run_pooled(trials, record1, record2, options, fixed, executor, cancel_event,
                    tally, workers, start, timeout)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    outcome = BattleOutcome(
        combatant1=first[0],
        combatant2=first[1],
        options=options,
        total_battles=trial_count,
        creature1_wins=tally[SIDE_ONE],
        creature2_wins=tally[SIDE_TWO],
        execution_ms=elapsed_ms,
    )

    if tally[DRAW]:
        logger.warning("%s draws in %s trials (%s vs %s)", tally[DRAW], trial_count,
                       first[0].name, first[1].name)
    return outcome


def _run_pooled(trials, record1, record2, options, fixed, executor, cancel_event,
                tally: Counter, workers: int, start: float, timeout: Optional[float]) -> None:
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pw-trial")
    futures = {}
    finished = False
    try:
        for trial in trials:
            future = pool.submit(_run_trial, trial, record1, record2, options, fixed, executor, cancel_event)
            futures[future] = trial.index

        remaining = None if timeout is None else max(0.0, timeout - (time.monotonic() - start))
        try:
            for future in concurrent.futures.as_completed(futures, timeout=remaining):
                # commutative accumulation: completion order does not matter
                tally[future.result()] += 1
            finished = True
        except concurrent.futures.TimeoutError:
            raise Cancelled(
                message=f"Simulation timed out after {timeout}s.",
                details={"trials_total": len(trials), "trials_done": sum(tally.values())},
            )
        except _TrialCancelled:
            raise _cancelled(len(trials), sum(tally.values()))
    finally:
        if not finished:
            cancel_event.set()
            for future in futures:
                future.cancel()
        # an aborted run returns without waiting on trials still inside the executor
        pool.shutdown(wait=finished, cancel_futures=True)


def _cancelled(total: int, done: int) -> Cancelled:
    return Cancelled(
        message="Simulation was cancelled before all trials finished.",
        details={"trials_total": total, "trials_done": done},
    )
