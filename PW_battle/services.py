import logging
import random
import threading
from typing import Optional

from django.db import transaction
from django.db.models import F

from . import catalog, store
from .conf import engine_setting, get_executor
from .engine import kits
from .engine.aggregator import aggregate
from .engine.contracts import SIDE_ONE, SIDE_TWO, BattleOptions, CombatantOptions
from .engine.rules import SimulationFailed
from .engine.scoring import ScoreResult, score, validate_guess
from .models import BattleSession, GuessStat

logger = logging.getLogger(__name__)


def build_combatant(creature_id, options: CombatantOptions, seed: Optional[int] = None):
    record = catalog.load_creature(creature_id)
    return kits.build(record, options, random.Random(seed))


def simulate_battle(creature1_id, creature2_id, options: BattleOptions,
                    seed: Optional[int] = None,
                    cancel_event: Optional[threading.Event] = None) -> BattleSession:
    """
    Aggregate TRIAL_COUNT battles and store the result.
    Nothing is stored unless every trial ran.
    """
    store.session_ttl()
    record1 = catalog.load_creature(creature1_id)
    record2 = catalog.load_creature(creature2_id)
    trial_count = int(engine_setting("TRIAL_COUNT"))

    try:
        outcome = aggregate(
            record1,
            record2,
            options,
            trial_count,
            get_executor(),
            seed=seed,
            max_workers=engine_setting("MAX_WORKERS"),
            timeout=engine_setting("SIMULATION_TIMEOUT"),
            cancel_event=cancel_event,
        )
    except Exception as e:
        logger.error("Battle simulation failed: %s vs %s: %s", record1.name, record2.name, e)
        raise

    battle_id = store.create(outcome)
    session = store.get(battle_id)

    logger.info(
        "Battle %s simulated: %s (L%s) vs %s (L%s) wins=%s/%s draws=%s in %sms",
        battle_id, record1.name, options.pokemon1_level, record2.name, options.pokemon2_level,
        outcome.creature1_wins, outcome.creature2_wins, outcome.draws, outcome.execution_ms,
    )
    if outcome.win_rate == 0.5:
        logger.warning("Exact 50%% result for %s vs %s (moves %s / %s)", record1.name, record2.name,
                       ", ".join(outcome.combatant1.moves), ", ".join(outcome.combatant2.moves))
    return session


def submit_guess(battle_id, guessed_win_rate) -> ScoreResult:
    guess = validate_guess(guessed_win_rate)
    session = store.get(battle_id)
    result = score(session.win_rate, guess)
    _record_attempt(session, result.is_correct)
    logger.info("Guess for %s: guessed=%.3f actual=%.3f score=%s band=%s",
                session.id, result.guessed_win_rate, result.actual_win_rate, result.score, result.band)
    return result


def _record_attempt(session: BattleSession, correct: bool) -> None:
    with transaction.atomic():
        stat, _ = GuessStat.objects.get_or_create(session=session)
        GuessStat.objects.filter(pk=stat.pk).update(
            attempts=F("attempts") + 1,
            successes=F("successes") + int(correct),
        )


def battle_stats(battle_id) -> GuessStat:
    session = store.get(battle_id)
    return GuessStat.objects.filter(session=session).first() or GuessStat(session=session)


def simulate_single(creature1_id, creature2_id, options: BattleOptions, seed: Optional[int] = None):
    """
    One battle with its event log. Returns (spec1, spec2, TrialResult).
    """
    rng = random.Random(seed)
    spec1 = kits.build(catalog.load_creature(creature1_id), options.side(SIDE_ONE), rng)
    spec2 = kits.build(catalog.load_creature(creature2_id), options.side(SIDE_TWO), rng)
    try:
        result = get_executor().simulate_with_log(spec1, spec2, options.ruleset, seed=rng.getrandbits(32))
    except Exception as e:
        logger.error("Single battle failed: %s vs %s: %s", spec1.name, spec2.name, e)
        raise SimulationFailed(
            message=f"Battle simulation failed: {e}",
            details={"trial_index": 0},
        ) from e
    return spec1, spec2, result
