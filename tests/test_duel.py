import random
from dataclasses import replace

import pytest

from PW_battle.engine import kits
from PW_battle.engine.battle import DuelExecutor, UnitRuntime, base_damage, choose_move
from PW_battle.engine.contracts import DRAW, WINNERS, CombatantOptions, ExecutorError, Ruleset


def _specs(pikachu, charmander, moveset="competitive"):
    options = CombatantOptions(level=50, moveset=moveset)
    rng = random.Random(0)
    return kits.build(pikachu, options, rng), kits.build(charmander, options, rng)


def _unit(spec, move_table, side=1):
    moves = [move_table[c] for c in spec.moves]
    return UnitRuntime(tag=f"p{side}", side=side, spec=spec, moves=moves,
                       hp=spec.stats["hp"], max_hp=spec.stats["hp"])


def test_duel_finishes_with_a_known_winner(pikachu, charmander, move_table):
    executor = DuelExecutor(moves=move_table)
    a, b = _specs(pikachu, charmander)
    for seed in range(10):
        assert executor.simulate_one(a, b, Ruleset(), seed=seed) in WINNERS


def test_duel_is_reproducible(pikachu, charmander, move_table):
    executor = DuelExecutor(moves=move_table)
    a, b = _specs(pikachu, charmander, moveset="random")
    first = executor.simulate_with_log(a, b, Ruleset(ai_difficulty="elite"), seed=1234)
    second = executor.simulate_with_log(a, b, Ruleset(ai_difficulty="elite"), seed=1234)
    assert first == second


def test_log_brackets_the_battle(pikachu, charmander, move_table):
    result = DuelExecutor(moves=move_table).simulate_with_log(*_specs(pikachu, charmander), Ruleset(), seed=5)
    assert result.log[0]["type"] == "start"
    assert result.log[-1]["type"] == "end"
    assert result.log[-1]["value"] == result.winner
    assert result.turns > 0


def test_plain_simulation_keeps_no_log(pikachu, charmander, move_table):
    executor = DuelExecutor(moves=move_table)
    a, b = _specs(pikachu, charmander)
    assert executor._run(a, b, Ruleset(), 5, keep_log=False).log == []


def test_tick_limit_is_a_draw(pikachu, charmander, move_table):
    executor = DuelExecutor(moves=move_table, tick_limit=1)
    a, b = _specs(pikachu, charmander)
    assert executor.simulate_one(a, b, Ruleset(), seed=3) == DRAW


def test_status_only_battle_runs_out_of_turns(pikachu, move_table):
    options = CombatantOptions(level=5)
    a = kits.build(pikachu, options, random.Random(1))
    status_only = dict(move_table)
    status_only["quickattack"] = move_table["thunderwave"]
    result = DuelExecutor(moves=status_only, max_turns=20).simulate_with_log(a, a, Ruleset(), seed=9)
    assert result.winner == DRAW
    assert result.turns == 20


def test_unknown_move_raises(pikachu, charmander):
    a, b = _specs(pikachu, charmander)
    with pytest.raises(ExecutorError):
        DuelExecutor(moves={}).simulate_one(a, b, Ruleset(), seed=1)


def test_elite_picks_best_expected_damage(pikachu, charmander, move_table):
    a, b = _specs(pikachu, charmander)
    actor, target = _unit(a, move_table), _unit(b, move_table, side=2)
    move = choose_move(actor, target, "elite", random.Random(0))
    assert move.code == "thunderbolt"
    assert base_damage(actor, target, move_table["thunderwave"]) == 0.0


def test_stab_boosts_damage(pikachu, charmander, move_table):
    a, b = _specs(pikachu, charmander)
    actor, target = _unit(a, move_table), _unit(b, move_table, side=2)
    plain = replace(move_table["thunderbolt"], type="normal")
    assert base_damage(actor, target, plain) < base_damage(actor, target, move_table["thunderbolt"])
