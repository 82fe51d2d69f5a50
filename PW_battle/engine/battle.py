from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional

from .contracts import (
    DRAW,
    SIDE_ONE,
    SIDE_TWO,
    BattleExecutor,
    CombatantSpec,
    ExecutorError,
    Ruleset,
    TrialResult,
)
from .rules import AI_ELITE

# =========================
# CONFIG
# =========================

TURN_THRESHOLD = 100
SPEED_TO_AP_DIVISOR = 10
MAX_TURNS = 100  # actions across both sides before the battle is called a draw
DEFAULT_TICK_LIMIT = 5000

CRIT_CHANCE = 16  # 1 in N
STAB = 1.5


# =========================
# RUNTIME TYPES
# =========================

@dataclass
class UnitRuntime:
    tag: str  # "p1" / "p2"
    side: int
    spec: CombatantSpec
    moves: list
    hp: int
    max_hp: int
    ap: int = 0

    @property
    def alive(self):
        return self.hp > 0

    @property
    def stats(self) -> dict:
        return self.spec.stats


@dataclass
class BattleContext:
    tick: int
    log: Optional[list]
    turns: int = 0

    def event(self, type_, source, target, value=None, meta=None):
        if self.log is None:
            return
        self.log.append({
            "tick": self.tick,
            "turn": self.turns,
            "type": type_,
            "source": source,
            "target": target,
            "value": value,
            "meta": meta or {},
        })


# =========================
# EXECUTOR
# =========================

class DuelExecutor(BattleExecutor):
    """
    Small 1v1 reference engine.

    Action points grow with speed each tick; a unit at TURN_THRESHOLD acts.
    Type matchups, abilities and items are not modelled.
    """

    def __init__(self, moves: Optional[Dict[str, object]] = None, max_turns: int = MAX_TURNS,
                 tick_limit: int = DEFAULT_TICK_LIMIT):
        if moves is None:
            from ..catalog import load_move_table
            moves = load_move_table()
        self.moves = dict(moves)
        self.max_turns = max_turns
        self.tick_limit = tick_limit

    def simulate_one(self, spec_a, spec_b, ruleset, seed=None) -> int:
        return self._run(spec_a, spec_b, ruleset, seed, keep_log=False).winner

    def simulate_with_log(self, spec_a, spec_b, ruleset, seed=None) -> TrialResult:
        return self._run(spec_a, spec_b, ruleset, seed, keep_log=True)

    # -------------------------

    def _resolve_moves(self, spec: CombatantSpec) -> list:
        out = []
        for code in spec.moves:
            move = self.moves.get(code)
            if move is None:
                raise ExecutorError(f"Unknown move '{code}' for {spec.name}")
            out.append(move)
        return out

    def _unit(self, side: int, spec: CombatantSpec, rng: random.Random) -> UnitRuntime:
        hp = spec.stats["hp"]
        return UnitRuntime(
            tag=f"p{side}",
            side=side,
            spec=spec,
            moves=self._resolve_moves(spec),
            hp=hp,
            max_hp=hp,
            ap=rng.randint(0, 20),  # minor stagger
        )

    def _run(self, spec_a: CombatantSpec, spec_b: CombatantSpec, ruleset: Ruleset,
             seed: Optional[int], keep_log: bool) -> TrialResult:
        rng = random.Random(seed)
        units = [self._unit(SIDE_ONE, spec_a, rng), self._unit(SIDE_TWO, spec_b, rng)]
        ctx = BattleContext(tick=0, log=[] if keep_log else None)
        ctx.event("start", None, None, meta={"p1": spec_a.name, "p2": spec_b.name})

        while ctx.tick < self.tick_limit and ctx.turns < self.max_turns:
            for u in units:
                u.ap += max(1, u.stats.get("spe", 10) // SPEED_TO_AP_DIVISOR)

            # faster unit resolves first when both are ready; speed ties are a coin flip
            ready = [u for u in units if u.ap >= TURN_THRESHOLD]
            ready.sort(key=lambda u: (u.ap, u.stats.get("spe", 0), rng.random()), reverse=True)

            for actor in ready:
                target = units[1] if actor is units[0] else units[0]
                if not actor.alive or not target.alive:
                    break
                _resolve_turn(ctx, actor, target, ruleset, rng)
                actor.ap -= TURN_THRESHOLD
                ctx.turns += 1
                if ctx.turns >= self.max_turns:
                    break

            if not units[1].alive:
                return _finish(ctx, SIDE_ONE)
            if not units[0].alive:
                return _finish(ctx, SIDE_TWO)

            ctx.tick += 1

        ctx.event("draw", None, None, meta={"turns": ctx.turns})
        return _finish(ctx, DRAW)


# =========================
# INTERNAL LOGIC
# =========================

def _finish(ctx: BattleContext, winner: int) -> TrialResult:
    ctx.event("end", None, None, value=winner)
    return TrialResult(winner=winner, turns=ctx.turns, log=ctx.log or [])


def _resolve_turn(ctx: BattleContext, actor: UnitRuntime, target: UnitRuntime, ruleset: Ruleset,
                  rng: random.Random):
    move = choose_move(actor, target, ruleset.ai_difficulty, rng)

    if move.accuracy is not None and rng.randint(1, 100) > move.accuracy:
        ctx.event("miss", actor.tag, target.tag, meta={"move": move.code})
        return

    if move.category == "status" or move.power <= 0:
        ctx.event("status", actor.tag, target.tag, meta={"move": move.code})
        return

    dmg, crit = calculate_damage(actor, target, move, rng)
    target.hp = max(0, target.hp - dmg)
    ctx.event("damage", actor.tag, target.tag, dmg, {"move": move.code, "crit": crit, "hp": target.hp})

    if not target.alive:
        ctx.event("faint", target.tag, None)


def _attack_stats(actor: UnitRuntime, target: UnitRuntime, move) -> tuple:
    if move.category == "special":
        return actor.stats["spa"], target.stats["spd"]
    return actor.stats["atk"], target.stats["def"]


def base_damage(actor: UnitRuntime, target: UnitRuntime, move) -> float:
    if move.power <= 0 or move.category == "status":
        return 0.0
    atk, dfn = _attack_stats(actor, target, move)
    base = (2 * actor.spec.level) / 5 + 2
    base = (base * move.power * atk / max(1, dfn)) / 50 + 2
    if move.type in actor.spec.types:
        base *= STAB
    return base


def calculate_damage(actor: UnitRuntime, target: UnitRuntime, move, rng: random.Random) -> tuple:
    base = base_damage(actor, target, move)
    crit = rng.randint(1, CRIT_CHANCE) == 1
    if crit:
        base *= 2
    return max(1, int(base * rng.uniform(0.85, 1.0))), crit


def choose_move(actor: UnitRuntime, target: UnitRuntime, difficulty: str, rng: random.Random):
    """
    random: any move. elite: best expected damage (power x accuracy).
    """
    if difficulty != AI_ELITE:
        return rng.choice(actor.moves)

    def expected(move):
        hit = (move.accuracy if move.accuracy is not None else 100) / 100
        return base_damage(actor, target, move) * hit

    return max(actor.moves, key=expected)
