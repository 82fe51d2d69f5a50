from __future__ import annotations

import random
from typing import Optional

from .contracts import CombatantOptions, CombatantSpec
from .rules import (
    FIRST_ITEM_GENERATION,
    MAX_MOVES,
    MOVESET_COMPETITIVE,
    MOVESET_POLICIES,
    MOVESET_RANDOM,
    NoLegalMoves,
    validate_choice,
    validate_generation,
    validate_level,
)
from .stats import NATURES, calc_stats

NO_ABILITY = "noability"
DEFAULT_COMPETITIVE_ITEM = "leftovers"

ITEM_POOL = (
    "leftovers",
    "choiceband",
    "choicescarf",
    "choicespecs",
    "lifeorb",
    "focussash",
    "assaultvest",
    "eviolite",
    "blacksludge",
    "rockyhelmet",
    "lightclay",
    "sitrusberry",
)


def _pick_moves(record, options: CombatantOptions, rng: random.Random) -> tuple:
    if options.moveset == MOVESET_COMPETITIVE:
        moves = tuple(dict.fromkeys(record.competitive_moves))[:MAX_MOVES]
    else:
        pool = list(dict.fromkeys(record.moves_at_level(options.level)))
        moves = tuple(rng.sample(pool, min(MAX_MOVES, len(pool))))

    if not moves:
        raise NoLegalMoves(
            message=f"{record.name} has no eligible moves under the {options.moveset} moveset at level {options.level}.",
            details={"creature_id": record.dex_number, "moveset": options.moveset, "level": options.level},
        )
    return moves


def _pick_ability(record, options: CombatantOptions, rng: random.Random) -> str:
    if options.moveset == MOVESET_COMPETITIVE and record.competitive_ability:
        return record.competitive_ability
    if not record.abilities:
        return NO_ABILITY
    if options.moveset == MOVESET_COMPETITIVE:
        return record.abilities[0]
    return rng.choice(record.abilities)


def _pick_item(record, options: CombatantOptions, rng: random.Random) -> Optional[str]:
    if not options.with_item or options.generation < FIRST_ITEM_GENERATION:
        return None
    if options.moveset == MOVESET_COMPETITIVE:
        return record.competitive_item or DEFAULT_COMPETITIVE_ITEM
    return rng.choice(ITEM_POOL)


def _pick_nature(record, options: CombatantOptions, rng: random.Random) -> str:
    if options.moveset == MOVESET_COMPETITIVE:
        return record.competitive_nature
    return rng.choice(NATURES)


def build(record, options: CombatantOptions, rng: Optional[random.Random] = None) -> CombatantSpec:
    """
    Turn a catalog record into a battle-ready combatant.

    All randomness is drawn from `rng`, so the same record, options and
    seed always give the same spec. The competitive policy draws nothing.
    """
    validate_level(options.level)
    validate_generation(options.generation)
    validate_choice(options.moveset, MOVESET_POLICIES, "movesetType")
    rng = rng or random.Random()

    moves = _pick_moves(record, options, rng)
    ability = _pick_ability(record, options, rng)
    nature = _pick_nature(record, options, rng)
    item = _pick_item(record, options, rng)

    return CombatantSpec(
        creature_id=record.dex_number,
        name=record.name,
        species=record.species,
        level=options.level,
        types=tuple(record.types),
        base_stats=dict(record.base_stats),
        stats=calc_stats(record.base_stats, options.level, nature),
        moves=moves,
        ability=ability,
        item=item,
        nature=nature,
    )


def is_reusable(options: CombatantOptions) -> bool:
    """A competitive build is fixed, so one spec can serve every trial."""
    return options.moveset != MOVESET_RANDOM
