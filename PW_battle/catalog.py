"""
Plain, immutable views of the creature catalog.

Trials run on worker threads, so everything they need is read here,
in the request thread, and handed over as frozen records.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .engine.rules import UnknownCreature
from .models import Creature, Move


@dataclass(frozen=True)
class MoveRecord:
    code: str
    name: str
    type: str
    category: str
    power: int
    accuracy: Optional[int]

    @classmethod
    def from_model(cls, move: Move) -> "MoveRecord":
        return cls(
            code=move.code,
            name=move.name,
            type=move.type,
            category=move.category,
            power=move.power,
            accuracy=move.accuracy,
        )


@dataclass(frozen=True)
class CreatureRecord:
    dex_number: int
    name: str
    species: str
    types: Tuple[str, ...]
    base_stats: Dict[str, int]
    abilities: Tuple[str, ...]
    learnset: Tuple[Tuple[int, str], ...]  # (learn level, move code), sorted by level
    competitive_moves: Tuple[str, ...]  # in slot order
    competitive_ability: str = ""
    competitive_item: str = ""
    competitive_nature: str = "Hardy"

    def moves_at_level(self, level: int) -> Tuple[str, ...]:
        return tuple(code for learned, code in self.learnset if learned <= level)


def creature_record(creature: Creature) -> CreatureRecord:
    learnset = tuple(
        (row.learn_level, row.move.code)
        for row in creature.learnset.select_related("move").order_by("learn_level", "move__code")
    )
    competitive = tuple(
        row.move.code
        for row in creature.competitive_moves.select_related("move").order_by("slot")
        if 1 <= row.slot <= 4
    )
    return CreatureRecord(
        dex_number=creature.dex_number,
        name=creature.name,
        species=creature.species_key,
        types=tuple(creature.types),
        base_stats=creature.base_stats,
        abilities=tuple(creature.ability_list),
        learnset=learnset,
        competitive_moves=competitive,
        competitive_ability=creature.competitive_ability,
        competitive_item=creature.competitive_item,
        competitive_nature=creature.competitive_nature or "Hardy",
    )


def load_creature(dex_number) -> CreatureRecord:
    try:
        creature = Creature.objects.get(dex_number=int(dex_number))
    except (Creature.DoesNotExist, TypeError, ValueError):
        raise UnknownCreature(
            message=f"Creature with id {dex_number} not found.",
            details={"creature_id": dex_number},
        )
    return creature_record(creature)


def load_move_table() -> Dict[str, MoveRecord]:
    return {m.code: MoveRecord.from_model(m) for m in Move.objects.all()}
