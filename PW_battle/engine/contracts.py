from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .rules import (
    AI_RANDOM,
    MOVESET_RANDOM,
    validate_level,
    validate_moves,
)

DRAW = 0
SIDE_ONE = 1
SIDE_TWO = 2
WINNERS = (DRAW, SIDE_ONE, SIDE_TWO)

STAT_KEYS = ("hp", "atk", "def", "spa", "spd", "spe")


class ExecutorError(Exception):
    """Raised by an executor that cannot run a battle with the given specs."""


@dataclass(frozen=True)
class CombatantSpec:
    creature_id: int
    name: str
    species: str
    level: int
    types: Tuple[str, ...]
    base_stats: Dict[str, int]
    stats: Dict[str, int]
    moves: Tuple[str, ...]
    ability: str
    item: Optional[str] = None
    nature: str = "Hardy"

    def __post_init__(self):
        validate_level(self.level)
        validate_moves(list(self.moves))
        for key in STAT_KEYS:
            if self.base_stats.get(key, -1) < 0:
                raise ValueError(f"base stat '{key}' must be a non-negative integer")

    def to_dict(self) -> dict:
        return {
            "id": self.creature_id,
            "name": self.name,
            "species": self.species,
            "level": self.level,
            "types": list(self.types),
            "baseStats": dict(self.base_stats),
            "stats": dict(self.stats),
            "moves": list(self.moves),
            "ability": self.ability,
            "item": self.item,
            "nature": self.nature,
        }


@dataclass(frozen=True)
class CombatantOptions:
    level: int
    with_item: bool = False
    moveset: str = MOVESET_RANDOM
    generation: int = 9


@dataclass(frozen=True)
class Ruleset:
    generation: int = 9
    ai_difficulty: str = AI_RANDOM


@dataclass(frozen=True)
class BattleOptions:
    """
    Everything the request controls about a simulation.
    The trial count is NOT here: it is fixed by configuration.
    """
    generation: int = 9
    pokemon1_level: int = 50
    pokemon2_level: int = 50
    with_items: bool = False
    moveset: str = MOVESET_RANDOM
    ai_difficulty: str = AI_RANDOM

    def side(self, n: int) -> CombatantOptions:
        level = self.pokemon1_level if n == SIDE_ONE else self.pokemon2_level
        return CombatantOptions(
            level=level,
            with_item=self.with_items,
            moveset=self.moveset,
            generation=self.generation,
        )

    @property
    def ruleset(self) -> Ruleset:
        return Ruleset(generation=self.generation, ai_difficulty=self.ai_difficulty)

    def to_dict(self) -> dict:
        return {
            "generation": self.generation,
            "pokemon1Level": self.pokemon1_level,
            "pokemon2Level": self.pokemon2_level,
            "withItems": self.with_items,
            "movesetType": self.moveset,
            "aiDifficulty": self.ai_difficulty,
        }


@dataclass
class TrialResult:
    winner: int
    turns: int = 0
    log: List[Dict[str, Any]] = field(default_factory=list)


class BattleExecutor(ABC):
    """Runs one battle between two combatants under a ruleset."""

    @abstractmethod
    def simulate_one(self, spec_a: CombatantSpec, spec_b: CombatantSpec,
                     ruleset: Ruleset, seed: Optional[int] = None) -> int:
        """
        Returns SIDE_ONE, SIDE_TWO or DRAW.
        Raises ExecutorError (or anything else) when the battle cannot run.
        """

    def simulate_with_log(self, spec_a: CombatantSpec, spec_b: CombatantSpec,
                          ruleset: Ruleset, seed: Optional[int] = None) -> TrialResult:
        return TrialResult(winner=self.simulate_one(spec_a, spec_b, ruleset, seed=seed))
