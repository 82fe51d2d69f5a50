# PW_battle/engine/rules.py

from dataclasses import dataclass
from typing import Optional, Dict, Any, List


@dataclass
class RuleError(Exception):
    message: str
    details: Optional[Dict[str, Any]] = None

    code = "RULE_ERROR"
    status = 400

    def __str__(self):
        return self.message

    def as_dict(self) -> dict:
        return {
            "ok": False,
            "code": self.code,
            "error": self.message,
            "details": self.details or {},
        }


class UnknownCreature(RuleError):
    code = "UNKNOWN_CREATURE"
    status = 404


class NoLegalMoves(RuleError):
    code = "NO_LEGAL_MOVES"
    status = 422


class InvalidOptions(RuleError):
    code = "INVALID_OPTIONS"
    status = 400


class SimulationFailed(RuleError):
    code = "SIMULATION_FAILED"
    status = 502


class Cancelled(RuleError):
    code = "CANCELLED"
    status = 503


class NotFound(RuleError):
    code = "NOT_FOUND"
    status = 404


class InvalidGuess(RuleError):
    code = "INVALID_GUESS"
    status = 400


# ============================================================
# EASY TO CHANGE STUFF (keep it here)
# ============================================================

MIN_LEVEL = 1
MAX_LEVEL = 100

MIN_GENERATION = 1
MAX_GENERATION = 9

MAX_MOVES = 4

MOVESET_RANDOM = "random"
MOVESET_COMPETITIVE = "competitive"
MOVESET_POLICIES = (MOVESET_RANDOM, MOVESET_COMPETITIVE)

AI_RANDOM = "random"
AI_ELITE = "elite"
AI_DIFFICULTIES = (AI_RANDOM, AI_ELITE)

# items were introduced in gen 2
FIRST_ITEM_GENERATION = 2


# ============================================================
# VALIDATION
# ============================================================

def validate_level(level: int, field: str = "level") -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidOptions(
            message=f"{field} must be an integer.",
            details={"field": field, "value": level},
        )
    if not (MIN_LEVEL <= level <= MAX_LEVEL):
        raise InvalidOptions(
            message=f"{field} must be between {MIN_LEVEL} and {MAX_LEVEL}.",
            details={"field": field, "value": level},
        )
    return level


def validate_choice(value: str, choices, field: str) -> str:
    if value not in choices:
        raise InvalidOptions(
            message=f"{field} must be one of: {', '.join(choices)}.",
            details={"field": field, "value": value},
        )
    return value


def validate_generation(generation: int) -> int:
    if isinstance(generation, bool) or not isinstance(generation, int):
        raise InvalidOptions(
            message="generation must be an integer.",
            details={"field": "generation", "value": generation},
        )
    if not (MIN_GENERATION <= generation <= MAX_GENERATION):
        raise InvalidOptions(
            message=f"generation must be between {MIN_GENERATION} and {MAX_GENERATION}.",
            details={"field": "generation", "value": generation},
        )
    return generation


def validate_moves(moves: List[str]) -> None:
    """
    A battle-ready combatant carries 1..4 distinct moves.
    """
    if not moves:
        raise NoLegalMoves(message="A combatant needs at least one move.")
    if len(moves) > MAX_MOVES:
        raise InvalidOptions(
            message=f"A combatant can know at most {MAX_MOVES} moves.",
            details={"moves": list(moves)},
        )
    if len(set(moves)) != len(moves):
        raise InvalidOptions(
            message="Duplicate move in moveset.",
            details={"moves": list(moves)},
        )
