from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from fractions import Fraction

from .rules import InvalidGuess

MAX_SCORE = 100
CORRECT_TOLERANCE = Fraction(1, 10)  # a guess within 10 points counts as correct

# (minimum accuracy, band, message), checked top to bottom
BANDS = (
    (Fraction(99, 100), "PERFECT", "Perfect prediction! Incredible!"),
    (Fraction(95, 100), "EXCELLENT", "Excellent prediction! Almost perfect!"),
    (Fraction(90, 100), "GREAT", "Great prediction! Very close!"),
    (Fraction(80, 100), "CLOSE", "Not bad, but not quite close enough."),
    (Fraction(70, 100), "FAIR", "You were off by a fair amount."),
    (Fraction(50, 100), "FAR", "Your prediction was quite far off."),
    (Fraction(0), "WAY_OFF", "Your prediction was way off the mark."),
)


@dataclass(frozen=True)
class ScoreResult:
    actual_win_rate: float
    guessed_win_rate: float
    accuracy: float
    score: int
    band: str
    message: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "actualWinRate": self.actual_win_rate,
            "guessedWinRate": self.guessed_win_rate,
            "accuracy": self.accuracy,
            "score": self.score,
            "band": self.band,
            "message": self.message,
            "isCorrect": self.is_correct,
        }


def _exact(value) -> Fraction:
    # floats are read as the decimal they print as, so 0.9 means 9/10
    if isinstance(value, numbers.Rational):
        return Fraction(value)
    return Fraction(str(float(value)))


def validate_guess(value) -> Fraction:
    """
    Out-of-range guesses are rejected, never clamped.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidGuess(
            message="guessedWinRate must be a number between 0 and 1.",
            details={"value": repr(value)},
        )
    if not isinstance(value, numbers.Rational) and not math.isfinite(value):
        raise InvalidGuess(
            message="guessedWinRate must be a finite number.",
            details={"value": repr(value)},
        )
    guess = _exact(value)
    if guess < 0 or guess > 1:
        raise InvalidGuess(
            message="guessedWinRate must be between 0 and 1.",
            details={"value": str(guess)},
        )
    return guess


def band_for(accuracy: Fraction) -> tuple:
    for minimum, band, message in BANDS:
        if accuracy >= minimum:
            return band, message
    return BANDS[-1][1], BANDS[-1][2]


def score(actual, guessed) -> ScoreResult:
    actual = _exact(actual)
    if actual < 0 or actual > 1:
        raise ValueError(f"actual win rate {actual} is outside [0, 1]")
    guess = validate_guess(guessed)

    error = abs(actual - guess)
    accuracy = 1 - error
    # round half up, exactly
    points = math.floor(MAX_SCORE * accuracy + Fraction(1, 2))
    band, message = band_for(accuracy)

    return ScoreResult(
        actual_win_rate=float(actual),
        guessed_win_rate=float(guess),
        accuracy=float(accuracy),
        score=points,
        band=band,
        message=message,
        is_correct=error <= CORRECT_TOLERANCE,
    )
