"""Validation for raw model score responses.

The model is asked for three comma-separated numbers: political lean,
tech sentiment, and source trust. Anything it sends back is reduced to a
BiasScore that is always inside its domain.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from ..news.models import FALLBACK_SCORE, BiasScore

# Longest leading decimal literal, the way JavaScript's parseFloat reads it
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY_PREFIX = re.compile(r"([+-]?)Infinity")


@dataclass(frozen=True)
class ScoreValidation:
    """Result of validating one model response."""

    score: BiasScore
    is_valid: bool
    raw_text: str


def parse_number(token: str) -> Optional[float]:
    """Parse the leading number of a token, or None if it has none."""
    token = token.strip()
    match = _NUMBER_PREFIX.match(token)
    if match:
        return float(match.group(0))
    match = _INFINITY_PREFIX.match(token)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf
    return None


def clamp(value: float, low: float, high: float) -> float:
    return float(max(low, min(high, value)))


class ScoreValidator:
    """Turns a raw "political,tech,trust" response into a clamped BiasScore."""

    POLITICAL_RANGE = (-1, 1)
    TECH_RANGE = (-1, 1)
    TRUST_RANGE = (1, 10)

    def validate(self, text: str) -> ScoreValidation:
        """
        Validate a model response.

        Only the first three comma-separated tokens are consulted. If any of
        them is not a number the fallback score is returned with
        is_valid=False. Otherwise each value is clamped into its range.

        Args:
            text: Raw completion text

        Returns:
            ScoreValidation with the final score and a pass/fail flag
        """
        tokens = text.split(",")[:3]
        values = [parse_number(token) for token in tokens]

        if len(values) < 3 or any(v is None for v in values):
            return ScoreValidation(score=FALLBACK_SCORE, is_valid=False, raw_text=text)

        political, tech, trust = values
        score = BiasScore(
            political_score=clamp(political, *self.POLITICAL_RANGE),
            tech_score=clamp(tech, *self.TECH_RANGE),
            trust_score=clamp(trust, *self.TRUST_RANGE),
        )
        return ScoreValidation(score=score, is_valid=True, raw_text=text)
