"""Rule-table primitives for dimension scoring.

A dimension is a baseline plus an ordered tuple of named rules. Each rule
returns a point delta; the dimension score is the clamped sum. Keeping the
rules small and named lets every heuristic be tested on its own and lets the
scorer report which rules moved a score.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Pattern, Tuple, Union

from okrcoach.domain.models import ObjectiveScope, UserContext

WORD_SPLIT = re.compile(r"\s+")
NUMBER = re.compile(r"\b\d+")


def clamp_score(x: float) -> int:
    """Clamp to the 0..100 score range."""
    return int(max(0.0, min(100.0, x)))


def round_half_up(x: float) -> int:
    """Round halves away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(x + 0.5))


def words(text: str):
    return WORD_SPLIT.split(text.lower())


def word_count(text: str) -> int:
    return len(WORD_SPLIT.split(text))


def count_words_containing(text: str, keywords: Iterable[str]) -> int:
    """Number of whitespace tokens that contain any of the keywords."""
    keywords = tuple(keywords)
    return sum(1 for w in words(text) if any(k in w for k in keywords))


def whole_word_matches(text: str, keywords: Iterable[str]):
    """Keywords that appear as whole words (case-insensitive)."""
    return [
        k for k in keywords
        if re.search(rf"\b{re.escape(k)}\b", text, re.IGNORECASE)
    ]


def has_numbers(text: str) -> bool:
    return NUMBER.search(text) is not None


@dataclass(frozen=True)
class RuleContext:
    """Inputs a rule may look at besides the text itself."""
    context: UserContext = field(default_factory=UserContext)
    scope: ObjectiveScope = ObjectiveScope.TEAM
    indicators: Optional[object] = None   # ScopeIndicators, filled in for objectives


RuleFn = Callable[[str, RuleContext], float]


@dataclass(frozen=True)
class ScoringRule:
    name: str
    apply: RuleFn

    def __call__(self, text: str, ctx: RuleContext) -> float:
        return float(self.apply(text, ctx))


@dataclass(frozen=True)
class DimensionResult:
    score: int
    baseline: float
    contributions: Dict[str, float]


@dataclass(frozen=True)
class Dimension:
    """One scoring dimension. ``gate`` short-circuits the score to 0 when False."""
    name: str
    baseline: Union[float, RuleFn]
    rules: Tuple[ScoringRule, ...]
    gate: Optional[Callable[[str], bool]] = None

    def evaluate(self, text: str, ctx: RuleContext) -> DimensionResult:
        if self.gate is not None and not self.gate(text):
            return DimensionResult(score=0, baseline=0.0, contributions={})

        base = float(self.baseline(text, ctx)) if callable(self.baseline) else float(self.baseline)
        total = base
        contributions: Dict[str, float] = {}
        for rule in self.rules:
            delta = rule(text, ctx)
            if delta:
                contributions[rule.name] = delta
                total += delta
        return DimensionResult(score=clamp_score(total), baseline=base, contributions=contributions)

    def rule(self, name: str) -> ScoringRule:
        for r in self.rules:
            if r.name == name:
                return r
        raise KeyError(name)


# ---- rule factories ----

def _compile(pattern: Union[str, Pattern], flags: int) -> Pattern:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)


def bonus(
    name: str,
    pattern: Union[str, Pattern],
    points: float,
    *,
    flags: int = re.IGNORECASE,
    unless: Optional[Union[str, Pattern]] = None,
) -> ScoringRule:
    """Add ``points`` (negative for a penalty) when ``pattern`` matches and ``unless`` does not."""
    rx = _compile(pattern, flags)
    rx_unless = _compile(unless, flags) if unless is not None else None

    def _apply(text: str, ctx: RuleContext) -> float:
        if rx.search(text) is None:
            return 0.0
        if rx_unless is not None and rx_unless.search(text) is not None:
            return 0.0
        return points

    return ScoringRule(name, _apply)


def when(name: str, predicate: Callable[[str, RuleContext], bool], points: float) -> ScoringRule:
    """Add ``points`` when the predicate holds."""
    return ScoringRule(name, lambda text, ctx: points if predicate(text, ctx) else 0.0)


def scaled(name: str, fn: RuleFn) -> ScoringRule:
    """Rule whose delta is computed directly by ``fn``."""
    return ScoringRule(name, fn)
