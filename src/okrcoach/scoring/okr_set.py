"""Whole-set measures: coherence, completeness, balance and achievability."""

import re
from typing import Sequence

import numpy as np

from .rules import clamp_score, words
from .vocabulary import STOP_WORDS

_LEADING = re.compile(
    r"\b(activity|input|effort|process|action|work|task|meeting|training)\b", re.IGNORECASE
)
_LAGGING = re.compile(
    r"\b(result|outcome|revenue|customer|user|satisfaction|score|rating|performance)\b", re.IGNORECASE
)


def is_leading_indicator(kr: str) -> bool:
    return _LEADING.search(kr) is not None


def is_lagging_indicator(kr: str) -> bool:
    return _LAGGING.search(kr) is not None


def score_coherence(objective: str, key_results: Sequence[str]) -> int:
    """Shared vocabulary between the objective and each key result."""
    score = 50
    theme_words = [w for w in words(objective) if len(w) > 3 and w not in STOP_WORDS]
    for kr in key_results:
        kr_words = words(kr)
        common = [w for w in theme_words if any(k in w or w in k for k in kr_words)]
        if common:
            score += min(len(common) * 5, 15)
        else:
            score -= 10
    return clamp_score(score)


def score_completeness(key_results: Sequence[str]) -> int:
    count = len(key_results)
    if 3 <= count <= 5:
        return 100
    if count in (2, 6):
        return 80
    if count in (1, 7):
        return 60
    return 20


def score_balance(key_results: Sequence[str]) -> int:
    leading = sum(1 for kr in key_results if is_leading_indicator(kr))
    lagging = sum(1 for kr in key_results if is_lagging_indicator(kr))
    if leading and lagging:
        return 100
    if leading or lagging:
        return 70
    return 30


def score_achievability(objective_ambition: int, key_result_challenges: Sequence[int]) -> int:
    """Sweet spot is a blended challenge level between 60 and 80."""
    mean_challenge = float(np.mean(key_result_challenges)) if len(key_result_challenges) else 0.0
    challenge = (objective_ambition + mean_challenge) / 2
    if 60 <= challenge <= 80:
        return 100
    if 50 <= challenge <= 90:
        return 80
    return 60
