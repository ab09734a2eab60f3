"""Rule tables for the five key-result dimensions."""

import re

from .rules import Dimension, RuleContext, bonus, scaled
from .objective_rules import OUTCOME_VS_ACTIVITY

_DECIMAL_NUMBERS = re.compile(r"\d+(?:\.\d+)?")
_ANY_DIGIT = re.compile(r"\d+")
_PERCENTAGES = re.compile(r"(\d+)%")

_MONTHS = (
    "january|february|march|april|may|june|july|august|"
    "september|october|november|december"
)


def _quantified(text: str) -> bool:
    return _DECIMAL_NUMBERS.search(text) is not None


def _number_count_delta(text: str, ctx: RuleContext) -> float:
    return min(len(_DECIMAL_NUMBERS.findall(text)) * 25, 70)


QUANTIFICATION = Dimension(
    name="quantification",
    baseline=0,
    gate=_quantified,
    rules=(
        scaled("numbers", _number_count_delta),
        bonus("percentage", r"%", 20, flags=0),
        bonus("currency", r"[$£€¥]", 20, flags=0),
        bonus(
            "baseline_and_target",
            r"\b(from|up\s+from)\s+[$£€¥]?\d+.*to\s+[$£€¥]?\d+|\d+.*to\s+[$£€¥]?\d+|\(up\s+from\s+[$£€¥]?\d+",
            25,
        ),
        bonus("change_by_amount", r"\b(increase|decrease|improve|reduce).*by\s+\d+", 20),
        bonus(
            "time_bound",
            r"\b(by|within|in)\s+(" + _MONTHS + r"|\d{1,2}/\d{1,2}|\d{4}|week|month|quarter|year)",
            15,
        ),
    ),
)


FEASIBILITY = Dimension(
    name="feasibility",
    baseline=60,
    rules=(
        bonus(
            "trackable_metric",
            r"\b(revenue|sales|users|customers|time|cost|rate|percentage|score|rating|count|number"
            r"|visits|downloads|signups)\b",
            20,
        ),
        bonus(
            "hard_to_measure",
            r"\b(happiness|happier|satisfaction|satisfied|morale|culture|quality|better|best|good|great"
            r"|improved|improve)\b",
            -25,
            unless=r"\b(score|rating|survey|index|measure|metric)\b",
        ),
        bonus(
            "measurement_method",
            r"\b(survey|score|rating|index|metric|measure|track|monitor|analytics|dashboard)\b",
            15,
        ),
        bonus("subjective_language", r"\b(feel|think|believe|seem|appear|roughly|approximately|about)\b", -15),
        bonus(
            "external_dependency",
            r"\b(market|competition|external|partner|vendor|third-party)\b",
            -10,
            unless=r"\b(share|position|ranking|relative)\b",
        ),
    ),
)


INDEPENDENCE = Dimension(
    name="independence",
    baseline=lambda t, c: 70 if _ANY_DIGIT.search(t) else 55,
    rules=(
        bonus("ownership", r"\b(we|our|team|internal|control|manage|own)\b", 15),
        bonus(
            "external_dependency",
            r"\b(partner|vendor|third-party|depends\s+on|relies\s+on|requires.*approval)\b",
            -20,
        ),
        bonus(
            "customer_outcome",
            r"\b(customer|client|user)\s+(satisfaction|engagement|retention|acquisition|experience|success)",
            10,
        ),
        bonus("market_dependency", r"\b(market|competition|industry|economic|external)\b", -15),
        bonus(
            "team_action",
            r"\b(develop|create|build|improve|optimize|design|implement|increase|decrease|reduce|achieve)\b",
            10,
        ),
        bonus("measured_by", r"\bmeasured\s+by\b", 15),
        bonus("approval_dependency", r"\b(approve|approval|sign-off|authorize|permission|board|committee)\b", -25),
    ),
)


def _percentage_challenge(text: str, ctx: RuleContext) -> float:
    values = [int(p) for p in _PERCENTAGES.findall(text)]
    if not values:
        return 0
    top = max(values)
    if top >= 50:
        return 15
    if top >= 30:
        return 12
    if top >= 20:
        return 10
    if top >= 10:
        return 5
    return -10


CHALLENGE = Dimension(
    name="challenge",
    baseline=lambda t, c: 70 if _ANY_DIGIT.search(t) else 50,
    rules=(
        scaled("percentage_stretch", _percentage_challenge),
        bonus("absolute_improvement", r"\b(from|up\s+from)\s+[$£€¥]?\d+.*to\s+[$£€¥]?\d+", 10),
        bonus("rating_improvement", r"\d+\.\d+.*to.*\d+\.\d+|\d+\.\d+.*up\s+from.*\d+\.\d+", 10),
        bonus("maintenance_language", r"\b(maintain|sustain|keep|preserve)\b", -20),
    ),
)


# dimension, weight
KEY_RESULT_DIMENSIONS = (
    (QUANTIFICATION, 0.25),
    (OUTCOME_VS_ACTIVITY, 0.30),
    (FEASIBILITY, 0.15),
    (INDEPENDENCE, 0.15),
    (CHALLENGE, 0.15),
)
