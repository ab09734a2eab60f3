"""Rule tables for the six objective dimensions."""

import re
from dataclasses import replace

from okrcoach.domain.models import ObjectiveScope
from .rules import (
    Dimension, RuleContext, bonus, when, scaled,
    count_words_containing, whole_word_matches, has_numbers, word_count,
)
from .vocabulary import (
    ACTIVITY_KEYWORDS, OUTCOME_KEYWORDS, INSPIRATION_KEYWORDS, VAGUE_WORDS,
    ALLOWED_LONG_TERMS, industry_keywords, function_keywords,
)

_OUTCOME_VERB = re.compile(r"\b(improve|increase|decrease|enhance|optimize)\b", re.IGNORECASE)
_JARGON = re.compile(r"\b[A-Z]{2,}|\w{15,}")
_ALLOWED_LONG = re.compile(r"\b(" + "|".join(ALLOWED_LONG_TERMS) + r")\b", re.IGNORECASE)
_ODD_CHARACTERS = re.compile(r"[^\w\s.,!?-]")
_NUMBERS = re.compile(r"\d+")
_PERCENTAGES = re.compile(r"(\d+)%")


# ---- outcome orientation ----

OUTCOME_ORIENTATION = Dimension(
    name="outcome_orientation",
    baseline=30,
    rules=(
        scaled("activity_words", lambda t, c: -35 * count_words_containing(t, ACTIVITY_KEYWORDS)),
        scaled("outcome_words", lambda t, c: 40 * count_words_containing(t, OUTCOME_KEYWORDS)),
        bonus("result_language", r"\b(result|outcome|impact|effect|change|benefit|value)\b", 30),
        bonus("deliverable_language", r"\b(project|deliverable|milestone|task|feature|function)\b", -40),
        bonus("state_change", r"\b(from|to|by|increase|decrease|improve|reduce)\b", 25),
        # lower-case verbs only
        bonus("quantified_outcome", r"\b(increase|decrease|improve|reduce|achieve|reach).*\d+", 20, flags=0),
        when(
            "unquantified_outcome",
            lambda t, c: bool(_OUTCOME_VERB.search(t)) and not has_numbers(t),
            -35,
        ),
    ),
)


# ---- inspiration ----

INSPIRATION = Dimension(
    name="inspiration",
    baseline=40,
    rules=(
        scaled("inspiring_words", lambda t, c: 30 * count_words_containing(t, INSPIRATION_KEYWORDS)),
        bonus("emotional_language", r"\b(love|passion|excited|amazing|incredible|fantastic)\b", 20),
        bonus("aspirational_language", r"\b(vision|dream|aspire|transform|revolutionize|breakthrough)\b", 35),
        bonus("people_focus", r"\b(customer|user|client|people|team|world|society)\b", 20),
        bonus("market_leadership", r"\b(leader|leadership|first|leading|industry-leading)\b", 25),
        bonus("business_impact", r"\b(growth|revenue|profit|value|impact|achieve|reach)\b", 20),
        bonus("strategic_thinking", r"\b(strategic|enterprise|market|competitive|advantage)\b", 20),
        bonus("percentage_target", r"\b\d+%|\bby\s+\d+%", 15, flags=0),
        bonus("process_language", r"\b(process|system|procedure|workflow|documentation)\b", -20),
        bonus("technical_language", r"\b(API|database|server|framework|architecture|infrastructure)\b", -15),
        bonus("uninspiring_language", r"\b(stuff|things|better|good|do|make)\b", -25),
    ),
)


# ---- clarity ----

def vague_words(text: str):
    return whole_word_matches(text, VAGUE_WORDS)


def is_very_vague(text: str) -> bool:
    return len(vague_words(text)) >= 2


def jargon_terms(text: str):
    return [w for w in _JARGON.findall(text) if not _ALLOWED_LONG.search(w)]


def _length_delta(text: str, ctx: RuleContext) -> float:
    n = word_count(text)
    very_vague = is_very_vague(text)
    if 8 <= n <= 15 and not very_vague:
        return 20
    if 6 <= n <= 25 and not very_vague:
        return 10
    if n > 30 or n < 4:
        return -30
    return 0


def _vague_delta(text: str, ctx: RuleContext) -> float:
    per_word = 5 if has_numbers(text) else 15
    return -per_word * len(vague_words(text))


CLARITY = Dimension(
    name="clarity",
    baseline=lambda t, c: 50 if is_very_vague(t) else 60,
    rules=(
        scaled("length", _length_delta),
        scaled("jargon", lambda t, c: -10 * len(jargon_terms(t))),
        scaled("vague_words", _vague_delta),
        when("specific_numbers", lambda t, c: has_numbers(t), 20),
        when("formatting", lambda t, c: '  ' in t or bool(_ODD_CHARACTERS.search(t)), -15),
        bonus("quantified_change", r"\b(increase|decrease|improve|reduce|achieve|reach).*by.*\d+", 15),
        bonus("filler_words", r"\b(stuff|things)\b", -50),
        bonus("strategic_verbs", r"\b(achieve|establish|transform|deliver|generate|drive)\b", 10),
        bonus(
            "activity_verbs",
            r"\b(complete|finish|implement|build|create|launch|deploy|execute|conduct|perform|run|do)\b",
            -15,
        ),
    ),
)


# ---- alignment ----

def _industry_delta(text: str, ctx: RuleContext) -> float:
    return 10 * len(whole_word_matches(text, industry_keywords(ctx.context.industry)))


def _function_delta(text: str, ctx: RuleContext) -> float:
    return 10 * len(whole_word_matches(text, function_keywords(ctx.context.function)))


ALIGNMENT = Dimension(
    name="alignment",
    baseline=40,
    rules=(
        bonus("business_impact", r"\b(revenue|profit|growth|customer|market|business|value|ROI)\b", 30),
        bonus("strategic_terms", r"\b(strategic|competitive|advantage|position|leadership|innovation)\b", 25),
        scaled("industry_context", _industry_delta),
        scaled("function_context", _function_delta),
        bonus(
            "internal_focus",
            r"\b(internal|operational|process|efficiency|automation)\b",
            -15,
            unless=r"\b(customer|revenue|growth|value|impact|business)\b",
        ),
    ),
)


# ---- ambition ----

def _number_delta(text: str, ctx: RuleContext) -> float:
    numbers = _NUMBERS.findall(text)
    if not numbers:
        return 0
    delta = 10
    if any(int(n) >= 50 for n in numbers):
        delta += 15
    return delta


def _percentage_delta(text: str, ctx: RuleContext) -> float:
    percentages = _PERCENTAGES.findall(text)
    if not percentages:
        return 0
    return 30 if any(int(p) >= 25 for p in percentages) else 15


def _excellence_delta(text: str, ctx: RuleContext) -> float:
    if not re.search(r"\b(excellence)\b", text, re.IGNORECASE):
        return 0
    return 20 if _NUMBERS.search(text) else 10


AMBITION = Dimension(
    name="ambition",
    baseline=50,
    rules=(
        bonus("stretch_language", r"\b(stretch|challenging|ambitious|aggressive|breakthrough|transform)\b", 30),
        scaled("numeric_target", _number_delta),
        scaled("percentage_target", _percentage_delta),
        bonus("positional_ambition", r"\b(leader|leading|first|pioneer|innovate)\b", 30),
        scaled("excellence", _excellence_delta),
        when(
            "unbacked_superlative",
            lambda t, c: bool(re.search(r"\b(best)\b", t, re.IGNORECASE)) and not _NUMBERS.search(t),
            -10,
        ),
        bonus("growth_language", r"\b(growth|increase|expand|accelerate|scale)\b", 15),
        bonus("maintenance_language", r"\b(maintain|keep|sustain|continue|preserve)\b", -30),
        bonus("urgency", r"\b(quickly|rapidly|fast|immediately|urgent|critical)\b", 15),
        bonus("easy_target", r"\b(easy|simple|basic|minimum|least|small)\b", -20),
    ),
)


# ---- scope appropriateness ----

_TEAM_LEVEL_SCOPES = (ObjectiveScope.TEAM, ObjectiveScope.INITIATIVE, ObjectiveScope.PROJECT)


def _indicator_rule(label: str, scopes, flag: str, points: float):
    def _apply(text: str, ctx: RuleContext) -> float:
        if ctx.scope not in scopes or ctx.indicators is None:
            return 0
        return points if getattr(ctx.indicators, flag) else 0
    return scaled(label, _apply)


def _disguised_activity(text: str, ctx: RuleContext) -> float:
    ind = ctx.indicators
    if ctx.scope not in _TEAM_LEVEL_SCOPES or ind is None:
        return 0
    return -15 if ind.is_activity_disguised and not ind.has_measurable_outcome else 0


_STRATEGIC = (ObjectiveScope.STRATEGIC,)
_DEPARTMENTAL = (ObjectiveScope.DEPARTMENTAL,)

SCOPE_APPROPRIATENESS = Dimension(
    name="scope_appropriateness",
    baseline=70,
    rules=(
        _indicator_rule("strategic:market_positioning", _STRATEGIC, "is_market_positioning", 25),
        _indicator_rule("strategic:organizational_direction", _STRATEGIC, "sets_organizational_direction", 20),
        _indicator_rule("strategic:multiple_departments", _STRATEGIC, "requires_multiple_departments", 15),
        _indicator_rule("strategic:tactical_execution", _STRATEGIC, "is_tactical_execution", -25),
        _indicator_rule("strategic:single_team_focus", _STRATEGIC, "single_team_focus", -20),

        _indicator_rule("departmental:multiple_departments", _DEPARTMENTAL, "requires_multiple_departments", 20),
        _indicator_rule("departmental:measurable_outcome", _DEPARTMENTAL, "has_measurable_outcome", 15),
        _indicator_rule("departmental:market_positioning", _DEPARTMENTAL, "is_market_positioning", -10),
        _indicator_rule("departmental:tactical_execution", _DEPARTMENTAL, "is_tactical_execution", -10),

        _indicator_rule("team:team_control", _TEAM_LEVEL_SCOPES, "has_team_control", 25),
        _indicator_rule("team:measurable_outcome", _TEAM_LEVEL_SCOPES, "has_measurable_outcome", 25),
        _indicator_rule("team:tactical_execution", _TEAM_LEVEL_SCOPES, "is_tactical_execution", 20),
        _indicator_rule("team:single_team_focus", _TEAM_LEVEL_SCOPES, "single_team_focus", 15),
        _indicator_rule("team:market_positioning", _TEAM_LEVEL_SCOPES, "is_market_positioning", -15),
        _indicator_rule("team:organizational_direction", _TEAM_LEVEL_SCOPES, "sets_organizational_direction", -10),
        _indicator_rule("team:multiple_departments", _TEAM_LEVEL_SCOPES, "requires_multiple_departments", -15),
        _indicator_rule("team:cross_department", _TEAM_LEVEL_SCOPES, "requires_cross_department", -10),
        scaled("team:disguised_activity", _disguised_activity),
    ),
)


# dimension, weight
OBJECTIVE_DIMENSIONS = (
    (OUTCOME_ORIENTATION, 0.28),
    (INSPIRATION, 0.18),
    (CLARITY, 0.14),
    (ALIGNMENT, 0.14),
    (AMBITION, 0.16),
    (SCOPE_APPROPRIATENESS, 0.10),
)

# key results reuse the outcome rules under their own name
OUTCOME_VS_ACTIVITY = replace(OUTCOME_ORIENTATION, name="outcome_vs_activity")
