"""Curated anti-pattern definitions, in detection order."""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Tuple

from okrcoach.domain.models import UserContext

from .models import AntiPatternType, InterventionType, ReframingStrategy, Severity
from . import strategies

ContextRule = Callable[[str, Optional[UserContext]], bool]


@dataclass(frozen=True)
class AntiPatternDefinition:
    type: AntiPatternType
    name: str
    description: str
    detection_regex: Tuple[Pattern, ...]
    keyword_triggers: Tuple[str, ...]
    contextual_rule: ContextRule
    strategy: ReframingStrategy
    severity: Severity
    intervention_type: InterventionType


def _rx(pattern: str) -> Pattern:
    return re.compile(pattern, re.IGNORECASE)


def _absent(pattern: str) -> ContextRule:
    rx = _rx(pattern)
    return lambda text, context=None: rx.search(text) is None


# ---- contextual rules needing more than one pattern ----

_BINARY_ASPIRATION = _rx(
    r"\b(achieve|attain|accomplish|reach|improve|enhance|optimize)\s+"
    r"(excellence|success|leadership|satisfaction|quality|performance)\b"
)
_BINARY_NUMBERS = _rx(r"\b(\d+|by\s+\d|from\s+\d|to\s+\d|%|percent|points?)\b")
_BINARY_COMPLETION = _rx(
    r"\b(done|completed?|complete|finished?|finish|launched?|launch|shipped?|ship|delivered?|deliver"
    r"|implemented?|implement)\b"
)


def _binary_rule(text: str, context: Optional[UserContext] = None) -> bool:
    has_numbers = bool(_BINARY_NUMBERS.search(text))
    has_aspiration = bool(_BINARY_ASPIRATION.search(text))
    has_completion = bool(_BINARY_COMPLETION.search(text))
    return (has_aspiration and not has_numbers) or (has_completion and not has_numbers)


_KR_MENTION = _rx(r"\b(key\s*result|kr)\b")
_METRIC_MENTION = _rx(r"\b(metric|measure|track|monitor)\b")
_GOAL_VERB = _rx(
    r"\b(increas(?:e|ing)|improv(?:e|ing)|reduc(?:e|ing)|enhanc(?:e|ing)|optimiz(?:e|ing)|achiev(?:e|ing)"
    r"|grow(?:ing)?|expand(?:ing)?|boost(?:ing)?|mak(?:e|ing)|keep(?:ing)?|be(?:ing|come|coming)?"
    r"|establish(?:ing)?|creat(?:e|ing)|build(?:ing)?|develop(?:ing)?|launch(?:ing)?)\b"
)


def goal_clause_count(text: str) -> int:
    return len(_GOAL_VERB.findall(text))


def _kitchen_sink_rule(text: str, context: Optional[UserContext] = None) -> bool:
    kr_count = len(_KR_MENTION.findall(text))
    metric_count = len(_METRIC_MENTION.findall(text))
    goal_verbs = goal_clause_count(text)
    commas = text.count(",")
    many_goals = (goal_verbs >= 4 and commas >= 2) or goal_verbs >= 5
    many_krs = kr_count > 5 or metric_count > 7
    return many_krs or many_goals


PATTERNS: Tuple[AntiPatternDefinition, ...] = (
    AntiPatternDefinition(
        type=AntiPatternType.ACTIVITY_FOCUSED,
        name="Activity-Focused Language",
        description="Language focused on deliverables and activities rather than outcomes",
        detection_regex=(
            _rx(r"\b(implement|launch|complete|deliver|build|create|develop|deploy|install|setup|configure"
                r"|write|design|plan|organize|manage|coordinate|execute|conduct|analyze|review|research|test)\b"),
            _rx(r"\b(project|deliverable|milestone|task|feature|function|system|platform|tool|process"
                r"|interview|survey|meeting|workshop)\b"),
        ),
        keyword_triggers=(
            'implement', 'launch', 'complete', 'deliver', 'build', 'create',
            'develop', 'deploy', 'install', 'setup', 'configure', 'write',
            'design', 'plan', 'organize', 'manage', 'coordinate', 'execute',
            'conduct', 'analyze', 'review', 'research', 'test', 'interview',
        ),
        contextual_rule=_absent(
            r"\b(increase|decrease|improve|reduce|enhance|achieve|reach|result|outcome|impact|benefit|value|change)\b"
        ),
        strategy=strategies.FIVE_WHYS,
        severity=Severity.HIGH,
        intervention_type=InterventionType.ACTIVITY_TO_OUTCOME,
    ),
    AntiPatternDefinition(
        type=AntiPatternType.BINARY_THINKING,
        name="Binary Goals",
        description="Done/not-done goals without measurable outcomes",
        detection_regex=(
            _rx(r"\b(done|completed?|complete|finished?|finish|launched?|launch|shipped?|ship|delivered?"
                r"|deliver|implemented?|implement)\b"),
            _rx(r"\b(?:go|goes|going|went|gone|is|are|be|been|being|become|becomes)\s+(?:live|active)\b"
                r"|\bready\s+(?:for|to)\b"),
            _rx(r"\b(successfully|completely|fully|entirely)\s+(done|completed?|complete|finished?|finish"
                r"|launched?|launch|implemented?|implement)\b"),
            _rx(r"\b(achieve|attain|accomplish|reach)\s+(?:\w+\s+)?(excellence|success|leadership|greatness"
                r"|mastery)\b"),
            _rx(r"\b(achieve|attain|accomplish|reach)\s+[^.!?]*?successfully\b"),
        ),
        keyword_triggers=(
            'done', 'completed', 'finished', 'launched', 'shipped', 'delivered',
            'implemented', 'successfully', 'achieve excellence',
            'operational excellence', 'achieve success',
        ),
        contextual_rule=_binary_rule,
        strategy=strategies.OUTCOME_TRANSFORMATION,
        severity=Severity.HIGH,
        intervention_type=InterventionType.ACTIVITY_TO_OUTCOME,
    ),
    AntiPatternDefinition(
        type=AntiPatternType.VANITY_METRICS,
        name="Vanity Metrics",
        description="Metrics that look good but lack business context",
        detection_regex=(
            _rx(r"\b(followers|likes|views|downloads|page\s*views|impressions|clicks)\b"),
            _rx(r"\b(social\s*media|facebook|twitter|instagram|linkedin)\s*(followers|likes|shares|engagement)\b"),
        ),
        keyword_triggers=(
            'followers', 'likes', 'views', 'downloads', 'pageviews', 'impressions',
            'clicks', 'shares', 'mentions', 'subscribers',
        ),
        contextual_rule=_absent(
            r"\b(revenue|conversion|retention|satisfaction|value|business|customer|sales|profit|growth)\b"
        ),
        strategy=strategies.VALUE_EXPLORATION,
        severity=Severity.MEDIUM,
        intervention_type=InterventionType.METRIC_EDUCATION,
    ),
    AntiPatternDefinition(
        type=AntiPatternType.BUSINESS_AS_USUAL,
        name="Business as Usual",
        description="Regular job duties without stretch or improvement",
        detection_regex=(
            _rx(r"\b(maintain|keep|continue|sustain|preserve|ongoing|regular|routine|normal|standard)\b"),
            _rx(r"\b(daily|weekly|monthly|quarterly)\s+(meetings|reports|reviews|updates|calls)\b"),
        ),
        keyword_triggers=(
            'maintain', 'keep', 'continue', 'sustain', 'preserve', 'ongoing',
            'regular', 'routine', 'normal', 'standard', 'current', 'existing',
        ),
        contextual_rule=_absent(
            r"\b(improve|increase|enhance|optimize|accelerate|transform|exceed|breakthrough|stretch|ambitious)\b"
        ),
        strategy=strategies.AMBITION_CALIBRATION,
        severity=Severity.MEDIUM,
        intervention_type=InterventionType.AMBITION_CALIBRATION,
    ),
    AntiPatternDefinition(
        type=AntiPatternType.KITCHEN_SINK,
        name="Kitchen Sink Approach",
        description="Too many metrics or overlapping measurements",
        detection_regex=(
            _rx(r"(\d+\s*(?:key\s*result|kr|metric|measure|indicator))"),
            _rx(r"(increase|improve|reduce|enhance|optimize|achieve|grow|expand|boost)[^,.]+"
                r"(,\s*(?:and\s+)?(?:increase|improve|reduce|enhance|optimize|achieve|grow|expand|boost))+"),
        ),
        keyword_triggers=(),
        contextual_rule=_kitchen_sink_rule,
        strategy=strategies.FOCUS,
        severity=Severity.LOW,
        intervention_type=InterventionType.CLARITY_IMPROVEMENT,
    ),
    AntiPatternDefinition(
        type=AntiPatternType.VAGUE_OUTCOME,
        name="Vague Outcomes",
        description="Outcomes without specific, measurable definitions",
        detection_regex=(
            _rx(r"\b(best|better|good|great|more|less|some|many|few|various|several|multiple|different"
                r"|appropriate|significant|substantial)\b"),
            _rx(r"\b(improve|increase|enhance|optimize|boost|grow|expand)\b"
                r"(?!\s+.*\b(?:\d+|by|from|to|%|percent)\b)"),
        ),
        keyword_triggers=(
            'best', 'better', 'good', 'great', 'more', 'less', 'some', 'many', 'few',
            'various', 'several', 'multiple', 'different', 'appropriate',
            'significant', 'substantial', 'meaningful', 'considerable', 'happy', 'low',
        ),
        contextual_rule=_absent(r"\b\d+(\.\d+)?[%$]?\b|\bfrom\s+\d+|\bto\s+\d+|\bby\s+\d+"),
        strategy=strategies.SPECIFICITY,
        severity=Severity.MEDIUM,
        intervention_type=InterventionType.CLARITY_IMPROVEMENT,
    ),
)

PATTERNS_BY_TYPE = {p.type: p for p in PATTERNS}
