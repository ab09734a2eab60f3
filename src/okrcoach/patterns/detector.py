"""Anti-pattern detection and reframing.

Each pattern in the catalog scores its own confidence from regex hits,
keyword triggers and a contextual rule. Findings above the detection
threshold are reported; only findings at or above the activation threshold
can trigger a reframing suggestion.
"""

import logging
import re
from typing import List, Optional, Sequence

from okrcoach.domain.models import UserContext, UserProfile
from okrcoach.utils.text import analysed_text

from .catalog import PATTERNS, AntiPatternDefinition
from .models import (
    AntiPatternFinding, DetectionResult, ReframingSuggestion, ReframingEvaluation,
    ReframingExample, ReframingStrategy, Dependency, InterventionType, Technique,
)
from .strategies import FALLBACK_QUESTION, EXAMPLE_DRIVEN_QUESTION

logger = logging.getLogger(__name__)

DETECTION_THRESHOLD = 0.3
ACTIVATION_THRESHOLD = 0.5

REGEX_WEIGHT, REGEX_CAP = 0.25, 0.7
KEYWORD_WEIGHT, KEYWORD_CAP = 0.18, 0.45
CONTEXT_BOOST, CONTEXT_FLOOR = 0.4, 0.6

FOLLOW_UP_QUESTIONS = {
    InterventionType.ACTIVITY_TO_OUTCOME: (
        "What will be different when this is done?",
        "Who benefits from this change?",
        "How will you know it's working?",
    ),
    InterventionType.METRIC_EDUCATION: (
        "What business result does this metric indicate?",
        "How does this connect to revenue or customer value?",
    ),
    InterventionType.AMBITION_CALIBRATION: (
        "How could you exceed normal expectations here?",
        "What would make this feel like a real achievement?",
    ),
    InterventionType.CLARITY_IMPROVEMENT: (
        "Can you be more specific about what success looks like?",
        "What exact numbers would represent success?",
    ),
}

EXPECTED_OUTCOMES = {
    InterventionType.ACTIVITY_TO_OUTCOME: "User shifts from describing tasks to describing results and changes",
    InterventionType.METRIC_EDUCATION: "User connects metrics to business value and customer impact",
    InterventionType.AMBITION_CALIBRATION: "User raises ambition level with challenging but achievable targets",
    InterventionType.CLARITY_IMPROVEMENT: "User provides specific, measurable definitions of success",
}

_ACTIVITY_PHRASE = re.compile(
    r"\b(implement|launch|complete|deliver|build|create|develop|deploy)\s+([^.!?]+)", re.IGNORECASE
)

_TEXT_OUTCOME_WORDS = ('increase', 'decrease', 'improve', 'reduce', 'achieve',
                       'result', 'outcome', 'impact', 'value', 'benefit')
_TEXT_ACTIVITY_WORDS = ('implement', 'launch', 'complete', 'deliver', 'build', 'create', 'develop')
_TEXT_VAGUE_WORDS = ('better', 'good', 'more', 'some', 'many')


def _count_whole_words(text: str, vocabulary: Sequence[str]) -> int:
    return sum(1 for w in vocabulary if re.search(rf"\b{re.escape(w)}\b", text, re.IGNORECASE))


def text_quality_score(text: str) -> int:
    """Coarse outcome-vs-activity score used to judge a reframing attempt."""
    text = analysed_text(text)
    score = 50
    score += 10 * _count_whole_words(text, _TEXT_OUTCOME_WORDS)
    score -= 8 * _count_whole_words(text, _TEXT_ACTIVITY_WORDS)
    if re.search(r"\d+", text):
        score += 15
    score -= 5 * _count_whole_words(text, _TEXT_VAGUE_WORDS)
    return max(0, min(100, score))


class AntiPatternDetector:
    """Detects the six OKR anti-patterns and proposes reframing questions."""

    def __init__(
        self,
        detection_threshold: float = DETECTION_THRESHOLD,
        activation_threshold: float = ACTIVATION_THRESHOLD,
        patterns: Sequence[AntiPatternDefinition] = PATTERNS,
    ):
        self.detection_threshold = detection_threshold
        self.activation_threshold = activation_threshold
        self.patterns = tuple(patterns)

    # ---- detection ----

    def pattern_confidence(
        self,
        text: str,
        pattern: AntiPatternDefinition,
        context: Optional[UserContext] = None,
    ) -> AntiPatternFinding:
        text = analysed_text(text)
        regex_hits = sum(sum(1 for _ in rx.finditer(text)) for rx in pattern.detection_regex)
        keyword_hits = _count_whole_words(text, pattern.keyword_triggers)

        base = min(regex_hits * REGEX_WEIGHT, REGEX_CAP) + min(keyword_hits * KEYWORD_WEIGHT, KEYWORD_CAP)
        has_evidence = regex_hits > 0 or keyword_hits > 0
        context_passed = pattern.contextual_rule(text, context)

        if context_passed and has_evidence:
            confidence = max(base + CONTEXT_BOOST, CONTEXT_FLOOR)
        else:
            confidence = base
        confidence = min(confidence + pattern.severity.confidence_boost, 1.0)

        return AntiPatternFinding(
            type=pattern.type,
            name=pattern.name,
            description=pattern.description,
            confidence=confidence,
            severity=pattern.severity,
            intervention_type=pattern.intervention_type,
            strategy=pattern.strategy,
            evidence={
                "regex_hits": regex_hits,
                "keyword_hits": keyword_hits,
                "context_rule": int(bool(context_passed)),
            },
        )

    def detect_patterns(self, text: str, context: Optional[UserContext] = None) -> DetectionResult:
        text = analysed_text(text)
        findings: List[AntiPatternFinding] = []
        for pattern in self.patterns:
            try:
                finding = self.pattern_confidence(text, pattern, context)
            except Exception:
                logger.exception("Detector %s failed", pattern.type.value)
                continue
            if finding.confidence > self.detection_threshold:
                findings.append(finding)

        result = DetectionResult(patterns=tuple(findings))
        logger.debug(
            "Anti-pattern detection: %d found, severity=%s, confidence=%.2f",
            len(findings), result.severity.value, result.confidence,
        )
        return result

    # ---- reframing ----

    def primary_finding(self, detection: DetectionResult) -> Optional[AntiPatternFinding]:
        """Most severe activated finding; confidence breaks ties."""
        active = [p for p in detection.patterns if p.confidence >= self.activation_threshold]
        if not active:
            return None
        return sorted(active, key=lambda p: (-p.severity.rank, -p.confidence))[0]

    def generate_reframing_response(
        self,
        detection: DetectionResult,
        original_text: str,
        profile: Optional[UserProfile] = None,
        context: Optional[UserContext] = None,
    ) -> Optional[ReframingSuggestion]:
        primary = self.primary_finding(detection)
        if primary is None:
            return None

        profile = profile or UserProfile()
        context = context or UserContext()
        original_text = "" if original_text is None else str(original_text)
        strategy = primary.strategy
        attempts = max(0, profile.previous_attempts)

        resisted = primary.type.value in profile.resistance_patterns
        exhausted = attempts >= strategy.max_attempts
        technique = Technique.EXAMPLE_DRIVEN if (resisted or exhausted) else strategy.technique

        examples = self._select_examples(strategy, context)
        if technique is Technique.EXAMPLE_DRIVEN:
            question = EXAMPLE_DRIVEN_QUESTION
        else:
            question = self._select_question(strategy, original_text, attempts, context)

        suggestion = self._compose_suggestion(question, examples, strategy, technique, profile)

        logger.debug(
            "Reframing %s with %s (attempt %d)", primary.type.value, technique.value, attempts
        )
        return ReframingSuggestion(
            pattern_type=primary.type,
            technique=technique,
            strategy_name=strategy.name,
            question=question,
            suggestion=suggestion,
            examples=examples,
            follow_up_questions=FOLLOW_UP_QUESTIONS.get(primary.intervention_type, ()),
            expected_outcome=EXPECTED_OUTCOMES.get(
                primary.intervention_type, "User provides more outcome-focused response"
            ),
            previous_attempts=attempts,
            confidence=round(max(0.4, 0.8 - 0.1 * attempts), 2),
        )

    def _select_question(
        self,
        strategy: ReframingStrategy,
        text: str,
        attempts: int,
        context: UserContext,
    ) -> str:
        if attempts >= len(strategy.questions):
            return FALLBACK_QUESTION
        return fill_placeholders(strategy.questions[attempts], text, context)

    @staticmethod
    def _select_examples(strategy: ReframingStrategy, context: UserContext):
        examples = strategy.examples
        if context.industry:
            industry = context.industry.lower()
            matching = tuple(ex for ex in examples if industry in ex.context.lower())
            if matching:
                examples = matching
        return examples[:2]

    @staticmethod
    def _compose_suggestion(
        question: str,
        examples: Sequence[ReframingExample],
        strategy: ReframingStrategy,
        technique: Technique,
        profile: UserProfile,
    ) -> str:
        style = profile.communication_style
        parts = []
        if style == "supportive":
            parts.append("You're on the right track.")
        parts.append(question)

        show_example = examples and (
            technique is Technique.EXAMPLE_DRIVEN or profile.experience_level != "experienced"
        )
        if show_example:
            ex = examples[0]
            block = f'\n\nFor example, instead of:\n"{ex.before}"\n\nConsider:\n"{ex.after}"'
            if style != "direct":
                block += f"\n\n{ex.explanation}"
            parts.append(block)

        if style == "analytical" and strategy.success_criteria:
            parts.append(f"\n\nWhat good looks like: {strategy.success_criteria[0]}")

        suggestion = parts[0]
        for part in parts[1:]:
            suggestion += part if part.startswith("\n") else " " + part
        return suggestion

    # ---- supplementary analysis ----

    def evaluate_reframing_success(
        self,
        original_text: str,
        reframed_text: str,
        context: Optional[UserContext] = None,
    ) -> ReframingEvaluation:
        """Did a reframing attempt reduce anti-pattern confidence or improve the text?"""
        before = self.detect_patterns(original_text, context)
        after = self.detect_patterns(reframed_text, context)
        before_score = text_quality_score(original_text or "")
        after_score = text_quality_score(reframed_text or "")

        success = after.confidence < before.confidence * 0.7 or after_score > before_score + 10
        intervention = (
            before.patterns[0].intervention_type if before.patterns
            else InterventionType.ACTIVITY_TO_OUTCOME
        )
        return ReframingEvaluation(
            success=success,
            before_score=before_score,
            after_score=after_score,
            before_confidence=before.confidence,
            after_confidence=after.confidence,
            intervention_type=intervention,
        )

    @staticmethod
    def extract_dependencies(text: str) -> List[Dependency]:
        """Dependencies outside the team's sphere of influence."""
        text = analysed_text(text)
        deps: List[Dependency] = []

        if re.search(r"\b(customer|user|client)\s+(will|must|should|needs to|has to|chooses|decides|adopts"
                     r"|accepts|buys|uses)\b", text, re.IGNORECASE):
            deps.append(Dependency("customer_behavior", "Depends on customer/user choices or behavior", "low"))

        if (re.search(r"\b(requires|depends on|needs|relies on)\b.*\b(team|department|group|function|org)\b",
                      text, re.IGNORECASE)
                or re.search(r"\b(other team|another team|delivery team|design team|sales team|support team"
                             r"|operations team)\b", text, re.IGNORECASE)):
            deps.append(Dependency("other_team", "Requires coordination or delivery from other teams", "medium"))

        if (re.search(r"\b(market|industry|competition|competitor|economic|economy|trends)\b", text, re.IGNORECASE)
                and re.search(r"\b(if|when|assuming|provided|grows|changes|shifts|evolves)\b", text, re.IGNORECASE)):
            deps.append(Dependency(
                "market_dynamics", "Dependent on market conditions or competitive landscape", "none"
            ))

        if re.search(r"\b(partner|vendor|third party|external|supplier|contractor)\b.*"
                     r"\b(delivers|provides|completes|supports)\b", text, re.IGNORECASE):
            deps.append(Dependency("external_factor", "Relies on external partners or vendors", "low"))

        for m in re.finditer(r"\b(if|when|once|assuming|provided that|contingent on)\b[^.!?]*", text, re.IGNORECASE):
            clause = m.group(0)
            if not any(d.type in clause.lower() for d in deps):
                deps.append(Dependency(
                    "external_factor", f"Conditional dependency: {clause.strip()[:80]}", "low"
                ))
        return deps


def fill_placeholders(template: str, original_text: str, context: Optional[UserContext] = None) -> str:
    context = context or UserContext()
    match = _ACTIVITY_PHRASE.search(original_text or "")
    activity = match.group(0) if match else "this initiative"
    return (
        template
        .replace("{activity}", activity)
        .replace("{industry}", context.industry or "your industry")
        .replace("{function}", context.function or "your role")
    )
