import time

import pytest

from okrcoach.domain.models import UserContext, UserProfile
from okrcoach.patterns import (
    AntiPatternDetector,
    AntiPatternType,
    InterventionType,
    Severity,
    Technique,
    fill_placeholders,
    text_quality_score,
)
from okrcoach.patterns.catalog import PATTERNS, PATTERNS_BY_TYPE, goal_clause_count
from okrcoach.patterns.strategies import EXAMPLE_DRIVEN_QUESTION, FIVE_WHYS

ACTIVITY = "Launch 5 marketing campaigns and implement new CRM system"
KITCHEN_SINK = (
    "Increase revenue by 20%, improve retention by 10%, reduce churn by 5%, "
    "grow the user base by 30% and boost NPS by 15 points"
)
PRECISE = [
    "Grow monthly recurring revenue from $1.2M to $1.8M by Q4",
    "Reduce average support ticket resolution time from 48 hours to 12 hours",
    "Increase trial-to-paid conversion rate from 8% to 15%",
    "Increase daily active users by 40%",
    "Double monthly active customers from 20000 to 40000 by Q4",
]
STRATEGIC = [
    "Dominate the enterprise market",
    "Accelerate enterprise revenue growth",
]
SPRAWLING = (
    "Increase revenue, improve customer satisfaction, reduce costs, launch new products, "
    "optimize operations, and enhance team performance"
)


def confidence_of(detector, text, pattern_type):
    finding = detector.pattern_confidence(text, PATTERNS_BY_TYPE[pattern_type])
    return finding.confidence


class TestCatalog:

    def test_six_patterns_in_order(self):
        assert [p.type for p in PATTERNS] == list(AntiPatternType)

    def test_severities(self):
        assert PATTERNS_BY_TYPE[AntiPatternType.ACTIVITY_FOCUSED].severity is Severity.HIGH
        assert PATTERNS_BY_TYPE[AntiPatternType.BINARY_THINKING].severity is Severity.HIGH
        assert PATTERNS_BY_TYPE[AntiPatternType.VANITY_METRICS].severity is Severity.MEDIUM
        assert PATTERNS_BY_TYPE[AntiPatternType.BUSINESS_AS_USUAL].severity is Severity.MEDIUM
        assert PATTERNS_BY_TYPE[AntiPatternType.KITCHEN_SINK].severity is Severity.LOW
        assert PATTERNS_BY_TYPE[AntiPatternType.VAGUE_OUTCOME].severity is Severity.MEDIUM

    def test_goal_clause_count(self):
        assert goal_clause_count(KITCHEN_SINK) == 5


class TestConfidence:
    """Confidence blends regex hits, keywords, context and severity."""

    def test_activity_objective(self, detector):
        assert confidence_of(detector, ACTIVITY, AntiPatternType.ACTIVITY_FOCUSED) == pytest.approx(1.0)

    def test_binary_without_context(self, detector):
        """Two completion verbs, numbers present: 0.5 base plus the HIGH boost."""
        finding = detector.pattern_confidence(ACTIVITY, PATTERNS_BY_TYPE[AntiPatternType.BINARY_THINKING])
        assert finding.evidence == {"regex_hits": 2, "keyword_hits": 0, "context_rule": 0}
        assert finding.confidence == pytest.approx(0.6)

    def test_go_live_is_completion_language(self, detector):
        finding = detector.pattern_confidence(
            "The new portal is live", PATTERNS_BY_TYPE[AntiPatternType.BINARY_THINKING]
        )
        assert finding.evidence == {"regex_hits": 1, "keyword_hits": 0, "context_rule": 0}
        assert finding.confidence == pytest.approx(0.35)

    @pytest.mark.parametrize("text", ["Increase daily active users by 40%", "Be ready in time"])
    def test_active_and_ready_alone_are_not_completion(self, detector, text):
        finding = detector.pattern_confidence(text, PATTERNS_BY_TYPE[AntiPatternType.BINARY_THINKING])
        assert finding.evidence["regex_hits"] == 0
        assert finding.evidence["keyword_hits"] == 0

    def test_vague_outcome(self, detector):
        finding = detector.pattern_confidence(
            "Improve customer satisfaction", PATTERNS_BY_TYPE[AntiPatternType.VAGUE_OUTCOME]
        )
        assert finding.evidence == {"regex_hits": 1, "keyword_hits": 0, "context_rule": 1}
        assert finding.confidence == pytest.approx(0.7)

    def test_context_alone_is_not_evidence(self, detector):
        """The context rule holds for empty text but there is nothing to boost."""
        assert confidence_of(detector, "", AntiPatternType.VAGUE_OUTCOME) == pytest.approx(0.05)

    def test_capped_at_one(self, detector):
        text = "Reach 10,000 Instagram followers and likes and views and downloads and clicks"
        assert confidence_of(detector, text, AntiPatternType.VANITY_METRICS) == pytest.approx(1.0)


class TestDetectPatterns:

    def test_activity_objective_findings(self, detector):
        result = detector.detect_patterns(ACTIVITY)
        types = [p.type for p in result.patterns]
        assert AntiPatternType.ACTIVITY_FOCUSED in types
        assert AntiPatternType.BINARY_THINKING in types
        assert result.severity is Severity.HIGH
        assert InterventionType.ACTIVITY_TO_OUTCOME in result.suggested_interventions

    @pytest.mark.parametrize("text,pattern_type", [
        ("Reach 10,000 Instagram followers", AntiPatternType.VANITY_METRICS),
        ("Maintain current customer satisfaction levels", AntiPatternType.BUSINESS_AS_USUAL),
        ("Improve customer satisfaction", AntiPatternType.VAGUE_OUTCOME),
        (KITCHEN_SINK, AntiPatternType.KITCHEN_SINK),
        (SPRAWLING, AntiPatternType.KITCHEN_SINK),
        (ACTIVITY, AntiPatternType.ACTIVITY_FOCUSED),
    ])
    def test_recall(self, detector, text, pattern_type):
        finding = detector.detect_patterns(text).finding(pattern_type)
        assert finding is not None
        assert finding.confidence >= 0.5

    @pytest.mark.parametrize("text", PRECISE)
    def test_precision(self, detector, text):
        """Specific, measurable statements do not trip any detector."""
        for pattern in PATTERNS:
            assert detector.pattern_confidence(text, pattern).confidence <= 0.5
        assert not detector.detect_patterns(text).detected
        assert detector.generate_reframing_response(detector.detect_patterns(text), text) is None

    @pytest.mark.parametrize("text", STRATEGIC)
    def test_strategic_direction_is_not_flagged(self, detector, text):
        for pattern in PATTERNS:
            assert detector.pattern_confidence(text, pattern).confidence <= 0.5
        assert detector.generate_reframing_response(detector.detect_patterns(text), text) is None

    def test_long_input_is_bounded(self, detector):
        text = "improve " * 8000 + "done by the partner team if the market grows"
        start = time.perf_counter()
        result = detector.detect_patterns(text)
        text_quality_score(text)
        deps = AntiPatternDetector.extract_dependencies(text)
        assert time.perf_counter() - start < 5.0
        assert result.finding(AntiPatternType.VAGUE_OUTCOME) is not None
        assert deps == []

    def test_empty_text(self, detector):
        result = detector.detect_patterns("")
        assert not result.detected
        assert result.confidence == 0.0
        assert result.severity is Severity.LOW

    def test_none_text(self, detector):
        assert not detector.detect_patterns(None).detected

    def test_detection_threshold_filters(self):
        strict = AntiPatternDetector(detection_threshold=0.65)
        types = [p.type for p in strict.detect_patterns(ACTIVITY).patterns]
        assert types == [AntiPatternType.ACTIVITY_FOCUSED]

    def test_broken_pattern_is_skipped(self, detector, monkeypatch, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("bad regex")

        broken = PATTERNS_BY_TYPE[AntiPatternType.VANITY_METRICS]
        original = detector.pattern_confidence

        def patched(text, pattern, context=None):
            if pattern is broken:
                boom()
            return original(text, pattern, context)

        monkeypatch.setattr(detector, "pattern_confidence", patched)
        result = detector.detect_patterns("Reach 10,000 Instagram followers")
        assert result.finding(AntiPatternType.VANITY_METRICS) is None
        assert "Detector vanity_metrics failed" in caplog.text

    def test_as_dict(self, detector):
        data = detector.detect_patterns(ACTIVITY).as_dict()
        assert data["detected"] is True
        assert data["severity"] == "high"
        assert {p["type"] for p in data["patterns"]} >= {"activity_focused", "binary_thinking"}


class TestReframing:

    def test_primary_finding_prefers_severity_then_confidence(self, detector):
        primary = detector.primary_finding(detector.detect_patterns(ACTIVITY))
        assert primary.type is AntiPatternType.ACTIVITY_FOCUSED

    def test_nothing_activated_returns_none(self, detector):
        detection = detector.detect_patterns(PRECISE[0])
        assert detector.generate_reframing_response(detection, PRECISE[0]) is None

    def test_first_attempt_uses_strategy_question(self, detector):
        suggestion = detector.generate_reframing_response(detector.detect_patterns(ACTIVITY), ACTIVITY)
        assert suggestion.pattern_type is AntiPatternType.ACTIVITY_FOCUSED
        assert suggestion.technique is Technique.FIVE_WHYS
        assert suggestion.strategy_name == "Five Whys Technique"
        assert "Launch 5 marketing campaigns" in suggestion.question
        assert "{activity}" not in suggestion.question
        assert suggestion.confidence == 0.8
        assert suggestion.follow_up_questions

    def test_attempts_walk_the_question_list(self, detector):
        detection = detector.detect_patterns(ACTIVITY)
        suggestion = detector.generate_reframing_response(
            detection, ACTIVITY, UserProfile(previous_attempts=1)
        )
        assert suggestion.question.startswith("Why is ")
        assert suggestion.confidence == 0.7

    def test_exhausted_strategy_switches_to_examples(self, detector):
        detection = detector.detect_patterns(ACTIVITY)
        suggestion = detector.generate_reframing_response(
            detection, ACTIVITY, UserProfile(previous_attempts=FIVE_WHYS.max_attempts)
        )
        assert suggestion.technique is Technique.EXAMPLE_DRIVEN
        assert suggestion.question == EXAMPLE_DRIVEN_QUESTION
        assert suggestion.confidence == 0.4

    def test_resisted_pattern_switches_to_examples(self, detector):
        detection = detector.detect_patterns(ACTIVITY)
        profile = UserProfile(resistance_patterns=("activity_focused",))
        suggestion = detector.generate_reframing_response(detection, ACTIVITY, profile)
        assert suggestion.technique is Technique.EXAMPLE_DRIVEN
        assert "For example, instead of:" in suggestion.suggestion

    def test_supportive_style(self, detector):
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY), ACTIVITY, UserProfile(communication_style="supportive")
        )
        assert suggestion.suggestion.startswith("You're on the right track.")

    def test_direct_style_drops_explanation(self, detector):
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY), ACTIVITY, UserProfile(communication_style="direct")
        )
        example = FIVE_WHYS.examples[0]
        assert example.before in suggestion.suggestion
        assert example.explanation not in suggestion.suggestion

    def test_collaborative_style_keeps_explanation(self, detector):
        suggestion = detector.generate_reframing_response(detector.detect_patterns(ACTIVITY), ACTIVITY)
        assert FIVE_WHYS.examples[0].explanation in suggestion.suggestion

    def test_experienced_users_skip_examples(self, detector):
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY), ACTIVITY, UserProfile(experience_level="experienced")
        )
        assert "For example" not in suggestion.suggestion

    def test_analytical_style_adds_success_criteria(self, detector):
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY), ACTIVITY, UserProfile(communication_style="analytical")
        )
        assert f"What good looks like: {FIVE_WHYS.success_criteria[0]}" in suggestion.suggestion

    def test_industry_selects_examples(self, detector):
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY), ACTIVITY, context=UserContext(industry="sales")
        )
        assert [ex.before for ex in suggestion.examples] == ["Implement CRM system"]

    def test_non_text_industry_from_json_is_ignored(self, detector):
        context = UserContext.from_dict({"industry": 7, "function": {"name": "ops"}})
        suggestion = detector.generate_reframing_response(
            detector.detect_patterns(ACTIVITY, context), ACTIVITY, context=context
        )
        assert suggestion is not None
        assert len(suggestion.examples) == 2

    def test_as_dict(self, detector):
        data = detector.generate_reframing_response(detector.detect_patterns(ACTIVITY), ACTIVITY).as_dict()
        assert data["technique"] == "five_whys"
        assert data["pattern_type"] == "activity_focused"
        assert len(data["examples"]) == 2


class TestPlaceholders:

    def test_activity_phrase_extracted(self):
        text = fill_placeholders("Why is {activity} important?", "We will deploy the new billing flow.")
        assert text == "Why is deploy the new billing flow important?"

    def test_defaults(self):
        text = fill_placeholders("{activity} in {industry} for {function}", "Grow revenue")
        assert text == "this initiative in your industry for your role"

    def test_context_values(self):
        ctx = UserContext(industry="healthcare", function="operations")
        assert fill_placeholders("{industry}/{function}", "", ctx) == "healthcare/operations"


class TestReframingEvaluation:

    def test_text_quality_score(self):
        assert text_quality_score(ACTIVITY) == 49
        assert text_quality_score("Increase qualified pipeline by 30%") == 75
        assert text_quality_score("") == 50

    def test_successful_reframe(self, detector):
        evaluation = detector.evaluate_reframing_success(ACTIVITY, "Increase qualified pipeline by 30%")
        assert evaluation.success
        assert evaluation.before_score == 49
        assert evaluation.after_score == 75
        assert evaluation.intervention_type is InterventionType.ACTIVITY_TO_OUTCOME

    def test_unchanged_text_is_not_success(self, detector):
        evaluation = detector.evaluate_reframing_success(ACTIVITY, ACTIVITY)
        assert not evaluation.success


class TestDependencies:

    def _types(self, text):
        return [d.type for d in AntiPatternDetector.extract_dependencies(text)]

    def test_customer_behavior(self):
        assert "customer_behavior" in self._types("Grow usage once the customer adopts the new plan")

    def test_other_team(self):
        assert "other_team" in self._types("Ship onboarding, which requires the design team to deliver mockups")

    def test_market_dynamics(self):
        assert "market_dynamics" in self._types("Grow revenue if the market grows")

    def test_external_partner(self):
        assert "external_factor" in self._types("Launch in Spain once the vendor delivers the integration")

    def test_conditional_clause(self):
        deps = AntiPatternDetector.extract_dependencies("Hit 1,000 signups assuming budget is approved")
        assert [d.type for d in deps] == ["external_factor"]
        assert deps[0].description.startswith("Conditional dependency: assuming budget is approved")

    def test_self_contained_goal(self):
        assert self._types("Reduce p95 latency from 800ms to 300ms") == []
