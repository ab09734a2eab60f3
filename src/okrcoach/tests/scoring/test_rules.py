import pytest

from okrcoach.domain.models import QualityLevel
from okrcoach.scoring.models import QualityScores, level_for_score
from okrcoach.scoring.rules import (
    Dimension,
    RuleContext,
    bonus,
    clamp_score,
    count_words_containing,
    round_half_up,
    scaled,
    when,
    whole_word_matches,
    word_count,
)


class TestNumericHelpers:

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (36.3, 36), (95.49, 95), (95.5, 96), (0.0, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize("value,expected", [(-12, 0), (0, 0), (57.9, 57), (100, 100), (140, 100)])
    def test_clamp_score(self, value, expected):
        assert clamp_score(value) == expected

    def test_word_count_of_empty_string_is_one(self):
        """Splitting on whitespace always yields at least one token."""
        assert word_count("") == 1
        assert word_count("grow revenue fast") == 3

    def test_count_words_containing_matches_substrings(self):
        assert count_words_containing("Launching and implemented", ("launch", "implement")) == 2

    def test_whole_word_matches(self):
        assert whole_word_matches("Grow Revenue", ("revenue", "rev")) == ["revenue"]


class TestLevels:

    @pytest.mark.parametrize("score,level", [
        (100, QualityLevel.EXCELLENT),
        (90, QualityLevel.EXCELLENT),
        (89, QualityLevel.GOOD),
        (75, QualityLevel.GOOD),
        (74, QualityLevel.ACCEPTABLE),
        (60, QualityLevel.ACCEPTABLE),
        (59, QualityLevel.NEEDS_WORK),
        (40, QualityLevel.NEEDS_WORK),
        (39, QualityLevel.POOR),
        (0, QualityLevel.POOR),
    ])
    def test_level_boundaries(self, score, level):
        assert level_for_score(score) is level


class TestDimension:

    def _dimension(self, gate=None):
        return Dimension(
            name="demo",
            baseline=50,
            gate=gate,
            rules=(
                bonus("numbers", r"\d", 30),
                bonus("penalty", r"bad", -80, unless=r"not bad"),
                when("long", lambda t, c: len(t) > 20, 5),
                scaled("per_word", lambda t, c: 0),
            ),
        )

    def test_contributions_sum_to_score(self):
        result = self._dimension().evaluate("3 things", RuleContext())
        assert result.baseline == 50
        assert result.contributions == {"numbers": 30.0}
        assert result.score == 80

    def test_unless_suppresses_rule(self):
        result = self._dimension().evaluate("not bad at all", RuleContext())
        assert "penalty" not in result.contributions
        assert result.score == 50

    def test_score_is_clamped(self):
        result = self._dimension().evaluate("bad", RuleContext())
        assert result.contributions == {"penalty": -80.0}
        assert result.score == 0

    def test_gate_short_circuits(self):
        result = self._dimension(gate=lambda t: False).evaluate("3 things", RuleContext())
        assert result.score == 0
        assert result.contributions == {}

    def test_callable_baseline(self):
        dim = Dimension(name="d", baseline=lambda t, c: 70 if t else 10, rules=())
        assert dim.evaluate("x", RuleContext()).score == 70
        assert dim.evaluate("", RuleContext()).score == 10

    def test_rule_lookup(self):
        dim = self._dimension()
        assert dim.rule("long").name == "long"
        with pytest.raises(KeyError):
            dim.rule("missing")


class TestQualityScores:

    def test_mean_key_result_score_empty(self):
        assert QualityScores().mean_key_result_score is None

    def test_mean_key_result_score(self, make_scores):
        assert make_scores(key_results=(59, 60)).mean_key_result_score == pytest.approx(59.5)

    def test_as_dict_with_missing_parts(self, make_scores):
        data = make_scores(objective=80).as_dict()
        assert data["objective"]["overall"] == 80
        assert data["key_results"] == []
        assert data["overall"] is None
