import pytest

from okrcoach.scoring.models import level_for_score
from okrcoach.scoring.okr_set import (
    is_lagging_indicator,
    is_leading_indicator,
    score_achievability,
    score_balance,
    score_coherence,
    score_completeness,
)

OBJECTIVE = (
    "Increase monthly recurring revenue by 35% through improved customer retention "
    "and new customer acquisition"
)
KEY_RESULTS = [
    "Reduce monthly customer churn from 6% to 3%",
    "Grow net revenue retention from 98% to 110%",
    "Run 40 customer success training sessions",
]


class TestCompleteness:

    @pytest.mark.parametrize("count,expected", [
        (0, 20), (1, 60), (2, 80), (3, 100), (5, 100), (6, 80), (7, 60), (9, 20),
    ])
    def test_count_bands(self, count, expected):
        assert score_completeness(["kr"] * count) == expected


class TestBalance:

    def test_indicator_detection(self):
        assert is_leading_indicator("Run 40 training sessions")
        assert is_lagging_indicator("Raise customer satisfaction score to 4.5")
        assert not is_leading_indicator("Raise NPS to 50")

    def test_mixed_set_is_balanced(self):
        assert score_balance(["Run 40 training sessions", "Lift revenue to $2M"]) == 100

    def test_one_sided_set(self):
        assert score_balance(["Lift revenue to $2M", "Raise customer count to 500"]) == 70

    def test_no_indicators(self):
        assert score_balance(["Ship v2", "Hire two engineers"]) == 30


class TestCoherence:

    def test_shared_vocabulary_raises_score(self):
        assert score_coherence("Increase revenue", ["Grow revenue by 10%"]) == 55

    def test_unrelated_key_result_lowers_score(self):
        assert score_coherence("Increase revenue", ["Hire two engineers"]) == 40

    def test_no_key_results(self):
        assert score_coherence("Increase revenue", []) == 50


class TestAchievability:

    @pytest.mark.parametrize("ambition,challenges,expected", [
        (70, [70, 70], 100),
        (100, [70], 80),
        (40, [60, 60], 80),
        (100, [100], 60),
        (0, [], 60),
    ])
    def test_bands(self, ambition, challenges, expected):
        assert score_achievability(ambition, challenges) == expected


class TestScoreOkrSet:

    def test_assessment_covers_every_key_result(self, scorer):
        assessment = scorer.score_okr_set(OBJECTIVE, KEY_RESULTS)
        assert assessment.objective_text == OBJECTIVE
        assert assessment.key_result_texts == tuple(KEY_RESULTS)
        assert len(assessment.key_results) == 3
        assert assessment.overall.completeness == 100

    def test_overall_in_range_and_levelled(self, scorer):
        overall = scorer.score_okr_set(OBJECTIVE, KEY_RESULTS).overall
        assert 0 <= overall.score <= 100
        assert overall.level is level_for_score(overall.score)
        for part in (overall.coherence, overall.completeness, overall.balance, overall.achievability):
            assert 0 <= part <= 100

    def test_missing_key_results(self, scorer):
        assessment = scorer.score_okr_set(OBJECTIVE, [])
        assert assessment.key_results == ()
        assert assessment.overall.completeness == 20

    def test_quality_scores_view(self, scorer):
        scores = scorer.score_okr_set(OBJECTIVE, KEY_RESULTS).quality_scores()
        assert scores.objective is not None
        assert scores.mean_key_result_score is not None
