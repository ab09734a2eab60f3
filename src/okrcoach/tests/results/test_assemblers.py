import pytest

from okrcoach.domain.models import ObjectiveScope
from okrcoach.patterns import AntiPatternDetector
from okrcoach.results import assemblers
from okrcoach.scoring import QualityScorer

ACTIVITY = "Launch 5 marketing campaigns and implement new CRM system"


def scored(record_id, overall, objective, key_results=(), level="good", patterns=()):
    return {
        "id": record_id,
        "status": "scored",
        "objective": {
            "score": {"overall": objective},
            "anti_patterns": [{"type": p} for p in patterns],
        },
        "key_results": [{"score": {"overall": kr}} for kr in key_results],
        "overall": {"score": overall, "level": level},
    }


def test_finding_rows_sorted_by_confidence():
    detection = AntiPatternDetector().detect_patterns(ACTIVITY)

    rows = assemblers.finding_rows(detection)

    assert rows[0]["type"] == "activity_focused"
    assert rows[0]["severity"] == "high"
    confidences = [r["confidence"] for r in rows]
    assert confidences == sorted(confidences, reverse=True)
    assert set(rows[0]) == {"type", "confidence", "severity", "evidence"}


def test_okr_record_shape():
    detector = AntiPatternDetector()
    assessment = QualityScorer().score_okr_set(
        ACTIVITY, ["Increase uptime to 99%"], scope=ObjectiveScope.TEAM
    )
    detection = detector.detect_patterns(ACTIVITY)
    kr_detections = [detector.detect_patterns("Increase uptime to 99%")]
    reframing = detector.generate_reframing_response(detection, ACTIVITY)

    record = assemblers.okr_record("x1", assessment, ObjectiveScope.TEAM, detection, kr_detections, reframing)

    assert record["id"] == "x1"
    assert record["status"] == "scored"
    assert record["scope"] == "team"
    assert record["objective"]["text"] == ACTIVITY
    assert record["objective"]["score"]["overall"] == 36
    assert record["objective"]["reframing"]["pattern_type"] == "activity_focused"
    assert record["key_results"][0]["text"] == "Increase uptime to 99%"
    assert set(record["overall"]) == {"score", "coherence", "completeness", "balance", "achievability", "level"}


def test_failed_record():
    assert assemblers.failed_record("7", "bad") == {"id": "7", "status": "failed", "error": "bad"}


def test_summarize_empty():
    summary = assemblers.summarize([])
    assert summary["count"] == 0
    assert summary["overall"] is None
    assert summary["key_results"] is None
    assert summary["level_distribution"] == {
        "excellent": 0, "good": 0, "acceptable": 0, "needs_work": 0, "poor": 0,
    }
    assert summary["objective_anti_patterns"] == {}


def test_summarize_statistics():
    records = [
        scored("a", 80, 90, key_results=(70, 50), level="good", patterns=("vague_outcome",)),
        scored("b", 40, 30, key_results=(20,), level="needs_work",
               patterns=("activity_focused", "vague_outcome")),
        assemblers.failed_record("c", "Missing objective text"),
    ]

    summary = assemblers.summarize(records)

    assert (summary["count"], summary["scored"], summary["failed"]) == (3, 2, 1)
    assert summary["overall"]["mean"] == pytest.approx(60.0)
    assert summary["overall"]["median"] == pytest.approx(60.0)
    assert summary["overall"]["std"] == pytest.approx(20.0)
    assert summary["objective"]["min"] == 30.0
    assert summary["key_results"]["mean"] == pytest.approx(46.67)
    assert summary["level_distribution"]["good"] == 1
    assert summary["level_distribution"]["needs_work"] == 1
    assert summary["objective_anti_patterns"] == {"activity_focused": 1, "vague_outcome": 2}
    assert list(summary["objective_anti_patterns"]) == ["activity_focused", "vague_outcome"]
