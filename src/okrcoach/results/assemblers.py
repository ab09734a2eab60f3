# results/assemblers.py
"""Turn scores and findings into JSON-ready report records."""

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from okrcoach.domain.models import ObjectiveScope, QualityLevel
from okrcoach.patterns.models import DetectionResult, ReframingSuggestion
from okrcoach.scoring.models import OKRAssessment


def finding_rows(detection: DetectionResult) -> List[Dict[str, Any]]:
    """Compact per-pattern rows, most confident first."""
    rows = [
        {
            "type": f.type.value,
            "confidence": round(f.confidence, 3),
            "severity": f.severity.value,
            "evidence": list(f.evidence),
        }
        for f in detection.patterns
    ]
    return sorted(rows, key=lambda r: -r["confidence"])


def okr_record(
    record_id: str,
    assessment: OKRAssessment,
    scope: ObjectiveScope,
    objective_detection: DetectionResult,
    key_result_detections: Sequence[DetectionResult],
    reframing: Optional[ReframingSuggestion] = None,
) -> Dict[str, Any]:
    """
    One report entry for a scored OKR set.

    Keys: id, scope, objective{text, score, anti_patterns, reframing},
    key_results[{text, score, anti_patterns}], overall.
    """
    key_results = [
        {
            "text": text,
            "score": score.as_dict(),
            "anti_patterns": finding_rows(detection),
        }
        for text, score, detection in zip(
            assessment.key_result_texts, assessment.key_results, key_result_detections
        )
    ]
    return {
        "id": record_id,
        "status": "scored",
        "scope": scope.value,
        "objective": {
            "text": assessment.objective_text,
            "score": assessment.objective.as_dict(),
            "anti_patterns": finding_rows(objective_detection),
            "reframing": reframing.as_dict() if reframing else None,
        },
        "key_results": key_results,
        "overall": assessment.overall.as_dict(),
    }


def failed_record(record_id: str, error: str) -> Dict[str, Any]:
    return {"id": record_id, "status": "failed", "error": error}


def summarize(records: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Aggregate statistics over scored records; failed ones are only counted."""
    records = list(records)
    scored = [r for r in records if r.get("status") == "scored"]
    overall = np.array([r["overall"]["score"] for r in scored], dtype=float)
    objective = np.array([r["objective"]["score"]["overall"] for r in scored], dtype=float)
    kr_scores = np.array(
        [kr["score"]["overall"] for r in scored for kr in r["key_results"]], dtype=float
    )

    levels = Counter(r["overall"]["level"] for r in scored)
    patterns = Counter(
        row["type"] for r in scored for row in r["objective"]["anti_patterns"]
    )

    def _stats(values: np.ndarray) -> Optional[Dict[str, float]]:
        if values.size == 0:
            return None
        return {
            "mean": round(float(np.mean(values)), 2),
            "median": round(float(np.median(values)), 2),
            "std": round(float(np.std(values)), 2),
            "min": float(np.min(values)),
            "max": float(np.max(values)),
        }

    return {
        "count": len(records),
        "scored": len(scored),
        "failed": len(records) - len(scored),
        "overall": _stats(overall),
        "objective": _stats(objective),
        "key_results": _stats(kr_scores),
        "level_distribution": {lvl.value: levels.get(lvl.value, 0) for lvl in QualityLevel},
        "objective_anti_patterns": dict(sorted(patterns.items())),
    }
