"""Batch scoring of OKR sets read from a JSON file."""

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import psutil
from tqdm import tqdm

from okrcoach.config.integration import CoachingEngine
from okrcoach.domain.exceptions import (
    BatchProcessingError,
    InputFileNotFoundError,
    InvalidFileFormatError,
    OkrCoachError,
    ProcessingError,
)
from okrcoach.domain.models import ObjectiveScope, UserContext
from okrcoach.results import assemblers
from okrcoach.utils.itertools import chunked
from okrcoach.utils.timing import section_timer

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("okrcoach.summary")


@dataclass
class BatchResult:
    """Outcome of a batch run."""
    n_inputs: int
    n_scored: int
    n_failed: int
    records: List[Dict[str, Any]] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    output_path: Optional[str] = None
    processing_time: float = 0.0
    peak_rss_mb: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "records": self.records,
            "run": {
                "n_inputs": self.n_inputs,
                "n_scored": self.n_scored,
                "n_failed": self.n_failed,
                "processing_time": round(self.processing_time, 3),
                "peak_rss_mb": round(self.peak_rss_mb, 1),
            },
        }


def load_okr_sets(path: Union[str, Path]) -> List[Any]:
    """Read a JSON list of OKR sets, or an object with an ``okrs`` list."""
    p = Path(path)
    if not p.is_file():
        raise InputFileNotFoundError(str(p))
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidFileFormatError(
            f"Could not parse {p}: {e}", file_path=str(p), expected_format="JSON"
        ) from e

    if isinstance(data, Mapping):
        data = data.get("okrs")
    if not isinstance(data, list):
        raise InvalidFileFormatError(
            f"{p} must contain a list of OKR sets (or an object with an 'okrs' list)",
            file_path=str(p),
            expected_format="JSON",
        )
    return data


class BatchScoringRunner:
    """Scores every OKR set in a file and writes a JSON report."""

    def __init__(self, engine: CoachingEngine, chunk_size: int = 200, show_progress: bool = True):
        self.engine = engine
        self.chunk_size = chunk_size
        self.show_progress = show_progress
        self.process = psutil.Process(os.getpid())
        self.peak_rss_mb = 0.0

    def run(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        dry_run: bool = False,
    ) -> BatchResult:
        start = time.perf_counter()
        with section_timer("load_okr_sets", logger, logging.DEBUG):
            items = load_okr_sets(input_path)
        logger.info("Loaded %d OKR sets from %s", len(items), input_path)

        if dry_run:
            logger.info("Dry run: input validated, nothing scored")
            return BatchResult(n_inputs=len(items), n_scored=0, n_failed=0)

        try:
            records = self.score_items(items)
        except OkrCoachError:
            raise
        except Exception as e:
            raise ProcessingError(
                f"Unexpected batch scoring error: {e}", stage="batch_scoring"
            ).add_context('input_path', str(input_path)) from e

        summary = assemblers.summarize(records)
        result = BatchResult(
            n_inputs=len(items),
            n_scored=summary["scored"],
            n_failed=summary["failed"],
            records=records,
            summary=summary,
            processing_time=time.perf_counter() - start,
            peak_rss_mb=self.peak_rss_mb,
        )
        result.summary["peak_rss_mb"] = round(self.peak_rss_mb, 1)

        if items and result.n_scored == 0:
            raise BatchProcessingError(
                f"No OKR set in {input_path} could be scored",
                batch_size=len(items),
                failed_count=result.n_failed,
            )

        if output_path:
            self.write_report(result, output_path)
            result.output_path = str(output_path)

        self._log_summary(result)
        return result

    def score_items(self, items: List[Any]) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []
        pbar = tqdm(
            total=len(items),
            desc="Scoring OKRs",
            unit="okr",
            disable=not self.show_progress,
            leave=False,
        )
        try:
            for i, batch in enumerate(chunked(items, self.chunk_size)):
                offset = i * self.chunk_size
                for j, item in enumerate(batch):
                    records.append(self.score_item(item, index=offset + j))
                    pbar.update(1)
                self._memory_report(f"after chunk {i + 1}")
        finally:
            pbar.close()
        return records

    def score_item(self, item: Any, index: int = 0) -> Dict[str, Any]:
        """Score one OKR set; malformed entries become failed records."""
        if not isinstance(item, Mapping):
            return assemblers.failed_record(str(index), "OKR set must be a JSON object")
        record_id = str(item.get("id", index))
        objective = item.get("objective")
        if not isinstance(objective, str) or not objective.strip():
            return assemblers.failed_record(record_id, "Missing objective text")
        key_results = item.get("key_results") or []
        if not isinstance(key_results, list) or not all(isinstance(kr, str) for kr in key_results):
            return assemblers.failed_record(record_id, "key_results must be a list of strings")

        context = UserContext.from_dict(item.get("context"))
        if item.get("scope"):
            scope = ObjectiveScope.parse(item["scope"], default=ObjectiveScope.TEAM)
        else:
            scope = self.engine.controller.detect_objective_scope(objective, context)

        assessment = self.engine.scorer.score_okr_set(objective, key_results, context, scope)
        detector = self.engine.detector
        objective_detection = detector.detect_patterns(objective, context)
        kr_detections = [detector.detect_patterns(kr, context) for kr in key_results]
        reframing = detector.generate_reframing_response(objective_detection, objective, context=context)
        return assemblers.okr_record(
            record_id, assessment, scope, objective_detection, kr_detections, reframing
        )

    @staticmethod
    def write_report(result: BatchResult, output_path: Union[str, Path]) -> None:
        p = Path(output_path)
        tmp = p.with_name(p.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(result.as_dict(), fh, indent=2, ensure_ascii=False)
        tmp.replace(p)
        logger.info("Report written to %s", p)

    def _memory_report(self, label: str) -> None:
        try:
            rss = self.process.memory_info().rss / 1e6  # MB
        except psutil.Error as e:
            logger.debug("[mem] Could not get memory info: %s", e)
            return
        self.peak_rss_mb = max(self.peak_rss_mb, rss)
        logger.debug("[mem] %s RSS=%.1fMB", label, rss)

    def _log_summary(self, result: BatchResult) -> None:
        summary_logger.info("=" * 60)
        summary_logger.info("BATCH SCORING SUMMARY")
        summary_logger.info("=" * 60)
        summary_logger.info("OKR sets read:       %d", result.n_inputs)
        summary_logger.info("OKR sets scored:     %d", result.n_scored)
        summary_logger.info("OKR sets failed:     %d", result.n_failed)
        overall = result.summary.get("overall")
        if overall:
            summary_logger.info("Mean overall score:  %.1f (median %.1f)", overall["mean"], overall["median"])
        for level, count in result.summary.get("level_distribution", {}).items():
            if count:
                summary_logger.info("  %-12s %d", level, count)
        summary_logger.info("Processing time:     %.2fs", result.processing_time)
        summary_logger.info("Peak memory:         %.1fMB", result.peak_rss_mb)
