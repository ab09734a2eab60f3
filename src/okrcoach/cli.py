"""Command line interface for the OKR coaching engine."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from okrcoach.config.integration import build_engine
from okrcoach.config.loader import configure_from_cli
from okrcoach.config.settings import CacheBackend, set_settings
from okrcoach.domain.exceptions import (
    ConfigurationError,
    InputFileNotFoundError,
    InvalidFileFormatError,
    OkrCoachError,
)
from okrcoach.domain.models import ObjectiveScope, SessionSnapshot, UserContext, UserProfile
from okrcoach.runners.batch import BatchScoringRunner
from okrcoach.utils.logging import setup_logging


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every sub-command."""
    common = argparse.ArgumentParser(add_help=False)

    cache_group = common.add_argument_group("Cache Options")
    cache_group.add_argument(
        "--cache-backend",
        choices=[b.value for b in CacheBackend],
        help="Score cache backend (default: memory).",
    )
    cache_group.add_argument(
        "-p",
        "--cache-path",
        help="Path to the SQLite score cache. If omitted, a default is chosen.",
    )
    cache_group.add_argument(
        "--cache-ttl",
        type=float,
        metavar="SECONDS",
        help="Seconds a cached score stays valid (default: 600).",
    )
    cache_group.add_argument(
        "-f",
        "--fresh-cache",
        action="store_true",
        help="Start from an empty SQLite cache (deletes an existing one).",
    )

    phase_group = common.add_argument_group("Phase Options")
    phase_group.add_argument(
        "--timeout-turns",
        type=int,
        metavar="N",
        help="Force progression after N turns in any phase (default: never).",
    )

    debug_group = common.add_argument_group("Debug Options")
    debug_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with verbose logging.",
    )
    debug_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and inputs without scoring.",
    )
    debug_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write logs to this file instead of ./logs.",
    )
    return common


def _context_options() -> argparse.ArgumentParser:
    ctx = argparse.ArgumentParser(add_help=False)
    group = ctx.add_argument_group("Context Options")
    group.add_argument("--industry", help="Industry, e.g. technology, healthcare.")
    group.add_argument("--function", help="Business function or role, e.g. sales, marketing.")
    group.add_argument("--timeframe", help="OKR timeframe, e.g. quarterly.")
    group.add_argument("--team-size", type=int, metavar="N", help="Number of people on the team.")
    group.add_argument(
        "--cross-functional",
        action="store_true",
        help="The objective needs several departments.",
    )
    return ctx


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the okrcoach CLI."""
    parser = argparse.ArgumentParser(
        prog="okrcoach",
        description="Score OKRs, detect goal-setting anti-patterns and gate coaching phases.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)
    common = _common_options()
    ctx = _context_options()

    obj_p = sub.add_parser("score-objective", parents=[common, ctx], help="Score one objective")
    obj_p.add_argument("text", help="Objective statement")
    obj_p.add_argument(
        "--scope",
        choices=[s.value for s in ObjectiveScope],
        help="Organisational scope (detected from the text when omitted).",
    )

    kr_p = sub.add_parser("score-kr", parents=[common, ctx], help="Score one key result")
    kr_p.add_argument("text", help="Key result statement")

    det_p = sub.add_parser("detect", parents=[common, ctx], help="Detect anti-patterns in a statement")
    det_p.add_argument("text", help="Objective or key result statement")
    det_p.add_argument("--reframe", action="store_true", help="Also produce a reframing suggestion.")
    det_p.add_argument(
        "--style",
        choices=["direct", "collaborative", "analytical", "supportive"],
        default="collaborative",
        help="Communication style used to phrase the reframing.",
    )
    det_p.add_argument(
        "--experience",
        choices=["novice", "intermediate", "experienced"],
        default="intermediate",
        help="User experience level.",
    )
    det_p.add_argument("--attempts", type=int, default=0, help="Reframing attempts already made.")

    tr_p = sub.add_parser("transition", parents=[common], help="Validate a phase transition")
    tr_p.add_argument("from_phase", help="Current phase")
    tr_p.add_argument("to_phase", help="Proposed phase")
    tr_p.add_argument("-s", "--session", help="Session snapshot JSON file.")

    rd_p = sub.add_parser("readiness", parents=[common], help="Evaluate phase readiness for a session")
    rd_p.add_argument("-s", "--session", required=True, help="Session snapshot JSON file.")
    rd_p.add_argument("--ai-text", default="", help="Latest coaching message.")

    batch_p = sub.add_parser("batch", parents=[common], help="Score a JSON file of OKR sets")
    batch_p.add_argument("-i", "--input", required=True, help="JSON file with a list of OKR sets.")
    batch_p.add_argument("-o", "--output", help="Where to write the JSON report.")
    batch_p.add_argument("--chunk-size", type=int, metavar="N", help="OKR sets per chunk (default: 200).")
    batch_p.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")

    return parser


def _context_from(args) -> UserContext:
    return UserContext(
        industry=args.industry,
        function=args.function,
        timeframe=args.timeframe,
        team_size=args.team_size,
        requires_cross_functional=args.cross_functional,
    )


def _load_session(path: Optional[str]) -> SessionSnapshot:
    if not path:
        return SessionSnapshot()
    p = Path(path)
    if not p.is_file():
        raise InputFileNotFoundError(str(p))
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidFileFormatError(
            f"Could not parse session file {p}: {e}", file_path=str(p), expected_format="JSON"
        ) from e
    if not isinstance(data, dict):
        raise InvalidFileFormatError(
            f"Session file {p} must contain a JSON object", file_path=str(p), expected_format="JSON"
        )
    return SessionSnapshot.from_dict(data)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_command(args, settings, logger) -> int:
    """Dispatch one parsed sub-command. Returns the exit code."""
    engine = build_engine(settings)
    try:
        if args.cmd == "score-objective":
            context = _context_from(args)
            scope = (
                ObjectiveScope.parse(args.scope)
                if args.scope
                else engine.controller.detect_objective_scope(args.text, context)
            )
            score = engine.scorer.score_objective(args.text, context, scope)
            _emit({"scope": scope.value, **score.as_dict()})

        elif args.cmd == "score-kr":
            _emit(engine.scorer.score_key_result(args.text, _context_from(args)).as_dict())

        elif args.cmd == "detect":
            context = _context_from(args)
            detection = engine.detector.detect_patterns(args.text, context)
            payload = detection.as_dict()
            if args.reframe:
                profile = UserProfile(
                    communication_style=args.style,
                    experience_level=args.experience,
                    previous_attempts=args.attempts,
                )
                suggestion = engine.detector.generate_reframing_response(
                    detection, args.text, profile, context
                )
                payload["reframing"] = suggestion.as_dict() if suggestion else None
            _emit(payload)

        elif args.cmd == "transition":
            session = _load_session(args.session)
            scores = engine.score_session(session)
            result = engine.validator.validate_transition(args.from_phase, args.to_phase, session, scores)
            _emit(result.as_dict())

        elif args.cmd == "readiness":
            session = _load_session(args.session)
            _emit(engine.assess_turn(session, args.ai_text).as_dict())

        elif args.cmd == "batch":
            runner = BatchScoringRunner(
                engine,
                chunk_size=settings.processing.chunk_size,
                show_progress=settings.processing.show_progress,
            )
            result = runner.run(settings.input_path, settings.output_path, dry_run=settings.dry_run)
            if not settings.output_path:
                _emit(result.as_dict())
            logger.info("Scored %d of %d OKR sets", result.n_scored, result.n_inputs)

        else:
            logger.error("Unknown command: %s", args.cmd)
            return 2
    finally:
        engine.close()
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the okrcoach CLI."""
    args = build_parser().parse_args(argv)
    debug = bool(getattr(args, "debug", False))

    try:
        settings = configure_from_cli(args)
        set_settings(settings)

        logger, _ = setup_logging(
            log_file=settings.logging.file_path,
            console=settings.logging.console_output,
            level="DEBUG" if settings.debug_mode else "WARNING",
        )

        if settings.debug_mode:
            logger.debug("Configuration details:")
            for section, values in settings.to_dict().items():
                logger.debug("  %s: %s", section, values)

        if settings.dry_run and args.cmd != "batch":
            logger.warning("DRY RUN MODE - configuration validated successfully")
            sys.exit(0)

        sys.exit(run_command(args, settings, logger))

    except ConfigurationError as e:
        logging.error("Configuration error: %s", e.message)
        if getattr(e, "suggestions", None):
            logging.error("Suggestions:")
            for suggestion in e.suggestions:
                logging.error("  - %s", suggestion)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)

    except OkrCoachError as e:
        logging.error("%s failed: %s", args.cmd, e)
        sys.exit(1)

    except Exception as e:
        logging.error("%s failed: %s", args.cmd, e)
        if debug:
            logging.exception("Full traceback:")
        sys.exit(1)


if __name__ == "__main__":
    main()
