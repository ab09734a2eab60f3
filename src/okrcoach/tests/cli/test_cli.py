import json
import logging
from unittest.mock import patch

import pytest

from okrcoach import cli
from okrcoach.config.settings import reset_settings

ACTIVITY = "Launch 5 marketing campaigns and implement new CRM system"
OUTCOME = (
    "Increase monthly recurring revenue by 35% through improved customer retention "
    "and new customer acquisition"
)


@pytest.fixture(autouse=True)
def quiet_cli(tmp_path, monkeypatch):
    """Run in a scratch directory without reconfiguring the okrcoach logger tree."""
    monkeypatch.chdir(tmp_path)
    loggers = (logging.getLogger("okrcoach"), logging.getLogger("okrcoach.summary"))
    with patch("okrcoach.cli.setup_logging", return_value=loggers) as setup:
        yield setup
    reset_settings()


def run_cli(*argv):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(list(argv) + ["--cache-backend", "none"])
    return exc_info.value.code


class TestParser:

    def test_subcommands(self):
        parser = cli.build_parser()
        args = parser.parse_args(["score-objective", "Grow revenue", "--scope", "team", "--industry", "retail"])
        assert args.cmd == "score-objective"
        assert args.scope == "team"
        assert args.industry == "retail"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_readiness_needs_session(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["readiness"])


class TestCommands:

    def test_score_objective(self, capsys):
        assert run_cli("score-objective", ACTIVITY, "--scope", "team") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["scope"] == "team"
        assert payload["overall"] == 36
        assert payload["dimensions"]["outcome_orientation"] == 0

    def test_score_objective_detects_scope(self, capsys):
        assert run_cli("score-objective", ACTIVITY) == 0
        assert json.loads(capsys.readouterr().out)["scope"] == "project"

    def test_score_kr(self, capsys):
        assert run_cli("score-kr", "Increase uptime to 99%") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["dimensions"]["quantification"] == 45

    def test_detect_with_reframe(self, capsys):
        assert run_cli("detect", ACTIVITY, "--reframe", "--style", "direct") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["reframing"]["pattern_type"] == "activity_focused"

    def test_transition_with_session(self, tmp_path, capsys):
        session = tmp_path / "session.json"
        session.write_text(json.dumps({"phase": "discovery", "objective": OUTCOME}), encoding="utf-8")
        assert run_cli("transition", "discovery", "refinement", "-s", str(session)) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is True

    def test_backward_transition_reported_not_failed(self, capsys):
        assert run_cli("transition", "validation", "discovery") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is False
        assert "backward_movement" in payload["error_kinds"]

    def test_readiness(self, tmp_path, capsys):
        session = tmp_path / "session.json"
        session.write_text(json.dumps({"objective": OUTCOME, "turn_count": 3}), encoding="utf-8")
        assert run_cli("readiness", "-s", str(session)) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["readiness"]["ready_to_transition"] is True
        assert payload["scope"] == "team"

    def test_batch_to_stdout(self, tmp_path, capsys):
        okrs = tmp_path / "okrs.json"
        okrs.write_text(json.dumps([{"id": "a", "objective": OUTCOME}]), encoding="utf-8")
        assert run_cli("batch", "-i", str(okrs), "--no-progress") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["run"]["n_scored"] == 1

    def test_batch_to_file(self, tmp_path, capsys):
        okrs = tmp_path / "okrs.json"
        okrs.write_text(json.dumps([{"id": "a", "objective": OUTCOME}]), encoding="utf-8")
        out = tmp_path / "report.json"
        assert run_cli("batch", "-i", str(okrs), "-o", str(out), "--no-progress") == 0
        assert capsys.readouterr().out == ""
        assert json.loads(out.read_text(encoding="utf-8"))["records"][0]["id"] == "a"


class TestFailures:

    def test_missing_batch_input(self, tmp_path, caplog):
        assert run_cli("batch", "-i", str(tmp_path / "missing.json")) == 1
        assert "Configuration error" in caplog.text

    def test_missing_session_file(self, tmp_path, caplog):
        assert run_cli("readiness", "-s", str(tmp_path / "missing.json")) == 1
        assert "readiness failed" in caplog.text

    def test_bad_phase_token_is_a_rejection(self, capsys):
        assert run_cli("transition", "discovery", "ideation") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is False
        assert payload["errors"] == ["Unknown phase 'ideation'"]
        assert payload["error_kinds"] == ["structural_precondition"]

    def test_bad_phase_in_session_file(self, tmp_path, caplog):
        session = tmp_path / "session.json"
        session.write_text(json.dumps({"phase": "ideation"}), encoding="utf-8")
        assert run_cli("readiness", "-s", str(session)) == 1
        assert "Unknown phase" in caplog.text

    def test_dry_run(self, capsys):
        assert run_cli("score-objective", ACTIVITY, "--dry-run") == 0
        assert capsys.readouterr().out == ""

    def test_unexpected_error(self, caplog):
        with patch("okrcoach.cli.run_command", side_effect=RuntimeError("boom")):
            assert run_cli("score-kr", "Increase uptime to 99%") == 1
        assert "score-kr failed: boom" in caplog.text

    def test_keyboard_interrupt(self):
        with patch("okrcoach.cli.run_command", side_effect=KeyboardInterrupt):
            assert run_cli("score-kr", "Increase uptime to 99%") == 130
