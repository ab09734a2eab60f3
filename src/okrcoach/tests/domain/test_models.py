import pytest

from okrcoach.domain.exceptions import InvalidPhaseError
from okrcoach.domain.models import (
    ObjectiveScope,
    Phase,
    PhaseTransitionResult,
    SessionSnapshot,
    TransitionErrorKind,
    UserContext,
    UserProfile,
)


class TestPhase:

    @pytest.mark.parametrize("token, expected", [
        ("discovery", Phase.DISCOVERY),
        ("  KR_Discovery ", Phase.KR_DISCOVERY),
        (Phase.VALIDATION, Phase.VALIDATION),
    ])
    def test_parse(self, token, expected):
        assert Phase.parse(token) is expected

    def test_parse_unknown(self):
        with pytest.raises(InvalidPhaseError):
            Phase.parse("ideation")


class TestObjectiveScope:

    def test_parse(self):
        assert ObjectiveScope.parse("Strategic") is ObjectiveScope.STRATEGIC

    def test_default_on_unknown(self):
        assert ObjectiveScope.parse("galactic", ObjectiveScope.TEAM) is ObjectiveScope.TEAM

    def test_unknown_without_default(self):
        with pytest.raises(ValueError):
            ObjectiveScope.parse("galactic")


class TestUserContext:

    def test_from_empty(self):
        assert UserContext.from_dict(None) == UserContext()

    def test_from_dict(self):
        context = UserContext.from_dict({
            "industry": "technology", "team_size": "12", "requires_cross_functional": True,
        })
        assert context.industry == "technology"
        assert context.team_size == 12
        assert context.requires_cross_functional is True
        assert context.as_dict()["function"] is None

    def test_bad_team_size_dropped(self):
        assert UserContext.from_dict({"team_size": "a dozen"}).team_size is None

    def test_non_text_fields_dropped(self):
        context = UserContext.from_dict({"industry": 7, "function": ["ops"], "timeframe": {"q": 3}})
        assert context == UserContext()


class TestUserProfile:

    def test_defaults(self):
        profile = UserProfile.from_dict(None)
        assert profile.communication_style == "collaborative"
        assert profile.experience_level == "intermediate"
        assert profile.previous_attempts == 0

    def test_from_dict(self):
        profile = UserProfile.from_dict({
            "communication_style": "direct",
            "resistance_patterns": ["activity_focused"],
            "previous_attempts": "2",
        })
        assert profile.communication_style == "direct"
        assert profile.resistance_patterns == ("activity_focused",)
        assert profile.previous_attempts == 2


class TestSessionSnapshot:

    def test_from_dict(self):
        session = SessionSnapshot.from_dict({
            "session_id": "abc",
            "phase": "refinement",
            "objective": "Grow revenue by 20%",
            "key_results": ["Reach $2M ARR", 42],
            "turn_count": 7,
            "phase_turn_count": 2,
            "recent_user_messages": ["looks good"],
        })
        assert session.phase is Phase.REFINEMENT
        assert session.key_results == ("Reach $2M ARR",)
        assert session.turns_in_phase == 2
        assert session.recent_user_messages == ("looks good",)
        assert session.has_objective

    def test_non_text_values_from_json_dropped(self):
        session = SessionSnapshot.from_dict({
            "objective": 42,
            "recent_user_messages": ["looks good", None, 3],
        })
        assert session.objective is None
        assert not session.has_objective
        assert session.recent_user_messages == ("looks good",)

    def test_non_text_objective_is_not_an_objective(self):
        assert not SessionSnapshot(objective=42).has_objective

    def test_turns_in_phase_falls_back_to_turn_count(self):
        assert SessionSnapshot(turn_count=4).turns_in_phase == 4

    def test_blank_objective(self):
        assert not SessionSnapshot(objective="   ").has_objective
        assert not SessionSnapshot().has_objective

    def test_unknown_phase(self):
        with pytest.raises(InvalidPhaseError):
            SessionSnapshot.from_dict({"phase": "ideation"})


class TestPhaseTransitionResult:

    def test_kinds_deduplicated_in_order(self):
        result = PhaseTransitionResult(
            valid=False,
            errors=("a", "b", "c"),
            error_kinds=(
                TransitionErrorKind.QUALITY_GATE,
                TransitionErrorKind.STRUCTURAL_PRECONDITION,
                TransitionErrorKind.QUALITY_GATE,
            ),
        )
        assert result.kinds() == [TransitionErrorKind.QUALITY_GATE, TransitionErrorKind.STRUCTURAL_PRECONDITION]
        assert result.as_dict()["error_kinds"] == ["quality_gate", "structural_precondition", "quality_gate"]
