import pytest

from okrcoach.controller import NoTimeoutPolicy, TurnLimitTimeoutPolicy
from okrcoach.domain.exceptions import InvalidPhaseError, ParameterValidationError
from okrcoach.domain.models import Phase


class TestNoTimeoutPolicy:

    def test_never_forces(self):
        policy = NoTimeoutPolicy()
        assert not any(policy.should_force(p, 10 ** 6) for p in Phase)
        assert policy.describe() == "NoTimeoutPolicy"


class TestTurnLimitTimeoutPolicy:

    def test_default_limits_from_phase_metadata(self):
        policy = TurnLimitTimeoutPolicy()
        assert not policy.should_force(Phase.DISCOVERY, 11)
        assert policy.should_force(Phase.DISCOVERY, 12)
        assert policy.should_force(Phase.KR_DISCOVERY, 8)

    def test_custom_limits_by_token(self):
        policy = TurnLimitTimeoutPolicy({"refinement": 3, "validation": 0})
        assert policy.should_force(Phase.REFINEMENT, 3)
        assert not policy.should_force(Phase.REFINEMENT, 2)
        assert not policy.should_force(Phase.VALIDATION, 100)
        assert not policy.should_force(Phase.DISCOVERY, 100)

    def test_completed_is_never_forced(self):
        policy = TurnLimitTimeoutPolicy({Phase.COMPLETED: 1})
        assert not policy.should_force(Phase.COMPLETED, 50)

    def test_unknown_phase_rejected(self):
        with pytest.raises(InvalidPhaseError):
            TurnLimitTimeoutPolicy({"brainstorm": 3})

    def test_describe_lists_active_limits(self):
        policy = TurnLimitTimeoutPolicy({"refinement": 3, "validation": 0})
        assert policy.describe() == "TurnLimitTimeoutPolicy(refinement=3)"

    @pytest.mark.parametrize("limit", [-1, 2.5, "3", True])
    def test_invalid_limit_rejected(self, limit):
        with pytest.raises(ParameterValidationError) as exc_info:
            TurnLimitTimeoutPolicy({"refinement": limit})
        assert exc_info.value.error_code == "INVALID_PARAMETER"
        assert exc_info.value.context["field_name"] == "timeout_turns"
        assert exc_info.value.context["expected"] == "int >= 0"
