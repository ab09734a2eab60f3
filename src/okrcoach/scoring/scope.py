"""Scope indicators: signals about the organisational level an objective targets."""

import re
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from okrcoach.domain.models import UserContext

_MARKET_POSITIONING = re.compile(
    r"\b(become|establish|dominate|lead|transform industry|market leader|define category)\b"
)
_ORG_DIRECTION = re.compile(r"\b(company|organization|business model|strategic|vision|mission)\b")
_MULTI_DEPARTMENT = re.compile(r"\b(cross-functional|company-wide|organization-wide)\b")
_MEASURABLE_VERB = re.compile(r"\b(increase|reduce|improve|achieve|reach)\b")
_MEASURABLE_TARGET = re.compile(r"\d+%|\d+ [a-z]+")
_TACTICAL = re.compile(r"\b(our team|our department|our function|our process)\b")
_CROSS_TEAM = re.compile(r"\b(cross-team|cross-department|company-wide)\b")
_CROSS_DEPENDENCY = re.compile(r"\b(requires|depends on|needs support from|coordinates with)\b")
_ACTIVITY_DISGUISED = re.compile(r"\b(implement|launch|build|deploy|create)\b")

TEAM_CONTROL_MAX_SIZE = 50


@dataclass(frozen=True)
class ScopeIndicators:
    # strategic signals
    is_market_positioning: bool = False
    sets_organizational_direction: bool = False
    requires_multiple_departments: bool = False
    # team signals
    has_team_control: bool = False
    has_measurable_outcome: bool = False
    is_tactical_execution: bool = False
    single_team_focus: bool = True
    # warnings
    requires_cross_department: bool = False
    is_activity_disguised: bool = False

    def as_dict(self) -> Dict[str, bool]:
        return asdict(self)


def analyze_scope_indicators(text: str, context: Optional[UserContext] = None) -> ScopeIndicators:
    context = context or UserContext()
    lowered = (text or "").lower()
    return ScopeIndicators(
        is_market_positioning=bool(_MARKET_POSITIONING.search(lowered)),
        sets_organizational_direction=bool(_ORG_DIRECTION.search(lowered)),
        requires_multiple_departments=bool(
            context.requires_cross_functional or _MULTI_DEPARTMENT.search(lowered)
        ),
        has_team_control=bool(context.team_size and context.team_size < TEAM_CONTROL_MAX_SIZE),
        has_measurable_outcome=bool(
            _MEASURABLE_VERB.search(lowered) and _MEASURABLE_TARGET.search(lowered)
        ),
        is_tactical_execution=bool(_TACTICAL.search(lowered)),
        single_team_focus=not _CROSS_TEAM.search(lowered),
        requires_cross_department=bool(_CROSS_DEPENDENCY.search(lowered)),
        is_activity_disguised=bool(_ACTIVITY_DISGUISED.search(lowered)),
    )
