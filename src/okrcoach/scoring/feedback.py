"""Feedback and improvement text driven by per-dimension thresholds.

Each table is an ordered list of (dimension, threshold, message). A message
is emitted when the dimension score is strictly below its threshold.
"""

from dataclasses import asdict
from typing import List, Sequence, Tuple

OBJECTIVE_FEEDBACK = [
    ("outcome_orientation", 65, "Focus on the outcome or result rather than the activity or deliverable"),
    ("inspiration", 50, "Add more inspiring language that energizes the team"),
    ("clarity", 70, "Make the objective clearer and more memorable (aim for 8-15 words)"),
    ("alignment", 60, "Connect more clearly to business value and strategic priorities"),
    ("ambition", 70, "Increase the ambition level - this should be a stretch goal"),
    ("scope_appropriateness", 60,
     "Ensure this objective matches your team's span of control and organizational level"),
]

OBJECTIVE_IMPROVEMENTS = [
    ("outcome_orientation", 50, 'Try asking: "What change will this create?" instead of "What will we build?"'),
    ("inspiration", 40, "Consider what excites you most about achieving this outcome"),
    ("clarity", 50, "Simplify the language and aim for under 15 words"),
    ("ambition", 50, "Add a specific, measurable target that represents meaningful progress"),
    ("alignment", 50, "Connect this to clear business value or strategic priorities"),
    ("scope_appropriateness", 60,
     "Focus on outcomes your team can directly control and measure - avoid company-wide "
     "strategic goals unless you're in executive leadership"),
]

KEY_RESULT_FEEDBACK = [
    ("quantification", 50, "Add specific numbers with baseline and target values"),
    ("outcome_vs_activity", 50, "Focus on measuring the outcome/change rather than task completion"),
    ("feasibility", 60, "Ensure this metric is realistically trackable with available data"),
    ("independence", 60, "Focus on metrics your team can directly control and influence"),
    ("challenge", 60, "Make this more challenging - aim for 70% confidence in achievement"),
]

KEY_RESULT_IMPROVEMENTS = [
    ("quantification", 40, 'Try: "Increase [metric] from [baseline] to [target] by [date]"'),
    ("outcome_vs_activity", 40, 'Ask: "What will change when this task is done?" and measure that instead'),
]


def messages_for(dimensions, table: Sequence[Tuple[str, int, str]]) -> Tuple[str, ...]:
    """Messages from ``table`` whose dimension falls below its threshold."""
    scores = asdict(dimensions)
    out: List[str] = []
    for name, threshold, message in table:
        if scores.get(name, 0) < threshold:
            out.append(message)
    return tuple(out)
