"""Text normalisation shared by the scoring and detection heuristics."""
from typing import Any

# Objectives and key results are single statements; anything past this is
# not analysed. Keeps every regex scan bounded on pasted documents.
MAX_ANALYSED_CHARS = 1000

def analysed_text(value: Any) -> str:
    """The part of ``value`` the heuristics look at. None becomes ''."""
    text = "" if value is None else str(value)
    return text[:MAX_ANALYSED_CHARS]
