"""Lexical signals read from conversation text: finalization, approval and resistance."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

# coaching text announcing that the OKR is finished
COMPLETION_PHRASES = (
    "congratulations",
    "ready to export",
    "your okr is complete",
    "your okrs are complete",
    "you've created",
    "final okr",
    "ready to use",
)

# user text that finalizes regardless of conversation length
STRONG_FINALIZATION_PHRASES = (
    "let's finalize", "finalize this", "ready to finalize", "finalize and approve",
    "these are final", "final version", "we're done",
    "final okr", "wrap this up", "i approve", "approved", "i approve these",
    "let's move forward", "move to next phase", "proceed to next",
    "we can finish", "we're finished", "this is complete",
    "ready for validation", "please finalize",
    "no further refinement", "stop there",
)

# acceptance that only counts once the conversation is under way
APPROVAL_PHRASES = (
    "looks good", "sounds good", "that works",
    "i like it", "perfect", "excellent",
    "that's great", "exactly what i wanted",
    "this is great", "this is perfect",
    "that captures it", "spot on",
)

LATE_CONVERSATION_TURNS = 5
RECENT_MESSAGE_WINDOW = 3

NEGATION_WORDS = (
    "no", "not", "never", "nope", "don't", "doesn't", "didn't", "won't",
    "can't", "cannot", "isn't", "aren't", "shouldn't", "wouldn't",
    "disagree", "wrong", "pointless", "unrealistic",
)

HEDGE_WORDS = (
    "maybe", "likely", "possibly", "kind of", "sort of", "perhaps", "might",
    "somewhat", "arguably", "probably", "generally", "i guess", "not sure",
    "i suppose", "hard to say",
)


def _phrase_pattern(phrases: Iterable[str]) -> "re.Pattern[str]":
    alternatives = sorted((re.escape(p) for p in phrases), key=len, reverse=True)
    return re.compile(r"(?<![\w'])(?:" + "|".join(alternatives) + r")(?![\w'])", re.I)


_COMPLETION = _phrase_pattern(COMPLETION_PHRASES)
_STRONG = _phrase_pattern(STRONG_FINALIZATION_PHRASES)
_APPROVAL = _phrase_pattern(APPROVAL_PHRASES)
_NEGATION = _phrase_pattern(NEGATION_WORDS)
_HEDGE = _phrase_pattern(HEDGE_WORDS)
_WORD = re.compile(r"[\w']+")


def _normalise(text: str) -> str:
    # curly apostrophes from chat clients
    return (text or "").replace("’", "'")


def matched_phrases(text: str, pattern: "re.Pattern[str]") -> List[str]:
    return [m.group(0).lower() for m in pattern.finditer(_normalise(text))]


def has_completion_language(text: str) -> bool:
    return bool(_COMPLETION.search(_normalise(text)))


@dataclass(frozen=True)
class FinalizationSignals:
    strong: Tuple[str, ...] = ()
    approvals: Tuple[str, ...] = ()
    completion: Tuple[str, ...] = ()
    late_conversation: bool = False

    @property
    def detected(self) -> bool:
        """Strong phrases and completion language always count; approvals only late."""
        return bool(self.strong or self.completion or (self.late_conversation and self.approvals))

    @property
    def approval_strength(self) -> float:
        """0..1 weight of explicit user approval."""
        if self.strong:
            return 1.0
        if self.late_conversation and self.approvals:
            return 1.0 if len(set(self.approvals)) >= 2 else 0.5
        return 0.0


def detect_finalization(
    user_messages: Sequence[str],
    ai_text: str = "",
    turn_count: int = 0,
) -> FinalizationSignals:
    """Scan the latest user messages and the coaching text for finalization language."""
    recent = " ".join(_normalise(m) for m in list(user_messages)[-RECENT_MESSAGE_WINDOW:])
    return FinalizationSignals(
        strong=tuple(matched_phrases(recent, _STRONG)),
        approvals=tuple(matched_phrases(recent, _APPROVAL)),
        completion=tuple(matched_phrases(ai_text, _COMPLETION)),
        late_conversation=turn_count > LATE_CONVERSATION_TURNS,
    )


@dataclass(frozen=True)
class ResistanceSignals:
    message_count: int = 0
    word_count: int = 0
    negations: int = 0
    hedges: int = 0

    @property
    def negation_density(self) -> float:
        return self.negations / self.word_count if self.word_count else 0.0

    @property
    def hedging_density(self) -> float:
        return self.hedges / self.word_count if self.word_count else 0.0

    @property
    def words_per_message(self) -> float:
        return self.word_count / self.message_count if self.message_count else 0.0

    def as_dict(self):
        return {
            "message_count": self.message_count,
            "word_count": self.word_count,
            "negation_density": round(self.negation_density, 4),
            "hedging_density": round(self.hedging_density, 4),
            "words_per_message": round(self.words_per_message, 2),
        }


def analyze_resistance(messages: Sequence[str]) -> ResistanceSignals:
    texts = [_normalise(m) for m in messages if m and m.strip()]
    return ResistanceSignals(
        message_count=len(texts),
        word_count=sum(len(_WORD.findall(t)) for t in texts),
        negations=sum(len(_NEGATION.findall(t)) for t in texts),
        hedges=sum(len(_HEDGE.findall(t)) for t in texts),
    )
