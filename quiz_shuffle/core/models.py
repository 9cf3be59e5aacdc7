"""Domain models for the quiz randomization and grading pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class QuestionType(str, Enum):
    """Question kinds understood by the grading engine."""

    SINGLE_CHOICE = "single-choice"
    TRUE_FALSE = "true-false"
    MULTIPLE_ANSWER = "multiple-answer"
    FILL_IN_BLANK = "fill-in-blank"
    MATCHING = "matching"
    SHORT_ANSWER = "short-answer"


# An answer is a label/text, a list of labels/matches, or None when unanswered.
Answer = Any


@dataclass(frozen=True, slots=True)
class Question:
    """A single question in canonical (author) coordinates."""

    index: int
    type: QuestionType
    text: str
    options: dict[str, str] | None = None
    answer_key: str | list[str] | None = None
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class RandomizationPolicy:
    """Per-quiz switches controlling how participant views are derived."""

    shuffle_questions: bool = False
    shuffle_options: bool = False
    use_question_pool: bool = False
    pool_size: int = 0

    @property
    def enabled(self) -> bool:
        """True when at least one switch changes what participants see."""
        return self.shuffle_questions or self.shuffle_options or self.use_question_pool


@dataclass(frozen=True, slots=True)
class Quiz:
    """Canonical, author-ordered quiz definition."""

    quiz_id: str
    name: str
    questions: tuple[Question, ...]
    randomization: RandomizationPolicy | None = None
    description: str = ""
    total_time_limit: int | None = None


@dataclass(frozen=True, slots=True)
class CoordinateMapping:
    """How a participant's display coordinates map back to canonical ones."""

    question_mapping: tuple[int, ...]
    option_mappings: tuple[dict[str, str] | None, ...]


@dataclass(frozen=True, slots=True)
class ParticipantView:
    """Display questions handed to one participant plus the mapping behind them."""

    participant_id: str
    questions: tuple[Question, ...]
    mapping: CoordinateMapping
    randomized: bool


@dataclass(slots=True)
class GradedResult:
    """Outcome for one canonical question."""

    question_index: int
    question_type: QuestionType
    answer: Answer
    is_correct: bool
    needs_manual_grading: bool
    manual_score: int | None


@dataclass(slots=True)
class GradingReport:
    """Aggregate counters plus the per-question results."""

    score: int
    total_gradeable: int
    pending_manual_grading: int
    results: list[GradedResult]


@dataclass(slots=True)
class JoinedParticipant:
    """Represents a participant who joined the active session."""

    participant_id: str
    name: str
    joined_at: datetime


@dataclass(slots=True)
class ParticipantResult:
    """Grading record appended to the session's result log."""

    participant_id: str
    participant_name: str
    score: int
    total_questions: int
    total_gradeable: int
    pending_manual_grading: int
    submitted_at: datetime
    answers: list[Answer]
    original_answers: list[Answer]
    detailed_results: list[GradedResult]
    time_spent: int = 0
    auto_submitted: bool = False
    timeout_reason: str | None = None
    time_limit: int | None = None
    was_randomized: bool = False
    question_mapping: list[int] | None = None
