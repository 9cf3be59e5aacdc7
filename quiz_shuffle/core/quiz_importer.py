"""Utilities for importing quizzes from JSON documents.

Document format (camelCase keys, as written by the authoring tool)::

    {
      "name": "Fractions",
      "totalTimeLimit": 600,
      "randomization": {"shuffleQuestions": true, "shuffleOptions": true,
                        "useQuestionPool": false, "poolSize": 0},
      "questions": [
        {"type": "multiple-choice", "question": "1/2 + 1/4 = ?",
         "options": {"A": "3/4", "B": "2/6"}, "correct": "A"},
        {"type": "fill-blank", "question": "Half of 10 is ___",
         "correct": ["5", "five"]}
      ]
    }

The pydantic models only check structure. Answer-key shapes depend on the
question type, so they are validated while converting to the domain models.
A single-choice or true/false key may name an option by its text; it is
stored as that option's label. True/false questions may omit options, in
which case the key is the literal answer ("True" or "False").
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quiz_shuffle.constants.quiz_constants import (
    DEFAULT_QUESTION_TYPE,
    MANUALLY_GRADED_TYPES,
    QUESTION_TYPE_ALIASES,
    SHUFFLEABLE_TYPES,
)
from quiz_shuffle.core.models import Question, QuestionType, Quiz, RandomizationPolicy


class QuizImportError(ValueError):
    """Raised when a quiz definition cannot be parsed."""


class RandomizationDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shuffle_questions: bool = Field(default=False, alias="shuffleQuestions")
    shuffle_options: bool = Field(default=False, alias="shuffleOptions")
    use_question_pool: bool = Field(default=False, alias="useQuestionPool")
    pool_size: int = Field(default=0, alias="poolSize", ge=0)


class QuestionDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    question: str
    options: dict[str, str] | None = None
    correct: str | list[str] | None = None
    explanation: str | None = None


class QuizDocument(BaseModel):
    """Structure of a quiz as submitted by the authoring side."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str
    description: str = ""
    questions: list[QuestionDocument]
    total_time_limit: int | None = Field(default=None, alias="totalTimeLimit", gt=0)
    randomization: RandomizationDocument | None = None


def load_quiz_from_file(file_path: Path) -> Quiz:
    text = file_path.read_text(encoding="utf-8")
    try:
        document = QuizDocument.model_validate_json(text)
    except ValidationError as exc:
        raise QuizImportError(f"{file_path.name}: {exc}") from exc
    return build_quiz(document)


def load_quiz_from_dict(data: dict[str, Any]) -> Quiz:
    try:
        document = QuizDocument.model_validate(data)
    except ValidationError as exc:
        raise QuizImportError(str(exc)) from exc
    return build_quiz(document)


def build_quiz(document: QuizDocument) -> Quiz:
    """Convert a structurally valid document into an immutable ``Quiz``."""
    if not document.name.strip():
        raise QuizImportError("Quiz name cannot be empty.")
    if not document.questions:
        raise QuizImportError("Quiz must contain at least one question.")

    questions = tuple(
        _build_question(index, question) for index, question in enumerate(document.questions)
    )
    policy = None
    if document.randomization is not None:
        policy = RandomizationPolicy(
            shuffle_questions=document.randomization.shuffle_questions,
            shuffle_options=document.randomization.shuffle_options,
            use_question_pool=document.randomization.use_question_pool,
            pool_size=document.randomization.pool_size,
        )
    return Quiz(
        quiz_id=document.id or uuid4().hex,
        name=document.name.strip(),
        questions=questions,
        randomization=policy,
        description=document.description,
        total_time_limit=document.total_time_limit,
    )


def _build_question(index: int, document: QuestionDocument) -> Question:
    position = index + 1
    qtype = _parse_type(position, document.type)
    text = document.question.strip()
    if not text:
        raise QuizImportError(f"Question {position}: text cannot be empty.")

    options = document.options
    if qtype in SHUFFLEABLE_TYPES:
        # True/false questions may rely on the literal "True"/"False" answers.
        if not options and qtype is not QuestionType.TRUE_FALSE:
            raise QuizImportError(f"Question {position}: {qtype.value} questions need options.")
        if options and any(not label.strip() for label in options):
            raise QuizImportError(f"Question {position}: option labels cannot be empty.")

    key = _validate_key(position, qtype, document.correct, options)
    return Question(
        index=index,
        type=qtype,
        text=text,
        options=dict(options) if options else None,
        answer_key=key,
        explanation=document.explanation,
    )


def _parse_type(position: int, raw_type: str | None) -> QuestionType:
    if raw_type is None:
        return DEFAULT_QUESTION_TYPE
    normalized = raw_type.strip().lower()
    if normalized in QUESTION_TYPE_ALIASES:
        return QUESTION_TYPE_ALIASES[normalized]
    try:
        return QuestionType(normalized)
    except ValueError as exc:
        raise QuizImportError(f"Question {position}: unknown type '{raw_type}'.") from exc


def _validate_key(
    position: int,
    qtype: QuestionType,
    key: str | list[str] | None,
    options: dict[str, str] | None,
) -> str | list[str] | None:
    if qtype in MANUALLY_GRADED_TYPES:
        return key
    if key is None:
        raise QuizImportError(f"Question {position}: answer key is required.")

    if qtype in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE):
        if not isinstance(key, str):
            raise QuizImportError(f"Question {position}: answer key must be a single value.")
        return _resolve_label(position, key, options)
    if qtype is QuestionType.MULTIPLE_ANSWER:
        if not isinstance(key, list) or not key:
            raise QuizImportError(f"Question {position}: answer key must list at least one label.")
        unknown = [label for label in key if label not in (options or {})]
        if unknown:
            raise QuizImportError(f"Question {position}: unknown option label(s) {unknown}.")
        return list(key)
    if qtype is QuestionType.FILL_IN_BLANK:
        accepted = [key] if isinstance(key, str) else list(key)
        if not accepted:
            raise QuizImportError(f"Question {position}: at least one accepted answer is required.")
        return accepted
    # Matching keys are ordered lists compared position by position.
    if not isinstance(key, list):
        raise QuizImportError(f"Question {position}: matching key must be a list.")
    return list(key)


def _resolve_label(position: int, key: str, options: dict[str, str] | None) -> str:
    """Return the option label for ``key``, which may be a label or an option's text."""
    if options is None or key in options:
        return key
    for label, text in options.items():
        if text == key:
            return label
    raise QuizImportError(f"Question {position}: answer key must be one of the option labels.")

