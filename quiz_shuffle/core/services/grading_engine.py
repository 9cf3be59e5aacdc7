"""Scores canonical-order answers against a quiz's answer keys."""

from __future__ import annotations

from typing import Iterable, Sequence

from quiz_shuffle.core.models import Answer, GradedResult, GradingReport, Question, QuestionType


def grade(questions: Sequence[Question], answers: Sequence[Answer]) -> GradingReport:
    """Grade every canonical question; missing answers count as unanswered."""
    score = 0
    total_gradeable = 0
    pending_manual_grading = 0
    results: list[GradedResult] = []

    for position, question in enumerate(questions):
        answer = answers[position] if position < len(answers) else None
        if question.type is QuestionType.SHORT_ANSWER:
            pending_manual_grading += 1
            results.append(
                GradedResult(
                    question_index=position,
                    question_type=question.type,
                    answer=answer,
                    is_correct=False,
                    needs_manual_grading=True,
                    manual_score=None,
                )
            )
            continue

        is_correct = is_answer_correct(question, answer)
        total_gradeable += 1
        if is_correct:
            score += 1
        results.append(
            GradedResult(
                question_index=position,
                question_type=question.type,
                answer=answer,
                is_correct=is_correct,
                needs_manual_grading=False,
                manual_score=1 if is_correct else 0,
            )
        )

    return GradingReport(
        score=score,
        total_gradeable=total_gradeable,
        pending_manual_grading=pending_manual_grading,
        results=results,
    )


def is_answer_correct(question: Question, answer: Answer) -> bool:
    """Apply the equivalence rule for the question's type.

    Malformed answers (wrong shape for the type) are simply incorrect.
    """
    if answer is None or answer == "":
        return False
    key = question.answer_key
    qtype = question.type

    if qtype in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE):
        return isinstance(answer, str) and answer == key
    if qtype is QuestionType.MULTIPLE_ANSWER:
        submitted = _string_list(answer)
        expected = _string_list(key)
        if submitted is None or expected is None:
            return False
        return set(submitted) == set(expected)
    if qtype is QuestionType.FILL_IN_BLANK:
        if not isinstance(answer, str) or not isinstance(key, list):
            return False
        return any(accepted == answer for accepted in key)
    if qtype is QuestionType.MATCHING:
        submitted = _string_list(answer)
        if submitted is None or not isinstance(key, list):
            return False
        return submitted == key
    return False


def final_score(results: Iterable[GradedResult]) -> int:
    """Auto-graded points plus any manual scores a reviewer has assigned."""
    return sum(result.manual_score for result in results if result.manual_score is not None)


def _string_list(value: Answer) -> list[str] | None:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return value
