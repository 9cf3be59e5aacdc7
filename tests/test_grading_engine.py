from __future__ import annotations

import pytest

from conftest import CHOICES, TRUE_FALSE, make_question
from quiz_shuffle.core.models import QuestionType
from quiz_shuffle.core.services.grading_engine import final_score, grade, is_answer_correct


def test_single_choice_and_true_false_scenario():
    questions = [
        make_question(0, options=dict(CHOICES), key="A"),
        make_question(1, options=dict(CHOICES), key="C"),
        make_question(2, options=dict(CHOICES), key="B"),
        make_question(3, QuestionType.TRUE_FALSE, options=dict(TRUE_FALSE), key="True"),
    ]

    report = grade(questions, ["A", "B", None, "True"])

    assert report.score == 2
    assert report.total_gradeable == 4
    assert report.pending_manual_grading == 0
    assert [r.is_correct for r in report.results] == [True, False, False, True]
    assert [r.manual_score for r in report.results] == [1, 0, 0, 1]


def test_single_choice_is_case_sensitive():
    question = make_question(0, options=dict(CHOICES), key="A")

    assert not is_answer_correct(question, "a")


@pytest.mark.parametrize(
    "answer, expected",
    [
        (["C", "A"], True),
        (["A", "C"], True),
        (["A"], False),
        (["A", "C", "D"], False),
        ("A", False),
        ([], False),
    ],
)
def test_multiple_answer_compares_sets(answer, expected):
    question = make_question(0, QuestionType.MULTIPLE_ANSWER, options=dict(CHOICES), key=["A", "C"])

    assert is_answer_correct(question, answer) is expected


@pytest.mark.parametrize(
    "answer, expected",
    [("5", True), ("five", True), ("Five", False), (" 5", False), (["5"], False)],
)
def test_fill_in_blank_accepts_any_listed_text(answer, expected):
    question = make_question(0, QuestionType.FILL_IN_BLANK, key=["5", "five"])

    assert is_answer_correct(question, answer) is expected


@pytest.mark.parametrize(
    "answer, expected",
    [
        (["2", "1", "3"], True),
        (["1", "2", "3"], False),
        (["2", "1"], False),
        ("2,1,3", False),
    ],
)
def test_matching_requires_same_order(answer, expected):
    question = make_question(0, QuestionType.MATCHING, key=["2", "1", "3"])

    assert is_answer_correct(question, answer) is expected


def test_short_answer_is_left_for_manual_grading():
    questions = [
        make_question(0, options=dict(CHOICES), key="A"),
        make_question(1, QuestionType.SHORT_ANSWER, key=None),
    ]

    report = grade(questions, ["A", "Because of gravity."])

    assert report.score == 1
    assert report.total_gradeable == 1
    assert report.pending_manual_grading == 1
    manual = report.results[1]
    assert manual.needs_manual_grading
    assert manual.manual_score is None
    assert manual.answer == "Because of gravity."


@pytest.mark.parametrize("malformed", [["A"], {"A": 1}, 3, ""])
def test_malformed_single_choice_answers_are_incorrect(malformed):
    question = make_question(0, options=dict(CHOICES), key="A")

    assert is_answer_correct(question, malformed) is False


def test_malformed_answer_does_not_abort_remaining_questions(mixed_questions):
    answers = [["C"], {"bad": True}, "A", 5, ["2", "1", "3"], None]

    report = grade(mixed_questions, answers)

    assert report.score == 1
    assert report.total_gradeable == 5
    assert report.results[4].is_correct


def test_missing_trailing_answers_count_as_unanswered(mixed_questions):
    report = grade(mixed_questions, ["C"])

    assert report.score == 1
    assert [r.answer for r in report.results[1:]] == [None] * 5


def test_grade_is_deterministic(mixed_questions):
    answers = ["C", "False", ["D", "A"], "five", ["2", "1", "3"], "essay"]

    first = grade(mixed_questions, answers)
    second = grade(mixed_questions, answers)

    assert first == second
    assert first.score == 5
    assert first.pending_manual_grading == 1


def test_final_score_adds_manual_scores(mixed_questions):
    report = grade(mixed_questions, ["C", "True", None, "five", None, "essay"])
    assert final_score(report.results) == 2

    report.results[5].manual_score = 1

    assert final_score(report.results) == 3
