from __future__ import annotations

import random

import pytest

from conftest import CHOICES, ReversingRandom, make_question
from quiz_shuffle.core.models import QuestionType, RandomizationPolicy
from quiz_shuffle.core.services.permutation_engine import (
    build_view,
    identity_mapping,
    order_questions,
    select_pool,
    shuffle_options,
)


def test_build_view_without_policy_returns_canonical_quiz(choice_questions):
    questions, mapping = build_view(choice_questions, None, random.Random(1))

    assert questions == tuple(choice_questions)
    assert mapping == identity_mapping(len(choice_questions))
    assert mapping.option_mappings == (None,) * len(choice_questions)


def test_policy_with_all_flags_off_is_identity(choice_questions):
    questions, mapping = build_view(choice_questions, RandomizationPolicy(), random.Random(1))

    assert list(mapping.question_mapping) == list(range(len(choice_questions)))
    assert [q.index for q in questions] == list(range(len(choice_questions)))


@pytest.mark.parametrize("seed", range(20))
def test_question_shuffle_is_a_permutation(choice_questions, seed):
    policy = RandomizationPolicy(shuffle_questions=True)
    questions, mapping = build_view(choice_questions, policy, random.Random(seed))

    assert sorted(mapping.question_mapping) == list(range(len(choice_questions)))
    for display_index, canonical_index in enumerate(mapping.question_mapping):
        assert questions[display_index] == choice_questions[canonical_index]


@pytest.mark.parametrize("seed", range(20))
def test_pool_selects_distinct_valid_indices(choice_questions, seed):
    policy = RandomizationPolicy(use_question_pool=True, pool_size=3)
    questions, mapping = build_view(choice_questions, policy, random.Random(seed))

    assert len(questions) == 3
    assert len(mapping.question_mapping) == 3
    assert len(set(mapping.question_mapping)) == 3
    assert all(0 <= index < 5 for index in mapping.question_mapping)


@pytest.mark.parametrize("seed", range(10))
def test_pool_without_question_shuffle_keeps_canonical_order(choice_questions, seed):
    policy = RandomizationPolicy(use_question_pool=True, pool_size=3)
    _, mapping = build_view(choice_questions, policy, random.Random(seed))

    assert list(mapping.question_mapping) == sorted(mapping.question_mapping)


@pytest.mark.parametrize("pool_size", [0, 5, 9])
def test_pool_size_out_of_range_selects_everything(choice_questions, pool_size):
    policy = RandomizationPolicy(use_question_pool=True, pool_size=pool_size)
    selected = select_pool(choice_questions, policy, random.Random(3))

    assert [index for index, _ in selected] == list(range(5))


def test_order_questions_carries_canonical_indices(choice_questions):
    selected = list(enumerate(choice_questions))
    ordered = order_questions(selected, RandomizationPolicy(shuffle_questions=True), ReversingRandom())

    assert [index for index, _ in ordered] == [4, 3, 2, 1, 0]
    assert all(question.index == index for index, question in ordered)


def test_shuffle_options_relabels_in_display_order():
    question = make_question(0, options={"A": "one", "B": "two", "C": "three"}, key="C")
    policy = RandomizationPolicy(shuffle_options=True)

    display, option_mapping = shuffle_options(question, policy, ReversingRandom())

    assert option_mapping == {"A": "C", "B": "B", "C": "A"}
    assert list(display.options) == ["A", "B", "C"]
    assert display.options == {"A": "three", "B": "two", "C": "one"}
    assert display.answer_key == "A"
    # canonical question is untouched
    assert question.options == {"A": "one", "B": "two", "C": "three"}


@pytest.mark.parametrize("seed", range(10))
def test_shuffle_options_mapping_covers_canonical_labels(seed):
    question = make_question(0, QuestionType.MULTIPLE_ANSWER, options=dict(CHOICES), key=["B", "D"])
    policy = RandomizationPolicy(shuffle_options=True)

    display, option_mapping = shuffle_options(question, policy, random.Random(seed))

    assert set(option_mapping.values()) == set(CHOICES)
    for display_label, canonical_label in option_mapping.items():
        assert display.options[display_label] == CHOICES[canonical_label]
    assert sorted(option_mapping[label] for label in display.answer_key) == ["B", "D"]


@pytest.mark.parametrize(
    "qtype, key",
    [
        (QuestionType.FILL_IN_BLANK, ["five"]),
        (QuestionType.SHORT_ANSWER, None),
        (QuestionType.MATCHING, ["1", "2"]),
    ],
)
def test_shuffle_options_skips_non_choice_types(qtype, key):
    question = make_question(0, qtype, options=None, key=key)
    display, option_mapping = shuffle_options(question, RandomizationPolicy(shuffle_options=True), random.Random(0))

    assert display is question
    assert option_mapping is None


def test_shuffle_options_disabled_records_no_mapping():
    question = make_question(0, options=dict(CHOICES))
    display, option_mapping = shuffle_options(question, RandomizationPolicy(), random.Random(0))

    assert display is question
    assert option_mapping is None


def test_seeded_generator_reproduces_view(mixed_questions, full_policy):
    first = build_view(mixed_questions, full_policy, random.Random(99))
    second = build_view(mixed_questions, full_policy, random.Random(99))

    assert first == second


@pytest.mark.parametrize("seed", range(15))
def test_view_satisfies_mapping_invariants(mixed_questions, full_policy, seed):
    questions, mapping = build_view(mixed_questions, full_policy, random.Random(seed))

    assert len(mapping.question_mapping) == len(questions) == full_policy.pool_size
    assert len(mapping.option_mappings) == len(questions)
    assert len(set(mapping.question_mapping)) == len(questions)
    for display_index, canonical_index in enumerate(mapping.question_mapping):
        assert 0 <= canonical_index < len(mixed_questions)
        option_mapping = mapping.option_mappings[display_index]
        if option_mapping is not None:
            assert set(option_mapping.values()) <= set(mixed_questions[canonical_index].options)
