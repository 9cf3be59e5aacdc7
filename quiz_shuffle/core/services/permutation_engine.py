"""Derives participant-specific question and option orderings.

Every function here is pure apart from consuming the supplied ``random.Random``.
A view is built by running the three steps in sequence against a single
generator, so a seeded generator reproduces the same view.
"""

from __future__ import annotations

from dataclasses import replace
import random
from typing import Sequence

from quiz_shuffle.constants.quiz_constants import OPTION_LABELS, SHUFFLEABLE_TYPES
from quiz_shuffle.core.models import CoordinateMapping, Question, RandomizationPolicy

# (canonical index, question) pairs flowing between the steps.
IndexedQuestion = tuple[int, Question]


def select_pool(
    questions: Sequence[Question],
    policy: RandomizationPolicy,
    rng: random.Random,
) -> list[IndexedQuestion]:
    """Pick the subset of questions a participant will see.

    Without pooling (or with a pool at least as large as the quiz) every
    question is selected in canonical order.
    """
    indexed = list(enumerate(questions))
    pool_size = policy.pool_size
    if not policy.use_question_pool or pool_size <= 0 or pool_size >= len(indexed):
        return indexed
    rng.shuffle(indexed)
    return indexed[:pool_size]


def order_questions(
    selected: Sequence[IndexedQuestion],
    policy: RandomizationPolicy,
    rng: random.Random,
) -> list[IndexedQuestion]:
    """Fix the display order of the selected questions."""
    ordered = list(selected)
    if policy.shuffle_questions:
        rng.shuffle(ordered)
    else:
        # A pooled selection keeps its canonical relative order.
        ordered.sort(key=lambda item: item[0])
    return ordered


def shuffle_options(
    question: Question,
    policy: RandomizationPolicy,
    rng: random.Random,
) -> tuple[Question, dict[str, str] | None]:
    """Reorder a question's options and relabel them A, B, C, ...

    Returns the display question and a display-label to canonical-label map,
    or the untouched question and ``None`` when nothing was shuffled.
    """
    if (
        not policy.shuffle_options
        or not question.options
        or question.type not in SHUFFLEABLE_TYPES
    ):
        return question, None

    canonical_labels = list(question.options)
    if len(canonical_labels) > len(OPTION_LABELS):
        raise ValueError(f"Question {question.index} has more options than available labels.")
    rng.shuffle(canonical_labels)

    display_options: dict[str, str] = {}
    option_mapping: dict[str, str] = {}
    for position, canonical_label in enumerate(canonical_labels):
        display_label = OPTION_LABELS[position]
        display_options[display_label] = question.options[canonical_label]
        option_mapping[display_label] = canonical_label

    display_question = replace(
        question,
        options=display_options,
        answer_key=_relabel_key(question.answer_key, option_mapping),
    )
    return display_question, option_mapping


def build_view(
    questions: Sequence[Question],
    policy: RandomizationPolicy | None,
    rng: random.Random,
) -> tuple[tuple[Question, ...], CoordinateMapping]:
    """Compose pool selection, question ordering and option shuffling."""
    if policy is None:
        return tuple(questions), identity_mapping(len(questions))

    selected = select_pool(questions, policy, rng)
    ordered = order_questions(selected, policy, rng)

    display_questions: list[Question] = []
    option_mappings: list[dict[str, str] | None] = []
    for _, question in ordered:
        display_question, option_mapping = shuffle_options(question, policy, rng)
        display_questions.append(display_question)
        option_mappings.append(option_mapping)

    mapping = CoordinateMapping(
        question_mapping=tuple(index for index, _ in ordered),
        option_mappings=tuple(option_mappings),
    )
    return tuple(display_questions), mapping


def identity_mapping(question_count: int) -> CoordinateMapping:
    """Mapping for a view that shows the canonical quiz unchanged."""
    return CoordinateMapping(
        question_mapping=tuple(range(question_count)),
        option_mappings=(None,) * question_count,
    )


def _relabel_key(
    answer_key: str | list[str] | None,
    option_mapping: dict[str, str],
) -> str | list[str] | None:
    inverse = {canonical: display for display, canonical in option_mapping.items()}
    if isinstance(answer_key, list):
        return [inverse.get(label, label) for label in answer_key]
    if isinstance(answer_key, str):
        return inverse.get(answer_key, answer_key)
    return answer_key
