"""Translates submissions between display and canonical coordinates."""

from __future__ import annotations

import logging
from typing import Sequence

from quiz_shuffle.core.models import Answer, CoordinateMapping

logger = logging.getLogger(__name__)


class InvalidMappingError(Exception):
    """Raised when a stored coordinate mapping cannot be applied."""


def reconcile(
    mapping: CoordinateMapping,
    canonical_question_count: int,
    submission: Sequence[Answer],
) -> list[Answer]:
    """Return answers in canonical order; questions never shown stay ``None``."""
    canonical: list[Answer] = [None] * canonical_question_count
    displayed_count = len(mapping.question_mapping)
    if len(submission) > displayed_count:
        logger.warning(
            "Ignoring %d answer(s) beyond the %d displayed question(s).",
            len(submission) - displayed_count,
            displayed_count,
        )

    seen: set[int] = set()
    for display_index, answer in enumerate(submission[:displayed_count]):
        canonical_index = mapping.question_mapping[display_index]
        if not 0 <= canonical_index < canonical_question_count:
            raise InvalidMappingError(
                f"Display question {display_index} maps to canonical index {canonical_index}, "
                f"outside a quiz of {canonical_question_count} question(s)."
            )
        if canonical_index in seen:
            raise InvalidMappingError(
                f"Canonical index {canonical_index} is mapped more than once."
            )
        seen.add(canonical_index)
        if answer is None:
            continue
        option_mapping = _option_mapping_at(mapping, display_index)
        canonical[canonical_index] = _translate(answer, option_mapping)
    return canonical


def project_to_display(
    mapping: CoordinateMapping,
    canonical_answers: Sequence[Answer],
) -> list[Answer]:
    """Inverse of :func:`reconcile` for the questions this participant saw."""
    projected: list[Answer] = []
    for display_index, canonical_index in enumerate(mapping.question_mapping):
        if not 0 <= canonical_index < len(canonical_answers):
            raise InvalidMappingError(
                f"Canonical index {canonical_index} is outside the supplied answers."
            )
        answer = canonical_answers[canonical_index]
        option_mapping = _option_mapping_at(mapping, display_index)
        if answer is not None and option_mapping:
            inverse = {canonical: display for display, canonical in option_mapping.items()}
            answer = _translate(answer, inverse)
        projected.append(answer)
    return projected


def _option_mapping_at(mapping: CoordinateMapping, display_index: int) -> dict[str, str] | None:
    if display_index < len(mapping.option_mappings):
        return mapping.option_mappings[display_index]
    return None


def _translate(answer: Answer, label_map: dict[str, str] | None) -> Answer:
    if not label_map:
        return answer
    if isinstance(answer, list):
        return [
            label_map.get(item, item) if isinstance(item, str) else item
            for item in answer
        ]
    if isinstance(answer, str):
        return label_map.get(answer, answer)
    return answer
