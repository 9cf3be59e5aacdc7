"""Per-session store of the views handed out to participants."""

from __future__ import annotations

from contextlib import AbstractContextManager
import logging
import random
from threading import Lock

from quiz_shuffle.core.models import ParticipantView, Quiz
from quiz_shuffle.core.services.permutation_engine import build_view

logger = logging.getLogger(__name__)


class ViewCache:
    """Remembers the first view built for each participant.

    A cache belongs to exactly one quiz session; starting a new session means
    constructing a new cache rather than clearing this one.
    """

    def __init__(self, lock: AbstractContextManager | None = None) -> None:
        self._views: dict[str, ParticipantView] = {}
        self._lock = lock if lock is not None else Lock()

    def get_or_create(
        self,
        participant_id: str,
        quiz: Quiz,
        rng: random.Random,
    ) -> ParticipantView:
        """Return the participant's view, building it on first request."""
        with self._lock:
            view = self._views.get(participant_id)
            if view is not None:
                return view
            questions, mapping = build_view(quiz.questions, quiz.randomization, rng)
            view = ParticipantView(
                participant_id=participant_id,
                questions=questions,
                mapping=mapping,
                randomized=quiz.randomization is not None and quiz.randomization.enabled,
            )
            self._views[participant_id] = view
            logger.debug(
                "Built view for participant %s: questions %s",
                participant_id,
                list(mapping.question_mapping),
            )
            return view

    def get(self, participant_id: str) -> ParticipantView | None:
        with self._lock:
            return self._views.get(participant_id)

    def __contains__(self, participant_id: object) -> bool:
        with self._lock:
            return participant_id in self._views

    def __len__(self) -> int:
        with self._lock:
            return len(self._views)
