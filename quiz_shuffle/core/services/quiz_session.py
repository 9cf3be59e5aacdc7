"""Service for one running quiz session: views, submissions and results."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import random
from typing import Sequence
from uuid import uuid4

from quiz_shuffle.constants.quiz_constants import UNKNOWN_PARTICIPANT_NAME
from quiz_shuffle.core.models import Answer, ParticipantResult, ParticipantView, Quiz
from quiz_shuffle.core.services.answer_reconciler import reconcile
from quiz_shuffle.core.services.grading_engine import grade
from quiz_shuffle.core.services.participant_registry import ParticipantRegistry
from quiz_shuffle.core.services.view_cache import ViewCache

logger = logging.getLogger(__name__)


class QuizSession:
    """State owned by a single started quiz.

    Everything participant-specific (cached views, joined participants and
    the result log) lives here, so a new session starts from a clean slate.
    A closed session keeps its result log for review.
    """

    def __init__(
        self,
        quiz: Quiz,
        rng: random.Random | None = None,
        view_cache: ViewCache | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid4().hex
        self.quiz = quiz
        self.started_at = datetime.now(timezone.utc)
        self.ended_at: datetime | None = None
        self.participants = ParticipantRegistry()
        self._rng = rng or random.Random()
        self._views = view_cache if view_cache is not None else ViewCache()
        self._results: list[ParticipantResult] = []

    def get_participant_view(self, participant_id: str) -> ParticipantView:
        """Return the participant's stable view, creating it on first fetch."""
        return self._views.get_or_create(participant_id, self.quiz, self._rng)

    def has_view(self, participant_id: str) -> bool:
        return participant_id in self._views

    def submit_answers(
        self,
        participant_id: str,
        submission: Sequence[Answer],
        time_spent: int = 0,
        auto_submitted: bool = False,
        timeout_reason: str | None = None,
    ) -> ParticipantResult:
        """Reconcile, grade and record a participant's submission."""
        question_count = len(self.quiz.questions)
        view = self._views.get(participant_id)
        if view is None:
            logger.warning(
                "No view was issued to participant %s; treating answers as canonical.",
                participant_id,
            )
            canonical_answers = list(submission[:question_count])
            canonical_answers.extend([None] * (question_count - len(canonical_answers)))
        else:
            canonical_answers = reconcile(view.mapping, question_count, submission)

        report = grade(self.quiz.questions, canonical_answers)
        participant = self.participants.get(participant_id)
        was_randomized = view is not None and view.randomized
        result = ParticipantResult(
            participant_id=participant_id,
            participant_name=participant.name if participant else UNKNOWN_PARTICIPANT_NAME,
            score=report.score,
            total_questions=question_count,
            total_gradeable=report.total_gradeable,
            pending_manual_grading=report.pending_manual_grading,
            submitted_at=datetime.now(timezone.utc),
            answers=canonical_answers,
            original_answers=list(submission),
            detailed_results=report.results,
            time_spent=time_spent,
            auto_submitted=auto_submitted,
            timeout_reason=timeout_reason,
            time_limit=self.quiz.total_time_limit,
            was_randomized=was_randomized,
            question_mapping=list(view.mapping.question_mapping) if was_randomized else None,
        )
        self._results.append(result)

        pending = (
            f" ({report.pending_manual_grading} pending manual grading)"
            if report.pending_manual_grading
            else ""
        )
        logger.info(
            "%s submitted quiz - Score: %d/%d%s",
            result.participant_name,
            report.score,
            report.total_gradeable,
            pending,
        )
        return result

    def get_results(self) -> list[ParticipantResult]:
        return list(self._results)

    def close(self) -> None:
        """Mark the session ended and drop its cached views; results stay readable."""
        if self.ended_at is None:
            self.ended_at = datetime.now(timezone.utc)
        self._views = ViewCache()
