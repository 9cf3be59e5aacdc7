"""Business logic for managing quiz state shared by the API endpoints."""

from __future__ import annotations

import logging
import random
from threading import Lock
from typing import Sequence

from quiz_shuffle.core.models import (
    Answer,
    JoinedParticipant,
    ParticipantResult,
    Quiz,
)
from quiz_shuffle.core.services.quiz_repository import QuizRepository
from quiz_shuffle.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)


class NoActiveSessionError(RuntimeError):
    """Raised when a participant operation arrives before any session started."""


class QuizManager:
    """Facade over the quiz repository and the active quiz session."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._repository = QuizRepository()
        self._session: QuizSession | None = None
        self._sessions: dict[str, QuizSession] = {}
        self._shuffle_seed: int | None = None

    # --- Quiz Repository Delegation ---

    def register_quiz(self, quiz: Quiz) -> Quiz:
        with self._lock:
            self._repository.add_quiz(quiz)
            logger.info("Quiz registered: %s (ID: %s)", quiz.name, quiz.quiz_id)
            return quiz

    def list_quizzes(self) -> list[Quiz]:
        with self._lock:
            return self._repository.list_quizzes()

    # --- Session Lifecycle ---

    def start_session(self, quiz_id: str) -> QuizSession:
        """Replace any running session with a fresh one for ``quiz_id``.

        The replaced session is closed and stays available through
        ``get_session`` so its results can still be reviewed.
        """
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            if self._session is not None:
                self._session.close()
            rng = random.Random(self._shuffle_seed)
            self._session = QuizSession(quiz, rng=rng)
            self._sessions[self._session.session_id] = self._session
            logger.info(
                "Quiz session started: %s (Session ID: %s)",
                quiz.name,
                self._session.session_id,
            )
            return self._session

    def end_session(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                logger.info("Quiz session ended: %s", self._session.session_id)
            self._session = None

    def has_active_session(self) -> bool:
        with self._lock:
            return self._session is not None

    def get_active_session(self) -> QuizSession:
        with self._lock:
            return self._require_session()

    def list_sessions(self) -> list[QuizSession]:
        """Every session started so far, newest first."""
        with self._lock:
            return list(reversed(self._sessions.values()))

    def get_session(self, session_id: str) -> QuizSession:
        with self._lock:
            return self._sessions[session_id]

    def set_shuffle_seed(self, seed: int | None) -> None:
        """Seed used for the generator of every session started afterwards."""
        with self._lock:
            self._shuffle_seed = seed

    # --- Participant Operations ---

    def join(self, name: str) -> JoinedParticipant:
        with self._lock:
            return self._require_session().participants.join(name)

    def get_participants(self) -> list[JoinedParticipant]:
        with self._lock:
            return self._require_session().participants.list_participants()

    def submit_answers(
        self,
        participant_id: str,
        answers: Sequence[Answer],
        time_spent: int = 0,
        auto_submitted: bool = False,
        timeout_reason: str | None = None,
    ) -> ParticipantResult:
        with self._lock:
            return self._require_session().submit_answers(
                participant_id,
                answers,
                time_spent=time_spent,
                auto_submitted=auto_submitted,
                timeout_reason=timeout_reason,
            )

    def get_session_results(self) -> list[ParticipantResult]:
        with self._lock:
            return self._require_session().get_results()

    def _require_session(self) -> QuizSession:
        if self._session is None:
            raise NoActiveSessionError("No quiz session started yet")
        return self._session
