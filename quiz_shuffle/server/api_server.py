"""FastAPI server that exposes the participant and administrator endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from quiz_shuffle.constants.about import APP_NAME, APP_VERSION
from quiz_shuffle.constants.network_constants import API_LOG_LEVEL, DEFAULT_HOST, DEFAULT_PORT
from quiz_shuffle.core.markdown_renderer import renderer
from quiz_shuffle.core.models import GradedResult, ParticipantResult, Question, Quiz
from quiz_shuffle.core.quiz_importer import QuizDocument, build_quiz
from quiz_shuffle.core.quiz_manager import NoActiveSessionError, QuizManager
from quiz_shuffle.core.services.answer_reconciler import InvalidMappingError
from quiz_shuffle.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)


class JoinPayload(BaseModel):
    """Payload schema for the join flow."""

    name: str = Field(min_length=1)


class StartPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quiz_id: str = Field(alias="quizId")


class SubmitPayload(BaseModel):
    """Payload schema for submitted answers, indexed by display position."""

    model_config = ConfigDict(populate_by_name=True)

    participant_id: str = Field(alias="participantId")
    answers: list[Any]
    time_spent: int = Field(default=0, alias="timeSpent")
    auto_submitted: bool = Field(default=False, alias="autoSubmitted")
    timeout_reason: str | None = Field(default=None, alias="timeoutReason")


def _question_payload(question: Question) -> dict[str, object]:
    # Answer keys and explanations never leave the server before grading.
    payload: dict[str, object] = {
        "type": question.type.value,
        "question": question.text,
        "questionHtml": renderer.render_fragment(question.text),
        "options": None,
        "optionsHtml": None,
    }
    if question.options:
        payload["options"] = dict(question.options)
        payload["optionsHtml"] = renderer.render_options(question.options)
    return payload


def _quiz_summary(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.quiz_id,
        "name": quiz.name,
        "description": quiz.description,
        "questionCount": len(quiz.questions),
        "totalTimeLimit": quiz.total_time_limit,
        "randomized": quiz.randomization is not None and quiz.randomization.enabled,
    }


def _graded_payload(graded: GradedResult) -> dict[str, object]:
    return {
        "questionIndex": graded.question_index,
        "questionType": graded.question_type.value,
        "studentAnswer": graded.answer,
        "isCorrect": graded.is_correct,
        "needsManualGrading": graded.needs_manual_grading,
        "manualScore": graded.manual_score,
    }


def _result_payload(result: ParticipantResult) -> dict[str, object]:
    return {
        "participantId": result.participant_id,
        "participantName": result.participant_name,
        "score": result.score,
        "totalQuestions": result.total_questions,
        "totalGradeable": result.total_gradeable,
        "pendingManualGrading": result.pending_manual_grading,
        "submittedAt": result.submitted_at.isoformat(),
        "answers": result.answers,
        "originalAnswers": result.original_answers,
        "detailedResults": [_graded_payload(graded) for graded in result.detailed_results],
        "timeSpent": result.time_spent,
        "autoSubmitted": result.auto_submitted,
        "timeoutReason": result.timeout_reason,
        "timeLimit": result.time_limit,
        "wasRandomized": result.was_randomized,
        "questionMapping": result.question_mapping,
    }


def _session_summary(session: QuizSession) -> dict[str, object]:
    return {
        "sessionId": session.session_id,
        "quizId": session.quiz.quiz_id,
        "quizName": session.quiz.name,
        "sessionDate": session.started_at.isoformat(),
        "endedAt": session.ended_at.isoformat() if session.ended_at else None,
        "participantCount": len(session.get_results()),
    }


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.post("/api/join")
    def join(
        payload: JoinPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            joined = manager.join(payload.name)
        except NoActiveSessionError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"message": "Joined successfully!", "id": joined.participant_id}

    @app.get("/api/participants")
    def list_participants(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        try:
            participants = manager.get_participants()
        except NoActiveSessionError:
            return []
        return [
            {
                "id": participant.participant_id,
                "name": participant.name,
                "joinedAt": participant.joined_at.isoformat(),
            }
            for participant in participants
        ]

    @app.get("/api/quizzes")
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [_quiz_summary(quiz) for quiz in manager.list_quizzes()]

    @app.post("/api/quizzes", status_code=201)
    def create_quiz(
        payload: QuizDocument,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.register_quiz(build_quiz(payload))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _quiz_summary(quiz)

    @app.post("/api/quizzes/start")
    def start_session(
        payload: StartPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.start_session(payload.quiz_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz not found") from exc
        return {"sessionId": session.session_id, "message": "Quiz session started successfully"}

    @app.post("/api/session/end")
    def end_session(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        manager.end_session()
        return {"message": "Quiz session ended"}

    @app.get("/api/currentQuiz")
    def get_current_quiz(
        student_id: str | None = Query(default=None, alias="studentId"),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.get_active_session()
            if student_id:
                questions = session.get_participant_view(student_id).questions
            else:
                questions = session.quiz.questions
        except NoActiveSessionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        quiz = session.quiz
        return {
            "sessionId": session.session_id,
            "name": quiz.name,
            "description": quiz.description,
            "totalTimeLimit": quiz.total_time_limit,
            "questions": [_question_payload(question) for question in questions],
        }

    @app.post("/api/submit")
    def submit(
        payload: SubmitPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.submit_answers(
                payload.participant_id,
                payload.answers,
                time_spent=payload.time_spent,
                auto_submitted=payload.auto_submitted,
                timeout_reason=payload.timeout_reason,
            )
        except NoActiveSessionError as exc:
            raise HTTPException(status_code=400, detail="No active quiz session") from exc
        except InvalidMappingError as exc:
            logger.exception("Could not reconcile answers for %s", payload.participant_id)
            raise HTTPException(status_code=500, detail="Failed to grade submission") from exc
        return {
            "score": result.score,
            "totalQuestions": result.total_questions,
            "totalGradeable": result.total_gradeable,
            "pendingManualGrading": result.pending_manual_grading,
        }

    @app.get("/api/session/results")
    def get_results(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            session = manager.get_active_session()
        except NoActiveSessionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "sessionId": session.session_id,
            "quizName": session.quiz.name,
            "results": [_result_payload(result) for result in session.get_results()],
        }

    @app.get("/api/sessions")
    def list_sessions(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [_session_summary(session) for session in manager.list_sessions()]

    @app.get("/api/sessions/{session_id}")
    def get_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.get_session(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Session not found") from exc
        return {
            **_session_summary(session),
            "results": [_result_payload(result) for result in session.get_results()],
        }

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API with uvicorn until the process is interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=API_LOG_LEVEL)
    uvicorn.Server(config).run()
