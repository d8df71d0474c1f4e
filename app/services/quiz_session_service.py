"""
Quiz Session Service
Question sequencing, answer evaluation and completion detection for user sessions

Every operation fetches the session from the store, works on a local copy
and writes it back with a single version-checked replace. Nothing is
shared between calls or between sessions.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import (
    AlreadyAnsweredError,
    ConcurrentUpdateError,
    InvalidStateError,
    NotFoundError,
    QuizValidationError
)
from app.db.stores import CatalogStore, SessionStore
from app.models.catalog import Question, Test
from app.models.next_question import NextQuestionResponse
from app.models.quiz_sessions import Answer, UserSession, utc_now
from app.models.submit_answer import SubmitAnswerResponse
from app.services.question_mapper import map_to_question_view

logger = logging.getLogger(__name__)


def order_questions(questions: Sequence[Question]) -> List[Question]:
    """
    Fixed ordering of a test's questions (stable sort by question id)

    Depends on the question set only, never on session state, so the
    current question and the next question always agree.
    """
    return sorted(questions, key=lambda question: question.id)


def find_next_question(
    ordered: Sequence[Question],
    answered_ids: Iterable[str]
) -> Optional[Question]:
    """First question of the ordering that has no answer yet"""
    answered = set(answered_ids)
    for question in ordered:
        if question.id not in answered:
            return question
    return None


def _require(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise QuizValidationError(message)
    return value


class QuizSessionService:
    """Service class for quiz session progression with completion detection"""

    def __init__(
        self,
        catalog: CatalogStore,
        sessions: SessionStore,
        max_update_retries: Optional[int] = None
    ):
        """
        Initialize quiz session service

        Args:
            catalog: Store holding tests and questions
            sessions: Store holding user sessions
            max_update_retries: Attempts per write before a version conflict
                is reported (default: settings.max_update_retries)
        """
        self.catalog = catalog
        self.sessions = sessions
        self.max_update_retries = max(1, max_update_retries or settings.max_update_retries)

    async def list_tests(self) -> List[Test]:
        """Retrieve all tests of the catalog"""
        return await self.catalog.get_all_tests()

    async def start_session(self, user_name: str, test_id: str) -> UserSession:
        """
        Create a new, empty session for a test

        Raises:
            QuizValidationError: If user name or test ID is blank
            NotFoundError: If the test does not exist or has no questions
        """
        user_name = _require(user_name, "User name is required.")
        test_id = _require(test_id, "Test ID is required.")

        test = await self.catalog.get_test_by_id(test_id)
        if test is None:
            raise NotFoundError(f"Test with ID '{test_id}' not found.")

        questions = await self.catalog.get_questions_by_test_id(test.id)
        if not questions:
            logger.error(f"❌ Test {test.id} has no questions")
            raise NotFoundError(f"No questions found for test '{test.id}'.")

        session = UserSession(user_name=user_name, test_id=test.id)
        session_id = await self.sessions.create_session(session)
        session = session.model_copy(update={"id": session_id})

        logger.info(
            f"🎬 Started session {session.id} - "
            f"User: {user_name}, Test: {test.id} ({len(questions)} questions)"
        )
        return session

    async def get_current_question(self, session_id: str) -> NextQuestionResponse:
        """
        First unanswered question of the session, or the completion signal

        Reaching the end of the question list finalizes the session.
        """
        session = await self._load_session(session_id)
        if session.is_finalized:
            return self._completed(session)

        ordered = await self._load_questions(session.test_id)
        next_question = find_next_question(ordered, session.answered_question_ids())

        if next_question is None:
            logger.info(f"🏁 Session {session.id} has no unanswered questions left")
            session = await self._finalize(session)
            return self._completed(session)

        return NextQuestionResponse(
            sessionId=session.id,
            isQuizComplete=False,
            question=map_to_question_view(
                next_question,
                sequence_number=len(session.answers) + 1,
                total_questions=len(ordered)
            )
        )

    async def get_question(self, session_id: str, question_id: str) -> NextQuestionResponse:
        """
        A specific question of the session's test

        Raises:
            NotFoundError: If the question is missing or belongs to another test
            AlreadyAnsweredError: If the session already answered it
        """
        question_id = _require(question_id, "Question ID is required.")
        session = await self._load_session(session_id)
        if session.is_finalized:
            return self._completed(session)

        question = await self.catalog.get_question_by_id(question_id)
        if question is None or question.test_id != session.test_id:
            raise NotFoundError(
                f"Question with ID '{question_id}' not found in test '{session.test_id}'."
            )
        if session.has_answered(question.id):
            raise AlreadyAnsweredError(
                f"Question with ID '{question.id}' has already been answered."
            )

        ordered = await self._load_questions(session.test_id)
        return NextQuestionResponse(
            sessionId=session.id,
            isQuizComplete=False,
            question=map_to_question_view(
                question,
                sequence_number=len(session.answers) + 1,
                total_questions=len(ordered)
            )
        )

    async def submit_answer(
        self,
        session_id: str,
        question_id: str,
        selected_option_id: str
    ) -> SubmitAnswerResponse:
        """
        Evaluate and record an answer, finalizing the session on the last one

        The answer and, when it completes the quiz, the end time and score
        are written in one replace. A version conflict re-runs the whole
        check against the fresh session.

        Raises:
            QuizValidationError: If an ID is blank
            NotFoundError: If session, question (within the test) or option is missing
            InvalidStateError: If the session is already finalized
            AlreadyAnsweredError: If the question already has an answer
            ConcurrentUpdateError: If every attempt hit a version conflict
        """
        question_id = _require(question_id, "Question ID is required.")
        selected_option_id = _require(selected_option_id, "Selected Option ID is required.")

        for attempt in range(1, self.max_update_retries + 1):
            session = await self._load_session(session_id)

            if session.is_finalized:
                raise InvalidStateError(
                    "The session is already completed. Cannot submit new answers."
                )
            if session.has_answered(question_id):
                raise AlreadyAnsweredError(
                    f"Question with ID '{question_id}' has already been answered."
                )

            ordered = await self._load_questions(session.test_id)
            question = next((q for q in ordered if q.id == question_id), None)
            if question is None:
                raise NotFoundError(
                    f"Question with ID '{question_id}' not found in test '{session.test_id}'."
                )

            option = question.find_option(selected_option_id)
            if option is None:
                raise NotFoundError(
                    f"Selected Option ID '{selected_option_id}' is invalid "
                    f"for Question ID '{question_id}'."
                )

            answer = Answer(
                question_id=question.id,
                selected_option_id=option.id,
                is_correct=option.is_correct
            )
            updated = session.model_copy(deep=True)
            updated.answers.append(answer)

            next_question = find_next_question(ordered, updated.answered_question_ids())
            is_complete = next_question is None or len(updated.answers) >= len(ordered)
            if is_complete:
                updated = self._finalized_copy(updated)

            try:
                await self.sessions.replace_session(updated)
            except ConcurrentUpdateError:
                logger.warning(
                    f"⚠️ Session {session.id} changed while answering "
                    f"(attempt {attempt}/{self.max_update_retries})"
                )
                continue

            logger.info(
                f"✅ Recorded answer - Session: {session.id}, Question: {question.id}, "
                f"Selected: {option.id}, Result: {'✓' if answer.is_correct else '✗'}"
            )
            if is_complete:
                logger.info(
                    f"🏁 Session {session.id} completed - "
                    f"Score: {updated.score}/{len(ordered)}"
                )

            return SubmitAnswerResponse(
                questionId=question.id,
                isCorrect=answer.is_correct,
                nextQuestionId=None if is_complete else next_question.id,
                isQuizComplete=is_complete
            )

        raise ConcurrentUpdateError(
            f"Could not record the answer for session '{session_id}': "
            f"it kept changing during {self.max_update_retries} attempts."
        )

    async def get_result(self, session_id: str) -> UserSession:
        """
        Full session record with its final score

        Asking for the result before the last answer ends the quiz.
        """
        session = await self._load_session(session_id)
        if not session.is_finalized:
            logger.info(f"⏭️ Result requested for open session {session.id}, finalizing")
            session = await self._finalize(session)
        return session

    # ============================================================================
    # HELPERS
    # ============================================================================

    async def _load_session(self, session_id: str) -> UserSession:
        session_id = _require(session_id, "Session ID is required.")
        session = await self.sessions.get_session_by_id(session_id)
        if session is None:
            raise NotFoundError(f"Session with ID '{session_id}' not found.")
        return session

    async def _load_questions(self, test_id: str) -> List[Question]:
        questions = await self.catalog.get_questions_by_test_id(test_id)
        if not questions:
            raise NotFoundError(f"No questions found for test '{test_id}'.")
        return order_questions(questions)

    async def _finalize(self, session: UserSession) -> UserSession:
        """
        Set end time and score once

        No-op for an already finalized session, including one finalized by
        a concurrent request in the meantime.
        """
        for attempt in range(1, self.max_update_retries + 1):
            if session.is_finalized:
                return session

            finalized = self._finalized_copy(session)
            try:
                await self.sessions.replace_session(finalized)
            except ConcurrentUpdateError:
                logger.warning(
                    f"⚠️ Session {session.id} changed while finalizing "
                    f"(attempt {attempt}/{self.max_update_retries})"
                )
                session = await self._load_session(session.id)
                continue

            logger.info(
                f"🏁 Finalized session {finalized.id} - "
                f"Score: {finalized.score}/{len(finalized.answers)} answered"
            )
            return finalized

        if session.is_finalized:
            return session
        raise ConcurrentUpdateError(
            f"Could not finalize session '{session.id}': "
            f"it kept changing during {self.max_update_retries} attempts."
        )

    @staticmethod
    def _finalized_copy(session: UserSession) -> UserSession:
        # end_time and score always change together
        return session.model_copy(
            update={"end_time": utc_now(), "score": session.count_correct()}
        )

    @staticmethod
    def _completed(session: UserSession) -> NextQuestionResponse:
        return NextQuestionResponse(sessionId=session.id, isQuizComplete=True, question=None)
