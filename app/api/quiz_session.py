"""
Quiz Session API Routes
Catalog listing, session start, question progression, answer submission and results
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.exceptions import QuizServiceError, StoreError
from app.db.catalog_store import MongoCatalogStore
from app.db.session_store import MongoSessionStore
from app.models.api_response import ApiResponse
from app.models.catalog import TestSummary
from app.models.next_question import NextQuestionResponse
from app.models.quiz_sessions import SessionResultResponse
from app.models.start_session import StartSessionRequest, StartSessionResponse
from app.models.submit_answer import SubmitAnswerRequest, SubmitAnswerResponse
from app.services.quiz_session_service import QuizSessionService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/quiz")

ERROR_RESPONSES = {
    400: {"description": "Invalid request", "model": ApiResponse},
    404: {"description": "Session, test, question or option not found", "model": ApiResponse},
    409: {"description": "Already answered, session completed or concurrent update", "model": ApiResponse},
    500: {"description": "Internal server error", "model": ApiResponse},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

async def get_db() -> AsyncIOMotorDatabase:
    """Dependency to get MongoDB database instance"""
    from app.db.mongodb import get_database, mongodb
    if mongodb.client is None:
        logger.error("❌ Request received without a MongoDB connection")
        raise StoreError("Database not connected")
    return get_database()


def get_quiz_session_service(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> QuizSessionService:
    """Dependency to get QuizSessionService instance"""
    return QuizSessionService(
        catalog=MongoCatalogStore(db),
        sessions=MongoSessionStore(db)
    )


def _unexpected(action: str, e: Exception) -> StoreError:
    logger.error(f"❌ Unexpected error while {action}: {e}", exc_info=True)
    return StoreError(f"An internal server error occurred while {action}.", detail=str(e))


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get(
    "/tests",
    response_model=ApiResponse[List[TestSummary]],
    responses={500: ERROR_RESPONSES[500]},
    summary="List available tests"
)
async def list_tests(
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[List[TestSummary]]:
    """Retrieve all tests the user can choose from"""
    try:
        tests = await service.list_tests()
        return ApiResponse.ok([TestSummary.from_test(test) for test in tests])
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("retrieving tests", e)


@router.post(
    "/start-session",
    response_model=ApiResponse[StartSessionResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Start a new quiz session",
    description="""
    Create a new quiz session for a user and a test.

    **Workflow:**
    1. Validates user name and test ID
    2. Checks that the test exists and has at least one question
    3. Creates an empty session (no answers, start time = now)

    **Next Steps:**
    Use `/session/{sessionId}/next-question` to fetch the first question.
    """
)
async def start_session(
    request: StartSessionRequest,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[StartSessionResponse]:
    """
    Start a new quiz session

    Example:
        POST /api/quiz/start-session
        {"userName": "Ada", "testId": "665f1c2e9b1e8a3d4c2b1a01"}
    """
    try:
        session = await service.start_session(
            user_name=request.userName,
            test_id=request.testId
        )
        return ApiResponse.ok(
            StartSessionResponse(
                sessionId=session.id,
                testId=session.test_id,
                userName=session.user_name,
                startTime=session.start_time
            ),
            message="Session successfully created."
        )
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("creating the session", e)


@router.get(
    "/session/{session_id}/next-question",
    response_model=ApiResponse[NextQuestionResponse],
    responses=ERROR_RESPONSES,
    summary="Get the current question of a session",
    description="""
    Return the first unanswered question of the session.

    When no question is left the session is finalized and the response has
    `isQuizComplete: true` and `question: null`; fetch the result next.

    **SECURITY:** options never include which one is correct.
    """
)
async def get_next_question(
    session_id: str,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[NextQuestionResponse]:
    try:
        current = await service.get_current_question(session_id)
        if current.isQuizComplete:
            return ApiResponse.ok(current, message="Quiz finished. Proceed to final results.")
        return ApiResponse.ok(current)
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("retrieving the next question", e)


@router.get(
    "/session/{session_id}/question/{question_id}",
    response_model=ApiResponse[NextQuestionResponse],
    responses=ERROR_RESPONSES,
    summary="Get a specific question of a session"
)
async def get_question(
    session_id: str,
    question_id: str,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[NextQuestionResponse]:
    """Sanitized view of one question, or the completion signal for a finished session"""
    try:
        current = await service.get_question(session_id, question_id)
        if current.isQuizComplete:
            return ApiResponse.ok(current, message="Session completed. Proceed to results.")
        return ApiResponse.ok(current)
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("retrieving the question", e)


@router.post(
    "/session/{session_id}/answer",
    response_model=ApiResponse[SubmitAnswerResponse],
    responses=ERROR_RESPONSES,
    summary="Submit and evaluate an answer",
    description="""
    Record the user's answer for a question of the session.

    **Behavior:**
    - Each question can be answered once per session
    - Correctness is evaluated server-side from the stored options
    - Returns the ID of the next question, or `nextQuestionId: null` with
      `isQuizComplete: true` when this was the last one
    """
)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[SubmitAnswerResponse]:
    try:
        logger.info(
            f"📝 Answer submission - "
            f"Session: {session_id}, "
            f"Question: {request.questionId}, "
            f"Selected: {request.selectedOptionId}"
        )
        result = await service.submit_answer(
            session_id=session_id,
            question_id=request.questionId,
            selected_option_id=request.selectedOptionId
        )
        return ApiResponse.ok(result, message="Answer submitted successfully.")
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("submitting the answer", e)


@router.get(
    "/session/{session_id}/result",
    response_model=ApiResponse[SessionResultResponse],
    responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]},
    summary="Get the result of a session",
    description="""
    Return the full session record with its final score.

    Requesting the result of an unfinished session ends it: the end time
    and score are fixed from the answers recorded so far.
    """
)
async def get_result(
    session_id: str,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ApiResponse[SessionResultResponse]:
    try:
        session = await service.get_result(session_id)
        return ApiResponse.ok(SessionResultResponse.from_session(session))
    except QuizServiceError:
        raise
    except Exception as e:
        raise _unexpected("retrieving the result", e)
