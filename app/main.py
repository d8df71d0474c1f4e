"""
Quiz Session API - Main Application
FILE: main.py
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time

from app.core.config import settings
from app.core.exceptions import QuizServiceError
from app.db.mongodb import connect_to_mongo, close_mongo_connection, ping_mongo
from app.api.quiz_session import router as quiz_session_router
from app.models.api_response import ApiResponse

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("🚀 Starting Quiz Session API...")

    try:
        await connect_to_mongo()
        logger.info("✓ MongoDB connected")
    except Exception as e:
        logger.error(f"❌ Startup error: {e}")
        raise

    yield

    # Shutdown
    logger.info("🛑 Shutting down Quiz Session API...")

    try:
        await close_mongo_connection()
        logger.info("✓ MongoDB disconnected")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")


app = FastAPI(
    title="Quiz Session API",
    description="""
    Quiz-taking API: pick a test, answer its multiple-choice questions one
    at a time, and get a scored result.

    ## Endpoints
    - **Tests**: `/api/quiz/tests` - Available tests
    - **Start**: `/api/quiz/start-session` - Start a session for a user and a test
    - **Next question**: `/api/quiz/session/{sessionId}/next-question` - Current question or completion signal
    - **Answer**: `/api/quiz/session/{sessionId}/answer` - Submit an answer
    - **Result**: `/api/quiz/session/{sessionId}/result` - Final score
    - **Health**: `/health` - Service health check
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000  # Convert to ms
    response.headers["X-Process-Time-Ms"] = str(round(process_time, 2))
    return response


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    logger.info(f"📨 {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(
        f"📤 {request.method} {request.url.path} - "
        f"Status: {response.status_code}"
    )
    return response


# ==================== ERROR HANDLERS ====================

@app.exception_handler(QuizServiceError)
async def quiz_service_error_handler(request: Request, exc: QuizServiceError):
    """Map service errors to the response envelope with their stable code"""
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.code} on {request.url.path}: {exc.message} ({exc.detail})")
    else:
        logger.warning(f"⚠️ {exc.code} on {request.url.path}: {exc.message}")

    body = ApiResponse.fail(exc.message, errors=exc.errors, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as VALIDATION_ERROR / 400"""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        errors.append(f"{location}: {message}" if location else message)

    logger.warning(f"⚠️ Validation failed on {request.url.path}: {errors}")
    body = ApiResponse.fail("Validation failed.", errors=errors, code="VALIDATION_ERROR")
    return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


# ==================== INCLUDE ROUTERS ====================

app.include_router(quiz_session_router, tags=["Quiz Sessions"])


# ==================== ROOT ENDPOINTS ====================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Quiz Session API",
        "version": "1.0.0",
        "status": "operational",
        "endpoints": {
            "docs": "/docs",
            "redoc": "/redoc",
            "tests": "/api/quiz/tests",
            "start_session": "/api/quiz/start-session",
            "next_question": "/api/quiz/session/{sessionId}/next-question",
            "answer": "/api/quiz/session/{sessionId}/answer",
            "result": "/api/quiz/session/{sessionId}/result",
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check for the service and its MongoDB connection

    Returns:
        Health status with per-component details (503 when degraded)
    """
    mongo_healthy = await ping_mongo()

    health_status = {
        "status": "healthy" if mongo_healthy else "degraded",
        "timestamp": time.time(),
        "components": {
            "mongodb": {
                "status": "healthy" if mongo_healthy else "unhealthy",
                "message": "Connected and responsive" if mongo_healthy else "Connection failed"
            }
        },
        "api": {
            "title": app.title,
            "version": app.version,
            "status": "operational"
        }
    }

    return JSONResponse(
        status_code=200 if mongo_healthy else 503,
        content=health_status
    )


# ==================== RUN APPLICATION ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
        log_level="info"
    )
