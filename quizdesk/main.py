"""
Main FastAPI application.
"""
import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizdesk import __version__
from quizdesk.api.v1 import api_router
from quizdesk.core.config import settings
from quizdesk.core.exceptions import QuizDeskError
from quizdesk.db.base import engine
from quizdesk.models import Base
from quizdesk.schemas.common import ErrorResponse
from quizdesk.services.quiz_runner import QuizRunner

# Configure logging BEFORE creating the app
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()
    ]
)
logging.getLogger("uvicorn").setLevel(logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Quiz authoring, timed quiz taking and results review",
    version=__version__,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.quiz_runner = QuizRunner()
_sweeper: Optional[asyncio.Task] = None

if settings.BACKEND_CORS_ORIGINS == "*":
    cors_origins = ["*"]
else:
    cors_origins = [str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(QuizDeskError)
async def quizdesk_exception_handler(request: Request, exc: QuizDeskError):
    """
    Render application errors with the path the client should move to.

    Args:
        request: Request object
        exc: Application error

    Returns:
        JSON response with detail and redirect_to
    """
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.detail, redirect_to=exc.redirect_to).model_dump(),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON response with error details
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle all unhandled exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        JSON response with error message
    """
    logger.error(f"Global unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal server error occurred."},
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """
    Create tables and start the countdown sweeper.
    """
    global _sweeper
    Base.metadata.create_all(bind=engine)
    _sweeper = asyncio.create_task(
        app.state.quiz_runner.run_sweeper(settings.TIMER_SWEEP_INTERVAL_SECONDS)
    )
    logger.info(f"Starting {settings.PROJECT_NAME}")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop the countdown sweeper. Unfinished quizzes are discarded.
    """
    if _sweeper is not None:
        _sweeper.cancel()
        try:
            await _sweeper
        except asyncio.CancelledError:
            pass
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - Health check.

    Returns:
        Status message
    """
    return {
        "message": "QuizDesk API",
        "status": "healthy",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("quizdesk.main:app", host="0.0.0.0", port=8000, reload=True)
