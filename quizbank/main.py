"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from prometheus_fastapi_instrumentator import Instrumentator

from quizbank.core.config import Settings, get_settings
from quizbank.core.database import create_db_engine, make_session_factory, init_db, close_db
from quizbank.core.exceptions import QuizBankError
from quizbank.storage.json_file import JsonQuestionStore, JsonQuizResultStore
from quizbank.storage.database import SqlQuestionStore, SqlQuizResultStore
from quizbank.services.questions import QuestionService
from quizbank.services.quiz_results import QuizResultService
from quizbank.api.questions import router as questions_router
from quizbank.api.quiz_results import router as quiz_results_router

logger = logging.getLogger(__name__)

def _build_stores(app: FastAPI, settings: Settings):
    if settings.uses_database():
        engine = create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        session_factory = make_session_factory(engine)
        app.state.engine = engine
        return SqlQuestionStore(session_factory), SqlQuizResultStore(session_factory)
    app.state.engine = None
    return JsonQuestionStore(settings.QUESTIONS_FILE), JsonQuizResultStore(settings.QUIZ_RESULTS_FILE)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} with {settings.STORAGE_BACKEND} storage...")

    engine = app.state.engine
    if engine is not None:
        try:
            init_db(engine)
        except Exception as e:
            logger.critical(f"Database connection error: {e}")
            raise SystemExit(1)
        logger.info("Database initialized")
    else:
        logger.info(f"Questions file: {settings.QUESTIONS_FILE}, results file: {settings.QUIZ_RESULTS_FILE}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    if engine is not None:
        close_db(engine)
    logger.info("Shutdown complete")

def _error_response(status_code: int, message, error_type: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": error_type, "status_code": status_code, **extra}},
    )

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize Sentry if configured
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        )

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    question_store, result_store = _build_stores(app, settings)
    app.state.question_service = QuestionService(
        question_store,
        default_lang=settings.DEFAULT_LANG,
        default_sample_size=settings.DEFAULT_SAMPLE_SIZE,
        required_languages=settings.REQUIRED_LANGUAGES,
    )
    app.state.quiz_result_service = QuizResultService(result_store, default_lang=settings.DEFAULT_LANG)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    # Exception handlers
    @app.exception_handler(QuizBankError)
    async def quizbank_exception_handler(request: Request, exc: QuizBankError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.error_type)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, exc.detail, "http_error")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # A malformed path id names no resource; malformed fields are reported as 400
        errors = exc.errors()
        if errors and all(e.get("loc", ())[:1] == ("path",) for e in errors):
            return _error_response(status.HTTP_404_NOT_FOUND, "Not found", "not_found")
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "Validation error", "validation_error",
            details=jsonable_errors(exc),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        message = "An internal error occurred" if settings.is_production() else str(exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, "internal_error")

    @app.get("/health", tags=["Health"])
    def health_check():
        """Basic health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "storage": settings.STORAGE_BACKEND,
        }

    app.include_router(questions_router, prefix=f"{settings.API_PREFIX}/questions", tags=["questions"])
    app.include_router(quiz_results_router, prefix=f"{settings.API_PREFIX}/quiz-results", tags=["quiz-results"])

    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    # Front-end last so it never shadows the API
    if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app

def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]

app = create_app()

def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "quizbank.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )

if __name__ == "__main__":
    run()
