"""FastAPI application factory and entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from insightboard import __version__
from insightboard.api import router
from insightboard.core.config import Settings, get_settings
from insightboard.core.database import create_db_engine, create_session_factory
from insightboard.core.logs import configure_logging


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request bodies are client errors (400), not 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API around an explicit settings object. The engine and session
    factory are created here and shared by every request via app.state.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="InsightBoard API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _bad_request)
    app.include_router(router)
    return app
