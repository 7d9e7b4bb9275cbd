import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hobby_planner.core.config import Settings, get_settings
from hobby_planner.database.db import Base, engine
from hobby_planner.models import attendees, sessions  # noqa: F401  (register tables)
from hobby_planner.routes import attendees as attendee_routes
from hobby_planner.routes import management, suggestions
from hobby_planner.routes import sessions as session_routes
from hobby_planner.services.notifications import Mailer

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)
    logger.info("Hobby sessions server starting on port %s", settings.PORT)
    Mailer(settings).verify()
    yield
    engine.dispose()


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": problems or "Invalid request"})


async def store_error_handler(request: Request, exc: Exception):
    """Database or Redis failure: log the full context, answer with a generic 500."""
    logger.error(
        "%s in %s %s params=%s",
        type(exc).__name__,
        request.method,
        request.url.path,
        request.path_params,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="Hobby Planner", lifespan=lifespan)
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(RedisError, store_error_handler)

    @app.get("/", response_class=PlainTextResponse)
    def hello():
        return "Hello from hobby planner!"

    # Management routes must win over /sessions/{session_id}
    app.include_router(management.router)
    app.include_router(session_routes.router)
    app.include_router(attendee_routes.router)
    app.include_router(suggestions.router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("hobby_planner.main:app", host="0.0.0.0", port=settings.PORT)
