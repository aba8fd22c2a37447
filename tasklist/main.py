"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasklist.config import Settings
from tasklist.errors import DuplicateTitleError, NotFoundError, TaskListError, ValidationError
from tasklist.logging_setup import configure_logging, get_logger
from tasklist.models import HealthResponse, Task, TaskDraft
from tasklist.persistence import FileStorage, KeyValueStorage, TaskPersistence
from tasklist.session import TASK_ADDED, TASK_DELETED, TASK_UPDATED, TaskSession

logger = get_logger(__name__)

# PersistenceError is absent: save failures are reported through PERSISTENCE_HEADER.
ERROR_STATUS: dict[type[TaskListError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    DuplicateTitleError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}

PERSISTENCE_HEADER = "X-Persistence-Error"
NOTICE_HEADER = "X-Notice"


def get_session(request: Request) -> TaskSession:
    """Return the session owned by the running app."""
    return request.app.state.session


def _report(session: TaskSession, response: Response, notice: str | None = None) -> None:
    """Attach the success notice, if any, and flag a failed save."""
    if notice is not None:
        response.headers[NOTICE_HEADER] = notice
    if session.last_error is not None:
        response.headers[PERSISTENCE_HEADER] = session.last_error.message


def create_app(settings: Settings | None = None, storage: KeyValueStorage | None = None) -> FastAPI:
    """Build the application around a single task session."""
    settings = settings or Settings()
    configure_logging(settings.log_level, settings.log_format)

    persistence = TaskPersistence(
        storage if storage is not None else FileStorage(settings.storage_path),
        key=settings.storage_key,
    )
    session = TaskSession(persistence)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session.on_init()
        logger.info("app_started", app_name=settings.app_name, tasks=len(session.tasks))
        yield

    app = FastAPI(
        title=settings.app_name,
        description="A single-user task list with priority ordering and durable storage.",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TaskListError)
    async def task_error_handler(request: Request, exc: TaskListError) -> JSONResponse:
        code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info("request_rejected", path=request.url.path, status=code, error=exc.message)
        return JSONResponse(status_code=code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("request_invalid", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.get("/api/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(version=settings.version)

    @app.get("/api/tasks", response_model=list[Task], tags=["Tasks"])
    async def list_tasks(q: str = "", session: TaskSession = Depends(get_session)) -> list[Task]:
        """List tasks in display order, optionally filtered by title."""
        return session.on_search(q)

    # Mutations write to storage, so they are plain functions run in the threadpool.

    @app.post(
        "/api/tasks",
        response_model=list[Task],
        status_code=status.HTTP_201_CREATED,
        tags=["Tasks"],
    )
    def create_task(
        draft: TaskDraft,
        response: Response,
        session: TaskSession = Depends(get_session),
    ) -> list[Task]:
        """Add a task and return the updated collection."""
        tasks = session.on_submit(draft)
        _report(session, response, TASK_ADDED)
        return tasks

    @app.put("/api/tasks/{task_id}", response_model=list[Task], tags=["Tasks"])
    def update_task(
        task_id: UUID,
        draft: TaskDraft,
        response: Response,
        session: TaskSession = Depends(get_session),
    ) -> list[Task]:
        """Edit a task's title, description and priority."""
        tasks = session.on_submit(draft, editing_id=task_id)
        _report(session, response, TASK_UPDATED)
        return tasks

    @app.post("/api/tasks/{task_id}/toggle", response_model=list[Task], tags=["Tasks"])
    def toggle_task(
        task_id: UUID,
        response: Response,
        session: TaskSession = Depends(get_session),
    ) -> list[Task]:
        """Flip a task between pending and completed."""
        tasks = session.on_toggle(task_id)
        _report(session, response)
        return tasks

    @app.delete("/api/tasks/{task_id}", response_model=list[Task], tags=["Tasks"])
    def delete_task(
        task_id: UUID,
        response: Response,
        session: TaskSession = Depends(get_session),
    ) -> list[Task]:
        """Delete a task. Deleting a missing task is not an error."""
        tasks = session.on_delete(task_id)
        _report(session, response, TASK_DELETED)
        return tasks

    return app


def dev() -> None:
    """Run the development server."""
    settings = Settings()
    uvicorn.run(
        "tasklist.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
