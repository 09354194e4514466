"""FastAPI application for the task manager backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_api.config import ALLOWED_ORIGINS, HOST, LOG_LEVEL, PORT
from task_api.database import create_db_and_tables
from task_api.errors import TaskNotFoundError, TaskValidationError
from task_api.routes.tasks import router as tasks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup via SQLModel create_all."""
    create_db_and_tables()
    yield


app = FastAPI(title="Task Manager API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(tasks_router)


@app.exception_handler(TaskValidationError)
async def task_validation_handler(request: Request, exc: TaskValidationError):
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(TaskNotFoundError)
async def task_not_found_handler(request: Request, exc: TaskNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Answer malformed or wrongly shaped bodies with 400 instead of 422."""
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request body", "errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Reduce pydantic error entries to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "task-api"}


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
