import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, envelope, schemas
from .config import get_settings
from .database import close_db, get_db, init_db
from .errors import TaskFault
from .logging_setup import setup_logging
from .service import TaskService
from .validation import ValidationMode, validate_request, violations_from_errors

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    init_db()
    logger.info("%s started env=%s", settings.app_name, settings.environment)
    yield
    logger.info("Shutting down gracefully...")
    close_db()


app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def access_log(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


# ------------------------------------------------------------
# Error projection
# ------------------------------------------------------------

@app.exception_handler(TaskFault)
async def task_fault_handler(request: Request, exc: TaskFault):
    return JSONResponse(status_code=exc.status_code, content=envelope.from_fault(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope.validation_failed(violations_from_errors(exc.errors())),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = "API endpoint not found"
    else:
        error = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": error})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope.internal_error(str(exc), debug=settings.debug),
    )


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


# ------------------------------------------------------------
# Meta
# ------------------------------------------------------------

@app.get("/api/health")
def health_check():
    return {
        "success": True,
        "message": f"{settings.app_name} is running",
        "timestamp": schemas.format_utc(datetime.now(timezone.utc)),
    }


@app.get("/api/docs")
def api_docs():
    return {
        "success": True,
        "documentation": {
            "title": settings.app_name,
            "version": __version__,
            "endpoints": {
                "GET /api/health": "Health check",
                "GET /api/tasks": "Get all tasks",
                "GET /api/tasks/{id}": "Get task by ID",
                "POST /api/tasks": "Create new task",
                "PUT /api/tasks/{id}": "Update task (only the fields provided)",
                "PATCH /api/tasks/{id}/status": "Update task status only",
                "DELETE /api/tasks/{id}": "Delete task",
            },
            "taskSchema": {
                "id": "integer (auto-generated)",
                "title": "string (required, max 255 chars)",
                "description": "string (optional, max 1000 chars)",
                "status": "enum: " + "|".join(s.value for s in schemas.TaskStatus),
                "due_date": "ISO 8601 datetime string",
                "created_at": "datetime (auto-generated)",
                "updated_at": "datetime (auto-updated)",
            },
        },
    }


# ------------------------------------------------------------
# Tasks
# ------------------------------------------------------------

@app.get("/api/tasks")
def list_tasks(service: TaskService = Depends(get_task_service)):
    tasks = [schemas.TaskOut.model_validate(t) for t in service.list_all()]
    return envelope.success(tasks, count=len(tasks))


@app.get("/api/tasks/{task_id}")
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    tid, _ = validate_request(raw_id=task_id)
    return envelope.success(schemas.TaskOut.model_validate(service.get(tid)))


@app.post("/api/tasks", status_code=status.HTTP_201_CREATED)
def create_task(payload: Any = Body(None), service: TaskService = Depends(get_task_service)):
    _, task_in = validate_request(payload=payload, mode=ValidationMode.CREATE)
    task = service.create(task_in)
    return envelope.success(schemas.TaskOut.model_validate(task), message="Task created successfully")


@app.put("/api/tasks/{task_id}")
def update_task(task_id: str, payload: Any = Body(None), service: TaskService = Depends(get_task_service)):
    tid, task_in = validate_request(raw_id=task_id, payload=payload, mode=ValidationMode.UPDATE)
    task = service.replace(tid, task_in)
    return envelope.success(schemas.TaskOut.model_validate(task), message="Task updated successfully")


@app.patch("/api/tasks/{task_id}/status")
def update_task_status(task_id: str, payload: Any = Body(None), service: TaskService = Depends(get_task_service)):
    tid, status_in = validate_request(raw_id=task_id, payload=payload, mode=ValidationMode.STATUS_ONLY)
    task = service.update_status(tid, status_in.status)
    return envelope.success(schemas.TaskOut.model_validate(task), message="Task status updated successfully")


@app.delete("/api/tasks/{task_id}")
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    tid, _ = validate_request(raw_id=task_id)
    service.delete(tid)
    return envelope.success({"id": tid, "deleted": True}, message="Task deleted successfully")


def run():
    import uvicorn

    uvicorn.run("task_manager.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
