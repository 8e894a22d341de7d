import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response

from todo_api import schemas
from todo_api.config import Settings, settings as default_settings
from todo_api.store import TaskStore, get_store
from todo_api.validation import parse_json_body, validate_patch_body, validate_task_body

logger = logging.getLogger(__name__)

ENDPOINTS = [
    ("GET", "/status", "API status"),
    ("GET", "/tasks", "Get all tasks"),
    ("GET", "/tasks/{id}", "Get task by ID"),
    ("POST", "/tasks", "Create new task"),
    ("PUT", "/tasks/{id}", "Update task"),
    ("PATCH", "/tasks/{id}", "Partially update task"),
    ("DELETE", "/tasks/{id}", "Delete task"),
]

ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

NOT_FOUND = {404: {"model": schemas.ErrorResponse}}
BAD_REQUEST = {400: {"model": schemas.ErrorResponse}}

router = APIRouter()


def task_not_found(task_id: int) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Task not found", "id": task_id},
    )


def bad_request(error: dict) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error)


def internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "details": str(exc)},
    )


@router.get("/status", response_model=schemas.StatusResponse)
async def service_status(request: Request, store: TaskStore = Depends(get_store)):
    return {
        "status": "ok",
        "tasks_count": store.count(),
        "service": request.app.state.settings.service_name,
    }


@router.get("/tasks", response_model=List[schemas.TaskResponse])
async def list_tasks(store: TaskStore = Depends(get_store)):
    try:
        tasks = store.get_all()
        logger.info(f"Tasks count: {len(tasks)}")
        return JSONResponse(content=[task.serialize() for task in tasks])
    except Exception as e:
        logger.exception(f"Error in GET /tasks: {e}")
        return internal_error(e)


@router.get("/tasks/{task_id:int}", response_model=schemas.TaskResponse, responses=NOT_FOUND)
async def read_task(task_id: int, store: TaskStore = Depends(get_store)):
    task = store.get(task_id)
    if task is None:
        return task_not_found(task_id)
    return JSONResponse(content=task.serialize())


@router.post(
    "/tasks",
    response_model=schemas.TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_task(request: Request, store: TaskStore = Depends(get_store)):
    body = parse_json_body(await request.body())
    if not body.ok:
        return bad_request(body.error)
    draft = validate_task_body(body.value)
    if not draft.ok:
        return bad_request(draft.error)

    task = store.create(draft.value)
    if task is None:
        return bad_request({"error": "Invalid task"})
    headers = {"Location": f"{request.url}/{task.id}"}
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=task.serialize(), headers=headers)


@router.put(
    "/tasks/{task_id:int}",
    response_model=schemas.TaskResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
async def update_task(task_id: int, request: Request, store: TaskStore = Depends(get_store)):
    body = parse_json_body(await request.body())
    if not body.ok:
        return bad_request(body.error)
    replacement = validate_task_body(body.value)
    if not replacement.ok:
        return bad_request(replacement.error)

    if not store.update(task_id, replacement.value):
        return task_not_found(task_id)
    return _current(task_id, store)


@router.patch(
    "/tasks/{task_id:int}",
    response_model=schemas.TaskResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
async def patch_task(task_id: int, request: Request, store: TaskStore = Depends(get_store)):
    body = parse_json_body(await request.body())
    if not body.ok:
        return bad_request(body.error)
    fields = validate_patch_body(body.value)
    if not fields.ok:
        return bad_request(fields.error)

    if not store.patch_update(task_id, fields.value):
        return task_not_found(task_id)
    return _current(task_id, store)


@router.delete("/tasks/{task_id:int}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    if not store.delete(task_id):
        return task_not_found(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _current(task_id: int, store: TaskStore) -> JSONResponse:
    # the task may have been deleted between the write and this read
    task = store.get(task_id)
    if task is None:
        return task_not_found(task_id)
    return JSONResponse(content=task.serialize())


def preflight_response(request: Request, allowed_origins: List[str]) -> Response:
    """Empty 200 answer to any OPTIONS request, carrying permissive CORS headers."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
        "Access-Control-Allow-Headers": request.headers.get(
            "access-control-request-headers", "Content-Type"),
    }
    origin = request.headers.get("origin")
    if "*" in allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in allowed_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return Response(status_code=status.HTTP_200_OK, headers=headers)


def create_app(store: Optional[TaskStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    store = store if store is not None else TaskStore()

    # Set up logging
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_examples:
            store.seed_examples()
            logger.info(f"Seeded example tasks, {store.count()} in store")
        logger.info(f"{settings.service_name} listening on port {settings.port}")
        for method, path, summary in ENDPOINTS:
            logger.info(f"  {method:<7} {path:<12} - {summary}")
        yield

    app = FastAPI(title=settings.service_name, lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    # CORS headers on regular responses; OPTIONS never reaches it
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware to log requests before and after.
    # Registered last, so it is outermost and answers every OPTIONS itself.
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Request: {request.method} {request.url}")
        start_time = time.perf_counter()
        if request.method == "OPTIONS":
            response = preflight_response(request, settings.cors_origins)
        else:
            response = await call_next(request)
        process_time = time.perf_counter() - start_time
        logger.info(
            f"Response status: {response.status_code} | Time: {process_time:.4f}s")
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.exception(f"Unhandled error in {request.method} {request.url.path}: {exc}")
        return internal_error(exc)

    app.include_router(router)
    return app


app = create_app()
