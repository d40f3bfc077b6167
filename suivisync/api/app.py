"""FastAPI dev backend for suivisync.

Serves an InMemoryTaskService over HTTP so SuiviApiClient (and any other
client) can be exercised locally without the real Suivi service.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

from suivisync import __version__
from suivisync.engine.selectors import count_by_filter, get_by_status_filter
from suivisync.integrations.in_memory import ApiError, InMemoryTaskService
from suivisync.models.task import Activity, Task, TaskUpdate

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Suivi mock API",
    description="In-memory task service for local development",
    version=__version__,
)

_service: Optional[InMemoryTaskService] = None


def get_service() -> InMemoryTaskService:
    """Process-wide in-memory service, created on first use."""
    global _service
    if _service is None:
        _service = InMemoryTaskService()
    return _service


def _http_error(e: ApiError) -> HTTPException:
    return HTTPException(status_code=e.status, detail=e.message)


# Request/response models
class QuickCaptureRequest(BaseModel):
    """Request body for quick capture."""
    text: str = Field(..., min_length=1, description="Task title")


class TaskSummaryResponse(BaseModel):
    """Counts shown on the dashboard."""
    counts: Dict[str, int]
    today: date


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/tasks", response_model=List[Task])
async def list_tasks(status: Optional[str] = None, service: InMemoryTaskService = Depends(get_service)):
    """List tasks, optionally filtered ('all', 'active', 'completed' or an exact status)."""
    tasks = await service.get_tasks()
    if status is None:
        return tasks
    return get_by_status_filter(tasks, status)


@app.get("/api/tasks/summary", response_model=TaskSummaryResponse)
async def task_summary(service: InMemoryTaskService = Depends(get_service)):
    today = date.today()
    tasks = await service.get_tasks()
    return TaskSummaryResponse(counts=count_by_filter(tasks, today), today=today)


@app.post("/api/tasks", response_model=Task, status_code=201)
async def create_task(data: dict, service: InMemoryTaskService = Depends(get_service)):
    try:
        return await service.create_task(data)
    except ApiError as e:
        raise _http_error(e) from e


@app.post("/api/tasks/quick-capture", response_model=Task, status_code=201)
async def quick_capture(request: QuickCaptureRequest, service: InMemoryTaskService = Depends(get_service)):
    try:
        return await service.quick_capture(request.text)
    except ApiError as e:
        raise _http_error(e) from e


@app.get("/api/tasks/{task_id}", response_model=Task)
async def get_task(task_id: str, service: InMemoryTaskService = Depends(get_service)):
    try:
        return await service.get_task(task_id)
    except ApiError as e:
        raise _http_error(e) from e


@app.patch("/api/tasks/{task_id}", response_model=Task)
async def update_task(task_id: str, update: TaskUpdate, service: InMemoryTaskService = Depends(get_service)):
    """Apply a partial update. Only fields present in the body change."""
    try:
        return await service.update_task(task_id, update)
    except ApiError as e:
        raise _http_error(e) from e


@app.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, service: InMemoryTaskService = Depends(get_service)):
    try:
        await service.delete_task(task_id)
    except ApiError as e:
        raise _http_error(e) from e
    return Response(status_code=204)


@app.get("/api/tasks/{task_id}/activities", response_model=List[Activity])
async def list_task_activities(task_id: str, service: InMemoryTaskService = Depends(get_service)):
    try:
        return await service.get_task_activities(task_id)
    except ApiError as e:
        raise _http_error(e) from e


@app.post("/api/tasks/{task_id}/activities", response_model=Activity, status_code=201)
async def add_task_activity(task_id: str, activity: Activity, service: InMemoryTaskService = Depends(get_service)):
    try:
        return await service.add_task_activity(task_id, activity)
    except ApiError as e:
        raise _http_error(e) from e
