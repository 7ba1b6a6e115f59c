"""Task API routes.

Learn: The whole router is mounted behind get_current_user_id (see
api/__init__.py), and every handler passes the bound user id down to
TaskService, which scopes each query to that owner. A missing task and
someone else's task both come back as 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.auth.dependencies import get_current_user_id
from taskmanager.db.engine import get_db
from taskmanager.schemas.task import MessageResponse, TaskCreate, TaskRead, TaskUpdate
from taskmanager.services.task_service import TaskService

router = APIRouter()


def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("/tasks", response_model=list[TaskRead])
async def list_tasks(
    user_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(get_task_service),
):
    """List the caller's tasks, newest first."""
    return await svc.list_tasks(user_id)


@router.post("/tasks", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    user_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(get_task_service),
):
    return await svc.create_task(user_id, title=body.title, description=body.description)


@router.get("/tasks/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(get_task_service),
):
    return await svc.get_task(user_id, task_id)


@router.put("/tasks/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    user_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(get_task_service),
):
    """Replace title/description and optionally toggle completion."""
    return await svc.update_task(
        user_id,
        task_id,
        title=body.title,
        description=body.description,
        completed=body.completed,
    )


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(get_task_service),
):
    await svc.delete_task(user_id, task_id)
    return MessageResponse(message="Task deleted successfully")
