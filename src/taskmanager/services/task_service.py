"""Task service — CRUD over the tasks a single user owns.

Learn: Every method takes the owner's user_id and filters on it, so a
task id belonging to someone else behaves exactly like a missing one.
Routes never see another user's rows, and never learn they exist.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db.models import Task


class TaskNotFoundError(Exception):
    """Raised when a task doesn't exist or belongs to another user."""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ──────────────────────────────────────────

    async def create_task(self, user_id: int, title: str, description: str = "") -> Task:
        task = Task(user_id=user_id, title=title, description=description, completed=False)
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(self, user_id: int) -> list[Task]:
        """The user's tasks, newest first."""
        result = await self.db.execute(
            select(Task).where(Task.user_id == user_id).order_by(Task.id.desc())
        )
        return list(result.scalars().all())

    async def get_task(self, user_id: int, task_id: int) -> Task:
        result = await self.db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == user_id)
        )
        task = result.scalars().first()
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        user_id: int,
        task_id: int,
        title: str,
        description: str = "",
        completed: Optional[bool] = None,
    ) -> Task:
        """Replace title and description; completed is only changed when given."""
        task = await self.get_task(user_id, task_id)
        task.title = title
        task.description = description
        if completed is not None:
            task.completed = completed
        await self.db.commit()
        await self.db.refresh(task)
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, user_id: int, task_id: int) -> None:
        task = await self.get_task(user_id, task_id)
        await self.db.delete(task)
        await self.db.commit()
