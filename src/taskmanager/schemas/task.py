"""Pydantic schemas for tasks.

- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to replace a task's fields
- TaskRead: what the API returns
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")


class TaskUpdate(BaseModel):
    """Full replacement of title/description; completed is left alone when omitted."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
