# schemas/task.py
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Optional
from uuid import UUID
from enum import Enum
import unicodedata


class Priority(str, Enum):
    """タスクの優先度"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _check_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    # NUL や改行などの制御文字は不可
    if any(unicodedata.category(ch) == "Cc" for ch in value):
        raise ValueError("title must not contain control characters")
    return value


class TaskBase(BaseModel):
    title: str
    description: Optional[str] = None
    category: Optional[str] = "General"
    priority: Optional[Priority] = Priority.MEDIUM
    deadline: Optional[datetime] = None


class TaskCreate(TaskBase):
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return _check_title(value)


class TaskUpdate(BaseModel):
    # 送られてきたフィールドだけ更新する（exclude_unset で判定）
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        if value is None:
            raise ValueError("title must not be empty")
        return _check_title(value)

    @field_validator("completed")
    @classmethod
    def completed_not_null(cls, value):
        if value is None:
            raise ValueError("completed must be true or false")
        return value


class TaskResponse(TaskBase):
    id: UUID
    owner_id: UUID
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScoredTaskResponse(TaskResponse):
    score: int
