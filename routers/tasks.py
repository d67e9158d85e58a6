# routers/tasks.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from db.database import get_db

from models.task import Task
from models.user import User
from schemas.task import TaskCreate, TaskUpdate, TaskResponse, ScoredTaskResponse
from auth.deps import get_current_user
from services import task_store
from services.errors import NotTaskOwnerError, TaskNotFoundError
from services.ranking import rank_tasks
from services.task_view import SortOrder, StatusFilter, apply_view

from uuid import UUID
from typing import List, Optional

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


# -------------------------
# utility
# -------------------------
def load_owned_task(task_id: UUID, db: Session, user: User) -> Task:
    """
    404: タスクが存在しない
    401: 他のユーザーのタスク
    """
    try:
        return task_store.get_owned_task(db, task_id, user.id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    except NotTaskOwnerError:
        raise HTTPException(status_code=401, detail="Not authorized")


def to_scored_response(task: Task, score: int) -> ScoredTaskResponse:
    data = TaskResponse.model_validate(task).model_dump()
    return ScoredTaskResponse(**data, score=score)


# -------------------------
# endpoints
# -------------------------
@router.get("", response_model=List[ScoredTaskResponse])
def get_tasks(
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    q: Optional[str] = None,
    sort: SortOrder = SortOrder.SMART,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    tasks = task_store.list_tasks(db, user.id)
    scored = [to_scored_response(item.task, item.score) for item in rank_tasks(tasks)]

    # 既定値（all / 検索なし / smart）ならランキング順そのまま
    return apply_view(scored, status=status_filter, query=q, sort=sort)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return task_store.create_task(db, user.id, task.model_dump())


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return load_owned_task(task_id, db, user)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: UUID,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task = load_owned_task(task_id, db, user)
    return task_store.update_task(db, task, task_update.model_dump(exclude_unset=True))


@router.delete("/{task_id}")
def delete_task(task_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    task = load_owned_task(task_id, db, user)
    task_store.delete_task(db, task)
    return {"msg": "Task removed"}
