# services/task_store.py
"""
タスクの永続化（ユーザー単位）

ルーターからはここだけを通して tasks テーブルに触る。
スコアは保存しない（ranking.rank_tasks で読み出し時に計算する）。
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.task import Task
from services.errors import NotTaskOwnerError, StoreError, TaskNotFoundError
from services.time_utils import to_naive_utc, utc_now_naive

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_PRIORITY = "Medium"

UPDATABLE_FIELDS = ("title", "description", "category", "priority", "deadline", "completed")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Could not %s task", action)
        raise StoreError(f"Could not {action} task") from e


def list_tasks(db: Session, owner_id: UUID) -> List[Task]:
    # 作成順（ranking の同点はこの順のまま）
    return (
        db.query(Task)
        .filter(Task.owner_id == owner_id)
        .order_by(Task.seq, Task.created_at)
        .all()
    )


def _next_seq(db: Session, owner_id: UUID) -> int:
    last = db.query(func.coalesce(func.max(Task.seq), 0)).filter(Task.owner_id == owner_id).scalar()
    return last + 1


def get_task(db: Session, task_id: UUID) -> Optional[Task]:
    return db.query(Task).filter(Task.id == task_id).first()


def get_owned_task(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    """
    存在しなければ TaskNotFoundError、他人のタスクなら NotTaskOwnerError
    """
    task = get_task(db, task_id)
    if task is None:
        raise TaskNotFoundError(str(task_id))
    if task.owner_id != owner_id:
        logger.warning("User %s tried to access task %s owned by someone else", owner_id, task_id)
        raise NotTaskOwnerError(str(task_id))
    return task


def create_task(db: Session, owner_id: UUID, data: Dict[str, Any]) -> Task:
    now = utc_now_naive()
    task = Task(
        owner_id=owner_id,
        title=data["title"],
        description=data.get("description"),
        category=data.get("category") or DEFAULT_CATEGORY,
        priority=_enum_value(data.get("priority")) or DEFAULT_PRIORITY,
        deadline=to_naive_utc(data.get("deadline")),
        completed=False,
        seq=_next_seq(db, owner_id),
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    _commit(db, "create")
    db.refresh(task)

    logger.info("Created task %s for user %s", task.id, owner_id)
    return task


def update_task(db: Session, task: Task, changes: Dict[str, Any]) -> Task:
    """
    changes に含まれるフィールドだけ上書きする
    None は「消す」扱い（category / priority は既定値に戻す）
    """
    for name in UPDATABLE_FIELDS:
        if name not in changes:
            continue
        value = _enum_value(changes[name])

        if name == "deadline":
            value = to_naive_utc(value)
        elif name == "category" and value is None:
            value = DEFAULT_CATEGORY
        elif name == "priority" and value is None:
            value = DEFAULT_PRIORITY

        setattr(task, name, value)

    task.updated_at = utc_now_naive()
    _commit(db, "update")
    db.refresh(task)

    logger.info("Updated task %s (%s)", task.id, ", ".join(sorted(changes)) or "no fields")
    return task


def delete_task(db: Session, task: Task) -> None:
    task_id = task.id
    db.delete(task)
    _commit(db, "delete")
    logger.info("Deleted task %s", task_id)
