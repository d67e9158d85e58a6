# client/board.py
"""
クライアント側のタスク一覧

サーバーの smart 順を保持し、表示時に task_view で絞り込み・並び替えする。
完了切り替えと削除は楽観的更新（先にローカル、失敗したら元に戻す）。
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional
from uuid import UUID

from client.api_client import ApiError, TodoApiClient
from services.task_view import SortOrder, StatusFilter, apply_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimisticChange:
    """ローカル変更の前後のスナップショット"""
    description: str
    before: List[Any]
    after: List[Any]


class TaskBoard:
    def __init__(self, api: TodoApiClient):
        self.api = api
        self.tasks: List[Any] = []
        self.status = StatusFilter.ALL
        self.query = ""
        self.sort = SortOrder.SMART

    def refresh(self) -> List[Any]:
        self.tasks = self.api.list_tasks()
        return self.tasks

    def visible(self) -> List[Any]:
        return apply_view(self.tasks, status=self.status, query=self.query, sort=self.sort)

    def find(self, task_id) -> Optional[Any]:
        for task in self.tasks:
            if str(task.id) == str(task_id):
                return task
        return None

    def _require(self, task_id):
        task = self.find(task_id)
        if task is None:
            raise KeyError(f"Task {task_id} is not on the board")
        return task

    def save(self, title: str, task_id: Optional[UUID] = None, **fields: Any) -> List[Any]:
        """新規作成 or 編集。保存後は並び順が変わるのでサーバーから取り直す"""
        if task_id is None:
            self.api.create_task(title, **fields)
        else:
            self.api.update_task(task_id, title=title, **fields)
        return self.refresh()

    def _run(self, change: OptimisticChange, remote: Callable[[], Any]) -> Any:
        # 1. ローカルに反映 2. サーバーに送る 3. 失敗したら元に戻す
        self.tasks = change.after
        try:
            return remote()
        except ApiError as e:
            logger.warning("%s failed, rolling back: %s", change.description, e.message)
            self.tasks = change.before
            raise

    def toggle_complete(self, task_id) -> Any:
        task = self._require(task_id)
        toggled = task.model_copy(update={"completed": not task.completed})
        change = OptimisticChange(
            description=f"toggle {task.id}",
            before=list(self.tasks),
            after=[toggled if t is task else t for t in self.tasks],
        )
        self._run(change, lambda: self.api.update_task(task.id, completed=toggled.completed))
        return toggled

    def delete(self, task_id) -> None:
        task = self._require(task_id)
        change = OptimisticChange(
            description=f"delete {task.id}",
            before=list(self.tasks),
            after=[t for t in self.tasks if t is not task],
        )
        self._run(change, lambda: self.api.delete_task(task.id))
