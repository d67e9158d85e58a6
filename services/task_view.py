# services/task_view.py
"""
取得済みタスクの表示用フィルタ・並び替え

ステータス → 検索文字列 → 並び替え の順に適用する。
"smart" はサーバーが返した順（ranking.rank_tasks の結果）をそのまま使う。
"""
import unicodedata
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from services.time_utils import to_naive_utc


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class SortOrder(str, Enum):
    SMART = "smart"
    DATE = "date"
    ALPHABETICAL = "alphabetical"


SEARCH_FIELDS = ("title", "description", "category")


def matches_status(task: Any, status: StatusFilter) -> bool:
    if status == StatusFilter.ACTIVE:
        return not task.completed
    if status == StatusFilter.COMPLETED:
        return bool(task.completed)
    return True


def matches_query(task: Any, query: Optional[str]) -> bool:
    """
    title / description / category のどれかに部分一致すれば True（大文字小文字は無視）
    空白もそのまま検索文字列として扱う（空文字だけが全件一致）
    """
    if not query:
        return True

    needle = query.casefold()
    for name in SEARCH_FIELDS:
        value = getattr(task, name, None)
        if value and needle in value.casefold():
            return True
    return False


def _deadline_key(task: Any):
    deadline: Optional[datetime] = to_naive_utc(getattr(task, "deadline", None))
    # 締め切りなしは最後
    return (deadline is None, deadline or datetime.min)


def _title_key(task: Any):
    """
    アクセントを外して大文字小文字を無視した比較（é は e の位置に並ぶ）
    同じになる場合は元の文字列で順序を決める
    """
    title = task.title or ""
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), title.casefold(), title)


def sort_tasks(tasks: List[Any], order: SortOrder) -> List[Any]:
    if order == SortOrder.DATE:
        return sorted(tasks, key=_deadline_key)
    if order == SortOrder.ALPHABETICAL:
        return sorted(tasks, key=_title_key)
    return list(tasks)


def apply_view(
    tasks: Iterable[Any],
    status: StatusFilter = StatusFilter.ALL,
    query: Optional[str] = None,
    sort: SortOrder = SortOrder.SMART,
) -> List[Any]:
    status = StatusFilter(status)
    sort = SortOrder(sort)

    visible = [
        task for task in tasks
        if matches_status(task, status) and matches_query(task, query)
    ]
    return sort_tasks(visible, sort)
