# services/ranking.py
"""
タスクの緊急度スコアと並び替え（"smart" 順）

スコア = 優先度 + 締め切りの近さ - 完了ペナルティ
帯は重ならないように決めてある:
- 期限切れ (+2000) は期限切れでない未完了タスク (最大 1000 + 300) より必ず上
- 完了 (-5000) は正の組み合わせ (最大 3000) では打ち消せないので必ず下
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from services.time_utils import to_naive_utc, utc_now_naive

PRIORITY_WEIGHTS = {
    "High": 1000,
    "Medium": 500,
    "Low": 0,
}

OVERDUE_BONUS = 2000
DUE_SOON_DAYS = 2
DUE_SOON_BONUS = 300
DUE_THIS_WEEK_DAYS = 7
DUE_THIS_WEEK_BONUS = 100
COMPLETED_PENALTY = 5000

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class RankedTask:
    task: Any
    score: int


def _priority_value(priority: Any) -> Optional[str]:
    # Enum でも str でも受け付ける
    if priority is None:
        return None
    return getattr(priority, "value", priority)


def priority_score(priority: Any) -> int:
    return PRIORITY_WEIGHTS.get(_priority_value(priority), 0)


def deadline_score(deadline: Optional[datetime], now: datetime) -> int:
    if deadline is None:
        return 0

    days_until_deadline = (to_naive_utc(deadline) - now) / ONE_DAY

    if days_until_deadline < 0:
        return OVERDUE_BONUS
    if days_until_deadline < DUE_SOON_DAYS:
        return DUE_SOON_BONUS
    if days_until_deadline < DUE_THIS_WEEK_DAYS:
        return DUE_THIS_WEEK_BONUS
    return 0


def score_task(task: Any, now: Optional[datetime] = None) -> int:
    """
    1件のタスクのスコアを返す（永続化はしない）

    Args:
        task: priority / deadline / completed を持つオブジェクト
        now: 基準時刻。省略時は現在の UTC
    """
    now = to_naive_utc(now) if now is not None else utc_now_naive()

    score = priority_score(getattr(task, "priority", None))
    score += deadline_score(getattr(task, "deadline", None), now)
    if getattr(task, "completed", False):
        score -= COMPLETED_PENALTY
    return score


def rank_tasks(tasks: Iterable[Any], now: Optional[datetime] = None) -> List[RankedTask]:
    """
    スコアの降順に並べた新しいリストを返す
    同点は入力順のまま（sorted は安定ソート）
    """
    # 1回の並び替えの中では同じ now を使う
    now = to_naive_utc(now) if now is not None else utc_now_naive()

    ranked = [RankedTask(task=task, score=score_task(task, now)) for task in tasks]
    return sorted(ranked, key=lambda item: item.score, reverse=True)
