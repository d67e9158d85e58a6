"""Tests for the urgency score and smart ordering."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from schemas.task import Priority
from services.ranking import rank_tasks, score_task

NOW = datetime(2026, 3, 10, 12, 0, 0)


def make_task(name, priority="Medium", deadline=None, completed=False):
    return SimpleNamespace(name=name, priority=priority, deadline=deadline, completed=completed)


def names(ranked):
    return [item.task.name for item in ranked]


@pytest.mark.parametrize(
    "priority,expected",
    [("High", 1000), ("Medium", 500), ("Low", 0), (None, 0), ("Urgent", 0), (Priority.HIGH, 1000)],
)
def test_priority_component(priority, expected):
    assert score_task(make_task("t", priority=priority), NOW) == expected


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(seconds=-1), 2000),
        (timedelta(days=-30), 2000),
        (timedelta(0), 300),
        (timedelta(days=1, hours=23), 300),
        (timedelta(days=2), 100),
        (timedelta(days=6, hours=23), 100),
        (timedelta(days=7), 0),
        (timedelta(days=10), 0),
    ],
)
def test_deadline_bands(delta, expected):
    task = make_task("t", priority="Low", deadline=NOW + delta)
    assert score_task(task, NOW) == expected


def test_no_deadline_scores_like_far_deadline():
    no_deadline = make_task("a", priority="High")
    far = make_task("b", priority="High", deadline=NOW + timedelta(days=10))
    assert score_task(no_deadline, NOW) == score_task(far, NOW) == 1000


def test_aware_deadline_is_compared_in_utc():
    # 13:00+02:00 == 11:00 UTC, one hour before NOW
    deadline = datetime(2026, 3, 10, 13, 0, tzinfo=timezone(timedelta(hours=2)))
    assert score_task(make_task("t", priority="Low", deadline=deadline), NOW) == 2000


def test_overdue_high_open_done_scenario():
    yesterday = NOW - timedelta(days=1)
    a = make_task("A", priority="High", deadline=yesterday)
    b = make_task("B", priority="Low")
    c = make_task("C", priority="High", deadline=yesterday, completed=True)

    ranked = rank_tasks([c, b, a], NOW)

    assert names(ranked) == ["A", "B", "C"]
    assert [item.score for item in ranked] == [3000, 0, -2000]


def test_medium_deadline_proximity_scenario():
    d = make_task("D", deadline=NOW + timedelta(days=1))
    e = make_task("E", deadline=NOW + timedelta(days=5))
    f = make_task("F", deadline=NOW + timedelta(days=10))

    ranked = rank_tasks([f, e, d], NOW)

    assert names(ranked) == ["D", "E", "F"]
    assert [item.score for item in ranked] == [800, 600, 500]


def test_completed_always_below_open():
    done = make_task("done", priority="High", deadline=NOW - timedelta(days=3), completed=True)
    open_low = make_task("open", priority="Low", deadline=NOW + timedelta(days=30))
    assert score_task(done, NOW) < score_task(open_low, NOW)


def test_overdue_beats_any_non_overdue_open_task():
    overdue_low = make_task("overdue", priority="Low", deadline=NOW - timedelta(minutes=5))
    best_other = make_task("soon", priority="High", deadline=NOW + timedelta(hours=1))
    assert score_task(overdue_low, NOW) >= 2000 > score_task(best_other, NOW) == 1300


def test_equal_scores_keep_input_order():
    tasks = [make_task(str(i), priority="Medium") for i in range(6)]
    tasks.insert(3, make_task("high", priority="High"))

    ranked = rank_tasks(tasks, NOW)

    assert names(ranked) == ["high", "0", "1", "2", "3", "4", "5"]


def test_ranking_is_idempotent_and_does_not_mutate():
    tasks = [
        make_task("x", priority="Low", deadline=NOW + timedelta(days=3)),
        make_task("y", priority="High", completed=True),
        make_task("z", priority="Medium"),
    ]
    snapshot = [vars(t).copy() for t in tasks]

    first = rank_tasks(tasks, NOW)
    second = rank_tasks(tasks, NOW)

    assert first == second
    assert [vars(t) for t in tasks] == snapshot


def test_empty_input():
    assert rank_tasks([], NOW) == []
