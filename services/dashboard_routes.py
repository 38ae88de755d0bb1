"""Dashboard summary: counts and short lists relative to the injected clock."""

from flask import jsonify

from backend.auth import user_required
from backend.calendar_math import day_bounds
from backend.clock import get_clock
from backend.habit_activity import habits_due_on
from backend.store import HabitStore, PlanningStore, TodoStore
from models import PlanningEntry, IMPORTANCE_RANK, STATUS_DONE, STATUS_IN_PROGRESS, STATUS_TODO

OPEN_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS)
UPCOMING_LIMIT = 5
TOP_TODOS_LIMIT = 5


def is_overdue(todo, now):
    return todo.due_at is not None and todo.status in OPEN_STATUSES and todo.due_at < now


def rank_todos(todos, limit=TOP_TODOS_LIMIT):
    """Highest importance first, newest first within the same importance."""
    ordered = sorted(
        todos,
        key=lambda t: (IMPORTANCE_RANK.get(t.importance, 0), t.created_at, t.id),
        reverse=True,
    )
    return ordered[:limit]


def completion_rate(todos):
    if not todos:
        return 0
    done = sum(1 for t in todos if t.status == STATUS_DONE)
    return round(done / len(todos) * 100)


@user_required
def dashboard_summary(user):
    now = get_clock().now()
    start_of_today, end_of_today = day_bounds(now)

    todos = TodoStore(user.id).query().all()
    planning = PlanningStore(user.id)
    upcoming = planning.query().filter(
        PlanningEntry.starts_at >= now,
        PlanningEntry.completed.is_(False),
    ).order_by(PlanningEntry.starts_at.asc()).limit(UPCOMING_LIMIT).all()
    today_plans = planning.query().filter(
        PlanningEntry.starts_at >= start_of_today,
        PlanningEntry.starts_at < end_of_today,
        PlanningEntry.completed.is_(False),
    ).count()

    today_open = [
        t for t in todos
        if t.status in OPEN_STATUSES and t.due_at is not None and start_of_today <= t.due_at < end_of_today
    ]
    active_habits = HabitStore(user.id).list_active()
    habits_today = habits_due_on(active_habits, now)

    return jsonify({
        'now': now.isoformat(),
        'total_todos': len(todos),
        'today_open_todos': len(today_open),
        'overdue_todos': sum(1 for t in todos if is_overdue(t, now)),
        'today_plans': today_plans,
        'completion_rate': completion_rate(todos),
        'top_todos': [t.to_dict() for t in rank_todos(todos)],
        'upcoming_plans': [p.to_dict() for p in upcoming],
        'habits_today': [h.to_dict() for h in habits_today],
        'total_habits': len(active_habits),
    })
