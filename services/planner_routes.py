"""Planner route handlers: plan creation, edits, drag-and-drop moves and calendar views."""

from flask import current_app, jsonify, request

from backend.auth import user_required
from backend.calendar_math import (
    add_days,
    add_months,
    combine,
    is_same_calendar_day,
    month_grid,
    start_of_month,
    start_of_week,
)
from backend.clock import get_clock
from backend.habit_activity import habits_by_day
from backend.recurrence import RECURRENCE_NONE, Occurrence, RecurrencePolicy, expand
from backend.reschedule import DayOnly, TimeSlot, apply_times, resolve_direct_edit, resolve_drop
from backend.store import HabitStore, PlanningStore, TodoStore
from backend.todo_sync import sync_from_todo, sync_status_only
from models import db, STATUS_DONE, STATUS_TODO
from services.validation_service import (
    normalize_importance,
    parse_bool,
    parse_day_value,
    parse_int,
    parse_month_value,
    parse_timestamp,
)


def _source_todo(user, entry):
    if not entry.is_mirror():
        return None
    return TodoStore(user.id).find_by_id(entry.source_todo_id)


def _move_entry(user, entry, starts_at, ends_at):
    """
    Persist new times for an entry. A to-do mirror moves its to-do instead:
    the due time follows the drop and the mirror is re-synced from it.
    """
    todo = _source_todo(user, entry)
    if todo is not None:
        todo.due_at = starts_at
        current_app.logger.info("Plan %s moved; to-do %s now due %s", entry.id, todo.id, starts_at.isoformat())
        return sync_from_todo(todo)
    return apply_times(entry, starts_at, ends_at)


def parse_drop_target(raw):
    """Turn {'kind': 'slot'|'day', 'day_index': n, 'hour': h} into a drop target."""
    if not isinstance(raw, dict):
        return None
    kind = str(raw.get('kind') or '').lower()
    day_index = parse_int(raw.get('day_index'))
    if day_index is None or not 0 <= day_index <= 6:
        return None
    if kind == 'slot':
        hour = parse_int(raw.get('hour'))
        if hour is None or not 0 <= hour <= 23:
            return None
        return TimeSlot(day_index=day_index, hour=hour)
    if kind == 'day':
        return DayOnly(day_index=day_index)
    return None


@user_required
def planning_collection(user):
    store = PlanningStore(user.id)
    if request.method == 'GET':
        start = parse_timestamp(request.args.get('start'))
        end = parse_timestamp(request.args.get('end'))
        if start and end:
            entries = store.list_between(start, end)
        else:
            entries = store.query().order_by(store.model.starts_at.asc()).all()
        return jsonify([e.to_dict() for e in entries])

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip()
    starts_at = parse_timestamp(data.get('starts_at'))
    if not title or not starts_at:
        return jsonify({'error': 'Title and start time are required'}), 400
    ends_at = None
    if data.get('ends_at'):
        ends_at = parse_timestamp(data.get('ends_at'))
        if ends_at is None:
            return jsonify({'error': 'Invalid ends_at'}), 400

    recurrence = str(data.get('recurrence') or RECURRENCE_NONE).strip().upper()
    policy = RecurrencePolicy(kind=recurrence, base=Occurrence.from_bounds(starts_at, ends_at))
    blocks = expand(
        policy,
        title=title,
        importance=normalize_importance(data.get('importance')),
        description=(data.get('description') or '').strip() or None,
    )

    created = [
        store.create(
            title=block.title,
            description=block.description,
            starts_at=block.starts_at,
            ends_at=block.ends_at,
            importance=block.importance,
            completed=False,
        )
        for block in blocks
    ]
    db.session.commit()
    if len(created) > 1:
        current_app.logger.info(f"Created {len(created)} {recurrence.lower()} plans for user {user.id}")
    return jsonify([e.to_dict() for e in created]), 201


@user_required
def handle_planning_entry(user, entry_id):
    store = PlanningStore(user.id)
    entry = store.get(entry_id)

    if request.method == 'GET':
        return jsonify(entry.to_dict())

    if request.method == 'DELETE':
        todo = _source_todo(user, entry)
        if todo is not None:
            # Removing a mirror means the to-do is no longer scheduled.
            todo.due_at = None
            sync_from_todo(todo)
        else:
            store.delete(entry)
        db.session.commit()
        return '', 204

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip() if 'title' in data else entry.title
    if not title:
        return jsonify({'error': 'Title is required'}), 400
    importance = normalize_importance(data.get('importance'), default=entry.importance)
    if 'description' in data:
        entry.description = (data.get('description') or '').strip() or None

    todo = _source_todo(user, entry)
    if todo is not None:
        todo.title = title
        todo.importance = importance
        sync_from_todo(todo)
    else:
        entry.title = title
        entry.importance = importance
    db.session.commit()
    return jsonify(entry.to_dict())


@user_required
def update_planning_time(user, entry_id):
    """Direct edit of start/end from the edit form."""
    entry = PlanningStore(user.id).get(entry_id)
    data = request.get_json(silent=True) or {}
    starts_at = parse_timestamp(data.get('starts_at'))
    if not starts_at:
        return jsonify({'error': 'Invalid starts_at'}), 400
    ends_at = parse_timestamp(data.get('ends_at')) if data.get('ends_at') else None
    starts_at, ends_at = resolve_direct_edit(starts_at, ends_at)
    _move_entry(user, entry, starts_at, ends_at)
    db.session.commit()
    return jsonify(entry.to_dict())


@user_required
def reschedule_planning_entry(user, entry_id):
    """Drag-and-drop onto a time slot or a day header of the displayed week."""
    entry = PlanningStore(user.id).get(entry_id)
    data = request.get_json(silent=True) or {}
    target = parse_drop_target(data.get('target'))
    if target is None:
        return jsonify({'error': 'Invalid drop target'}), 400
    week_day = parse_day_value(data.get('week_start')) if data.get('week_start') else get_clock().today()
    if week_day is None:
        return jsonify({'error': 'Invalid week_start'}), 400
    week_start = start_of_week(combine(week_day))

    starts_at, ends_at = resolve_drop(entry.starts_at, entry.ends_at, week_start, target)
    _move_entry(user, entry, starts_at, ends_at)
    db.session.commit()
    return jsonify(entry.to_dict())


@user_required
def toggle_planning_completed(user, entry_id):
    entry = PlanningStore(user.id).get(entry_id)
    data = request.get_json(silent=True) or {}
    completed = parse_bool(data.get('completed'), default=not entry.completed)
    todo = _source_todo(user, entry)
    if todo is not None:
        # The to-do owns completion; the mirror follows its status.
        todo.status = STATUS_DONE if completed else STATUS_TODO
        sync_status_only(todo)
    else:
        entry.completed = completed
    db.session.commit()
    return jsonify(entry.to_dict())


def _day_payload(day_start, entries, todos, due_habits):
    return {
        'date': day_start.date().isoformat(),
        'entries': [e.to_dict() for e in entries if is_same_calendar_day(e.starts_at, day_start)],
        'todos': [t.to_dict() for t in todos if is_same_calendar_day(t.due_at, day_start)],
        'habits': [h.to_dict() for h in due_habits.get(day_start.date(), [])],
    }


@user_required
def planner_week(user):
    clock = get_clock()
    raw_start = request.args.get('start')
    anchor = parse_day_value(raw_start) if raw_start else clock.today()
    if anchor is None:
        return jsonify({'error': 'Invalid start date'}), 400
    week_start = start_of_week(combine(anchor))
    week_end = add_days(week_start, 7)

    entries = PlanningStore(user.id).list_between(week_start, week_end)
    todos = TodoStore(user.id).list_due_between(week_start, week_end)
    week_days = [add_days(week_start, i) for i in range(7)]
    due_habits = habits_by_day(HabitStore(user.id).list_active(), week_days)
    today = clock.now()
    days = []
    for i, day_start in enumerate(week_days):
        payload = _day_payload(day_start, entries, todos, due_habits)
        payload['day_index'] = i
        payload['is_today'] = is_same_calendar_day(day_start, today)
        days.append(payload)
    return jsonify({
        'week_start': week_start.date().isoformat(),
        'days': days,
    })


@user_required
def planner_month(user):
    clock = get_clock()
    raw_month = request.args.get('month')
    month_start = parse_month_value(raw_month) if raw_month else start_of_month(clock.now())
    if month_start is None:
        return jsonify({'error': 'Invalid month'}), 400

    grid = month_grid(month_start)
    grid_start = grid[0][0]
    grid_end = add_days(grid[-1][-1], 1)
    entries = PlanningStore(user.id).list_between(grid_start, grid_end)
    todos = TodoStore(user.id).list_due_between(grid_start, grid_end)
    due_habits = habits_by_day(HabitStore(user.id).list_active(), [d for week in grid for d in week])

    weeks = []
    for week in grid:
        cells = []
        for day_start in week:
            payload = _day_payload(day_start, entries, todos, due_habits)
            payload['in_month'] = day_start.month == month_start.month
            cells.append(payload)
        weeks.append(cells)
    return jsonify({
        'month': month_start.strftime('%Y-%m'),
        'prev_month': add_months(month_start, -1).strftime('%Y-%m'),
        'next_month': add_months(month_start, 1).strftime('%Y-%m'),
        'weeks': weeks,
    })
