"""Habit route handlers."""

from flask import jsonify, request

from backend.auth import user_required
from backend.clock import get_clock
from backend.habit_activity import habits_due_on
from backend.store import HabitStore
from models import db, HabitLog, FREQUENCY_WEEKLY, HABIT_TYPE_COUNTER
from services.validation_service import (
    normalize_frequency,
    normalize_habit_type,
    parse_days_of_week,
    parse_int,
)


def _today_log(habit, day_value):
    return HabitLog.query.filter_by(habit_id=habit.id, day=day_value).first()


def _habit_payload(habit, log=None):
    data = habit.to_dict()
    data['done'] = bool(log.done) if log else False
    data['value'] = (log.value or 0) if log else 0
    return data


@user_required
def habits_collection(user):
    store = HabitStore(user.id)
    if request.method == 'GET':
        return jsonify([h.to_dict() for h in store.list_active()])

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip()
    if not title:
        return jsonify({'error': 'Title is required'}), 400

    frequency = normalize_frequency(data.get('frequency'))
    habit_type = normalize_habit_type(data.get('type'))
    target = parse_int(data.get('target_per_period'))
    habit = store.create(
        title=title,
        description=(data.get('description') or '').strip() or None,
        frequency=frequency,
        habit_type=habit_type,
        target_per_period=max(1, target) if target is not None else None,
        created_at=get_clock().now(),
    )
    # Weekdays only mean something for weekly habits.
    habit.set_days_of_week(parse_days_of_week(data.get('days_of_week')) if frequency == FREQUENCY_WEEKLY else [])
    db.session.commit()
    return jsonify(habit.to_dict()), 201


@user_required
def habits_today(user):
    clock = get_clock()
    today = clock.today()
    habits = habits_due_on(HabitStore(user.id).list_active(), clock.now())
    return jsonify({
        'date': today.isoformat(),
        'habits': [_habit_payload(h, _today_log(h, today)) for h in habits],
    })


@user_required
def archive_habit(user, habit_id):
    habit = HabitStore(user.id).get(habit_id)
    habit.is_archived = True
    db.session.commit()
    return jsonify(habit.to_dict())


@user_required
def check_in_habit(user, habit_id):
    """
    Record today's progress. YES_NO habits toggle; COUNTER habits step the
    value up or down (never below zero) and are done once they hit the target.
    """
    habit = HabitStore(user.id).get(habit_id)
    if habit.is_archived:
        return jsonify({'error': 'Habit is archived'}), 400
    data = request.get_json(silent=True) or {}
    today = get_clock().today()
    log = _today_log(habit, today)

    if habit.habit_type == HABIT_TYPE_COUNTER:
        delta = -1 if data.get('action') == 'decrement' else 1
        value = max(0, ((log.value or 0) if log else 0) + delta)
        done = value >= (habit.target_per_period or 1)
    else:
        done = not (log.done if log else False)
        value = 1 if done else 0

    if log is None:
        log = HabitLog(habit_id=habit.id, owner_id=user.id, day=today)
        db.session.add(log)
    log.done = done
    log.value = value
    db.session.commit()
    return jsonify(_habit_payload(habit, log))
