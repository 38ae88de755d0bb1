"""To-do route handlers. Every mutation ends with the matching planner sync."""

from flask import current_app, jsonify, request

from backend.auth import user_required
from backend.store import TodoStore
from backend.todo_sync import delete_todo, find_mirror, sync_from_todo, sync_importance_only, sync_status_only
from models import db, Todo, STATUS_DONE, STATUS_IN_PROGRESS, STATUS_TODO
from services.validation_service import (
    normalize_importance,
    normalize_status,
    parse_bool,
    parse_timestamp,
)

NEXT_STATUS = {
    STATUS_TODO: STATUS_IN_PROGRESS,
    STATUS_IN_PROGRESS: STATUS_DONE,
    STATUS_DONE: STATUS_TODO,
}


def _todo_payload(todo):
    data = todo.to_dict()
    mirror = find_mirror(todo)
    data['planning_entry_id'] = mirror.id if mirror else None
    return data


def _parse_due_at(data):
    """Return (due_at, error). A blank value clears the due time."""
    raw = data.get('due_at')
    if raw in (None, ''):
        return None, None
    due_at = parse_timestamp(raw)
    if due_at is None:
        return None, 'Invalid due_at'
    return due_at, None


@user_required
def todos_collection(user):
    store = TodoStore(user.id)
    if request.method == 'GET':
        query = store.query()
        status_filter = request.args.get('status')
        if status_filter:
            query = query.filter(Todo.status == normalize_status(status_filter))
        todos = query.order_by(Todo.created_at.desc(), Todo.id.desc()).all()
        return jsonify([_todo_payload(t) for t in todos])

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip()
    if not title:
        return jsonify({'error': 'Title is required'}), 400
    due_at, error = _parse_due_at(data)
    if error:
        return jsonify({'error': error}), 400

    todo = store.create(
        title=title,
        importance=normalize_importance(data.get('importance')),
        status=STATUS_TODO,
        due_at=due_at,
    )
    sync_from_todo(todo)
    db.session.commit()
    return jsonify(_todo_payload(todo)), 201


@user_required
def handle_todo(user, todo_id):
    store = TodoStore(user.id)
    todo = store.get(todo_id)

    if request.method == 'GET':
        return jsonify(_todo_payload(todo))

    if request.method == 'DELETE':
        delete_todo(todo, db.session)
        db.session.commit()
        return '', 204

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip() if 'title' in data else todo.title
    if not title:
        return jsonify({'error': 'Title is required'}), 400
    due_at, error = _parse_due_at(data) if 'due_at' in data else (todo.due_at, None)
    if error:
        return jsonify({'error': error}), 400

    todo.title = title
    todo.due_at = due_at
    todo.importance = normalize_importance(data.get('importance'), default=todo.importance)
    todo.status = normalize_status(data.get('status'), default=todo.status)
    if parse_bool(data.get('completed')):
        todo.status = STATUS_DONE

    sync_from_todo(todo)
    db.session.commit()
    return jsonify(_todo_payload(todo))


@user_required
def toggle_todo_status(user, todo_id):
    """Cycle TODO -> IN_PROGRESS -> DONE -> TODO."""
    todo = TodoStore(user.id).get(todo_id)
    todo.status = NEXT_STATUS.get(todo.status, STATUS_TODO)
    sync_status_only(todo)
    db.session.commit()
    return jsonify(_todo_payload(todo))


@user_required
def move_todo(user, todo_id):
    """Importance board drop: only importance changes."""
    data = request.get_json(silent=True) or {}
    todo = TodoStore(user.id).get(todo_id)
    importance = normalize_importance(data.get('importance'), default=None)
    if importance is None:
        return jsonify({'error': 'Invalid importance'}), 400
    todo.importance = importance
    sync_importance_only(todo)
    db.session.commit()
    current_app.logger.info("To-do %s moved to %s", todo.id, importance)
    return jsonify(_todo_payload(todo))
