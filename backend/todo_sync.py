"""
Keep each to-do's planner mirror in step with the to-do.

For a to-do with a due time there is at most one PlanningEntry whose
`source_todo_id` is the to-do's id, starting at `due_at`, one hour long, and
carrying the to-do's title, importance and completion. A to-do without a due
time has no mirror. `sync_from_todo` is the single place that enforces this;
call it after any to-do change touching title, importance, status or due time.
"""

from flask import current_app

from backend.calendar_math import MIN_DURATION
from backend.errors import InvariantViolation
from backend.store import PlanningStore
from models import STATUS_DONE


MIRROR_DURATION = MIN_DURATION


def mirror_fields(todo):
    return {
        'title': todo.title,
        'starts_at': todo.due_at,
        'ends_at': todo.due_at + MIRROR_DURATION,
        'importance': todo.importance,
        'completed': todo.status == STATUS_DONE,
    }


def _store_for(todo, store):
    return store or PlanningStore(todo.owner_id)


def find_mirror(todo, store=None):
    store = _store_for(todo, store)
    mirrors = store.find_by_source_todo_id(todo.id)
    if len(mirrors) > 1:
        raise InvariantViolation(
            f"To-do {todo.id} has {len(mirrors)} planner mirrors; expected at most one"
        )
    return mirrors[0] if mirrors else None


def remove_mirror(todo, store=None):
    store = _store_for(todo, store)
    removed = store.delete_many(source_todo_id=todo.id)
    if removed:
        current_app.logger.info("Removed planner mirror for to-do %s", todo.id)
    return removed


def sync_from_todo(todo, store=None):
    """
    Bring the mirror in line with `todo` and return it (None when the to-do
    has no due time). An existing mirror is updated in place so its id stays
    stable for the life of the to-do.
    """
    store = _store_for(todo, store)
    if todo.due_at is None:
        remove_mirror(todo, store)
        return None

    fields = mirror_fields(todo)
    mirror = find_mirror(todo, store)
    if mirror is not None:
        return store.update(mirror, **fields)

    mirror = store.create_mirror(todo.id, description=None, **fields)
    if mirror is None:
        # Lost the insert race: another sync created it first, so update the winner.
        current_app.logger.warning("Mirror insert for to-do %s rejected; updating existing mirror", todo.id)
        mirror = find_mirror(todo, store)
        if mirror is None:
            raise InvariantViolation(f"Mirror insert for to-do {todo.id} rejected but no mirror found")
        return store.update(mirror, **fields)
    current_app.logger.info("Created planner mirror %s for to-do %s", mirror.id, todo.id)
    return mirror


def sync_status_only(todo, store=None):
    """Quick status toggle: only the mirror's completion flag follows."""
    mirror = find_mirror(todo, store)
    if mirror is None:
        return None
    return _store_for(todo, store).update(mirror, completed=todo.status == STATUS_DONE)


def sync_importance_only(todo, store=None):
    mirror = find_mirror(todo, store)
    if mirror is None:
        return None
    return _store_for(todo, store).update(mirror, importance=todo.importance)


def delete_todo(todo, session, store=None):
    """Delete the to-do and its mirror in the caller's transaction, mirror first."""
    remove_mirror(todo, store)
    session.delete(todo)
    session.flush()
