"""Notebook and note route handlers."""

from flask import current_app, jsonify, request
from sqlalchemy import or_

from backend.auth import user_required
from backend.store import NotebookStore, NoteStore
from models import db, Note, Notebook, DEFAULT_NOTEBOOK_NAME
from services.validation_service import normalize_importance, parse_bool, parse_int

QUICK_NOTES = 'quick'


def _notebook_id_from(user, raw):
    """Resolve a requested notebook id; blank means quick notes. Foreign ids raise NotFoundError."""
    if raw in (None, ''):
        return None
    return NotebookStore(user.id).get(parse_int(raw)).id


@user_required
def notebooks_collection(user):
    store = NotebookStore(user.id)
    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        name = (data.get('name') or '').strip() or DEFAULT_NOTEBOOK_NAME
        notebook = store.create(name=name)
        db.session.commit()
        return jsonify(notebook.to_dict()), 201

    notebooks = store.query().order_by(Notebook.updated_at.desc(), Notebook.id.desc()).all()
    return jsonify([n.to_dict() for n in notebooks])


@user_required
def handle_notebook(user, notebook_id):
    store = NotebookStore(user.id)
    notebook = store.get(notebook_id)

    if request.method == 'GET':
        return jsonify(notebook.to_dict())

    if request.method == 'DELETE':
        moved = NoteStore(user.id).detach_notebook(notebook.id)
        store.delete(notebook)
        db.session.commit()
        current_app.logger.info("Deleted notebook %s; %s notes moved to quick notes", notebook_id, moved)
        return jsonify({'deleted': True, 'moved_notes': moved})

    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Notebook name required'}), 400
    notebook.name = name
    db.session.commit()
    return jsonify(notebook.to_dict())


@user_required
def notes_collection(user):
    store = NoteStore(user.id)
    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        title = (data.get('title') or '').strip()
        if not title:
            return jsonify({'error': 'Title is required'}), 400
        note = store.create(
            title=title,
            content=(data.get('content') or '').strip() or None,
            importance=normalize_importance(data.get('importance')),
            pinned=parse_bool(data.get('pinned')),
            notebook_id=_notebook_id_from(user, data.get('notebook_id')),
        )
        db.session.commit()
        return jsonify(note.to_dict()), 201

    query = store.query()
    scope = request.args.get('notebook_id')
    if scope == QUICK_NOTES:
        query = query.filter(Note.notebook_id.is_(None))
    elif scope:
        query = query.filter(Note.notebook_id == _notebook_id_from(user, scope))
    if parse_bool(request.args.get('pinned')):
        query = query.filter(Note.pinned.is_(True))
    search = (request.args.get('q') or '').strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Note.title.ilike(pattern), Note.content.ilike(pattern)))
    # Pinned first, then most recently edited.
    notes = query.order_by(Note.pinned.desc(), Note.updated_at.desc(), Note.id.desc()).all()
    return jsonify([n.to_dict() for n in notes])


@user_required
def handle_note(user, note_id):
    store = NoteStore(user.id)
    note = store.get(note_id)

    if request.method == 'GET':
        return jsonify(note.to_dict())

    if request.method == 'DELETE':
        store.delete(note)
        db.session.commit()
        return '', 204

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip() if 'title' in data else note.title
    if not title:
        return jsonify({'error': 'Title is required'}), 400
    notebook_id = _notebook_id_from(user, data.get('notebook_id')) if 'notebook_id' in data else note.notebook_id

    note.title = title
    note.notebook_id = notebook_id
    if 'content' in data:
        note.content = (data.get('content') or '').strip() or None
    note.importance = normalize_importance(data.get('importance'), default=note.importance)
    if 'pinned' in data:
        note.pinned = parse_bool(data.get('pinned'))
    db.session.commit()
    return jsonify(note.to_dict())


@user_required
def toggle_note_pin(user, note_id):
    note = NoteStore(user.id).get(note_id)
    note.pinned = not note.pinned
    db.session.commit()
    return jsonify(note.to_dict())


@user_required
def move_note(user, note_id):
    """Importance board drop for notes."""
    data = request.get_json(silent=True) or {}
    note = NoteStore(user.id).get(note_id)
    importance = normalize_importance(data.get('importance'), default=None)
    if importance is None:
        return jsonify({'error': 'Invalid importance'}), 400
    note.importance = importance
    db.session.commit()
    return jsonify(note.to_dict())
