from functools import wraps

from flask import current_app, jsonify, request, session

from models import db, User


def _user_from_api_headers():
    """Service callers send the shared key with `X-API-Key` and pick a user with `X-User-Id`."""
    shared_key = current_app.config.get('API_SHARED_KEY')
    if not shared_key or request.headers.get('X-API-Key') != shared_key:
        return None
    raw_id = request.headers.get('X-User-Id', '')
    if not raw_id.isdigit():
        return None
    return db.session.get(User, int(raw_id))


def get_current_user():
    """Header credentials win; browsers fall back to the selected session user."""
    user = _user_from_api_headers()
    if user is not None:
        return user
    user_id = session.get('user_id')
    return db.session.get(User, user_id) if user_id else None


def user_required(view):
    """Route decorator: reject anonymous callers with 401, else pass the user in."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user = get_current_user()
        if not user:
            return jsonify({'error': 'No user selected'}), 401
        return view(user, *args, **kwargs)

    return wrapper
