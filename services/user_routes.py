"""User/session routes. Identity only; there is no password flow."""

from flask import jsonify, request, session

from backend.auth import get_current_user
from models import db, User


def create_user():
    """Create a user and select it for this session."""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()

    if not username:
        return jsonify({'error': 'Username is required'}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 400

    user = User(username=username)
    db.session.add(user)
    db.session.commit()

    session['user_id'] = user.id
    session.permanent = True
    return jsonify({'success': True, 'user_id': user.id, 'username': user.username}), 201


def set_user(user_id):
    """Set the current user in session"""
    user = db.get_or_404(User, user_id)
    session['user_id'] = user.id
    session.permanent = True  # Make session persistent across browser restarts
    return jsonify({'success': True, 'username': user.username, 'user_id': user.id})


def logout_user():
    session.pop('user_id', None)
    return '', 204


def current_user_info():
    user = get_current_user()
    if user:
        return jsonify({'user_id': user.id, 'username': user.username})
    return jsonify({'user_id': None, 'username': None})
