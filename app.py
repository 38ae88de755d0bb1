import os

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from backend.clock import DEFAULT_TIMEZONE, SystemClock
from backend.errors import InvalidRecurrenceError, InvariantViolation, NotFoundError
from models import db
from services import dashboard_routes, habit_routes, note_routes, planner_routes, todo_routes, user_routes

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///planner.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['PERMANENT_SESSION_LIFETIME'] = 365 * 24 * 60 * 60  # 1 year in seconds
app.config['API_SHARED_KEY'] = os.environ.get('API_SHARED_KEY')  # Optional shared key for API callers
app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', DEFAULT_TIMEZONE)
app.config['CLOCK'] = SystemClock(app.config['DEFAULT_TIMEZONE'])

db.init_app(app)

with app.app_context():
    db.create_all()


# --- Error handling ---
# Each request is one transaction: any failure discards everything it staged.

@app.errorhandler(NotFoundError)
def handle_not_found(exc):
    db.session.rollback()
    return jsonify({'error': str(exc)}), 404


@app.errorhandler(InvalidRecurrenceError)
def handle_invalid_recurrence(exc):
    db.session.rollback()
    return jsonify({'error': str(exc)}), 400


@app.errorhandler(InvariantViolation)
def handle_invariant_violation(exc):
    db.session.rollback()
    app.logger.error(f"Planner invariant violated: {exc}")
    return jsonify({'error': 'Internal consistency error'}), 500


# User Selection Routes
@app.route('/api/create-user', methods=['POST'])
def create_user():
    return user_routes.create_user()


@app.route('/api/set-user/<int:user_id>', methods=['POST'])
def set_user(user_id):
    return user_routes.set_user(user_id)


@app.route('/api/logout', methods=['POST'])
def logout_user():
    return user_routes.logout_user()


@app.route('/api/current-user')
def current_user_info():
    return user_routes.current_user_info()


# To-do API
@app.route('/api/todos', methods=['GET', 'POST'])
def todos_collection():
    return todo_routes.todos_collection()


@app.route('/api/todos/<int:todo_id>', methods=['GET', 'PUT', 'DELETE'])
def handle_todo(todo_id):
    return todo_routes.handle_todo(todo_id)


@app.route('/api/todos/<int:todo_id>/toggle', methods=['POST'])
def toggle_todo_status(todo_id):
    return todo_routes.toggle_todo_status(todo_id)


@app.route('/api/todos/<int:todo_id>/move', methods=['POST'])
def move_todo(todo_id):
    return todo_routes.move_todo(todo_id)


# Planner API
@app.route('/api/planner/entries', methods=['GET', 'POST'])
def planning_collection():
    return planner_routes.planning_collection()


@app.route('/api/planner/entries/<int:entry_id>', methods=['GET', 'PUT', 'DELETE'])
def handle_planning_entry(entry_id):
    return planner_routes.handle_planning_entry(entry_id)


@app.route('/api/planner/entries/<int:entry_id>/time', methods=['PUT'])
def update_planning_time(entry_id):
    return planner_routes.update_planning_time(entry_id)


@app.route('/api/planner/entries/<int:entry_id>/reschedule', methods=['POST'])
def reschedule_planning_entry(entry_id):
    return planner_routes.reschedule_planning_entry(entry_id)


@app.route('/api/planner/entries/<int:entry_id>/complete', methods=['POST'])
def toggle_planning_completed(entry_id):
    return planner_routes.toggle_planning_completed(entry_id)


@app.route('/api/planner/week')
def planner_week():
    return planner_routes.planner_week()


@app.route('/api/planner/month')
def planner_month():
    return planner_routes.planner_month()


# Habits API
@app.route('/api/habits', methods=['GET', 'POST'])
def habits_collection():
    return habit_routes.habits_collection()


@app.route('/api/habits/today')
def habits_today():
    return habit_routes.habits_today()


@app.route('/api/habits/<int:habit_id>/archive', methods=['POST'])
def archive_habit(habit_id):
    return habit_routes.archive_habit(habit_id)


@app.route('/api/habits/<int:habit_id>/check-in', methods=['POST'])
def check_in_habit(habit_id):
    return habit_routes.check_in_habit(habit_id)


# Notes API
@app.route('/api/notebooks', methods=['GET', 'POST'])
def notebooks_collection():
    return note_routes.notebooks_collection()


@app.route('/api/notebooks/<int:notebook_id>', methods=['GET', 'PUT', 'DELETE'])
def handle_notebook(notebook_id):
    return note_routes.handle_notebook(notebook_id)


@app.route('/api/notes', methods=['GET', 'POST'])
def notes_collection():
    return note_routes.notes_collection()


@app.route('/api/notes/<int:note_id>', methods=['GET', 'PUT', 'DELETE'])
def handle_note(note_id):
    return note_routes.handle_note(note_id)


@app.route('/api/notes/<int:note_id>/pin', methods=['POST'])
def toggle_note_pin(note_id):
    return note_routes.toggle_note_pin(note_id)


@app.route('/api/notes/<int:note_id>/move', methods=['POST'])
def move_note(note_id):
    return note_routes.move_note(note_id)


# Dashboard
@app.route('/api/dashboard')
def dashboard_summary():
    return dashboard_routes.dashboard_summary()


if __name__ == '__main__':
    app.run(debug=True)
