from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

IMPORTANCE_LOW = 'LOW'
IMPORTANCE_MEDIUM = 'MEDIUM'
IMPORTANCE_HIGH = 'HIGH'
ALLOWED_IMPORTANCES = (IMPORTANCE_LOW, IMPORTANCE_MEDIUM, IMPORTANCE_HIGH)
IMPORTANCE_RANK = {IMPORTANCE_HIGH: 3, IMPORTANCE_MEDIUM: 2, IMPORTANCE_LOW: 1}

STATUS_TODO = 'TODO'
STATUS_IN_PROGRESS = 'IN_PROGRESS'
STATUS_DONE = 'DONE'
ALLOWED_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)

FREQUENCY_DAILY = 'DAILY'
FREQUENCY_WEEKLY = 'WEEKLY'
FREQUENCY_MONTHLY = 'MONTHLY'
ALLOWED_FREQUENCIES = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_MONTHLY)

HABIT_TYPE_YES_NO = 'YES_NO'
HABIT_TYPE_COUNTER = 'COUNTER'
ALLOWED_HABIT_TYPES = (HABIT_TYPE_YES_NO, HABIT_TYPE_COUNTER)

DEFAULT_NOTEBOOK_NAME = 'Untitled notebook'


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    todos = db.relationship('Todo', backref='owner', lazy=True, cascade="all, delete-orphan")
    planning_entries = db.relationship('PlanningEntry', backref='owner', lazy=True, cascade="all, delete-orphan")
    habits = db.relationship('Habit', backref='owner', lazy=True, cascade="all, delete-orphan")
    notebooks = db.relationship('Notebook', backref='owner', lazy=True, cascade="all, delete-orphan")
    notes = db.relationship('Note', backref='owner', lazy=True, cascade="all, delete-orphan")


class Todo(db.Model):
    """
    A user to-do. When `due_at` is set the to-do owns exactly one mirrored
    PlanningEntry (see backend.todo_sync).
    """
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    importance = db.Column(db.String(10), nullable=False, default=IMPORTANCE_MEDIUM)  # LOW | MEDIUM | HIGH
    status = db.Column(db.String(20), nullable=False, default=STATUS_TODO)  # TODO | IN_PROGRESS | DONE
    due_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'importance': self.importance,
            'status': self.status,
            'due_at': _iso(self.due_at),
            'created_at': _iso(self.created_at),
        }


class PlanningEntry(db.Model):
    """
    Time block on the planner. All timestamps are naive local wall-clock times.
    Entries with `source_todo_id` are mirrors of a to-do and are written by the
    synchronizer only.
    """
    __tablename__ = 'planning_entry'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    starts_at = db.Column(db.DateTime, nullable=False, index=True)
    ends_at = db.Column(db.DateTime, nullable=False)
    importance = db.Column(db.String(10), nullable=False, default=IMPORTANCE_MEDIUM)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    # Unique: at most one mirror per to-do, also the race guard for concurrent syncs.
    source_todo_id = db.Column(db.Integer, db.ForeignKey('todo.id'), nullable=True, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_mirror(self):
        return self.source_todo_id is not None

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'description': self.description,
            'starts_at': _iso(self.starts_at),
            'ends_at': _iso(self.ends_at),
            'importance': self.importance,
            'completed': bool(self.completed),
            'source_todo_id': self.source_todo_id,
        }


class Habit(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    frequency = db.Column(db.String(10), nullable=False, default=FREQUENCY_DAILY)  # DAILY | WEEKLY | MONTHLY
    days_of_week = db.Column(db.String(20), nullable=True)  # comma-separated 0-6, 0 = Sunday (WEEKLY only)
    habit_type = db.Column(db.String(10), nullable=False, default=HABIT_TYPE_YES_NO)  # YES_NO | COUNTER
    target_per_period = db.Column(db.Integer, nullable=True)
    is_archived = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    logs = db.relationship('HabitLog', backref='habit', lazy=True, cascade="all, delete-orphan")

    def get_days_of_week(self):
        if not self.days_of_week:
            return set()
        return {int(d) for d in self.days_of_week.split(',') if d.strip().isdigit()}

    def set_days_of_week(self, days):
        self.days_of_week = ','.join(str(d) for d in sorted(set(days))) or None

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'description': self.description,
            'frequency': self.frequency,
            'days_of_week': sorted(self.get_days_of_week()),
            'type': self.habit_type,
            'target_per_period': self.target_per_period,
            'is_archived': bool(self.is_archived),
            'created_at': _iso(self.created_at),
        }


class HabitLog(db.Model):
    """One check-in row per habit per calendar day."""
    __table_args__ = (db.UniqueConstraint('habit_id', 'day', name='uq_habit_log_day'),)

    id = db.Column(db.Integer, primary_key=True)
    habit_id = db.Column(db.Integer, db.ForeignKey('habit.id'), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    day = db.Column(db.Date, nullable=False)
    done = db.Column(db.Boolean, nullable=False, default=False)
    value = db.Column(db.Integer, nullable=True)


class Notebook(db.Model):
    """Named group of notes. Notes without a notebook are the user's quick notes."""
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False, default=DEFAULT_NOTEBOOK_NAME)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    notes = db.relationship('Note', backref='notebook', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'name': self.name,
            'note_count': len(self.notes),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Note(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    notebook_id = db.Column(db.Integer, db.ForeignKey('notebook.id'), nullable=True, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=True)
    importance = db.Column(db.String(10), nullable=False, default=IMPORTANCE_MEDIUM)
    pinned = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'notebook_id': self.notebook_id,
            'title': self.title,
            'content': self.content,
            'importance': self.importance,
            'pinned': bool(self.pinned),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
