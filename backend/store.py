"""Owner-scoped persistence for planner entries, to-dos, habits and notes.

Stores only flush; committing (or rolling back) the request's transaction is
the caller's job, so a batch either lands as a whole or not at all.
"""

from sqlalchemy.exc import IntegrityError

from backend.errors import NotFoundError
from models import db, Habit, Note, Notebook, PlanningEntry, Todo


class OwnedStore:
    model = None
    entity_name = 'Entity'

    def __init__(self, owner_id, session=None):
        self.owner_id = owner_id
        self.session = session or db.session

    def query(self):
        return self.session.query(self.model).filter(self.model.owner_id == self.owner_id)

    def find_by_id(self, entity_id):
        if entity_id is None:
            return None
        return self.query().filter(self.model.id == entity_id).first()

    def get(self, entity_id):
        """Like find_by_id, but a missing or foreign id raises NotFoundError."""
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def create(self, **fields):
        entity = self.model(owner_id=self.owner_id, **fields)
        self.session.add(entity)
        self.session.flush()
        return entity

    def update(self, entity, **fields):
        for key, value in fields.items():
            setattr(entity, key, value)
        self.session.flush()
        return entity

    def delete(self, entity):
        self.session.delete(entity)
        self.session.flush()

    def delete_many(self, **filters):
        """Delete every owned row matching `filters`; zero matches is fine."""
        rows = self.query().filter_by(**filters).all()
        for row in rows:
            self.session.delete(row)
        if rows:
            self.session.flush()
        return len(rows)


class PlanningStore(OwnedStore):
    model = PlanningEntry
    entity_name = 'Plan'

    def find_by_source_todo_id(self, todo_id):
        return self.query().filter(PlanningEntry.source_todo_id == todo_id).all()

    def create_mirror(self, todo_id, **fields):
        """
        Insert a mirror inside a savepoint.

        Returns None when the unique constraint on `source_todo_id` rejects it,
        i.e. a concurrent sync already created the mirror; the rest of the
        transaction is kept.
        """
        try:
            with self.session.begin_nested():
                entry = PlanningEntry(owner_id=self.owner_id, source_todo_id=todo_id, **fields)
                self.session.add(entry)
        except IntegrityError:
            return None
        return entry

    def list_between(self, start, end):
        """Entries starting in the half-open range [start, end), earliest first."""
        return self.query().filter(
            PlanningEntry.starts_at >= start,
            PlanningEntry.starts_at < end,
        ).order_by(PlanningEntry.starts_at.asc(), PlanningEntry.id.asc()).all()


class TodoStore(OwnedStore):
    model = Todo
    entity_name = 'To-do'

    def list_due_between(self, start, end):
        return self.query().filter(
            Todo.due_at.isnot(None),
            Todo.due_at >= start,
            Todo.due_at < end,
        ).order_by(Todo.due_at.asc()).all()


class HabitStore(OwnedStore):
    model = Habit
    entity_name = 'Habit'

    def list_active(self):
        return self.query().filter(Habit.is_archived.is_(False)).order_by(
            Habit.created_at.asc(), Habit.id.asc()
        ).all()


class NotebookStore(OwnedStore):
    model = Notebook
    entity_name = 'Notebook'


class NoteStore(OwnedStore):
    model = Note
    entity_name = 'Note'

    def detach_notebook(self, notebook_id):
        """Turn a notebook's notes into quick notes; returns how many moved."""
        return self.query().filter(Note.notebook_id == notebook_id).update({'notebook_id': None})
