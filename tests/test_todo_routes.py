from models import db, PlanningEntry, Todo


def _create(client, **payload):
    payload.setdefault('title', 'Pay rent')
    resp = client.post('/api/todos', json=payload)
    assert resp.status_code == 201
    return resp.get_json()


def test_requires_a_selected_user(app):
    resp = app.test_client().get('/api/todos')
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'No user selected'}


def test_create_with_due_time_creates_mirror(client):
    data = _create(client, due_at='2024-03-01T09:00', importance='HIGH')
    assert data['planning_entry_id'] is not None

    mirror = db.session.get(PlanningEntry, data['planning_entry_id'])
    assert mirror.source_todo_id == data['id']
    assert mirror.starts_at.isoformat() == '2024-03-01T09:00:00'
    assert mirror.ends_at.isoformat() == '2024-03-01T10:00:00'
    assert mirror.importance == 'HIGH'
    assert mirror.completed is False


def test_create_without_due_time_has_no_mirror(client):
    data = _create(client)
    assert data['planning_entry_id'] is None
    assert PlanningEntry.query.count() == 0


def test_create_rejects_missing_title_and_bad_due_time(client):
    assert client.post('/api/todos', json={'title': '  '}).status_code == 400
    assert client.post('/api/todos', json={'title': 'x', 'due_at': 'soon'}).status_code == 400
    assert Todo.query.count() == 0


def test_marking_done_completes_mirror_without_moving_it(client):
    data = _create(client, due_at='2024-03-01T09:00', importance='HIGH')
    resp = client.put(f"/api/todos/{data['id']}", json={'status': 'DONE'})
    assert resp.status_code == 200

    mirror = db.session.get(PlanningEntry, data['planning_entry_id'])
    assert mirror.completed is True
    assert mirror.starts_at.isoformat() == '2024-03-01T09:00:00'
    assert mirror.ends_at.isoformat() == '2024-03-01T10:00:00'


def test_update_moves_mirror_and_keeps_its_id(client):
    data = _create(client, due_at='2024-03-01T09:00')
    resp = client.put(f"/api/todos/{data['id']}", json={'due_at': '2024-03-06T16:30', 'title': 'Pay rent now'})
    body = resp.get_json()
    assert body['planning_entry_id'] == data['planning_entry_id']

    mirror = db.session.get(PlanningEntry, body['planning_entry_id'])
    assert mirror.title == 'Pay rent now'
    assert mirror.starts_at.isoformat() == '2024-03-06T16:30:00'
    assert mirror.ends_at.isoformat() == '2024-03-06T17:30:00'


def test_clearing_due_time_removes_mirror(client):
    data = _create(client, due_at='2024-03-01T09:00')
    resp = client.put(f"/api/todos/{data['id']}", json={'due_at': None})
    assert resp.get_json()['planning_entry_id'] is None
    assert PlanningEntry.query.count() == 0


def test_invalid_update_changes_nothing(client):
    data = _create(client, due_at='2024-03-01T09:00')
    resp = client.put(f"/api/todos/{data['id']}", json={'title': 'New', 'due_at': 'garbage'})
    assert resp.status_code == 400
    assert db.session.get(Todo, data['id']).title == 'Pay rent'


def test_toggle_cycles_status_and_syncs_completion(client):
    data = _create(client, due_at='2024-03-01T09:00')
    url = f"/api/todos/{data['id']}/toggle"

    assert client.post(url).get_json()['status'] == 'IN_PROGRESS'
    assert db.session.get(PlanningEntry, data['planning_entry_id']).completed is False
    assert client.post(url).get_json()['status'] == 'DONE'
    assert db.session.get(PlanningEntry, data['planning_entry_id']).completed is True
    assert client.post(url).get_json()['status'] == 'TODO'
    assert db.session.get(PlanningEntry, data['planning_entry_id']).completed is False


def test_move_changes_only_importance(client):
    data = _create(client, due_at='2024-03-01T09:00', importance='LOW')
    resp = client.post(f"/api/todos/{data['id']}/move", json={'importance': 'HIGH'})
    assert resp.get_json()['importance'] == 'HIGH'
    mirror = db.session.get(PlanningEntry, data['planning_entry_id'])
    assert mirror.importance == 'HIGH'
    assert mirror.starts_at.isoformat() == '2024-03-01T09:00:00'

    assert client.post(f"/api/todos/{data['id']}/move", json={'importance': 'CRITICAL'}).status_code == 400


def test_delete_removes_mirror_too(client):
    data = _create(client, due_at='2024-03-01T09:00')
    assert client.delete(f"/api/todos/{data['id']}").status_code == 204
    assert Todo.query.count() == 0
    assert PlanningEntry.query.count() == 0


def test_status_filter(client):
    first = _create(client, title='one')
    _create(client, title='two')
    client.post(f"/api/todos/{first['id']}/toggle")
    titles = [t['title'] for t in client.get('/api/todos?status=in_progress').get_json()]
    assert titles == ['one']


def test_other_users_todo_is_not_found(client, other_user):
    foreign = Todo(owner_id=other_user.id, title='secret')
    db.session.add(foreign)
    db.session.commit()

    assert client.get(f'/api/todos/{foreign.id}').status_code == 404
    assert client.delete(f'/api/todos/{foreign.id}').status_code == 404
    assert db.session.get(Todo, foreign.id) is not None
