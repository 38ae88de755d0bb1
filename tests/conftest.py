import os

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ.setdefault('SECRET_KEY', 'test-secret')

from datetime import datetime

import pytest

from app import app as flask_app
from backend.clock import FixedClock
from models import db, User


@pytest.fixture
def clock():
    # Monday 2024-03-04, 08:00 local
    return FixedClock(datetime(2024, 3, 4, 8, 0))


@pytest.fixture
def app(clock):
    flask_app.config.update(TESTING=True, CLOCK=clock)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()


@pytest.fixture
def user(app):
    account = User(username='tester')
    db.session.add(account)
    db.session.commit()
    return account


@pytest.fixture
def other_user(app):
    account = User(username='someone-else')
    db.session.add(account)
    db.session.commit()
    return account


@pytest.fixture
def client(app, user):
    test_client = app.test_client()
    with test_client.session_transaction() as sess:
        sess['user_id'] = user.id
    return test_client
