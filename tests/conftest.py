import base64
import os

# 2022-03-05 is a Saturday, so embarkation weekday is 7.
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['CRUISE_START_DATE'] = '2022-03-05'
os.environ['CRUISE_LENGTH_DAYS'] = '8'
os.environ['CRUISE_TIMEZONE'] = 'UTC'
os.environ['ENVIRONMENT'] = 'testing'
os.environ.pop('CRUISE_START_DAY_OF_WEEK', None)

import pytest
from flask import g
from flask.testing import FlaskClient

from app import app as flask_app
from models import db, ACCESS_VERIFIED, User, UserProfile


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()


class _FreshUserClient(FlaskClient):
    """The app fixture holds one app context open, so `g` would otherwise carry
    Flask-Login's cached user from one request into the next."""

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


@pytest.fixture
def client(app):
    app.test_client_class = _FreshUserClient
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username, password='password', access_level=ACCESS_VERIFIED):
        user = User(username=username, access_level=access_level)
        user.set_password(password)
        user.profile = UserProfile(username=username)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


def basic_auth(username, password='password'):
    raw = f"{username}:{password}".encode('utf-8')
    return {'Authorization': 'Basic ' + base64.b64encode(raw).decode('ascii')}


@pytest.fixture
def auth_headers(client):
    """Log in over the API and return bearer headers for that user."""
    def _auth_headers(username, password='password'):
        resp = client.post('/api/v3/auth/login', headers=basic_auth(username, password))
        assert resp.status_code == 200, resp.get_json()
        return {'Authorization': f"Bearer {resp.get_json()['token']}"}
    return _auth_headers
