from conftest import basic_auth
from models import ACCESS_BANNED, Token


def test_api_login_returns_token(client, make_user):
    make_user('alice')
    resp = client.post('/api/v3/auth/login', headers=basic_auth('alice'))
    assert resp.status_code == 200
    assert resp.get_json()['token']


def test_api_login_reuses_existing_token(client, make_user):
    make_user('alice')
    first = client.post('/api/v3/auth/login', headers=basic_auth('alice')).get_json()['token']
    second = client.post('/api/v3/auth/login', headers=basic_auth('alice')).get_json()['token']
    assert first == second
    assert Token.query.count() == 1


def test_api_login_rejects_bad_password(client, make_user):
    make_user('alice')
    resp = client.post('/api/v3/auth/login', headers=basic_auth('alice', 'wrong'))
    assert resp.status_code == 401
    assert resp.get_json()['error']


def test_api_login_rejects_missing_credentials(client):
    assert client.post('/api/v3/auth/login').status_code == 401


def test_banned_user_cannot_log_in(client, make_user):
    make_user('punk', access_level=ACCESS_BANNED)
    assert client.post('/api/v3/auth/login', headers=basic_auth('punk')).status_code == 401


def test_bearer_token_identifies_user(client, make_user, auth_headers):
    make_user('alice')
    resp = client.get('/api/v3/user/whoami', headers=auth_headers('alice'))
    data = resp.get_json()
    assert data['is_logged_in'] is True
    assert data['username'] == 'alice'


def test_anonymous_whoami(client):
    assert client.get('/api/v3/user/whoami').get_json()['is_logged_in'] is False


def test_logout_revokes_token(client, make_user, auth_headers):
    make_user('alice')
    headers = auth_headers('alice')
    assert client.post('/api/v3/auth/logout', headers=headers).status_code == 204
    assert client.get('/api/v3/user/whoami', headers=headers).get_json()['is_logged_in'] is False
    assert client.post('/api/v3/auth/logout', headers=headers).status_code == 401


def test_site_form_login_and_logout(client, make_user):
    make_user('alice')
    resp = client.post('/login', data={'username': 'alice', 'password': 'password'})
    assert resp.status_code == 302
    assert client.get('/api/v3/user/whoami').get_json()['username'] == 'alice'
    client.get('/logout')
    assert client.get('/api/v3/user/whoami').get_json()['is_logged_in'] is False


def test_site_login_rejects_bad_password(client, make_user):
    make_user('alice')
    resp = client.post('/login', data={'username': 'alice', 'password': 'nope'})
    assert resp.status_code == 401
    assert b'Invalid username or password' in resp.data


def test_site_login_ignores_offsite_next(client, make_user):
    make_user('alice')
    resp = client.post('/login?next=//evil.example.com/', data={'username': 'alice', 'password': 'password'})
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/events')
