from datetime import datetime

from backend.ics_export import EventRecord, build_event_ics
from migrate_events import import_schedule
from migrate_notes import ensure_user_note_table
from migrate_test_users import TEST_USERS, seed_test_users
from models import Event, User


def test_seed_test_users_creates_one_per_access_level(app):
    created = seed_test_users()
    assert sorted(created) == sorted(TEST_USERS)
    for username, access_level in TEST_USERS.items():
        user = User.query.filter_by(username=username).first()
        assert user.access_level == access_level
        assert user.check_password('password')
        assert user.check_recovery_key('recovery key')
        assert user.profile.username == username


def test_seed_test_users_is_idempotent(app):
    seed_test_users()
    assert seed_test_users() == []
    assert User.query.count() == len(TEST_USERS)


def test_seeded_banned_user_cannot_log_in(app, client):
    seed_test_users()
    from conftest import basic_auth
    assert client.post('/api/v3/auth/login', headers=basic_auth('banned')).status_code == 401
    assert client.post('/api/v3/auth/login', headers=basic_auth('verified')).status_code == 200


def test_user_note_table_has_foreign_keys(app):
    assert {'user', 'user_profile'} <= ensure_user_note_table()


def test_import_schedule_round_trips_export(app):
    record = EventRecord(uid='karaoke@sched', title='Karaoke; Night, Live', description='Sing\nloud',
                         event_type='Music', location='Piano Bar', start_time=datetime(2022, 3, 8, 21, 0),
                         end_time=datetime(2022, 3, 8, 23, 0))
    ics = build_event_ics(record, generated_at=datetime(2022, 3, 1))

    assert import_schedule(ics.encode('utf-8')) == (1, 0)
    event = Event.query.filter_by(uid='karaoke@sched').one()
    assert event.title == 'Karaoke; Night, Live'
    assert event.description == 'Sing\nloud'
    assert event.event_type == 'Music'
    assert event.location == 'Piano Bar'
    assert event.start_time == datetime(2022, 3, 8, 21, 0)
    assert event.end_time == datetime(2022, 3, 8, 23, 0)

    assert import_schedule(ics.encode('utf-8')) == (0, 1)
    assert Event.query.count() == 1
