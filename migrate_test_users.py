"""
Seed one test user per access level so every permission path can be exercised.
Never runs when ENVIRONMENT=production.
Usage:  python migrate_test_users.py

Every seeded account uses the password 'password' and gets a matching profile.
Idempotent: existing usernames are left alone.
"""
from app import app, db
from models import (
    ACCESS_BANNED,
    ACCESS_MODERATOR,
    ACCESS_QUARANTINED,
    ACCESS_THO,
    ACCESS_UNVERIFIED,
    ACCESS_VERIFIED,
    User,
    UserProfile,
)

TEST_PASSWORD = 'password'
TEST_RECOVERY_KEY = 'recovery key'
TEST_USERS = {
    'unverified': ACCESS_UNVERIFIED,
    'banned': ACCESS_BANNED,
    'quarantined': ACCESS_QUARANTINED,
    'verified': ACCESS_VERIFIED,
    'moderator': ACCESS_MODERATOR,
    'tho': ACCESS_THO,
}


def seed_test_users():
    """Create any missing test users. Returns the usernames created."""
    created = []
    for username, access_level in TEST_USERS.items():
        if User.query.filter_by(username=username).first():
            print(f"[skip] {username} already exists")
            continue
        user = User(username=username, access_level=access_level)
        user.set_password(TEST_PASSWORD)
        user.set_recovery_key(TEST_RECOVERY_KEY)
        user.profile = UserProfile(username=username)
        db.session.add(user)
        created.append(username)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    for username in created:
        print(f"[add] test user '{username}'")
    return created


def main():
    with app.app_context():
        if app.config['ENVIRONMENT'] == 'production':
            print("Refusing to seed test users in production.")
            return
        created = seed_test_users()
        print(f"Seeded {len(created)} test users (password '{TEST_PASSWORD}').")


if __name__ == '__main__':
    main()
