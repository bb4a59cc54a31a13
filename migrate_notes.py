"""
Create the user_note table, with foreign keys to user and user_profile, if it does not exist.
Usage:  python migrate_notes.py
"""
from sqlalchemy import inspect

from app import app, db
from models import UserNote


def ensure_user_note_table():
    UserNote.__table__.create(db.engine, checkfirst=True)
    conn = db.engine.connect()
    try:
        # SQLite reports FKs via PRAGMA; other engines via the inspector
        if db.engine.dialect.name == 'sqlite':
            targets = {row[2] for row in conn.execute(db.text("PRAGMA foreign_key_list(user_note)"))}
        else:
            targets = {fk['referred_table'] for fk in inspect(db.engine).get_foreign_keys('user_note')}
    finally:
        conn.close()
    missing = {'user', 'user_profile'} - targets
    if missing:
        raise RuntimeError(f"user_note is missing foreign keys to: {', '.join(sorted(missing))}")
    return targets


def main():
    with app.app_context():
        ensure_user_note_table()
        print("user_note table is ensured.")


if __name__ == '__main__':
    main()
