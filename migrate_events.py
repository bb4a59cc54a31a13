"""
Load the event schedule from an .ics export (e.g. the Sched.com feed) into the event table.
Usage:  python migrate_events.py schedule.ics

Events are matched by UID: existing rows are updated, new ones inserted.
"""
import argparse
from datetime import date, datetime

import pytz
from icalendar import Calendar

from app import app, db
from models import Event


def _as_utc_naive(value):
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value
        return value.astimezone(pytz.UTC).replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    raise ValueError(f"Unsupported date value: {value!r}")


def _text(component, key):
    value = component.get(key)
    if value is None:
        return ''
    if key == 'categories':
        # icalendar gives a vCategory (or a list of them) for CATEGORIES
        cats = value if isinstance(value, list) else [value]
        return ', '.join(str(c) for cat in cats for c in getattr(cat, 'cats', [cat]))
    return str(value)


def import_schedule(ics_bytes):
    """Upsert every VEVENT in the calendar. Returns (created, updated)."""
    calendar = Calendar.from_ical(ics_bytes)
    created = updated = 0
    for component in calendar.walk('VEVENT'):
        uid = _text(component, 'uid')
        if not uid or component.get('dtstart') is None:
            print(f"[skip] event without uid/dtstart: {_text(component, 'summary')!r}")
            continue
        start_time = _as_utc_naive(component.decoded('dtstart'))
        if component.get('dtend') is not None:
            end_time = _as_utc_naive(component.decoded('dtend'))
        else:
            end_time = start_time
        event = Event.query.filter_by(uid=uid).first()
        if event is None:
            event = Event(uid=uid)
            db.session.add(event)
            created += 1
        else:
            updated += 1
        event.title = _text(component, 'summary') or 'Untitled event'
        event.description = _text(component, 'description')
        event.event_type = _text(component, 'categories')
        event.location = _text(component, 'location')
        event.start_time = start_time
        event.end_time = end_time
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return created, updated


def main():
    parser = argparse.ArgumentParser(description="Import the event schedule from an .ics file")
    parser.add_argument('path', help="Path to the .ics schedule")
    args = parser.parse_args()
    with open(args.path, 'rb') as fh:
        ics_bytes = fh.read()
    with app.app_context():
        created, updated = import_schedule(ics_bytes)
        print(f"Imported schedule: {created} new, {updated} updated events.")


if __name__ == '__main__':
    main()
