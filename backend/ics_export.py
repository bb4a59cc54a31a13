"""Single-event iCalendar (.ics) export.

The document is a fixed VCALENDAR/VEVENT skeleton filled in property by
property. Text values go through `ics_escape` exactly once, right before the
line is emitted, so nothing is ever escaped twice.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

import pytz

DEFAULT_CALENDAR_NAME = 'jococruise2022'
DEFAULT_PRODUCT_ID = '-//Sched.com JoCo Cruise 2022//EN'
ICS_CONTENT_TYPE = 'text/calendar; charset=utf-8'
ICS_LINE_END = '\r\n'

_FILENAME_UNSAFE = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


@dataclass(frozen=True)
class EventRecord:
    uid: str
    title: str
    description: str
    event_type: str
    location: str
    start_time: datetime
    end_time: datetime


def ics_escape(value) -> str:
    """Escape a TEXT value per RFC 5545 section 3.3.11. Backslash must go first."""
    text = '' if value is None else str(value)
    return (text.replace('\\', '\\\\')
                .replace(';', '\\;')
                .replace(',', '\\,')
                .replace('\n', '\\n'))


def format_ics_timestamp(moment: datetime) -> str:
    """UTC basic format, e.g. 20220305T170000Z. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = pytz.UTC.localize(moment)
    return moment.astimezone(timezone.utc).strftime('%Y%m%dT%H%M%SZ')


def ics_filename(title) -> str:
    """Suggested download name: the title with path-hostile characters replaced, plus .ics."""
    cleaned = _FILENAME_UNSAFE.sub('_', (title or '').strip()).strip('. ')
    return f"{cleaned or 'event'}.ics"


def _event_lines(event, generated_at):
    return [
        ('BEGIN', 'VEVENT'),
        ('DTSTAMP', format_ics_timestamp(generated_at)),
        ('DTSTART', format_ics_timestamp(event.start_time)),
        ('DTEND', format_ics_timestamp(event.end_time)),
        ('SUMMARY', ics_escape(event.title)),
        ('DESCRIPTION', ics_escape(event.description)),
        ('CATEGORIES', ics_escape(event.event_type)),
        ('LOCATION', ics_escape(event.location)),
        ('SEQUENCE', '0'),
        ('UID', ics_escape(event.uid)),
        ('END', 'VEVENT'),
    ]


def build_event_ics(event, generated_at=None, calendar_name=DEFAULT_CALENDAR_NAME,
                    product_id=DEFAULT_PRODUCT_ID) -> str:
    """Render one event as a complete calendar document.

    `event` is anything with the EventRecord attributes. `generated_at` becomes
    DTSTAMP and defaults to the current UTC time.
    """
    if generated_at is None:
        generated_at = datetime.now(pytz.UTC)
    lines = [
        ('BEGIN', 'VCALENDAR'),
        ('VERSION', '2.0'),
        ('X-WR-CALNAME', calendar_name),
        ('X-WR-CALDESC', 'Event Calendar'),
        ('METHOD', 'PUBLISH'),
        ('CALSCALE', 'GREGORIAN'),
        ('PRODID', product_id),
        ('X-WR-TIMEZONE', 'UTC'),
    ]
    lines.extend(_event_lines(event, generated_at))
    lines.append(('END', 'VCALENDAR'))
    return ''.join(f"{name}:{value}{ICS_LINE_END}" for name, value in lines)
