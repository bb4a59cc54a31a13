"""Server-rendered event pages and the .ics download."""

from flask import Response, current_app, jsonify, redirect, render_template, request, url_for

from backend.auth import get_current_user
from backend.cruise_days import is_after_cruise, is_before_cruise, resolve_cruise_day, selector_from_args
from backend.ics_export import ICS_CONTENT_TYPE, build_event_ics, ics_filename
from backend.settings import cruise_config, local_now, utc_now
from models import db, Event
from services.events_routes import events_for_cruise_day, favorite_event_ids, set_favorite


def index():
    return redirect(url_for('events_page'))


def events_page():
    """One cruise day of events. `day=sun..sat` or `cruiseday=N`; defaults to today's weekday."""
    config = cruise_config()
    now = local_now()
    selector = selector_from_args(request.args)
    cruise_day, days = resolve_cruise_day(selector, config, now)

    user = get_current_user()
    favorites = favorite_event_ids(user)
    events = [e.to_dict(is_favorite=e.id in favorites) for e in events_for_cruise_day(cruise_day, config)]
    upcoming_event = None
    if favorites:
        upcoming_event = next((e for e in events if e['is_favorite']), None)

    return render_template(
        'events.html',
        title='Events',
        user=user,
        events=events,
        day=cruise_day,
        days=[d.to_dict() for d in days],
        is_before_cruise=is_before_cruise(config, now),
        is_after_cruise=is_after_cruise(config, now),
        upcoming_event=upcoming_event,
    )


def event_calendar_download(event_id):
    event = db.get_or_404(Event, event_id)
    body = build_event_ics(
        event.to_record(),
        generated_at=utc_now(),
        calendar_name=current_app.config['CRUISE_CALENDAR_NAME'],
    )
    filename = ics_filename(event.title)
    response = Response(body, status=200, content_type=ICS_CONTENT_TYPE)
    response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def site_event_favorite(event_id):
    """Favorite glue for the events page; returns bare status codes for its XHR calls."""
    user = get_current_user()
    if not user:
        return jsonify({'error': 'Log in to follow events'}), 401
    event = db.get_or_404(Event, event_id)
    status = set_favorite(user, event, request.method == 'POST')
    return '', status
