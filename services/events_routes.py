"""Event schedule API: listing by cruise day, single event, favorites."""

from datetime import datetime, timedelta

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from backend.auth import api_login_required, get_current_user
from backend.cruise_days import Unspecified, date_for_cruise_day, resolve_cruise_day, selector_from_args
from backend.settings import cruise_config, local_now, local_to_utc
from models import db, Event, EventFavorite


def favorite_event_ids(user):
    if not user:
        return set()
    rows = db.session.query(EventFavorite.event_id).filter(EventFavorite.user_id == user.id).all()
    return {row[0] for row in rows}


def events_for_cruise_day(cruise_day, config):
    """Events starting on the ship-local calendar date of the given cruise day, earliest first."""
    local_start = datetime.combine(date_for_cruise_day(cruise_day, config), datetime.min.time())
    # Local midnight-to-midnight, translated to the stored UTC
    day_start = local_to_utc(local_start)
    day_end = local_to_utc(local_start + timedelta(days=1))
    return Event.query.filter(
        Event.start_time >= day_start,
        Event.start_time < day_end,
    ).order_by(Event.start_time.asc(), Event.id.asc()).all()


def list_events():
    """All events, or one cruise day's worth when `day` or `cruiseday` is given."""
    selector = selector_from_args(request.args)
    if isinstance(selector, Unspecified):
        events = Event.query.order_by(Event.start_time.asc(), Event.id.asc()).all()
    else:
        cruise_day, _ = resolve_cruise_day(selector, cruise_config(), local_now())
        events = events_for_cruise_day(cruise_day, cruise_config())
    favorites = favorite_event_ids(get_current_user())
    return jsonify([e.to_dict(is_favorite=e.id in favorites) for e in events])


def get_event(event_id):
    event = db.get_or_404(Event, event_id)
    return jsonify(event.to_dict(is_favorite=event.id in favorite_event_ids(get_current_user())))


def set_favorite(user, event, favorite):
    """Add or remove a favorite. Returns the HTTP status for the change."""
    existing = EventFavorite.query.filter_by(user_id=user.id, event_id=event.id).first()
    if favorite:
        if existing:
            return 201
        db.session.add(EventFavorite(user_id=user.id, event_id=event.id))
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent add
            db.session.rollback()
        return 201
    if not existing:
        return 400
    db.session.delete(existing)
    db.session.commit()
    return 204


@api_login_required
def event_favorite(event_id):
    user = get_current_user()
    event = db.get_or_404(Event, event_id)
    status = set_favorite(user, event, request.method == 'POST')
    if status == 400:
        return jsonify({'error': 'Event is not a favorite'}), 400
    current_app.logger.info("User %s %s favorite event %s", user.id,
                            'added' if status == 201 else 'removed', event.id)
    return '', status
