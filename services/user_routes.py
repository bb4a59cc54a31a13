"""User identity and profile routes."""

from flask import current_app, jsonify, request

from backend.auth import api_login_required, get_current_user
from models import db, PROFILE_FIELD_LIMITS, UserProfile, UserNote


def whoami():
    user = get_current_user()
    if not user:
        return jsonify({'user_id': None, 'username': None, 'is_logged_in': False})
    data = user.to_dict()
    data['is_logged_in'] = True
    return jsonify(data)


def _ensure_profile(user):
    if user.profile is None:
        user.profile = UserProfile(user_id=user.id, username=user.username)
        db.session.commit()
    return user.profile


def user_profile(user_id):
    """Public profile; the requester's private note about this user rides along when one exists."""
    profile = UserProfile.query.filter_by(user_id=user_id).first_or_404()
    note_text = None
    viewer = get_current_user()
    if viewer:
        note = UserNote.query.filter_by(user_id=viewer.id, profile_id=profile.id).first()
        if note:
            note_text = note.note
    return jsonify(profile.to_dict(note=note_text))


@api_login_required
def own_profile():
    user = get_current_user()
    profile = _ensure_profile(user)

    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        errors = {}
        for field, limit in PROFILE_FIELD_LIMITS.items():
            if field not in data:
                continue
            value = data.get(field)
            value = (str(value) if value is not None else '').strip()
            if len(value) > limit:
                errors[field] = f"must be at most {limit} characters"
                continue
            setattr(profile, field, value or None)
        if errors:
            db.session.rollback()
            return jsonify({'error': 'Invalid profile fields', 'fields': errors}), 400
        db.session.commit()
        current_app.logger.info("Profile updated for user %s", user.id)

    return jsonify(profile.to_dict())
