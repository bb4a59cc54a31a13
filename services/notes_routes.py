"""Private per-profile user notes."""

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from backend.auth import api_login_required, get_current_user
from backend.settings import utc_now
from models import db, UserNote, UserProfile

NOTE_MAX_CHARS = 4000


def _note_text(data):
    note = (data.get('note') or '').strip()
    if not note:
        return None, 'Note text is required'
    if len(note) > NOTE_MAX_CHARS:
        return None, f"Note must be at most {NOTE_MAX_CHARS} characters"
    return note, None


def _find_note(user_id, profile_id):
    return UserNote.query.filter_by(user_id=user_id, profile_id=profile_id).first()


@api_login_required
def list_notes():
    user = get_current_user()
    notes = UserNote.query.filter_by(user_id=user.id).order_by(UserNote.updated_at.desc()).all()
    return jsonify([n.to_dict() for n in notes])


@api_login_required
def profile_note(user_id):
    """GET/POST/DELETE the caller's note about another user's profile."""
    user = get_current_user()
    profile = UserProfile.query.filter_by(user_id=user_id).first_or_404()
    note = _find_note(user.id, profile.id)

    if request.method == 'DELETE':
        if not note:
            return jsonify({'error': 'No note for this user'}), 404
        db.session.delete(note)
        db.session.commit()
        return '', 204

    if request.method == 'POST':
        text, error = _note_text(request.get_json(silent=True) or {})
        if error:
            return jsonify({'error': error}), 400
        if note:
            note.note = text
            note.updated_at = utc_now()
            db.session.commit()
            return jsonify(note.to_dict())
        note = UserNote(user_id=user.id, profile_id=profile.id, note=text)
        db.session.add(note)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent create; update the winner instead
            db.session.rollback()
            note = UserNote.query.filter_by(user_id=user.id, profile_id=profile.id).first_or_404()
            note.note = text
            note.updated_at = utc_now()
            db.session.commit()
            return jsonify(note.to_dict())
        current_app.logger.info("User %s created a note on profile %s", user.id, profile.id)
        return jsonify(note.to_dict()), 201

    if not note:
        return jsonify({'error': 'No note for this user'}), 404
    return jsonify(note.to_edit_dict())


@api_login_required
def edit_note():
    """Edit a note by id; only its owner may."""
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    try:
        note_id = int(data.get('note_id'))
    except (TypeError, ValueError):
        return jsonify({'error': 'note_id is required'}), 400
    note = db.get_or_404(UserNote, note_id)
    if note.user_id != user.id:
        current_app.logger.warning("User %s tried to edit note %s owned by %s", user.id, note.id, note.user_id)
        return jsonify({'error': 'Not your note'}), 403
    text, error = _note_text(data)
    if error:
        return jsonify({'error': error}), 400
    note.note = text
    note.updated_at = utc_now()
    db.session.commit()
    return jsonify(note.to_dict())
