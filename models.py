import secrets
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from backend.ics_export import EventRecord

db = SQLAlchemy()

# Access levels, lowest to highest
ACCESS_UNVERIFIED = 'unverified'
ACCESS_BANNED = 'banned'
ACCESS_QUARANTINED = 'quarantined'
ACCESS_VERIFIED = 'verified'
ACCESS_MODERATOR = 'moderator'
ACCESS_THO = 'tho'
ACCESS_ADMIN = 'admin'
ACCESS_LEVELS = [
    ACCESS_UNVERIFIED,
    ACCESS_BANNED,
    ACCESS_QUARANTINED,
    ACCESS_VERIFIED,
    ACCESS_MODERATOR,
    ACCESS_THO,
    ACCESS_ADMIN,
]

PROFILE_FIELD_LIMITS = {
    'display_name': 50,
    'real_name': 100,
    'pronouns': 30,
    'email': 120,
    'home_location': 100,
    'room_number': 20,
    'about': 2000,
    'message': 500,
}


def utcnow():
    return datetime.utcnow()


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    recovery_key_hash = db.Column(db.String(200), nullable=True)
    access_level = db.Column(db.String(20), default=ACCESS_UNVERIFIED, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    profile = db.relationship('UserProfile', backref='user', uselist=False, cascade="all, delete-orphan")
    tokens = db.relationship('Token', backref='user', lazy=True, cascade="all, delete-orphan")
    notes = db.relationship('UserNote', backref='author', lazy=True, cascade="all, delete-orphan",
                            foreign_keys='UserNote.user_id')
    favorites = db.relationship('EventFavorite', backref='user', lazy=True, cascade="all, delete-orphan")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def set_recovery_key(self, recovery_key):
        self.recovery_key_hash = generate_password_hash(recovery_key)

    def check_recovery_key(self, recovery_key):
        if not self.recovery_key_hash:
            return False
        return check_password_hash(self.recovery_key_hash, recovery_key)

    @property
    def is_banned(self):
        return self.access_level == ACCESS_BANNED

    @property
    def is_active(self):
        # Flask-Login refuses sessions for inactive users
        return not self.is_banned

    def to_dict(self):
        return {
            'user_id': self.id,
            'username': self.username,
            'access_level': self.access_level,
        }


class UserProfile(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False)
    username = db.Column(db.String(50), nullable=False)
    display_name = db.Column(db.String(50), nullable=True)
    real_name = db.Column(db.String(100), nullable=True)
    pronouns = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    home_location = db.Column(db.String(100), nullable=True)
    room_number = db.Column(db.String(20), nullable=True)
    about = db.Column(db.Text, nullable=True)
    message = db.Column(db.String(500), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def display_handle(self):
        """'Display Name (@username)' when a display name is set, else '@username'."""
        if self.display_name:
            return f"{self.display_name} (@{self.username})"
        return f"@{self.username}"

    def to_dict(self, note=None):
        data = {
            'user_id': self.user_id,
            'username': self.username,
            'display_handle': self.display_handle(),
        }
        for field in PROFILE_FIELD_LIMITS:
            data[field] = getattr(self, field) or ''
        if note is not None:
            data['note'] = note
        return data


class Token(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    @classmethod
    def generate(cls, user):
        return cls(token=secrets.token_urlsafe(16), user_id=user.id)


class UserNote(db.Model):
    """A private note one user keeps about another user's profile."""
    __table_args__ = (db.UniqueConstraint('user_id', 'profile_id', name='uq_user_note_owner_profile'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    profile_id = db.Column(db.Integer, db.ForeignKey('user_profile.id'), nullable=False)
    note = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    profile = db.relationship('UserProfile', backref=db.backref('notes_about', cascade="all, delete-orphan"))

    def to_edit_dict(self):
        """Just the text and id, enough for the owner to submit an edit."""
        return {'note_id': self.id, 'note': self.note}

    def to_dict(self):
        return {
            'note_id': self.id,
            'profile_user_id': self.profile.user_id if self.profile else None,
            'profile_username': self.profile.username if self.profile else None,
            'note': self.note,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Event(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    uid = db.Column(db.String(255), unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default='')
    event_type = db.Column(db.String(50), default='')
    location = db.Column(db.String(255), default='')
    # Stored as naive UTC
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)

    favorites = db.relationship('EventFavorite', backref='event', lazy=True, cascade="all, delete-orphan")

    def to_record(self):
        return EventRecord(
            uid=self.uid,
            title=self.title,
            description=self.description or '',
            event_type=self.event_type or '',
            location=self.location or '',
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def to_dict(self, is_favorite=False):
        return {
            'id': self.id,
            'uid': self.uid,
            'title': self.title,
            'description': self.description or '',
            'event_type': self.event_type or '',
            'location': self.location or '',
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'is_favorite': is_favorite,
        }


class EventFavorite(db.Model):
    __table_args__ = (db.UniqueConstraint('user_id', 'event_id', name='uq_event_favorite_user_event'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    event_id = db.Column(db.Integer, db.ForeignKey('event.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
