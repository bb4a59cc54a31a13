"""Request authentication: bearer tokens for API callers, Flask-Login sessions for the site."""

from functools import wraps

from flask import jsonify, request
from flask_login import LoginManager, current_user

from models import db, User, Token

login_manager = LoginManager()
login_manager.login_view = 'login_page'


@login_manager.user_loader
def load_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


def bearer_token_from_request(req):
    header = req.headers.get('Authorization', '')
    scheme, _, value = header.partition(' ')
    if scheme.lower() != 'bearer' or not value.strip():
        return None
    return value.strip()


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve `Authorization: Bearer <token>`; banned users never authenticate."""
    token_value = bearer_token_from_request(req)
    if not token_value:
        return None
    token = Token.query.filter_by(token=token_value).first()
    if not token or not token.user or token.user.is_banned:
        return None
    return token.user


def get_current_user():
    """The authenticated user for this request (token or session), else None."""
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def authenticate_basic(req):
    """Check HTTP Basic credentials. Returns the User or None."""
    auth = req.authorization
    if not auth or not auth.username or auth.password is None:
        return None
    user = User.query.filter_by(username=auth.username).first()
    if not user or not user.check_password(auth.password):
        return None
    return user


def api_login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not get_current_user():
            return jsonify({'error': 'Authentication required'}), 401
        return view(*args, **kwargs)
    return wrapped
