"""Login/logout routes: token login for API clients, form login for the site."""

from flask import current_app, jsonify, redirect, render_template, request, url_for
from flask_login import login_user, logout_user

from backend.auth import api_login_required, authenticate_basic, get_current_user
from models import db, User, Token


def api_login():
    """POST /api/v3/auth/login with HTTP Basic credentials; returns a bearer token.

    An existing token is handed back rather than minting a new one, so several
    clients can share a login until the user explicitly logs out.
    """
    user = authenticate_basic(request)
    if not user or user.is_banned:
        current_app.logger.info("Rejected API login for %s", request.authorization.username if request.authorization else None)
        return jsonify({'error': 'Invalid credentials'}), 401

    token = Token.query.filter_by(user_id=user.id).first()
    if not token:
        token = Token.generate(user)
        db.session.add(token)
        db.session.commit()
        current_app.logger.info("Issued token for user %s", user.id)
    return jsonify({'token': token.token, 'user_id': user.id})


@api_login_required
def api_logout():
    user = get_current_user()
    Token.query.filter_by(user_id=user.id).delete()
    db.session.commit()
    current_app.logger.info("Logged out user %s", user.id)
    return '', 204


def login_page():
    """Site login form."""
    if request.method == 'POST':
        username = (request.form.get('username') or '').strip()
        password = request.form.get('password') or ''
        user = User.query.filter_by(username=username).first()
        if not user or not user.check_password(password):
            return render_template('login.html', error='Invalid username or password', username=username), 401
        if user.is_banned:
            return render_template('login.html', error='This account is banned', username=username), 401
        login_user(user, remember=True)
        next_url = request.args.get('next') or ''
        # Only allow local redirects
        if not next_url.startswith('/') or next_url.startswith('//'):
            next_url = url_for('events_page')
        return redirect(next_url)
    return render_template('login.html', error=None, username='')


def logout_page():
    logout_user()
    return redirect(url_for('events_page'))
