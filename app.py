import os

from dotenv import load_dotenv
from flask import Flask, jsonify, request

load_dotenv()

from backend.auth import login_manager
from backend.ics_export import DEFAULT_CALENDAR_NAME
from backend.settings import load_cruise_config
from models import db
from services import auth_routes, events_routes, file_routes, notes_routes, site_routes, user_routes

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///cruise.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['PERMANENT_SESSION_LIFETIME'] = 14 * 24 * 60 * 60  # two weeks, long enough for a cruise
app.config['ENVIRONMENT'] = os.environ.get('ENVIRONMENT', 'development').strip().lower()
app.config['CRUISE'] = load_cruise_config()
app.config['CRUISE_TIMEZONE'] = os.environ.get('CRUISE_TIMEZONE', 'UTC')
app.config['CRUISE_CALENDAR_NAME'] = os.environ.get('CRUISE_CALENDAR_NAME', DEFAULT_CALENDAR_NAME)
app.config['ASSETS_DIR'] = os.environ.get('ASSETS_DIR', os.path.join(app.root_path, 'assets'))

db.init_app(app)
login_manager.init_app(app)

with app.app_context():
    db.create_all()

app.logger.info(
    "Cruise starts %s (weekday %s) for %s days",
    app.config['CRUISE'].start_date.date().isoformat(),
    app.config['CRUISE'].start_day_of_week,
    app.config['CRUISE'].length_in_days,
)


# Auth
@app.route('/api/v3/auth/login', methods=['POST'])
def api_login():
    return auth_routes.api_login()


@app.route('/api/v3/auth/logout', methods=['POST'])
def api_logout():
    return auth_routes.api_logout()


@app.route('/login', methods=['GET', 'POST'])
def login_page():
    return auth_routes.login_page()


@app.route('/logout')
def logout_page():
    return auth_routes.logout_page()


# Users and profiles
@app.route('/api/v3/user/whoami')
def whoami():
    return user_routes.whoami()


@app.route('/api/v3/users/<int:user_id>/profile')
def user_profile(user_id):
    return user_routes.user_profile(user_id)


@app.route('/api/v3/user/profile', methods=['GET', 'POST'])
def own_profile():
    return user_routes.own_profile()


# User notes
@app.route('/api/v3/user/notes')
def list_notes():
    return notes_routes.list_notes()


@app.route('/api/v3/users/<int:user_id>/note', methods=['GET', 'POST', 'DELETE'])
def profile_note(user_id):
    return notes_routes.profile_note(user_id)


@app.route('/api/v3/user/note', methods=['POST'])
def edit_note():
    return notes_routes.edit_note()


# Events API
@app.route('/api/v3/events')
def list_events():
    return events_routes.list_events()


@app.route('/api/v3/events/<int:event_id>')
def get_event(event_id):
    return events_routes.get_event(event_id)


@app.route('/api/v3/events/<int:event_id>/favorite', methods=['POST', 'DELETE'])
def event_favorite(event_id):
    return events_routes.event_favorite(event_id)


# Site pages
@app.route('/')
def index():
    return site_routes.index()


@app.route('/events')
def events_page():
    """Day-by-day event schedule."""
    return site_routes.events_page()


@app.route('/events/<int:event_id>/calendarevent')
def event_calendar_download(event_id):
    return site_routes.event_calendar_download(event_id)


@app.route('/events/<int:event_id>/favorite', methods=['POST', 'DELETE'])
def site_event_favorite(event_id):
    return site_routes.site_event_favorite(event_id)


# Static UI assets
@app.route('/css/<path:path>')
def stream_css(path):
    return file_routes.stream_asset('css', path)


@app.route('/img/<path:path>')
def stream_img(path):
    return file_routes.stream_asset('img', path)


@app.route('/js/<path:path>')
def stream_js(path):
    return file_routes.stream_asset('js', path)


def _wants_json():
    return request.path.startswith('/api/')


@app.errorhandler(400)
@app.errorhandler(401)
@app.errorhandler(403)
@app.errorhandler(404)
@app.errorhandler(405)
def handle_http_error(error):
    if _wants_json():
        return jsonify({'error': error.description}), error.code
    return error


@app.errorhandler(500)
def handle_server_error(error):
    app.logger.error(f"Unhandled error on {request.method} {request.path}: {error}")
    if _wants_json():
        return jsonify({'error': 'Internal server error'}), 500
    return 'Internal server error', 500


if __name__ == '__main__':
    app.run(host='0.0.0.0', debug=True)
