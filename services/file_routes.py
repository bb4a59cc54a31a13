"""Static UI assets (css/img/js) served straight from disk with a one-day cache lifetime."""

import os

from flask import abort, current_app, send_from_directory

ASSET_KINDS = ('css', 'img', 'js')
ASSET_MAX_AGE = 60 * 60 * 24


def stream_asset(kind, path):
    path = (path or '').lstrip('/')
    if '../' in path or path == '..' or path.endswith('/..'):
        abort(403)
    base_dir = os.path.join(current_app.config['ASSETS_DIR'], kind)
    full_path = os.path.join(base_dir, path)
    if not path or not os.path.isfile(full_path):
        abort(404)
    response = send_from_directory(base_dir, path, max_age=ASSET_MAX_AGE)
    if response.status_code in (200, 304):
        response.cache_control.public = True
        response.cache_control.max_age = ASSET_MAX_AGE
    return response
