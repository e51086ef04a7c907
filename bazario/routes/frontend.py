from pathlib import Path
from flask import Blueprint, current_app, jsonify, send_from_directory, abort
from werkzeug.routing import PathConverter

frontend_bp = Blueprint('frontend', __name__)
frontend_bp = Blueprint('frontend', __name__)

# Client-side pages; anything else outside /api is the not-found page.
FRONTEND_ROUTES = {
    '/': 'Home',
    '/how-it-works': 'How It Works',
    '/start-selling': 'Start Selling',
    '/auth': 'Sign In',
    '/dashboard': 'Dashboard',
    '/bazar': 'Bazar',
    '/list-product': 'List Product',
    '/find-sellers': 'Find Campaigns',
    '/match-onboard': 'Match & Onboard',
}


class PagePathConverter(PathConverter):
    """Like ``path`` but never matches under ``api/``, so unknown or
    wrong-method API requests reach the API 404/405 handlers."""
    regex = r'(?!api/)[^/].*?'


def build_path():
    return Path(current_app.config.get('FRONTEND_BUILD_DIR', 'dist')).resolve()


@frontend_bp.route('/assets/<path:filename>')
def serve_assets(filename):
    build = build_path()
    if not build.exists():
        abort(404)
    return send_from_directory(build / 'assets', filename)


@frontend_bp.route('/')
@frontend_bp.route('/<page:path>')
def serve_page(path=''):
    route = '/' + path.rstrip('/')
    if route != '/' and route not in FRONTEND_ROUTES:
        abort(404)

    build = build_path()
    if (build / 'index.html').exists():
        return send_from_directory(build, 'index.html')

    return jsonify({
        'page': FRONTEND_ROUTES[route],
        'path': route,
        'message': "Client build not found. Run 'npm run build' and set FRONTEND_BUILD_DIR."
    }), 200
