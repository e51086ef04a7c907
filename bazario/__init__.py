import logging
import os

from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt
from flask_marshmallow import Marshmallow
from marshmallow import ValidationError


db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
bcrypt = Bcrypt()
ma = Marshmallow()

logger = logging.getLogger(__name__)

SIGN_IN_PATH = '/auth'


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


def sign_in_required(reason):
    return jsonify({
        'message': 'Please sign in to continue.',
        'reason': reason,
        'redirect': SIGN_IN_PATH
    }), 401


def register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return sign_in_required(reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return sign_in_required(reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return sign_in_required('Token has expired')


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify({
            'message': 'Invalid request data',
            'errors': error.messages
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({
                'error': 'API endpoint not found',
                'message': f'The endpoint {request.path} does not exist.'
            }), 404
        return jsonify({
            'error': 'Page not found',
            'message': f'The page {request.path} does not exist.',
            'redirect': '/'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method not allowed',
            'message': f'{request.method} is not supported on {request.path}.'
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({
            'error': 'Internal server error',
            'message': 'Something went wrong on the server.'
        }), 500


def create_app(config_object='bazario.config.Config'):
    app = Flask(__name__)

    app.config.from_object(config_object)
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    CORS(app)
    bcrypt.init_app(app)
    ma.init_app(app)

    register_jwt_handlers()
    register_error_handlers(app)

    from bazario.models import Profile, Campaign, SellerApplication  # noqa: F401

    from bazario.database_setup import initialize_database, register_db_commands
    register_db_commands(app)

    if app.config.get('AUTO_INIT_DB'):
        with app.app_context():
            initialize_database()

    # Register blueprints
    from bazario.routes.auth import auth_bp
    from bazario.routes.campaigns import campaigns_bp
    from bazario.routes.applications import applications_bp
    from bazario.routes.dashboard import dashboard_bp
    from bazario.routes.frontend import frontend_bp, PagePathConverter

    app.url_map.converters['page'] = PagePathConverter

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(campaigns_bp, url_prefix='/api/campaigns')
    app.register_blueprint(applications_bp, url_prefix='/api/applications')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(frontend_bp)

    @app.route('/api/health')
    def health_check():
        return {
            'status': 'healthy',
            'message': 'Bazario API is running!',
            'version': '1.0.0'
        }, 200

    @app.route('/api/status')
    def app_status():
        """Complete application status"""
        try:
            Campaign.query.first()
            db_status = 'connected'
        except Exception as e:
            logger.exception("Database check failed")
            db_status = f'error: {str(e)}'

        return {
            'application': 'Bazario Marketplace',
            'version': '1.0.0',
            'status': 'running',
            'database': db_status,
            'environment': os.getenv('FLASK_ENV', 'development'),
            'endpoints': {
                'health': '/api/health',
                'auth': '/api/auth/login',
                'catalog': '/api/campaigns',
                'applications': '/api/applications',
                'review': '/api/applications/review',
                'dashboard': '/api/dashboard'
            }
        }, 200

    logger.info("Bazario app created with %s", config_object)
    return app
