import logging
import os

from flask import Flask, g, jsonify, request
from flask_bcrypt import Bcrypt
from werkzeug.exceptions import HTTPException

from gymdesk.models.database import init_db, missing_unique_keys
from gymdesk.utils.decorators import load_session_identity

# Import route blueprints
from gymdesk.routes.attendance import attendance_bp
from gymdesk.routes.auth import auth_bp
from gymdesk.routes.chat import chat_bp
from gymdesk.routes.dashboard import dashboard_bp
from gymdesk.routes.data import data_bp
from gymdesk.routes.finances import finances_bp
from gymdesk.routes.machines import machines_bp
from gymdesk.routes.measurements import measurements_bp
from gymdesk.routes.members import members_bp
from gymdesk.routes.plans import plans_bp
from gymdesk.routes.portal import portal_bp
from gymdesk.routes.trainers import trainers_bp


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'your-secret-key-change-in-production')
    app.config['DATABASE_PATH'] = os.environ.get('DATABASE_PATH', 'gymdesk.db')
    app.config['ADMIN_PIN'] = os.environ.get('ADMIN_PIN', '123456')
    app.config['ADMIN_PIN_HASH'] = os.environ.get('ADMIN_PIN_HASH')
    app.config['SESSION_SECRET'] = os.environ.get('SESSION_SECRET') or app.config['ADMIN_PIN']
    app.config['SESSION_COOKIE_NAME'] = 'gym_session'
    app.config['SESSION_MAX_AGE'] = 24 * 60 * 60
    app.config['GYM_COOKIE_SECURE'] = _env_flag('GYM_COOKIE_SECURE', True)
    app.config['ALLOW_LEGACY_SESSIONS'] = _env_flag('ALLOW_LEGACY_SESSIONS', False)
    app.config['LOGIN_RATE_LIMIT'] = 5
    app.config['LOGIN_RATE_WINDOW_MINUTES'] = 5
    app.config['SEED_DEMO_DATA'] = _env_flag('SEED_DEMO_DATA', False)
    app.config['BCRYPT_LOG_ROUNDS'] = 12
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize Bcrypt and attach to app for convenience
    bcrypt = Bcrypt(app)
    app.bcrypt = bcrypt
    if not app.config['ADMIN_PIN_HASH']:
        app.config['ADMIN_PIN_HASH'] = bcrypt.generate_password_hash(
            str(app.config['ADMIN_PIN'])
        ).decode('utf-8')

    with app.app_context():
        init_db(app.config['DATABASE_PATH'], seed=app.config['SEED_DEMO_DATA'])
        unkeyed = missing_unique_keys(app.config['DATABASE_PATH'])
        if unkeyed:
            app.logger.warning(
                "Tables without unique keys: %s. Upserts will fail until "
                "scripts/add_unique_keys.py is run against %s",
                ', '.join(unkeyed), app.config['DATABASE_PATH'],
            )

    # Session guard runs before every /api request
    app.before_request(load_session_identity)

    @app.after_request
    def log_request(response):
        identity = g.get('identity')
        app.logger.debug(
            "%s %s -> %s (role=%s)",
            request.method, request.path, response.status_code,
            identity.role if identity else None,
        )
        return response

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(members_bp, url_prefix='/api/members')
    app.register_blueprint(trainers_bp, url_prefix='/api/trainers')
    app.register_blueprint(machines_bp, url_prefix='/api/machines')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(measurements_bp, url_prefix='/api/measurements')
    app.register_blueprint(finances_bp, url_prefix='/api/finances')
    app.register_blueprint(chat_bp, url_prefix='/api/chat')
    app.register_blueprint(plans_bp, url_prefix='/api')
    app.register_blueprint(dashboard_bp, url_prefix='/api')
    app.register_blueprint(data_bp, url_prefix='/api')
    app.register_blueprint(portal_bp, url_prefix='/api/portal')

    # Error handlers
    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error("Internal server error: %s", error)
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
