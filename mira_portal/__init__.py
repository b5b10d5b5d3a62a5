"""
MIRA Portal - Application Factory
"""

import logging
import os

from flask import Flask
from flask.logging import default_handler

from config import config


def create_app(config_name='development'):
    """Factory function creating the Flask application."""

    app = Flask(__name__)

    # Loads settings
    app.config.from_object(config.get(config_name, config['default']))

    _configure_logging(app)

    # Initializes extensions
    from mira_portal.extensions import db, login_manager, migrate

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    # Imports models (needed for migrations)
    from mira_portal.models import User

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Error handlers
    from mira_portal.errors import register_error_handlers
    register_error_handlers(app)

    # Registers Blueprints
    from mira_portal.routes import (
        auth_bp, main_bp, admin_bp, manager_bp, customer_bp, functions_bp,
    )

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(manager_bp, url_prefix='/manager')
    app.register_blueprint(customer_bp, url_prefix='/customer')
    app.register_blueprint(functions_bp, url_prefix='/functions/v1')

    # Creates the upload folder
    upload_folder = app.config.get('UPLOAD_FOLDER')
    if upload_folder and not app.testing and not os.path.exists(upload_folder):
        os.makedirs(upload_folder)

    # Creates tables if missing (development)
    with app.app_context():
        db.create_all()

        # Creates the default admin if none exists
        _create_default_admin(app, db)

    return app


def _configure_logging(app):
    """Application and service loggers share Flask's handler and level."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)

    package_logger = logging.getLogger('mira_portal.services')
    package_logger.setLevel(level)
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)


def _create_default_admin(app, db):
    """Creates the default admin when no admin exists and a password is configured."""
    from mira_portal.models import User, UserRole

    password = app.config.get('DEFAULT_ADMIN_PASSWORD')
    if not password:
        return

    if UserRole.query.filter_by(role='admin').first() is not None:
        return

    email = app.config['DEFAULT_ADMIN_EMAIL'].lower()
    if User.query.filter_by(email=email).first() is not None:
        return

    admin = User(
        name='Administrator',
        email=email,
        is_superadmin=email in app.config.get('SUPERADMIN_EMAILS', []),
    )
    admin.set_password(password)
    admin.direct_role = UserRole(role='admin')
    db.session.add(admin)
    db.session.commit()
    app.logger.info('Default admin created: %s', email)
