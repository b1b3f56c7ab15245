"""Application factory for the Reef Magazine content backend."""

from __future__ import annotations

import logging

from flask import Flask, session

from reefmag.blueprints.admin import admin_bp
from reefmag.blueprints.api import api_bp, files_bp
from reefmag.blueprints.auth import auth_bp
from reefmag.blueprints.public import public_bp
from reefmag.config import Config
from reefmag.errors import Unauthorized, register_error_handlers
from reefmag.extensions import limiter, login_manager
from reefmag.models import User, UserRole
from reefmag.security import (
    ServerSideSessionInterface,
    configure_secure_session,
    configure_security_headers,
)
from reefmag.services.collections import build_services
from reefmag.services.contacts import ContactListClient
from reefmag.services.flipbook import FlipbookClient
from reefmag.services.queue import TaskQueue
from reefmag.services.store import JsonFileStore


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize Flask extensions
    login_manager.init_app(app)
    limiter.init_app(app)

    # Configure security
    configure_secure_session(app)
    configure_security_headers(app)
    app.session_interface = ServerSideSessionInterface()

    store = JsonFileStore(app.config['DATA_DIR'])
    app.extensions['reefmag'] = {
        'store': store,
        'collections': build_services(store),
        'flipbook': FlipbookClient(
            app.config['FLIPBOOK_API_URL'],
            app.config.get('FLIPBOOK_API_KEY'),
            app.config.get('FLIPBOOK_CLIENT_ID'),
        ),
        'contacts': ContactListClient(
            app.config.get('CONTACTS_API_URL'),
            app.config.get('CONTACTS_API_KEY'),
            app.config.get('CONTACTS_LIST_ID'),
            timeout=app.config.get('CONTACTS_TIMEOUT', 5),
        ),
        'tasks': TaskQueue(app),
    }

    @login_manager.user_loader
    def load_user(user_id: str):
        record = app.extensions['reefmag']['collections']['users'].repository.get(user_id)
        if record is None:
            return None
        roles = [UserRole(r) for r in session.get('roles', []) if r in UserRole._value2member_map_]
        return User(record, roles=roles)

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        raise Unauthorized('Unauthorized')

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(files_bp)
    app.register_blueprint(public_bp)

    # Register CLI commands
    from reefmag.commands import register_commands
    register_commands(app)

    return app
