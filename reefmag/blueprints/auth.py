"""Account blueprint: register, login, logout, recovery and current user."""

from __future__ import annotations

import secrets

from flask import Blueprint, current_app, jsonify, session
from flask_login import current_user, login_user, logout_user

from reefmag.auth import establish_session
from reefmag.errors import Conflict, InvalidCredentials, MailDeliveryError, NotFound, Unauthorized
from reefmag.extensions import limiter
from reefmag.forms import LoginForm, RecoverAccountForm, RegisterForm, form_data
from reefmag.models import User, check_password, hash_password, roles_for_email
from reefmag.security.config import auth_rate_limit, recovery_rate_limit, register_rate_limit
from reefmag.services.collections import get_service
from reefmag.services.email import send_password_reset_email
from reefmag.services.queue import get_task_queue


auth_bp = Blueprint("auth", __name__)


def _hash(password: str) -> str:
    return hash_password(password, rounds=current_app.config.get('BCRYPT_ROUNDS', 12))


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(register_rate_limit)
def register():
    data = form_data(RegisterForm())
    email = data['email']
    users = get_service('users')

    if users.find_by_email(email):
        raise Conflict('Email already registered')

    record = users.register(email, _hash(data['password']))
    current_app.logger.info(f"Registered user {record['id']}")

    # Mailing-list sync never affects the registration outcome
    get_task_queue().submit('sync_contact', email, data.get('firstName'))

    return jsonify({'success': True, 'message': 'Registration successful'}), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(auth_rate_limit)
def login():
    data = form_data(LoginForm())
    record = get_service('users').find_by_email(data['email'])

    if record is None or not check_password(data['password'], record.get('password')):
        current_app.logger.warning("Failed login attempt")
        raise InvalidCredentials()

    user = User(record, roles=roles_for_email(record['email'], current_app.config.get('ADMIN_EMAIL')))

    session.clear()
    session.regenerate()
    login_user(user)
    establish_session(user)

    current_app.logger.info(f"User {user.id} logged in (admin={user.is_admin})")
    return jsonify({'success': True, 'user': user.to_public_dict()})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        current_app.logger.info(f"User {current_user.id} logged out")
        logout_user()
    session.clear()
    return jsonify({'success': True})


@auth_bp.route("/user", methods=["GET"])
def current():
    if not current_user.is_authenticated:
        raise Unauthorized('Not logged in')
    return jsonify(current_user.to_public_dict())


@auth_bp.route("/recoverAccount", methods=["POST"])
@limiter.limit(recovery_rate_limit)
def recover_account():
    """Mail a generated password; it is stored only once the mail went out."""
    data = form_data(RecoverAccountForm())
    users = get_service('users')

    record = users.find_by_email(data['email'])
    if record is None:
        raise NotFound('No account found with that email')

    new_password = secrets.token_urlsafe(9)
    if not send_password_reset_email(record['email'], new_password):
        raise MailDeliveryError(f"Could not deliver recovery mail for user {record['id']}")

    users.set_password(record['id'], _hash(new_password), reset=True)
    current_app.logger.info(f"Password reset for user {record['id']}")

    return jsonify({'success': True, 'message': 'A new password has been sent to your email'})
