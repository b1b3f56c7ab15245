"""Authentication helpers shared across blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, cast

from flask import redirect, request, session, url_for
from flask_login import current_user

from reefmag.errors import Unauthorized
from reefmag.models import User, UserRole

F = TypeVar('F', bound=Callable[..., object])


def establish_session(user: User) -> None:
    """Store identity and role claims for a freshly authenticated user."""
    session["user_id"] = user.id
    session["email"] = user.email
    session["roles"] = [role.value for role in user.roles]
    session["is_admin"] = user.is_admin


def session_roles() -> set[str]:
    return set(session.get("roles") or ())


def has_claim(role: UserRole | str) -> bool:
    if not current_user.is_authenticated:
        return False
    value = role.value if isinstance(role, UserRole) else str(role)
    return value in session_roles()


def require_admin_api() -> None:
    """Reject the request unless the session carries the admin claim."""
    if not has_claim(UserRole.ADMIN):
        raise Unauthorized('Unauthorized')


def login_page_required(func: F) -> F:
    """Page decorator: anonymous visitors are sent to the login page."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('public.login', next=request.full_path))
        return func(*args, **kwargs)
    return cast(F, wrapper)


def admin_page_required(func: F) -> F:
    """Page decorator: anyone without the admin claim is sent to the login page."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not has_claim(UserRole.ADMIN):
            return redirect(url_for('public.login', next=request.full_path))
        return func(*args, **kwargs)

    return cast(F, wrapper)


__all__ = [
    'establish_session',
    'session_roles',
    'has_claim',
    'require_admin_api',
    'login_page_required',
    'admin_page_required',
]
