"""Domain types shared across the collections."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from flask_login import UserMixin

from reefmag.extensions import bcrypt


class RecordStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class UserRole(str, Enum):
    """Claims granted to an authenticated session."""

    MEMBER = 'member'
    ADMIN = 'admin'


def new_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, ``Z`` suffixed."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def roles_for_email(email: str, admin_email: str | None) -> list[UserRole]:
    """Every user is a member; the configured administrator email is also admin.

    The comparison is exact and case-sensitive.
    """
    roles = [UserRole.MEMBER]
    if admin_email and email == admin_email:
        roles.append(UserRole.ADMIN)
    return roles


class User(UserMixin):
    """Flask-Login wrapper around a stored user record."""

    def __init__(self, record: dict[str, Any], roles: list[UserRole] | None = None):
        self.record = record
        self.id = record['id']
        self.email = record['email']
        self.roles = roles or [UserRole.MEMBER]

    def has_role(self, *roles: UserRole | str) -> bool:
        held = {r.value for r in self.roles}
        wanted = {r.value if isinstance(r, UserRole) else str(r) for r in roles}
        return bool(held & wanted)

    @property
    def is_admin(self) -> bool:
        return self.has_role(UserRole.ADMIN)

    def to_public_dict(self) -> dict[str, Any]:
        return {'id': self.id, 'email': self.email, 'isAdmin': self.is_admin}
