from .models import (
    RecordStatus,
    User,
    UserRole,
    check_password,
    hash_password,
    new_id,
    roles_for_email,
    utc_timestamp,
)

__all__ = [
    'RecordStatus',
    'User',
    'UserRole',
    'check_password',
    'hash_password',
    'new_id',
    'roles_for_email',
    'utc_timestamp',
]
