from .auth import LoginForm, RecoverAccountForm, RegisterForm
from .content import COLLECTION_FORMS, ApiForm, form_data

__all__ = [
    'ApiForm',
    'COLLECTION_FORMS',
    'LoginForm',
    'RecoverAccountForm',
    'RegisterForm',
    'form_data',
]
