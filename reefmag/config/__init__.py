import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    APP_ENV = os.getenv('APP_ENV', 'development')
    # Provide a safe development fallback to avoid 500s when SECRET_KEY is missing.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'
    PORT = int(os.getenv('PORT', 3000))
    BASE_URL = os.getenv('BASE_URL') or f"http://localhost:{PORT}"
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Flat-file storage
    DATA_DIR = os.getenv('DATA_DIR', 'data')
    UPLOAD_ROOT = os.getenv('UPLOAD_ROOT', 'uploads')
    MAX_CONTENT_LENGTH = 200 * 1024 * 1024
    PROTECTION_TOKEN = os.getenv('PROTECTION_TOKEN', 'secret_pdf_access_token_123')

    # The single administrator identity
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL')

    # Flip-book rendering service
    FLIPBOOK_API_URL = os.getenv('FLIPBOOK_API_URL', 'https://heyzine.com/api1')
    FLIPBOOK_API_KEY = os.getenv('FLIPBOOK_API_KEY')
    FLIPBOOK_CLIENT_ID = os.getenv('FLIPBOOK_CLIENT_ID')

    # Mailing-list service
    CONTACTS_API_URL = os.getenv('CONTACTS_API_URL', 'https://api.brevo.com/v3/contacts')
    CONTACTS_API_KEY = os.getenv('CONTACTS_API_KEY')
    CONTACTS_LIST_ID = os.getenv('CONTACTS_LIST_ID')
    CONTACTS_TIMEOUT = 5

    # Outbound mail
    MAIL_ENABLED = _flag('MAIL_ENABLED')
    SMTP_HOST = os.getenv('SMTP_HOST')
    SMTP_PORT = int(os.getenv('SMTP_PORT', 587))
    SMTP_USERNAME = os.getenv('SMTP_USERNAME')
    SMTP_PASSWORD = os.getenv('SMTP_PASSWORD')
    SMTP_USE_TLS = _flag('SMTP_USE_TLS', 'true')
    MAIL_FROM = os.getenv('MAIL_FROM') or os.getenv('SMTP_USERNAME') or 'noreply@localhost'

    # Best-effort background work
    REDIS_URL = os.getenv('REDIS_URL')
    TASKS_EAGER = _flag('TASKS_EAGER')
    TASK_RETRIES = 3
    TASK_BACKOFF_SECONDS = 2.0

    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))
    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'true')

    SESSION_COOKIE_NAME = 'reefmag_session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = APP_ENV != 'development'
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)


class TestConfig(Config):
    TESTING = True
    APP_ENV = 'development'
    SECRET_KEY = 'test-secret-key'
    BASE_URL = 'http://testserver'
    ADMIN_EMAIL = 'admin@reefmag.com'
    PROTECTION_TOKEN = 'test-token'
    FLIPBOOK_API_KEY = 'flipbook-key'
    FLIPBOOK_CLIENT_ID = 'client-1'
    CONTACTS_API_KEY = None
    MAIL_ENABLED = False
    REDIS_URL = None
    TASKS_EAGER = True
    TASK_BACKOFF_SECONDS = 0
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False
    SESSION_COOKIE_SECURE = False
