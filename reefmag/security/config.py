"""Security configuration and middleware."""

from flask import request


def configure_security_headers(app):
    """Configure security headers."""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Flip-book pages embed the external viewer, but nobody embeds us
        response.headers['X-Frame-Options'] = 'DENY'

        # Control referrer information
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'

        # HSTS for HTTPS (only add if using HTTPS)
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    return app


def configure_secure_session(app):
    """Configure secure session settings."""
    app.config.update(
        SESSION_COOKIE_SECURE=app.config.get('APP_ENV') != 'development',  # HTTPS only outside development
        SESSION_COOKIE_HTTPONLY=True,  # Prevent JavaScript access
        SESSION_COOKIE_SAMESITE='Lax',
        SESSION_REFRESH_EACH_REQUEST=False,
    )

    return app


def auth_rate_limit():
    """Rate limit for login."""
    return "10 per minute"


def register_rate_limit():
    return "5 per minute"


def recovery_rate_limit():
    """Rate limit for password recovery."""
    return "3 per hour"


__all__ = [
    'configure_security_headers',
    'configure_secure_session',
    'auth_rate_limit',
    'register_rate_limit',
    'recovery_rate_limit',
]
