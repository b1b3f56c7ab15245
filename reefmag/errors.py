"""Error taxonomy shared by services and blueprints."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException


class ReefmagError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500
    public_message = None

    def __init__(self, message: str | None = None, fields: dict[str, Any] | None = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.fields = fields

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {'error': self.public_message or self.message}
        if self.fields:
            payload['fields'] = self.fields
        return payload


class ValidationError(ReefmagError):
    """Missing or malformed required field."""
    status_code = 400


class NotFound(ReefmagError):
    status_code = 404


class Conflict(ReefmagError):
    """Duplicate value on a unique field."""
    status_code = 400


class Unauthorized(ReefmagError):
    status_code = 401


class InvalidCredentials(Unauthorized):
    def __init__(self):
        super().__init__('Invalid email or password')


class UpstreamFailure(ReefmagError):
    """External API did not answer with the expected shape."""
    status_code = 500
    public_message = 'Upstream service failure'


class IOFailure(ReefmagError):
    """Local storage read or write error."""
    status_code = 500
    public_message = 'Storage failure'


class MailDeliveryError(ReefmagError):
    status_code = 500
    public_message = 'Mail delivery failed'


def register_error_handlers(app) -> None:
    """Translate domain errors and unexpected failures into responses."""

    @app.errorhandler(ReefmagError)
    def handle_domain_error(error: ReefmagError):
        if error.status_code >= 500:
            current_app.logger.error(f"{error.__class__.__name__} on {request.path}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if error.code == 500:
            return internal_error(error)
        if request.path.startswith('/api/'):
            return jsonify({'error': error.description}), error.code
        return error

    @app.errorhandler(500)
    def internal_error(error):
        original = getattr(error, 'original_exception', None) or error
        current_app.logger.error(f"Unhandled error on {request.path}: {original}", exc_info=original)
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('500.html'), 500


__all__ = [
    'ReefmagError',
    'ValidationError',
    'NotFound',
    'Conflict',
    'Unauthorized',
    'InvalidCredentials',
    'UpstreamFailure',
    'IOFailure',
    'MailDeliveryError',
    'register_error_handlers',
]
