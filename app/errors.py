"""Error kinds raised by the service layer and their HTTP mapping.

Services never build responses. They raise :class:`ApiError` with one of the
:class:`ErrorKind` members and a message; :func:`register_error_handlers`
turns it into ``{"error": message}`` with the matching status code and rolls
the request transaction back.
"""

import enum

from flask import jsonify, request, current_app
from werkzeug.exceptions import HTTPException

from app.extensions import db, jwt


class ErrorKind(enum.Enum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404

    @property
    def status_code(self):
        return self.value


class ApiError(Exception):
    """A failed operation, tagged with the kind of failure."""

    def __init__(self, kind, message):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self):
        return f'<ApiError {self.kind.name}: {self.message}>'


def not_found(message):
    return ApiError(ErrorKind.NOT_FOUND, message)


def bad_request(message):
    return ApiError(ErrorKind.BAD_REQUEST, message)


def forbidden(message):
    return ApiError(ErrorKind.FORBIDDEN, message)


def unauthorized(message):
    return ApiError(ErrorKind.UNAUTHORIZED, message)


def register_error_handlers(app):
    """Map ApiError, JWT failures and stray exceptions to JSON responses."""

    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        db.session.rollback()
        current_app.logger.warning(
            '%s on %s %s: %s', exc.kind.name, request.method, request.path, exc.message
        )
        return jsonify({'error': exc.message}), exc.kind.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'error': exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        current_app.logger.exception(
            'Unhandled exception on %s %s', request.method, request.path
        )
        return jsonify({'error': 'Internal server error'}), 500

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'error': 'You must be logged in.'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'error': f'Invalid token: {reason}'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has expired'}), 401

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_payload):
        from auth.models import User
        return db.session.get(User, int(jwt_payload['sub']))

    @jwt.user_lookup_error_loader
    def unknown_user(jwt_header, jwt_payload):
        current_app.logger.warning('Token for missing user %s on %s %s',
                                   jwt_payload.get('sub'), request.method, request.path)
        return jsonify({'error': 'User no longer exists.'}), 401
