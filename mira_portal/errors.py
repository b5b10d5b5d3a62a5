"""
MIRA Portal - Errors and Error Handlers
"""

from flask import jsonify, flash, redirect, request, url_for
from sqlalchemy.exc import SQLAlchemyError
from mira_portal.extensions import db

SUPPORT_MESSAGE = 'A database access rule rejected the request. Please contact support.'


class PortalError(Exception):
    """Base exception for portal errors."""

    status_code = 500

    def __init__(self, message=None, code=None, details=None):
        self.message = message or 'An error occurred in the portal'
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f'[{self.code}] {self.message}'
        return self.message

    def to_dict(self):
        """Converts the exception to the JSON error body."""
        error_dict = {'error': self.message}
        if self.code:
            error_dict['code'] = self.code
        if self.details:
            error_dict['details'] = self.details
        return error_dict


class AuthenticationRequired(PortalError):
    """No authenticated session."""
    status_code = 401


class AccessDenied(PortalError):
    """Authenticated, but the role does not grant access."""
    status_code = 403


class ValidationError(PortalError):
    """Invalid request payload."""
    status_code = 400


class UpstreamError(PortalError):
    """A third-party service failed or is not configured."""
    status_code = 500


class RepairError(PortalError):
    """The company association repair could not complete."""
    status_code = 500


def _wants_json():
    return request.path.startswith(('/functions/', '/api/')) or request.is_json


def register_error_handlers(app):
    """Installs the JSON and flash based error handlers."""

    @app.errorhandler(PortalError)
    def handle_portal_error(error):
        app.logger.warning('%s on %s: %s', error.__class__.__name__, request.path, error)
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        flash(error.message, 'error')
        return redirect(url_for('auth.index'))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        app.logger.error('Database error on %s: %s', request.path, error)
        db.session.rollback()
        if _wants_json():
            return jsonify({'error': SUPPORT_MESSAGE}), 500
        flash(SUPPORT_MESSAGE, 'error')
        return redirect(url_for('auth.index'))
