# tests/test_errors.py
"""
Tests for the error types and handlers.
"""

from sqlalchemy.exc import SQLAlchemyError

from mira_portal.errors import SUPPORT_MESSAGE, AccessDenied, PortalError, ValidationError


def test_error_body():
    error = ValidationError('Invalid payload', code='INVALID', details={'field': 'url'})

    assert error.status_code == 400
    assert str(error) == '[INVALID] Invalid payload'
    assert error.to_dict() == {'error': 'Invalid payload', 'code': 'INVALID', 'details': {'field': 'url'}}


def test_default_message():
    assert PortalError().to_dict() == {'error': 'An error occurred in the portal'}
    assert AccessDenied('nope').status_code == 403


def test_database_errors_become_support_message(app, client):
    def failing_view():
        raise SQLAlchemyError('infinite recursion detected in policy')

    app.add_url_rule('/functions/v1/failing', 'failing', failing_view, methods=['POST'])

    response = client.post('/functions/v1/failing')

    assert response.status_code == 500
    assert response.get_json() == {'error': SUPPORT_MESSAGE}
