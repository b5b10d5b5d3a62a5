# tests/conftest.py
"""
Pytest fixtures for MIRA Portal tests.

The app fixture does not push an application context: test client
requests get a fresh context (and a fresh g) each time. Service level
tests use app_ctx instead.
"""

from urllib.parse import urlparse

import pytest

from mira_portal import create_app
from mira_portal.extensions import db
from mira_portal.models import User, UserRole, Company, CompanyFeatures
from mira_portal.services.roles import CUSTOMER

PASSWORD = 'secret-password'


def location(response):
    """Path of a redirect response."""
    return urlparse(response.headers['Location']).path


@pytest.fixture
def app():
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# User & Company Fixtures
# =============================================================================

@pytest.fixture
def make_user():
    """Creates a user in the active application context."""
    def _make_user(email, role=CUSTOMER, name='Test User', is_superadmin=False, active=True):
        user = User(name=name, email=email, is_superadmin=is_superadmin, is_active_account=active)
        user.set_password(PASSWORD)
        if role:
            user.direct_role = UserRole(role=role)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_company():
    """Creates a company, with feature flags when google_jobs_enabled is given."""
    def _make_company(name='Acme Corp', google_jobs_enabled=None):
        company = Company(name=name, city='Berlin', country='Germany')
        db.session.add(company)
        db.session.flush()
        if google_jobs_enabled is not None:
            db.session.add(CompanyFeatures(company_id=company.id, google_jobs_enabled=google_jobs_enabled))
        db.session.commit()
        return company
    return _make_company


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        return client.post('/login', data={'email': email, 'password': password})
    return _login
