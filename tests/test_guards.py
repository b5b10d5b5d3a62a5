# tests/test_guards.py
"""
Tests for the access predicate and the page guards.
"""

from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest

from mira_portal.services import session as session_service
from mira_portal.services.guards import (
    GRANTED, DENIED, LOGIN, LOADING, authorize, admin_route,
)
from mira_portal.services.roles import ADMIN, MANAGER, CUSTOMER
from mira_portal.services.session import AuthSession, ANONYMOUS
from tests.conftest import location


def _session(role, is_superadmin=False, is_loading=False):
    user = SimpleNamespace(email='user@example.com', is_superadmin=is_superadmin)
    return AuthSession(user=user, role=role, is_loading=is_loading)


class TestAuthorize:

    def test_loading_comes_first(self):
        assert authorize(_session(ADMIN, is_loading=True), (ADMIN,)).outcome == LOADING

    def test_anonymous_must_log_in(self):
        assert authorize(ANONYMOUS, (CUSTOMER,)).outcome == LOGIN

    def test_matching_role_is_granted(self):
        decision = authorize(_session(MANAGER), (MANAGER,))
        assert decision.outcome == GRANTED
        assert decision.granted

    def test_other_role_is_denied(self):
        assert authorize(_session(CUSTOMER), (ADMIN,)).outcome == DENIED

    def test_superadmin_claim_bypasses_role(self):
        assert authorize(_session(CUSTOMER, is_superadmin=True), (ADMIN,)).granted

    def test_superadmin_bypass_can_be_disabled(self):
        decision = authorize(_session(ADMIN, is_superadmin=True), (MANAGER,), superadmin_bypass=False)
        assert decision.outcome == DENIED


@pytest.fixture
def guarded_app(app):
    """App with an admin page outside every portal section and one inside /admin."""
    app.add_url_rule('/guarded', 'guarded', admin_route(lambda: 'restricted content'))
    app.add_url_rule('/admin/guarded', 'admin_guarded', admin_route(lambda: 'admin content'))
    return app


def test_admin_page_denies_customer(guarded_app, client, make_user, login):
    with guarded_app.app_context():
        make_user('customer@example.com', role=CUSTOMER)
    login('customer@example.com')

    response = client.get('/guarded')

    assert response.status_code == 302
    assert location(response) == '/'


def test_admin_page_allows_admin(guarded_app, client, make_user, login):
    with guarded_app.app_context():
        make_user('admin@example.com', role=ADMIN)
    login('admin@example.com')

    response = client.get('/guarded')

    assert response.status_code == 200
    assert response.data == b'restricted content'


def test_admin_page_allows_superadmin_with_customer_role(guarded_app, client, make_user, login):
    with guarded_app.app_context():
        make_user('root@example.com', role=CUSTOMER, is_superadmin=True)
    login('root@example.com')

    response = client.get('/admin/guarded')

    assert response.status_code == 200
    assert response.data == b'admin content'


def test_superadmin_outside_admin_section_is_redirected_before_the_guard(guarded_app, client, make_user, login):
    with guarded_app.app_context():
        make_user('root@example.com', role=CUSTOMER, is_superadmin=True)
    login('root@example.com')

    response = client.get('/guarded')

    assert response.status_code == 302
    assert location(response) == '/admin/dashboard'


def test_guarded_page_answers_503_while_loading(app, client, make_user, login, monkeypatch):
    with app.app_context():
        make_user('customer@example.com', role=CUSTOMER)
    login('customer@example.com')

    monkeypatch.setattr(session_service, 'build_auth_session',
                        lambda user: AuthSession(user=user, is_loading=True))
    response = client.get('/customer/dashboard')

    assert response.status_code == 503
    assert response.headers['Retry-After'] == '2'


def test_anonymous_is_sent_to_login(client):
    response = client.get('/customer/dashboard')

    assert response.status_code == 302
    assert location(response) == '/login'
    assert parse_qs(urlparse(response.headers['Location']).query) == {'next': ['/customer/dashboard']}


def test_superadmin_is_sent_to_admin_section(app, client, make_user, login):
    with app.app_context():
        make_user('root@example.com', role=CUSTOMER, is_superadmin=True)
    login('root@example.com')

    response = client.get('/customer/dashboard')

    assert response.status_code == 302
    assert location(response) == '/admin/dashboard'


def test_manager_cannot_open_customer_pages(app, client, make_user, login):
    with app.app_context():
        make_user('manager@example.com', role=MANAGER)
    login('manager@example.com')

    response = client.get('/customer/dashboard')

    assert location(response) == '/manager/dashboard'
    assert client.get('/manager/dashboard').status_code == 200
