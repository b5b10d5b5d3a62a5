# tests/test_roles.py
"""
Tests for role resolution.
"""

from types import SimpleNamespace

from mira_portal.services.roles import (
    ADMIN, MANAGER, CUSTOMER, resolve_role, normalize_role, dashboard_for,
    role_for_path, is_admin_path, pick_primary_association,
)


def _user(is_superadmin=False):
    return SimpleNamespace(id=1, email='user@example.com', is_superadmin=is_superadmin)


def _link(role, is_primary_company=False, company_id=1):
    return SimpleNamespace(role=role, is_primary_company=is_primary_company, company_id=company_id)


def test_anonymous_has_no_role():
    assert resolve_role(None) is None


def test_superadmin_claim_wins_over_everything():
    rows = [_link(CUSTOMER, is_primary_company=True)]
    assert resolve_role(_user(is_superadmin=True), rows, direct_role=CUSTOMER) == ADMIN


def test_direct_role_beats_company_role():
    rows = [_link(ADMIN, is_primary_company=True)]
    assert resolve_role(_user(), rows, direct_role=MANAGER) == MANAGER


def test_primary_company_role_is_used_first():
    rows = [_link(CUSTOMER, company_id=1), _link(MANAGER, is_primary_company=True, company_id=2)]
    assert resolve_role(_user(), rows) == MANAGER


def test_first_association_when_none_is_primary():
    rows = [_link(MANAGER, company_id=1), _link(ADMIN, company_id=2)]
    assert resolve_role(_user(), rows) == MANAGER


def test_unknown_roles_default_to_customer():
    rows = [_link('owner')]
    assert resolve_role(_user(), rows, direct_role='superuser') == CUSTOMER
    assert resolve_role(_user()) == CUSTOMER


def test_normalize_role():
    assert normalize_role(' Admin ') == ADMIN
    assert normalize_role('') is None
    assert normalize_role('owner') is None


def test_pick_primary_association():
    first = _link(CUSTOMER, company_id=1)
    primary = _link(MANAGER, is_primary_company=True, company_id=2)
    assert pick_primary_association([first, primary]) is primary
    assert pick_primary_association([]) is None


def test_dashboards_and_sections():
    assert dashboard_for(MANAGER) == '/manager/dashboard'
    assert dashboard_for(None) == '/customer/dashboard'
    assert role_for_path('/admin') == ADMIN
    assert role_for_path('/customer/search-strings') == CUSTOMER
    assert role_for_path('/administrator') is None
    assert is_admin_path('/admin/users')
    assert not is_admin_path('/manager/dashboard')
