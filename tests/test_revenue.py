# tests/test_revenue.py
"""
Tests for the monthly revenue dashboard.
"""

import pytest

from mira_portal.extensions import db
from mira_portal.models import CustomerRevenue
from mira_portal.services.revenue import (
    get_revenue_by_period, month_columns, period_range, revenue_dashboard,
    revenue_metrics, upsert_customer_revenue,
)


def _entry(company, year, month, **values):
    entry = CustomerRevenue(company_id=company.id, year=year, month=month, **values)
    db.session.add(entry)
    db.session.commit()
    return entry


# =============================================================================
# Periods
# =============================================================================

@pytest.mark.parametrize('end, months, expected', [
    ((2025, 6), 6, (2025, 1, 2025, 6)),
    ((2025, 2), 6, (2024, 9, 2025, 2)),
    ((2025, 1), 1, (2025, 1, 2025, 1)),
    ((2025, 12), 24, (2024, 1, 2025, 12)),
])
def test_period_range(end, months, expected):
    assert period_range(*end, months_to_show=months) == expected


def test_month_columns_cross_the_year():
    columns = month_columns(2024, 11, 2025, 2)

    assert [column['label'] for column in columns] == ['Nov 2024', 'Dec 2024', 'Jan 2025', 'Feb 2025']
    assert (columns[2]['year'], columns[2]['month']) == (2025, 1)


def test_total_revenue():
    entry = CustomerRevenue(setup_fee=100, price_per_appointment=50,
                            appointments_delivered=3, recurring_fee=200)
    assert entry.total_revenue == 450


def test_total_revenue_of_empty_entry():
    assert CustomerRevenue().total_revenue == 0


# =============================================================================
# Queries
# =============================================================================

def test_revenue_by_period_crosses_the_year(app_ctx, make_company):
    company = make_company()
    for year, month in [(2024, 10), (2024, 12), (2025, 1), (2025, 3)]:
        _entry(company, year, month)

    entries = get_revenue_by_period(2024, 11, 2025, 2)

    assert [(entry.year, entry.month) for entry in entries] == [(2024, 12), (2025, 1)]


def test_revenue_metrics(app_ctx, make_company):
    first, second = make_company('First'), make_company('Second')
    _entry(first, 2025, 3, price_per_appointment=100, appointments_delivered=4)
    _entry(second, 2025, 3, recurring_fee=300, appointments_delivered=1)
    _entry(second, 2025, 2, setup_fee=1000)

    metrics = revenue_metrics(2025, 3)

    assert metrics == {'year': 2025, 'month': 3, 'customers': 2, 'appointments': 5, 'total_revenue': 700}


def test_revenue_dashboard(app_ctx, make_company):
    first, second = make_company('First'), make_company('Second')
    _entry(first, 2025, 1, setup_fee=500)
    _entry(first, 2025, 2, price_per_appointment=100, appointments_delivered=2)
    _entry(second, 2025, 2, recurring_fee=250)

    dashboard = revenue_dashboard(2025, 2, months_to_show=2)

    assert [column['label'] for column in dashboard['columns']] == ['Jan 2025', 'Feb 2025']
    assert [row['customer_name'] for row in dashboard['rows']] == ['First', 'Second']
    assert set(dashboard['rows'][0]['months']) == {'2025-1', '2025-2'}
    assert dashboard['totals']['2025-1']['total_revenue'] == 500
    assert dashboard['totals']['2025-2'] == {
        'setup_fee': 0, 'appointments': 2, 'recurring_fee': 250, 'total_revenue': 450,
    }
    assert dashboard['metrics']['total_revenue'] == 450


def test_revenue_dashboard_of_one_company(app_ctx, make_company):
    first, second = make_company('First'), make_company('Second')
    _entry(first, 2025, 2, setup_fee=500)
    _entry(second, 2025, 2, setup_fee=700)

    dashboard = revenue_dashboard(2025, 2, months_to_show=1, company_id=second.id)

    assert [row['customer_name'] for row in dashboard['rows']] == ['Second']
    assert dashboard['totals']['2025-2']['total_revenue'] == 700


# =============================================================================
# Writes
# =============================================================================

def test_upsert_creates_then_updates(app_ctx, make_company):
    company = make_company()

    upsert_customer_revenue(company.id, 2025, 4, setup_fee=300, appointments_delivered=2)
    upsert_customer_revenue(company.id, 2025, 4, appointments_delivered=6, recurring_fee=None)

    entry = CustomerRevenue.query.filter_by(company_id=company.id).one()
    assert entry.setup_fee == 300
    assert entry.appointments_delivered == 6
    assert entry.recurring_fee == 0
