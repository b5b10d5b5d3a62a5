"""
MIRA Portal - Revenue Dashboard

Monthly revenue per customer company. A period is addressed by
(year, month); ranges are compared on year * 12 + month so that ranges
crossing a year boundary select the right months.
"""

import logging
from collections import OrderedDict

from mira_portal.extensions import db
from mira_portal.models import CustomerRevenue

logger = logging.getLogger(__name__)

MONTH_NAMES = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
               'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

REVENUE_FIELDS = ('setup_fee', 'price_per_appointment', 'appointments_delivered',
                  'recurring_fee', 'comments')


def _period_index(year, month):
    return year * 12 + (month - 1)


def _period_from_index(index):
    return index // 12, index % 12 + 1


def period_range(end_year, end_month, months_to_show=6):
    """(start_year, start_month, end_year, end_month) of the last months_to_show months."""
    start_year, start_month = _period_from_index(
        _period_index(end_year, end_month) - (months_to_show - 1))
    return start_year, start_month, end_year, end_month


def month_columns(start_year, start_month, end_year, end_month):
    """One {year, month, label} column per month of the range."""
    return [
        {'year': year, 'month': month, 'label': f'{MONTH_NAMES[month - 1]} {year}'}
        for year, month in (
            _period_from_index(index)
            for index in range(_period_index(start_year, start_month),
                               _period_index(end_year, end_month) + 1)
        )
    ]


def get_revenue_by_period(start_year, start_month, end_year, end_month, company_id=None):
    """Revenue entries of the range, oldest first."""
    period = CustomerRevenue.year * 12 + (CustomerRevenue.month - 1)
    query = CustomerRevenue.query.filter(
        period >= _period_index(start_year, start_month),
        period <= _period_index(end_year, end_month),
    )
    if company_id is not None:
        query = query.filter_by(company_id=company_id)
    return query.order_by(CustomerRevenue.year, CustomerRevenue.month).all()


def customer_rows(entries):
    """Entries grouped by customer: [{company_id, customer_name, months: {'Y-M': entry}}]."""
    rows = OrderedDict()
    for entry in entries:
        row = rows.setdefault(entry.company_id, {
            'company_id': entry.company_id,
            'customer_name': entry.company.name if entry.company else 'Unknown Customer',
            'months': {},
        })
        row['months'][f'{entry.year}-{entry.month}'] = entry.to_dict()
    return list(rows.values())


def monthly_totals(entries, columns):
    """Sum of fees, appointments and revenue per month column."""
    totals = {
        f'{column["year"]}-{column["month"]}': {
            'setup_fee': 0, 'appointments': 0, 'recurring_fee': 0, 'total_revenue': 0,
        }
        for column in columns
    }
    for entry in entries:
        key = f'{entry.year}-{entry.month}'
        if key not in totals:
            continue
        totals[key]['setup_fee'] += entry.setup_fee or 0
        totals[key]['appointments'] += entry.appointments_delivered or 0
        totals[key]['recurring_fee'] += entry.recurring_fee or 0
        totals[key]['total_revenue'] += entry.total_revenue
    return totals


def revenue_metrics(year, month, company_id=None):
    """Figures of a single month."""
    entries = get_revenue_by_period(year, month, year, month, company_id)
    return {
        'year': year,
        'month': month,
        'customers': len({entry.company_id for entry in entries}),
        'appointments': sum(entry.appointments_delivered or 0 for entry in entries),
        'total_revenue': sum(entry.total_revenue for entry in entries),
    }


def revenue_dashboard(end_year, end_month, months_to_show=6, company_id=None):
    """Everything the revenue table shows for the range ending at end_year/end_month."""
    start_year, start_month, end_year, end_month = period_range(end_year, end_month, months_to_show)
    columns = month_columns(start_year, start_month, end_year, end_month)
    entries = get_revenue_by_period(start_year, start_month, end_year, end_month, company_id)
    return {
        'metrics': revenue_metrics(end_year, end_month, company_id),
        'columns': columns,
        'rows': customer_rows(entries),
        'totals': monthly_totals(entries, columns),
    }


def upsert_customer_revenue(company_id, year, month, **values):
    """Creates or updates the entry of a customer and month, then commits."""
    entry = CustomerRevenue.query.filter_by(company_id=company_id, year=year, month=month).first()
    if entry is None:
        entry = CustomerRevenue(company_id=company_id, year=year, month=month)
        db.session.add(entry)

    for field in REVENUE_FIELDS:
        if field in values and values[field] is not None:
            setattr(entry, field, values[field])

    db.session.commit()
    logger.info('Revenue of company %s for %d-%02d saved', company_id, year, month)
    return entry
