"""
MIRA Portal - Leads
"""

from sqlalchemy import func

from mira_portal.extensions import db
from mira_portal.models import Lead


def fetch_leads(company_id, status=None, limit=100):
    """Newest leads of a company, optionally of one status."""
    query = Lead.query.filter_by(company_id=company_id)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Lead.created_at.desc(), Lead.id.desc()).limit(limit).all()


def lead_status_counts(company_id):
    """Number of leads per status, every status present."""
    counts = dict.fromkeys(Lead.STATUSES, 0)
    rows = db.session.query(Lead.status, func.count(Lead.id))\
        .filter(Lead.company_id == company_id)\
        .group_by(Lead.status)\
        .all()
    for status, count in rows:
        counts[status] = count
    return counts
