"""
MIRA Portal - Company Feature Flags

Flags are read through a per-request cache. Writes to company_features
invalidate only the entry of the affected company.
"""

import logging
from datetime import datetime

from flask import g, has_app_context
from sqlalchemy import event

from mira_portal.extensions import db
from mira_portal.models import CompanyFeatures

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'google_jobs_enabled': False,
}


def _cache():
    if 'company_features' not in g:
        g.company_features = {}
    return g.company_features


def get_company_features(company_id):
    """Feature flags of a company as a dict."""
    if company_id is None:
        return dict(DEFAULT_FEATURES, company_id=None, updated_at=None)

    cache = _cache()
    if company_id not in cache:
        row = CompanyFeatures.query.filter_by(company_id=company_id).first()
        cache[company_id] = row.to_dict() if row else dict(
            DEFAULT_FEATURES, company_id=company_id, updated_at=None)
    return cache[company_id]


def is_google_jobs_enabled(company_id):
    return get_company_features(company_id)['google_jobs_enabled']


def ensure_company_features(company_id, google_jobs_enabled=True):
    """Creates the flags row when missing. Does not commit."""
    row = CompanyFeatures.query.filter_by(company_id=company_id).first()
    if row is None:
        row = CompanyFeatures(company_id=company_id, google_jobs_enabled=google_jobs_enabled)
        db.session.add(row)
        logger.info('Created feature flags for company %s', company_id)
    return row


def set_google_jobs_enabled(company_id, enabled):
    """Turns the Google Jobs dashboard on or off for a company."""
    row = CompanyFeatures.query.filter_by(company_id=company_id).first()
    if row is None:
        row = CompanyFeatures(company_id=company_id, google_jobs_enabled=enabled)
        db.session.add(row)
    else:
        row.google_jobs_enabled = enabled
        row.updated_at = datetime.utcnow()
    db.session.commit()
    logger.info('Google Jobs %s for company %s', 'enabled' if enabled else 'disabled', company_id)
    return row


def invalidate_company_features(company_id):
    """Drops the cached flags of one company."""
    if has_app_context() and 'company_features' in g:
        g.company_features.pop(company_id, None)


@event.listens_for(CompanyFeatures, 'after_insert')
@event.listens_for(CompanyFeatures, 'after_update')
@event.listens_for(CompanyFeatures, 'after_delete')
def _company_features_changed(mapper, connection, target):
    invalidate_company_features(target.company_id)
