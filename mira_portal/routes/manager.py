"""
MIRA Portal - Manager Routes
"""

from flask import Blueprint, render_template
from flask_login import current_user

from mira_portal.extensions import db
from mira_portal.models import Company, CompanyUser
from mira_portal.services.guards import manager_route
from mira_portal.services.repair import try_repair_company_association
from mira_portal.services.session import current_auth_session, refresh_auth_session

manager_bp = Blueprint('manager', __name__)


def _company_context():
    """Company of the current manager, repairing a missing association."""
    auth = current_auth_session()
    if auth.company_id is None and try_repair_company_association(current_user):
        auth = refresh_auth_session()
    if auth.company_id is None:
        return None
    return db.session.get(Company, auth.company_id)


def _members(company):
    if company is None:
        return []
    return CompanyUser.query\
        .filter_by(company_id=company.id)\
        .order_by(CompanyUser.full_name)\
        .all()


@manager_bp.route('/dashboard')
@manager_route
def dashboard():
    """Manager overview of the own company."""
    company = _company_context()
    members = _members(company)
    kpi_members = [m for m in members if m.is_manager_kpi_enabled]
    return render_template('manager/dashboard.html', company=company,
                           members=members, kpi_members=kpi_members)


@manager_bp.route('/team')
@manager_route
def team():
    """Members of the own company."""
    company = _company_context()
    return render_template('manager/team.html', company=company, members=_members(company))
