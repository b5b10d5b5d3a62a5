"""
MIRA Portal - Company Association Repair

Every user belongs to exactly one company. link_user_to_company() keeps
that true for new writes; the repair functions fix users written before
the rule or left without a company.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from mira_portal.errors import RepairError
from mira_portal.extensions import db
from mira_portal.models import Company, CompanyUser
from mira_portal.services.features import ensure_company_features
from mira_portal.services.roles import CUSTOMER, MANAGER, pick_primary_association

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = 'Default Company'
DEFAULT_COMPANY_DESCRIPTION = 'Automatically created default company'


def choose_best_association(links):
    """
    The association to keep among duplicates.

    Priority: is_admin, then role manager, then the first created.
    """
    links = list(links)
    if not links:
        return None
    for link in links:
        if link.is_admin:
            return link
    for link in links:
        if (link.role or '').lower() == MANAGER:
            return link
    return links[0]


def _user_links(user_id):
    return CompanyUser.query\
        .filter_by(user_id=user_id)\
        .order_by(CompanyUser.id)\
        .all()


def link_user_to_company(user, company, role=CUSTOMER, is_admin=False, is_manager_kpi_enabled=False):
    """
    Associates a user with a company, reusing the existing association.

    A user never gets a second row: an existing association is moved to
    the new company. role None keeps the role of that association.
    Does not commit.
    """
    links = _user_links(user.id)
    link = choose_best_association(links)
    for extra in links:
        if extra is not link:
            db.session.delete(extra)

    if link is None:
        link = CompanyUser(user_id=user.id)
        db.session.add(link)

    link.company_id = company.id
    link.role = role or link.role or CUSTOMER
    link.is_admin = is_admin
    link.is_primary_company = True
    link.is_manager_kpi_enabled = is_manager_kpi_enabled
    link.email = user.email
    link.full_name = user.display_name
    return link


def collapse_duplicate_associations(user_id=None):
    """
    Keeps one association per user and deletes the others.

    Returns:
        List of repairs, one per affected user
    """
    query = db.session.query(CompanyUser.user_id)\
        .group_by(CompanyUser.user_id)\
        .having(func.count(CompanyUser.id) > 1)
    if user_id is not None:
        query = query.filter(CompanyUser.user_id == user_id)

    repairs = []
    for (duplicated_user_id,) in query.all():
        links = _user_links(duplicated_user_id)
        keep = choose_best_association(links)
        removed = [link.company_id for link in links if link is not keep]
        for link in links:
            if link is not keep:
                db.session.delete(link)
        keep.is_primary_company = True
        repairs.append({
            'action': 'collapsed_duplicates',
            'user_id': duplicated_user_id,
            'kept_company_id': keep.company_id,
            'removed_company_ids': removed,
        })
        logger.info('Collapsed %d duplicate associations of user %s', len(removed), duplicated_user_id)

    if repairs:
        db.session.commit()
    return repairs


def ensure_company_association(user):
    """
    Gives a user without a usable association one.

    Attaches to the first company (creating the default company when
    there is none) with the customer role. The company always ends up
    with a feature flags row.

    Returns:
        Dict with repaired flag and company_id
    """
    link = pick_primary_association(_user_links(user.id))
    if link is not None and link.company_id is not None:
        ensure_company_features(link.company_id, google_jobs_enabled=True)
        db.session.commit()
        return {'repaired': False, 'company_id': link.company_id, 'created_company': False}

    logger.warning('User %s has no company association, repairing', user.id)

    created_company = False
    company = Company.query.order_by(Company.id).first()
    if company is None:
        company = Company(name=DEFAULT_COMPANY_NAME, description=DEFAULT_COMPANY_DESCRIPTION)
        db.session.add(company)
        db.session.flush()
        created_company = True

    if link is None:
        link = CompanyUser(
            user_id=user.id,
            role=CUSTOMER,
            is_admin=False,
            is_primary_company=True,
            email=user.email,
            full_name=user.display_name,
        )
        db.session.add(link)
    link.company_id = company.id

    ensure_company_features(company.id, google_jobs_enabled=True)
    db.session.commit()

    return {'repaired': True, 'company_id': company.id, 'created_company': created_company}


def repair_company_associations(user):
    """
    Collapses duplicates and fills a missing association for one user.

    Returns:
        {status, companies, associations, repairs, message}
    """
    try:
        repairs = collapse_duplicate_associations(user_id=user.id)
        result = ensure_company_association(user)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Repair failed for user %s: %s', user.id, e)
        raise RepairError('Failed to repair company association', details=str(e))

    if result['repaired']:
        repairs.append({
            'action': 'created_company' if result['created_company'] else 'created_association',
            'user_id': user.id,
            'company_id': result['company_id'],
        })

    links = _user_links(user.id)
    companies = [
        {'id': link.company.id, 'name': link.company.name}
        for link in links if link.company is not None
    ]
    associations = [
        {
            'company_id': link.company_id,
            'role': link.role,
            'is_admin': link.is_admin,
            'is_primary_company': link.is_primary_company,
        }
        for link in links
    ]

    return {
        'status': 'success',
        'companies': companies,
        'associations': associations,
        'repairs': repairs,
        'message': 'Company association repaired' if repairs else 'No repair needed',
    }


def try_repair_company_association(user):
    """
    Portal side repair: failures are logged and the page proceeds
    without company context.
    """
    try:
        return ensure_company_association(user)['company_id']
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Automatic association repair failed for user %s: %s', user.id, e)
        return None
