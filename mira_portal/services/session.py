"""
MIRA Portal - Auth Session

The AuthSession is built once per request from the logged in user and
passed to the redirect and guard layers. Role flags are derived from the
single resolved role, so they cannot disagree.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from flask import g
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from mira_portal.extensions import db
from mira_portal.models import CompanyUser
from mira_portal.services.roles import (
    ADMIN, MANAGER, CUSTOMER, resolve_role, pick_primary_association,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSession:
    """Who is asking, with which role, in which company."""
    user: object = None
    role: Optional[str] = None
    company_id: Optional[int] = None
    is_loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_superadmin(self) -> bool:
        return bool(getattr(self.user, 'is_superadmin', False))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == MANAGER

    @property
    def is_customer(self) -> bool:
        return self.role == CUSTOMER

    @property
    def email(self) -> Optional[str]:
        return getattr(self.user, 'email', None)


ANONYMOUS = AuthSession()


def build_auth_session(user):
    """
    Loads the role sources of a user and resolves the session.

    A database failure while loading leaves the session in the loading
    state: nothing redirects, guarded pages answer "try again".
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return ANONYMOUS

    try:
        rows = CompanyUser.query\
            .filter_by(user_id=user.id)\
            .order_by(CompanyUser.id)\
            .all()
        direct_role = user.direct_role.role if user.direct_role else None
    except SQLAlchemyError as e:
        logger.error('Could not load roles for user %s: %s', user.id, e)
        db.session.rollback()
        return AuthSession(user=user, is_loading=True)

    link = pick_primary_association(rows)
    return AuthSession(
        user=user,
        role=resolve_role(user, rows, direct_role),
        company_id=link.company_id if link else None,
    )


def current_auth_session():
    """The AuthSession of the current request, built on first use."""
    if 'auth_session' not in g:
        user = current_user._get_current_object() if current_user.is_authenticated else None
        g.auth_session = build_auth_session(user)
    return g.auth_session


def refresh_auth_session():
    """Drops the cached session so the next access reloads it."""
    g.pop('auth_session', None)
    return current_auth_session()
