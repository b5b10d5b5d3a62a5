"""
MIRA Portal - Route Guards

One predicate, authorize(), decides access; the page decorators and the
JSON decorator only translate its outcome into a response.
"""

from dataclasses import dataclass
from functools import wraps

from flask import current_app, flash, redirect, render_template, request, url_for

from mira_portal.errors import AuthenticationRequired, AccessDenied
from mira_portal.services.roles import ADMIN, MANAGER, CUSTOMER
from mira_portal.services.session import current_auth_session

LOADING = 'loading'
LOGIN = 'login'
DENIED = 'denied'
GRANTED = 'granted'


@dataclass(frozen=True)
class AccessDecision:
    outcome: str
    reason: str = ''

    @property
    def granted(self) -> bool:
        return self.outcome == GRANTED


def authorize(session, allowed_roles, superadmin_bypass=True):
    """
    Access decision for session against a set of role names.

    The superadmin claim grants access regardless of role when
    superadmin_bypass is set.
    """
    if session.is_loading:
        return AccessDecision(LOADING, 'authentication still loading')
    if not session.is_authenticated:
        return AccessDecision(LOGIN, 'not authenticated')
    if superadmin_bypass and session.is_superadmin:
        return AccessDecision(GRANTED, 'superadmin claim')
    if session.role in allowed_roles:
        return AccessDecision(GRANTED, f'role {session.role}')
    return AccessDecision(DENIED, f'role {session.role} not in {", ".join(allowed_roles)}')


def protected_route(*allowed_roles, superadmin_bypass=True):
    """Decorator restricting a page to the given roles."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            decision = authorize(current_auth_session(), allowed_roles, superadmin_bypass)
            current_app.logger.debug('Guard %s on %s: %s', decision.outcome, request.path, decision.reason)

            if decision.outcome == LOADING:
                return render_template('loading.html'), 503, {'Retry-After': '2'}
            if decision.outcome == LOGIN:
                return redirect(url_for('auth.login', next=request.path))
            if decision.outcome == DENIED:
                flash('Access restricted for your account.', 'error')
                return redirect(url_for('auth.index'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_route = protected_route(ADMIN)
manager_route = protected_route(MANAGER, superadmin_bypass=False)
customer_route = protected_route(CUSTOMER, superadmin_bypass=False)


def function_auth_required(*allowed_roles):
    """
    Decorator for the JSON function endpoints.

    Without roles any authenticated user passes. Failures raise, and the
    error handlers turn them into 401/403 JSON bodies.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            session = current_auth_session()
            if session.is_loading:
                raise AuthenticationRequired('Authentication could not be verified, try again.')
            if not session.is_authenticated:
                raise AuthenticationRequired('User not authenticated')
            if allowed_roles:
                decision = authorize(session, allowed_roles)
                if not decision.granted:
                    raise AccessDenied(f'Unauthorized: {" or ".join(allowed_roles)} access required')
            return f(*args, **kwargs)
        return decorated_function
    return decorator
