"""
MIRA Portal - Main Routes (section redirects, sidebar, health, feature flags API)
"""

from flask import Blueprint, current_app, flash, jsonify, redirect, request, session, url_for

from mira_portal.errors import AccessDenied
from mira_portal.services.features import get_company_features
from mira_portal.services.guards import function_auth_required
from mira_portal.services.navigation import build_nav_items
from mira_portal.services.redirect import LOGIN_PATH, AuthRedirect, RedirectState, is_exempt
from mira_portal.services.session import current_auth_session

main_bp = Blueprint('main', __name__)

REDIRECT_STATE_KEY = 'auth_redirect'


def reset_redirect_state():
    """Starts a fresh mount: attempts and last target are forgotten."""
    session.pop(REDIRECT_STATE_KEY, None)


@main_bp.before_app_request
def enforce_portal_section():
    """Sends the user to the section of its role before the view runs."""
    if request.endpoint == 'static' or is_exempt(request.path):
        return None

    redirector = AuthRedirect(
        RedirectState.from_dict(session.get(REDIRECT_STATE_KEY)),
        max_attempts=current_app.config.get('MAX_REDIRECT_ATTEMPTS', 5),
    )
    decision = redirector.evaluate(current_auth_session(), request.path)
    session[REDIRECT_STATE_KEY] = redirector.state.to_dict()

    if decision.warning:
        flash(decision.warning, 'warning')
    if decision.target == LOGIN_PATH:
        return redirect(url_for('auth.login', next=request.path))
    if decision.should_redirect:
        return redirect(decision.target)
    return None


@main_bp.app_context_processor
def inject_navigation():
    """Sidebar entries and the auth session for every template."""
    auth = current_auth_session()
    google_jobs_enabled = False
    if auth.is_authenticated and not auth.is_loading:
        google_jobs_enabled = get_company_features(auth.company_id)['google_jobs_enabled']
    return {
        'auth': auth,
        'nav_items': build_nav_items(auth.role, google_jobs_enabled) if auth.is_authenticated else [],
    }


@main_bp.route('/health')
def health():
    """Liveness check."""
    return jsonify({'status': 'ok'})


@main_bp.route('/api/companies/<int:company_id>/features')
@function_auth_required()
def company_features(company_id):
    """Feature flags of one company, for refetching after a change."""
    auth = current_auth_session()
    if not (auth.is_admin or auth.is_superadmin) and auth.company_id != company_id:
        raise AccessDenied('Unauthorized: not a member of this company')
    return jsonify(get_company_features(company_id))
