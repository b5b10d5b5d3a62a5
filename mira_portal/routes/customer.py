"""
MIRA Portal - Customer Routes
"""

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import current_user

from mira_portal.extensions import db
from mira_portal.models import Company, Lead, SearchString
from mira_portal.services.features import get_company_features, is_google_jobs_enabled
from mira_portal.services.guards import customer_route
from mira_portal.services.leads import fetch_leads, lead_status_counts
from mira_portal.services.repair import try_repair_company_association
from mira_portal.services.scraper import scrape_website
from mira_portal.services.search_strings import generate_search_string
from mira_portal.services.session import current_auth_session, refresh_auth_session

customer_bp = Blueprint('customer', __name__)


def _company_id():
    """Company of the current customer, repairing a missing association."""
    auth = current_auth_session()
    if auth.company_id is None and try_repair_company_association(current_user):
        auth = refresh_auth_session()
    return auth.company_id


def _search_strings():
    return current_user.search_strings\
        .order_by(SearchString.created_at.desc())\
        .limit(50)\
        .all()


@customer_bp.route('/dashboard')
@customer_route
def dashboard():
    """Customer overview."""
    company_id = _company_id()
    company = db.session.get(Company, company_id) if company_id else None
    return render_template(
        'customer/dashboard.html',
        company=company,
        features=get_company_features(company_id),
        search_strings=_search_strings()[:5],
    )


@customer_bp.route('/search-strings')
@customer_route
def search_strings():
    """Search strings of the current user."""
    return render_template('customer/search_strings.html',
                           search_strings=_search_strings(), types=SearchString.TYPES)


@customer_bp.route('/search-strings/create', methods=['POST'])
@customer_route
def create_search_string():
    """Creates a search string from text or a website and generates it."""
    search_type = request.form.get('type', 'recruiting')
    if search_type not in SearchString.TYPES:
        search_type = 'recruiting'
    input_text = request.form.get('input_text', '').strip()
    input_url = request.form.get('input_url', '').strip()

    record = SearchString(
        user_id=current_user.id,
        company_id=_company_id(),
        type=search_type,
        input_source='website' if input_url else 'text',
        input_url=input_url or None,
        input_text=input_text or None,
        status='new',
    )

    if input_url:
        result = scrape_website(input_url)
        if not result['success']:
            flash(f'Website could not be read: {result["error"]}', 'error')
            return redirect(url_for('customer.search_strings'))
        record.input_text = result['text']
        record.input_url = result['url']

    if not record.input_text:
        flash('Provide a text or a website URL.', 'error')
        return redirect(url_for('customer.search_strings'))

    db.session.add(record)
    db.session.commit()
    generate_search_string(record)

    flash('Search string generated.', 'success')
    return redirect(url_for('customer.search_strings'))


@customer_bp.route('/google-jobs')
@customer_route
def google_jobs():
    """Google Jobs dashboard, available when the company has the feature."""
    company_id = _company_id()
    if not is_google_jobs_enabled(company_id):
        flash('Google Jobs is not enabled for your company.', 'info')
        return redirect(url_for('customer.dashboard'))
    return render_template('customer/google_jobs.html', company_id=company_id)


@customer_bp.route('/leads')
@customer_route
def leads():
    """Leads of the customer's company, optionally filtered by status."""
    company_id = _company_id()
    status = request.args.get('status')
    if status not in Lead.STATUSES:
        status = None
    return render_template(
        'customer/leads.html',
        leads=fetch_leads(company_id, status=status) if company_id else [],
        counts=lead_status_counts(company_id) if company_id else dict.fromkeys(Lead.STATUSES, 0),
        status=status,
    )
