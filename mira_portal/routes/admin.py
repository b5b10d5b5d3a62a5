"""
MIRA Portal - Admin Routes
"""

from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_login import current_user

from mira_portal.extensions import db
from mira_portal.models import User, UserRole, Company, CompanyUser, CompanyFeatures
from mira_portal.services.features import set_google_jobs_enabled
from mira_portal.services.guards import admin_route
from mira_portal.services.repair import collapse_duplicate_associations, link_user_to_company
from mira_portal.services.revenue import revenue_dashboard, upsert_customer_revenue
from mira_portal.services.roles import ROLES, CUSTOMER, normalize_role

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/dashboard')
@admin_route
def dashboard():
    """Admin overview."""
    stats = {
        'users': User.query.count(),
        'active_users': User.query.filter_by(is_active_account=True).count(),
        'companies': Company.query.count(),
        'google_jobs_companies': CompanyFeatures.query.filter_by(google_jobs_enabled=True).count(),
        'unassigned_users': User.query.filter(~User.company_links.any()).count(),
    }
    return render_template('admin/dashboard.html', stats=stats)


# ==============================================================================
# USER MANAGEMENT
# ==============================================================================

@admin_bp.route('/users')
@admin_route
def list_users():
    """Lists every user with its company."""
    users = User.query.order_by(User.name).all()
    companies = Company.query.order_by(Company.name).all()
    return render_template('admin/users.html', users=users, companies=companies, roles=ROLES)


@admin_bp.route('/users/create', methods=['POST'])
@admin_route
def create_user():
    """Creates a user with a direct role and a company."""
    name = request.form.get('name', '').strip()
    email = request.form.get('email', '').strip().lower()
    password = request.form.get('password', '')
    role = normalize_role(request.form.get('role')) or CUSTOMER
    company_id = request.form.get('company_id', type=int)

    if not name or not email or not password:
        flash('Fill in all required fields.', 'error')
        return redirect(url_for('admin.list_users'))

    if User.query.filter_by(email=email).first():
        flash('A user with this e-mail already exists.', 'error')
        return redirect(url_for('admin.list_users'))

    user = User(name=name, email=email)
    user.set_password(password)
    user.direct_role = UserRole(role=role)
    db.session.add(user)
    db.session.flush()

    company = db.session.get(Company, company_id) if company_id else None
    if company:
        link_user_to_company(user, company, role=role, is_admin=request.form.get('is_admin') == 'on')

    db.session.commit()
    current_app.logger.info('Admin %s created user %s (%s)', current_user.email, email, role)
    flash(f'User {name} created.', 'success')
    return redirect(url_for('admin.list_users'))


@admin_bp.route('/users/<int:id>/edit', methods=['POST'])
@admin_route
def edit_user(id):
    """Updates role, company and status of a user."""
    user = db.get_or_404(User, id)

    user.name = request.form.get('name', user.name).strip()
    user.is_active_account = request.form.get('active') == 'on'

    role = normalize_role(request.form.get('role'))
    if role:
        if user.direct_role:
            user.direct_role.role = role
        else:
            user.direct_role = UserRole(role=role)

    company_id = request.form.get('company_id', type=int)
    company = db.session.get(Company, company_id) if company_id else None
    if company:
        link_user_to_company(user, company, role=role,
                             is_admin=request.form.get('is_admin') == 'on',
                             is_manager_kpi_enabled=request.form.get('kpi_enabled') == 'on')

    db.session.commit()
    flash(f'User {user.display_name} updated.', 'success')
    return redirect(url_for('admin.list_users'))


# ==============================================================================
# COMPANY MANAGEMENT
# ==============================================================================

@admin_bp.route('/companies')
@admin_route
def list_companies():
    """Lists every company with its feature flags."""
    companies = Company.query.order_by(Company.name).all()
    return render_template('admin/companies.html', companies=companies)


@admin_bp.route('/companies/create', methods=['POST'])
@admin_route
def create_company():
    """Creates a company."""
    name = request.form.get('name', '').strip()
    if not name:
        flash('The company name is required.', 'error')
        return redirect(url_for('admin.list_companies'))

    company = Company(
        name=name,
        description=request.form.get('description', '').strip(),
        contact_email=request.form.get('contact_email', '').strip().lower(),
        phone=request.form.get('phone', '').strip(),
        city=request.form.get('city', '').strip(),
        country=request.form.get('country', '').strip(),
        website=request.form.get('website', '').strip(),
    )
    db.session.add(company)
    db.session.commit()
    flash(f'Company {name} created.', 'success')
    return redirect(url_for('admin.list_companies'))


@admin_bp.route('/companies/<int:id>/google-jobs', methods=['POST'])
@admin_route
def toggle_google_jobs(id):
    """Turns the Google Jobs dashboard on or off for a company."""
    company = db.get_or_404(Company, id)
    enabled = request.form.get('enabled') == 'on'
    set_google_jobs_enabled(company.id, enabled)
    flash(f'Google Jobs {"enabled" if enabled else "disabled"} for {company.name}.', 'success')
    return redirect(url_for('admin.list_companies'))


@admin_bp.route('/repair', methods=['POST'])
@admin_route
def repair_associations():
    """Collapses duplicate company associations of every user."""
    repairs = collapse_duplicate_associations()
    members = CompanyUser.query.count()
    current_app.logger.info('Admin %s ran association repair: %d users fixed', current_user.email, len(repairs))
    flash(f'{len(repairs)} users repaired, {members} associations remain.', 'info')
    return redirect(url_for('admin.dashboard'))


# ==============================================================================
# REVENUE
# ==============================================================================

@admin_bp.route('/revenue')
@admin_route
def revenue():
    """Monthly revenue per customer company."""
    today = date.today()
    year = request.args.get('year', today.year, type=int)
    month = request.args.get('month', today.month, type=int)
    months = request.args.get('months', 6, type=int)
    if not 1 <= month <= 12:
        month = today.month
    months = min(max(months, 1), 24)

    return render_template(
        'admin/revenue.html',
        dashboard=revenue_dashboard(year, month, months),
        companies=Company.query.order_by(Company.name).all(),
        year=year, month=month, months=months,
    )


@admin_bp.route('/revenue/update', methods=['POST'])
@admin_route
def update_revenue():
    """Saves the revenue of one customer and month."""
    company = db.get_or_404(Company, request.form.get('company_id', type=int))
    year = request.form.get('year', type=int)
    month = request.form.get('month', type=int)

    if not year or not month or not 1 <= month <= 12:
        flash('Choose a valid month.', 'error')
        return redirect(url_for('admin.revenue'))

    upsert_customer_revenue(
        company.id, year, month,
        setup_fee=request.form.get('setup_fee', type=float),
        price_per_appointment=request.form.get('price_per_appointment', type=float),
        appointments_delivered=request.form.get('appointments_delivered', type=int),
        recurring_fee=request.form.get('recurring_fee', type=float),
        comments=request.form.get('comments', '').strip() or None,
    )
    flash(f'Revenue of {company.name} saved.', 'success')
    return redirect(url_for('admin.revenue', year=year, month=month))
