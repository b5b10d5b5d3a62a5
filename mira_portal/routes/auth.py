"""
MIRA Portal - Authentication Routes
"""

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from mira_portal.extensions import db
from mira_portal.models import User, UserRole
from mira_portal.routes.main import reset_redirect_state
from mira_portal.services.repair import try_repair_company_association
from mira_portal.services.roles import CUSTOMER, dashboard_for
from mira_portal.services.session import current_auth_session, refresh_auth_session

auth_bp = Blueprint('auth', __name__)


def _safe_next(next_page):
    """Only same-site relative paths are followed after login."""
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None


def _home():
    return redirect(dashboard_for(current_auth_session().role))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page."""
    if current_user.is_authenticated:
        return _home()

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        remember = bool(request.form.get('remember', False))

        if not email or not password:
            flash('Please fill in all fields.', 'error')
            return render_template('login.html'), 400

        user = User.query.filter_by(email=email).first()

        if user and user.check_password(password):
            if not user.is_active:
                flash('Your account is deactivated. Contact the administrator.', 'error')
                return render_template('login.html'), 403

            reset_redirect_state()
            login_user(user, remember=remember)
            user.register_login()
            refresh_auth_session()
            current_app.logger.info('User %s signed in', user.email)

            flash(f'Welcome, {user.display_name}!', 'success')

            next_page = _safe_next(request.args.get('next'))
            if next_page:
                return redirect(next_page)
            return _home()

        current_app.logger.info('Failed sign in for %s', email)
        flash('Invalid e-mail or password.', 'error')
        return render_template('login.html'), 401

    return render_template('login.html')


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Self-service registration as a customer."""
    if current_user.is_authenticated:
        return _home()

    if request.method == 'POST':
        name = request.form.get('name', '').strip()
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not name or not email or not password:
            flash('Please fill in all required fields.', 'error')
            return render_template('register.html'), 400

        if User.query.filter_by(email=email).first():
            flash('An account with this e-mail already exists.', 'error')
            return render_template('register.html'), 409

        user = User(
            name=name,
            email=email,
            is_superadmin=email in current_app.config.get('SUPERADMIN_EMAILS', []),
        )
        user.set_password(password)
        user.direct_role = UserRole(role=CUSTOMER)

        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error('Registration failed for %s: %s', email, e)
            flash('Registration failed. Please try again.', 'error')
            return render_template('register.html'), 500

        try_repair_company_association(user)

        reset_redirect_state()
        login_user(user)
        refresh_auth_session()
        current_app.logger.info('User %s registered', email)
        flash(f'Welcome, {user.display_name}!', 'success')
        return _home()

    return render_template('register.html')


@auth_bp.route('/logout')
@login_required
def logout():
    """Signs the user out."""
    logout_user()
    reset_redirect_state()
    flash('You have been signed out.', 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/')
def index():
    """Sends the visitor to login or to the role dashboard."""
    if current_user.is_authenticated:
        return _home()
    return redirect(url_for('auth.login'))
