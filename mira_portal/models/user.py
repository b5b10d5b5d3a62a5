"""
MIRA Portal - User Model
"""

from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from mira_portal.extensions import db


class User(UserMixin, db.Model):
    """Authenticated principal of the portal."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False, default='')
    password_hash = db.Column(db.String(256), nullable=False)
    is_active_account = db.Column('is_active', db.Boolean, default=True, nullable=False)
    # Capability claim: authorized for every portal section regardless of role
    is_superadmin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login_at = db.Column(db.DateTime)

    # Relationships
    direct_role = db.relationship('UserRole', uselist=False, backref='user',
                                  cascade='all, delete-orphan')
    company_links = db.relationship('CompanyUser', backref='user', lazy='select',
                                    cascade='all, delete-orphan',
                                    order_by='CompanyUser.id')
    search_strings = db.relationship('SearchString', backref='user', lazy='dynamic')

    @property
    def is_active(self):
        """Flask-Login refuses inactive accounts."""
        return bool(self.is_active_account)

    def set_password(self, password):
        """Sets the user's password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Checks whether the password is correct."""
        return check_password_hash(self.password_hash, password)

    @property
    def first_name(self):
        return (self.name or '').split(' ')[0] if self.name else ''

    @property
    def last_name(self):
        parts = (self.name or '').split(' ', 1)
        return parts[1] if len(parts) > 1 else ''

    @property
    def display_name(self):
        """Full name, falling back to the e-mail local part."""
        return self.name or self.email.split('@')[0]

    def register_login(self):
        """Records the time of the last login."""
        self.last_login_at = datetime.utcnow()
        db.session.commit()

    def __repr__(self):
        return f'<User {self.email}>'
