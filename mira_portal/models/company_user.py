"""
MIRA Portal - User-Company Association Model
"""

from datetime import datetime
from mira_portal.extensions import db


class CompanyUser(db.Model):
    """Join record granting a user a role within a company."""

    __tablename__ = 'company_users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=True, index=True)
    role = db.Column(db.String(20), nullable=False, default='customer')
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    is_primary_company = db.Column(db.Boolean, default=True, nullable=False)
    is_manager_kpi_enabled = db.Column(db.Boolean, default=False, nullable=False)
    email = db.Column(db.String(120))
    full_name = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<CompanyUser {self.user_id}-{self.company_id}>'
