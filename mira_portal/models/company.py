"""
MIRA Portal - Company Model
"""

from datetime import datetime
from mira_portal.extensions import db


class Company(db.Model):
    """Tenant organization owning projects, leads and campaigns."""

    __tablename__ = 'companies'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    contact_email = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    city = db.Column(db.String(80))
    country = db.Column(db.String(80))
    website = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    members = db.relationship('CompanyUser', backref='company', lazy='dynamic',
                              cascade='all, delete-orphan')
    features = db.relationship('CompanyFeatures', uselist=False, backref='company',
                               cascade='all, delete-orphan')

    @property
    def location(self):
        """City and country joined for display."""
        return ', '.join(part for part in (self.city, self.country) if part)

    def __repr__(self):
        return f'<Company {self.name}>'
