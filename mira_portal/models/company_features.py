"""
MIRA Portal - Company Feature Flags Model
"""

from datetime import datetime
from mira_portal.extensions import db


class CompanyFeatures(db.Model):
    """Per-company booleans controlling feature visibility."""

    __tablename__ = 'company_features'

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), unique=True, nullable=False)
    google_jobs_enabled = db.Column(db.Boolean, default=False, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'company_id': self.company_id,
            'google_jobs_enabled': bool(self.google_jobs_enabled),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<CompanyFeatures {self.company_id}>'
