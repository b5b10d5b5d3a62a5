"""
MIRA Portal - Lead Model
"""

from datetime import datetime
from mira_portal.extensions import db


class Lead(db.Model):
    """Contact prospected for a company."""

    __tablename__ = 'leads'

    STATUSES = ('new', 'contacted', 'qualified', 'converted', 'lost')

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    company_name = db.Column(db.String(120))
    email = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    position = db.Column(db.String(120))
    status = db.Column(db.String(20), nullable=False, default='new')
    score = db.Column(db.Integer)
    notes = db.Column(db.Text)
    last_contact = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship('Company', backref=db.backref('leads', lazy='dynamic'))

    def to_dict(self):
        return {
            'id': self.id,
            'company_id': self.company_id,
            'name': self.name,
            'company_name': self.company_name,
            'email': self.email,
            'phone': self.phone,
            'position': self.position,
            'status': self.status,
            'score': self.score,
            'notes': self.notes,
            'last_contact': self.last_contact.isoformat() if self.last_contact else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Lead {self.name} - {self.status}>'
