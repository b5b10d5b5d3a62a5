"""
MIRA Portal - Search String Model
"""

from datetime import datetime
from mira_portal.extensions import db


class SearchString(db.Model):
    """Boolean search string generated from text, a website or a PDF."""

    __tablename__ = 'search_strings'

    TYPES = ('recruiting', 'lead_generation')
    SOURCES = ('text', 'website', 'pdf')

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), index=True)
    type = db.Column(db.String(20), nullable=False, default='recruiting')
    input_source = db.Column(db.String(20), nullable=False, default='text')
    input_text = db.Column(db.Text)
    input_url = db.Column(db.String(500))
    pdf_path = db.Column(db.String(500))
    generated_string = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='new')  # new, processing, completed, failed
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'company_id': self.company_id,
            'type': self.type,
            'input_source': self.input_source,
            'input_text': self.input_text,
            'input_url': self.input_url,
            'pdf_path': self.pdf_path,
            'generated_string': self.generated_string,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<SearchString {self.id} - {self.status}>'
