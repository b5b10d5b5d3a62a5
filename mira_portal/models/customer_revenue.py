"""
MIRA Portal - Customer Revenue Model
"""

from datetime import datetime
from mira_portal.extensions import db


class CustomerRevenue(db.Model):
    """Revenue booked for one customer company in one month."""

    __tablename__ = 'customer_revenue'
    __table_args__ = (
        db.UniqueConstraint('company_id', 'year', 'month', name='uq_customer_revenue_period'),
    )

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False, index=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)  # 1-12
    setup_fee = db.Column(db.Float, nullable=False, default=0)
    price_per_appointment = db.Column(db.Float, nullable=False, default=0)
    appointments_delivered = db.Column(db.Integer, nullable=False, default=0)
    recurring_fee = db.Column(db.Float, nullable=False, default=0)
    comments = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship('Company', backref=db.backref('revenue_entries', lazy='dynamic'))

    @property
    def total_revenue(self):
        """Setup fee, delivered appointments and recurring fee of the month."""
        return ((self.setup_fee or 0)
                + (self.price_per_appointment or 0) * (self.appointments_delivered or 0)
                + (self.recurring_fee or 0))

    def to_dict(self):
        return {
            'id': self.id,
            'company_id': self.company_id,
            'customer_name': self.company.name if self.company else 'Unknown',
            'year': self.year,
            'month': self.month,
            'setup_fee': self.setup_fee or 0,
            'price_per_appointment': self.price_per_appointment or 0,
            'appointments_delivered': self.appointments_delivered or 0,
            'recurring_fee': self.recurring_fee or 0,
            'comments': self.comments,
            'total_revenue': self.total_revenue,
        }

    def __repr__(self):
        return f'<CustomerRevenue {self.company_id} {self.year}-{self.month:02d}>'
