"""
MIRA Portal - Direct Role Model
"""

from mira_portal.extensions import db


class UserRole(db.Model):
    """Role granted to a user independently of any company membership."""

    __tablename__ = 'user_roles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    role = db.Column(db.String(20), nullable=False)  # admin, manager, customer

    def __repr__(self):
        return f'<UserRole {self.user_id}-{self.role}>'
