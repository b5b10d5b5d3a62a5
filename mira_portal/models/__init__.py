"""
MIRA Portal - Data Models
"""

from mira_portal.models.user import User
from mira_portal.models.user_role import UserRole
from mira_portal.models.company import Company
from mira_portal.models.company_user import CompanyUser
from mira_portal.models.company_features import CompanyFeatures
from mira_portal.models.search_string import SearchString
from mira_portal.models.lead import Lead
from mira_portal.models.customer_revenue import CustomerRevenue

__all__ = [
    'User', 'UserRole', 'Company', 'CompanyUser', 'CompanyFeatures', 'SearchString',
    'Lead', 'CustomerRevenue',
]
