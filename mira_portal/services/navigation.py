"""
MIRA Portal - Sidebar Navigation
"""

from collections import namedtuple

from mira_portal.services.roles import ADMIN, MANAGER, CUSTOMER, DEFAULT_ROLE

NavItem = namedtuple('NavItem', ['name', 'path', 'badge'])

NAV_ITEMS = {
    ADMIN: [
        NavItem('Dashboard', '/admin/dashboard', None),
        NavItem('Users', '/admin/users', None),
        NavItem('Companies', '/admin/companies', 'new'),
        NavItem('Revenue', '/admin/revenue', None),
    ],
    MANAGER: [
        NavItem('Dashboard', '/manager/dashboard', None),
        NavItem('Team', '/manager/team', None),
    ],
    CUSTOMER: [
        NavItem('Dashboard', '/customer/dashboard', None),
        NavItem('Search Strings', '/customer/search-strings', None),
        NavItem('Leads', '/customer/leads', None),
    ],
}

GOOGLE_JOBS_ITEM = NavItem('Google Jobs', '/customer/google-jobs', None)


def build_nav_items(role, google_jobs_enabled=False):
    """Sidebar entries for a role; Google Jobs only when the company has it."""
    items = list(NAV_ITEMS.get(role, NAV_ITEMS[DEFAULT_ROLE]))
    if role in (CUSTOMER, None) and google_jobs_enabled:
        items.append(GOOGLE_JOBS_ITEM)
    return items
