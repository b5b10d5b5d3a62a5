"""
MIRA Portal - Role Resolution

A user can hold a role directly (user_roles table) and through company
membership (company_users table). The two sources can disagree, so the
role is resolved in one place with a fixed precedence:

1. superadmin claim on the user record -> admin
2. direct role from user_roles
3. role of the primary company association, then the remaining
   associations in creation order
4. customer
"""

ADMIN = 'admin'
MANAGER = 'manager'
CUSTOMER = 'customer'

ROLES = (ADMIN, MANAGER, CUSTOMER)
DEFAULT_ROLE = CUSTOMER

ROLE_PREFIXES = {
    ADMIN: '/admin',
    MANAGER: '/manager',
    CUSTOMER: '/customer',
}

ROLE_DASHBOARDS = {
    ADMIN: '/admin/dashboard',
    MANAGER: '/manager/dashboard',
    CUSTOMER: '/customer/dashboard',
}


def normalize_role(value):
    """Returns the known role name for value, or None."""
    if not value:
        return None
    role = str(value).strip().lower()
    return role if role in ROLES else None


def ordered_associations(company_user_rows):
    """Primary association first, the rest in their original order."""
    rows = list(company_user_rows or [])
    return sorted(rows, key=lambda row: not getattr(row, 'is_primary_company', False))


def pick_primary_association(company_user_rows):
    """The association that gives the user its company context."""
    rows = ordered_associations(company_user_rows)
    return rows[0] if rows else None


def resolve_role(user, company_user_rows=(), direct_role=None):
    """
    Resolves the single effective role of a user.

    Args:
        user: the user record (None for anonymous)
        company_user_rows: the user's CompanyUser rows
        direct_role: role name from the user_roles table, if any

    Returns:
        One of ROLES, or None for an anonymous user
    """
    if user is None:
        return None

    if getattr(user, 'is_superadmin', False):
        return ADMIN

    role = normalize_role(direct_role)
    if role:
        return role

    for row in ordered_associations(company_user_rows):
        role = normalize_role(getattr(row, 'role', None))
        if role:
            return role

    return DEFAULT_ROLE


def dashboard_for(role):
    """Dashboard path of a role, customer dashboard when unknown."""
    return ROLE_DASHBOARDS.get(role, ROLE_DASHBOARDS[DEFAULT_ROLE])


def _under(path, prefix):
    return path == prefix or path.startswith(prefix + '/')


def role_for_path(path):
    """Role whose portal section contains path, or None."""
    for role, prefix in ROLE_PREFIXES.items():
        if _under(path, prefix):
            return role
    return None


def is_admin_path(path):
    return _under(path, ROLE_PREFIXES[ADMIN])
