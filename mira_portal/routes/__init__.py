"""
MIRA Portal - Routes Package
"""

from mira_portal.routes.auth import auth_bp
from mira_portal.routes.main import main_bp
from mira_portal.routes.admin import admin_bp
from mira_portal.routes.manager import manager_bp
from mira_portal.routes.customer import customer_bp
from mira_portal.routes.functions import functions_bp

__all__ = ['auth_bp', 'main_bp', 'admin_bp', 'manager_bp', 'customer_bp', 'functions_bp']
