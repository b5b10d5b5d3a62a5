"""
MIRA Portal - Flask Extensions
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate

# Extension instances
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

# Login Manager configuration
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please sign in to access this page.'
login_manager.login_message_category = 'warning'
