"""
MIRA Portal - Configuration

IMPORTANT: No password, API key or sensitive path lives in this file.
Everything is read from environment variables (.env)
"""

import os
from dotenv import load_dotenv

# Loads environment variables from the .env file
load_dotenv()


def _env_list(name, default=''):
    """Reads a comma separated environment variable as a list."""
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(',') if item.strip()]


# ==============================================================================
# GENERAL SETTINGS
# ==============================================================================

class Config:
    """General application settings."""

    # Secret key for Flask sessions
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', os.urandom(24).hex())

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///mira_portal.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Stored files (PDF uploads for search strings)
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # AI provider
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    OPENAI_PDF_MODEL = os.getenv('OPENAI_PDF_MODEL', 'gpt-4o')
    OPENAI_TIMEOUT = int(os.getenv('OPENAI_TIMEOUT', '60'))

    # Website scraper
    SCRAPER_TIMEOUT = int(os.getenv('SCRAPER_TIMEOUT', '30'))

    # Accounts holding the superadmin claim when they are created or register
    SUPERADMIN_EMAILS = _env_list('SUPERADMIN_EMAILS')

    # Default admin created on first start
    DEFAULT_ADMIN_EMAIL = os.getenv('DEFAULT_ADMIN_EMAIL', 'admin@mira-portal.local')
    DEFAULT_ADMIN_PASSWORD = os.getenv('DEFAULT_ADMIN_PASSWORD', '')

    # Redirect loop protection
    MAX_REDIRECT_ATTEMPTS = 5


class DevelopmentConfig(Config):
    """Local development."""
    DEBUG = True


class TestingConfig(Config):
    """Test suite: in-memory database, no external calls configured."""
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    OPENAI_API_KEY = ''
    SUPERADMIN_EMAILS = ['root@mira-portal.local']
    DEFAULT_ADMIN_PASSWORD = ''


class ProductionConfig(Config):
    """Production deployment."""
    DEBUG = False
    SESSION_COOKIE_SECURE = True


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig,
}
