"""
Application Configuration

Centralizes all Flask, storage, payment and feature flag settings.
Values are read from the environment (a local .env file is loaded first).
"""

import os

from dotenv import load_dotenv

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

load_dotenv(os.path.join(BASE_DIR, '.env'))


def _env_list(name, default=''):
    """Split a comma separated environment variable into a list."""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')
    BASE_URL = os.environ.get('BASE_URL', 'http://localhost:5000')
    JSON_SORT_KEYS = False

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///tastebuddy.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload settings
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB request cap, images are capped lower

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # CORS
    CORS_ORIGINS = _env_list('CORS_ORIGINS', 'http://localhost:3000')

    # Owner of the site, receives the "Supreme Leader" achievement
    SITE_OWNER_EMAIL = os.environ.get('SITE_OWNER_EMAIL', '').lower()

    # Stripe
    STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')
    STRIPE_PUBLISHABLE_KEY = os.environ.get('STRIPE_PUBLISHABLE_KEY', '')
    STRIPE_WEBHOOK_SECRET = os.environ.get('STRIPE_WEBHOOK_SECRET', '')

    # Backblaze B2 (S3 compatible API)
    B2_ENDPOINT = os.environ.get('B2_ENDPOINT', '')
    B2_REGION = os.environ.get('B2_REGION', 'us-west-004')
    B2_ACCESS_KEY_ID = os.environ.get('B2_ACCESS_KEY_ID', '')
    B2_SECRET_ACCESS_KEY = os.environ.get('B2_SECRET_ACCESS_KEY', '')
    B2_BUCKET_NAME = os.environ.get('B2_BUCKET_NAME', '')
    B2_PUBLIC_URL = os.environ.get('B2_PUBLIC_URL', '')

    # Feature flag defaults, overridden by FEATURE_<NAME>=true
    FEATURE_FLAGS = {
        'enable_payments': False,
        'enable_beta_features': False,
    }


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'testing-secret'
    BASE_URL = 'http://testserver'
    SITE_OWNER_EMAIL = 'owner@tastebuddy.test'
    STRIPE_SECRET_KEY = 'sk_test_dummy'
    STRIPE_WEBHOOK_SECRET = 'whsec_test_dummy'
    B2_ENDPOINT = 'https://s3.us-west-004.backblazeb2.com'
    B2_ACCESS_KEY_ID = 'test-key'
    B2_SECRET_ACCESS_KEY = 'test-secret'
    B2_BUCKET_NAME = 'tastebuddy-test'
    B2_PUBLIC_URL = 'https://cdn.tastebuddy.test'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
