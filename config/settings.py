"""
Configuration settings for the Liquidity Planner web service
"""

import os

from liquidity.config import DEFAULT_THRESHOLD, DEFAULT_WEEKS


class Config:
    """Base configuration"""
    # Forecast defaults applied when a request omits them
    FORECAST_THRESHOLD = float(os.environ.get('FORECAST_THRESHOLD', DEFAULT_THRESHOLD))
    FORECAST_WEEKS = int(os.environ.get('FORECAST_WEEKS', DEFAULT_WEEKS))

    # Rate limiting
    RATELIMIT_DEFAULT = "100 per minute"
    RATELIMIT_FORECAST = os.environ.get('RATELIMIT_FORECAST', "10 per minute")
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')
    RATELIMIT_ENABLED = True

    # Request size
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max payload


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    RATELIMIT_ENABLED = False


# Config mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get config based on environment"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
