"""Configuration settings for the Flask application."""
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        os.environ.get('SQLALCHEMY_DATABASE_URI') or \
        'sqlite:///script_manager.db'  # Use SQLite for development

    # Request bodies above this size are rejected with 413 before any check runs
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 1024 * 1024))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # AI assistant (OpenAI compatible chat completions)
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', '')
    OPENAI_BASE_URL = os.environ.get('OPENAI_BASE_URL') or None
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL') or 'gpt-4-1106-preview'
    OPENAI_TEMPERATURE = float(os.environ.get('OPENAI_TEMPERATURE', 0.7))
    OPENAI_MAX_TOKENS = int(os.environ.get('OPENAI_MAX_TOKENS', 2000))

    # Reference documentation
    DOCS_DIR = os.environ.get('DOCS_DIR') or os.path.join(BASE_DIR, 'docs_data')
    DOCS_CONTEXT_PATHS = ['api-reference', 'events', 'packets']


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
    OPENAI_API_KEY = ''
    OPENAI_BASE_URL = None
    MAX_CONTENT_LENGTH = 64 * 1024


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
