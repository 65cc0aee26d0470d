import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the Deazytech site.
    Deployments provide secrets and paths via environment variables;
    anything set on the Flask app config wins over these defaults.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Any SQLAlchemy URL; defaults to a SQLite file inside DB_DIR
    DATABASE_URL = os.getenv('DATABASE_URL') or f"sqlite:///{os.path.join(DB_DIR, 'deazytech.db')}"

    # Uploads
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    MAX_UPLOAD_SIZE = int(os.getenv('MAX_UPLOAD_SIZE', str(5 * 1024 * 1024)))
    STORAGE_TYPE = os.getenv('STORAGE_TYPE', 'local')

    # DigitalOcean Spaces / S3-compatible storage (STORAGE_TYPE=cloud)
    SPACES_REGION = os.getenv('DO_SPACES_REGION')
    SPACES_NAME = os.getenv('DO_SPACES_NAME')
    SPACES_KEY = os.getenv('DO_SPACES_KEY')
    SPACES_SECRET = os.getenv('DO_SPACES_SECRET')
    SPACES_FOLDER = os.getenv('SPACES_FOLDER', 'uploads')

    # Projects are managed by the separate REST backend
    BACKEND_API_URL = os.getenv('NEXT_PUBLIC_API_URL') or os.getenv('BACKEND_API_URL', 'http://localhost:8000/api')
    BACKEND_TIMEOUT = int(os.getenv('BACKEND_TIMEOUT', '15'))

    # Auth
    SESSION_TOKEN_COOKIE = os.getenv('SESSION_TOKEN_COOKIE', 'token')
    SESSION_TOKEN_DAYS = 7

    # CORS for the public JSON API
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Site
    BRAND_NAME = os.getenv('BRAND_NAME', 'Deazytech')

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def _get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
