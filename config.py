"""
Configuration for the messaging catalog API.
Hosted (Railway/Render/FLASK_ENV=production): DATABASE_URL is mandatory.
Local: DATABASE_URL, DB_* when DB_HOST is set, else a SQLite file in instance/.
"""
import os
from pathlib import Path
from urllib.parse import quote_plus

BASE_DIR = Path(__file__).resolve().parent
INSTANCE_DIR = BASE_DIR / "instance"

POSTGRES_SCHEMES = ("postgres://", "postgresql://")


def _is_production():
    if os.environ.get("FLASK_ENV") == "production":
        return True
    return os.environ.get("RENDER") == "true" or "RAILWAY_ENVIRONMENT" in os.environ


def _env_flag(name, default="false"):
    return os.environ.get(name, default).lower() in ("true", "on", "1")


def _normalize_database_url(url):
    """Pin plain postgres URLs to the psycopg2 driver."""
    url = (url or "").strip()
    for scheme in POSTGRES_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+psycopg2://" + url[len(scheme):]
    return url


def _postgres_uri_from_parts():
    password = os.environ.get("DB_PASSWORD", "")
    return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}".format(
        user=os.environ.get("DB_USER", "msgcatalog"),
        password=quote_plus(password) if password else "",
        host=os.environ["DB_HOST"],
        port=os.environ.get("DB_PORT", "5432"),
        name=os.environ.get("DB_NAME", "msgcatalog"),
    )


def _get_database_uri():
    url = _normalize_database_url(os.environ.get("DATABASE_URL"))
    if url:
        return url
    if _is_production():
        raise RuntimeError("DATABASE_URL must be set for hosted deployments")
    if os.environ.get("DB_HOST"):
        return _postgres_uri_from_parts()

    INSTANCE_DIR.mkdir(exist_ok=True)
    return f"sqlite:///{INSTANCE_DIR / 'msgcatalog.db'}"


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Bearer tokens
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_HOURS = int(os.environ.get("JWT_EXPIRES_HOURS") or 24)
    REGISTRATION_TOKEN_MINUTES = int(os.environ.get("REGISTRATION_TOKEN_MINUTES") or 15)

    SQLALCHEMY_DATABASE_URI = _get_database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    MAIL_SERVER = os.environ.get("MAIL_SERVER")
    MAIL_PORT = int(os.environ.get("MAIL_PORT") or 587)
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", "true")
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.environ.get("MAIL_DEFAULT_SENDER") or os.environ.get("MAIL_USERNAME") or "noreply@msgcatalog.local"

    API_PREFIX = os.environ.get("API_PREFIX", "/api/v1")

    # Product icon uploads
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER") or str(BASE_DIR / "uploads" / "products")
    MAX_CONTENT_LENGTH = 2 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif"}

    OTP_EXPIRY_MINUTES = int(os.environ.get("OTP_EXPIRY_MINUTES") or 5)
    TEMP_USER_TTL_HOURS = int(os.environ.get("TEMP_USER_TTL_HOURS") or 24)

    WALLET_FREE_BALANCE = 100
    WALLET_VALIDITY_DAYS = 365

    DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "Asia/Kolkata")
