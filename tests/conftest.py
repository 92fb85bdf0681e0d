"""
Shared fixtures: a fresh in-memory database per test, an admin bearer token and a fixed OTP.
"""
import os
import tempfile

# must be set before config.py is imported by app.py
UPLOAD_DIR = tempfile.mkdtemp(prefix="msgcatalog-uploads-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_FOLDER"] = UPLOAD_DIR
os.environ.pop("MAIL_SERVER", None)

import pytest

from app import create_app
from config import Config
from models import db
from models.user import User
from models.wallet import Wallet
from utils import otp_helper
from utils.auth_utils import generate_access_token

BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
BOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
FIXED_OTP = "123456"
API = "/api/v1"


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    MAIL_SERVER = None
    UPLOAD_FOLDER = UPLOAD_DIR
    JWT_SECRET_KEY = "test-jwt-secret"
    API_PREFIX = API


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fixed_otp(monkeypatch):
    """Every OTP issued during the test is FIXED_OTP."""
    monkeypatch.setattr(otp_helper, "generate_otp", lambda: FIXED_OTP)
    return FIXED_OTP


def make_user(email="admin@example.com", password="Admin@123", role="admin", status="active",
              with_wallet=True):
    user = User(
        name="Test Admin",
        email=email,
        mobile_no="9876543210",
        role=role,
        status=status,
        otp_status="verified",
    )
    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    if with_wallet:
        db.session.add(Wallet(user_id=user.id, balance=25, free_balance=100, lien_balance=0))
    db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return make_user()


@pytest.fixture
def headers(admin_user):
    return {
        "Authorization": f"Bearer {generate_access_token(admin_user)}",
        "User-Agent": BROWSER_UA,
    }
