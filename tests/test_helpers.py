from datetime import datetime

from utils.helpers import format_ist, mask_email, mask_mobile, normalize_status
from utils.validators import validate_password


def test_format_ist_converts_from_utc(app):
    assert format_ist(datetime(2025, 1, 1, 0, 0, 0)) == "2025-01-01 05:30:00"
    assert format_ist(None) is None


def test_masking():
    assert mask_email("rahul.sharma@example.com") == "ra****@example.com"
    assert mask_mobile("9876543210") == "****3210"


def test_normalize_status():
    assert normalize_status("ACTIVE") == "Active"
    assert normalize_status(" inactive ") == "Inactive"
    assert normalize_status("paused") is None


def test_password_rules():
    assert validate_password("Secret@1") == (True, None)
    assert validate_password("Secret12")[1].startswith("Password must contain at least one special")
    assert validate_password("Se@1")[1] == "Password must be at least 6 characters"
