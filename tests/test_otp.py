from datetime import datetime, timedelta

import pytest

from models.otp_verification import OtpVerification
from utils import mail as mail_module
from utils.otp_helper import find_otp, generate_otp, hash_otp, issue_otp
from models import db


def test_generated_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6 and otp.isdigit() and otp[0] != "0"


def test_issue_otp_stores_hash_and_expiry(app, fixed_otp):
    issue_otp("9876543210", "mobile", 11)
    db.session.commit()

    row = OtpVerification.query.one()
    assert row.otp_hash == hash_otp(fixed_otp)
    assert row.is_verified is False
    assert datetime.utcnow() + timedelta(minutes=4) < row.expires_at <= datetime.utcnow() + timedelta(minutes=5)
    assert find_otp(11, "mobile", fixed_otp).id == row.id
    assert find_otp(11, "email", fixed_otp) is None


def test_issue_otp_rejects_unknown_channel(app):
    with pytest.raises(ValueError):
        issue_otp("someone", "fax", 1)


def test_email_otp_goes_through_flask_mail(app, fixed_otp, monkeypatch):
    sent = []
    app.config["MAIL_SERVER"] = "smtp.example.com"
    monkeypatch.setattr(mail_module.mail, "send", lambda message: sent.append(message))

    with app.test_request_context():
        issue_otp("asha@example.com", "email", 3)

    assert len(sent) == 1
    assert sent[0].recipients == ["asha@example.com"]
    assert fixed_otp in sent[0].body


def test_smtp_failure_falls_back_to_log(app, fixed_otp, monkeypatch):
    app.config["MAIL_SERVER"] = "smtp.example.com"

    def refuse(message):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mail_module.mail, "send", refuse)

    issue_otp("asha@example.com", "email", 3)
    db.session.commit()

    assert OtpVerification.query.count() == 1
