"""
OTP generation, hashing and delivery for registration verification.
OTPs are hashed before storage; never store plain OTP in DB.
"""
import secrets
import hashlib
from datetime import datetime, timedelta

from flask import current_app

from models import db
from models.otp_verification import OtpVerification

OTP_LENGTH = 6
OTP_EXPIRY_MINUTES = 5
CHANNELS = ('email', 'mobile')


def generate_otp() -> str:
    """Generate a secure 6-digit numeric OTP (no leading zero)."""
    return secrets.choice('123456789') + ''.join(secrets.choice('0123456789') for _ in range(OTP_LENGTH - 1))


def hash_otp(otp: str) -> str:
    """Hash OTP for storage."""
    return hashlib.sha256(otp.encode('utf-8')).hexdigest()


def otp_expires_at() -> datetime:
    """Return expiry datetime for a new OTP."""
    minutes = current_app.config.get('OTP_EXPIRY_MINUTES', OTP_EXPIRY_MINUTES)
    return datetime.utcnow() + timedelta(minutes=minutes)


def find_otp(temp_user_id, channel, plain_otp):
    """Most recent OTP row for this temp user and channel matching the submitted code."""
    return (
        OtpVerification.query
        .filter_by(user_id=temp_user_id, type=channel, otp_hash=hash_otp(plain_otp))
        .order_by(OtpVerification.id.desc())
        .first()
    )


def issue_otp(receiver, channel, temp_user_id):
    """
    Store a fresh OTP for temp_user_id and deliver it to receiver.
    The row is added to the session; the caller commits.
    """
    if channel not in CHANNELS:
        raise ValueError(f"Unknown OTP channel: {channel}")

    otp = generate_otp()
    db.session.add(OtpVerification(
        user_id=temp_user_id,
        type=channel,
        otp_hash=hash_otp(otp),
        expires_at=otp_expires_at(),
        is_verified=False,
    ))
    deliver_otp(receiver, channel, otp)
    return otp


def deliver_otp(receiver, channel, otp):
    """
    Email goes out through Flask-Mail when SMTP is configured.
    Without a delivery channel the code is only written to the server log.
    """
    if channel == 'email' and current_app.config.get('MAIL_SERVER'):
        from utils.mail import send_otp_email
        try:
            send_otp_email(receiver, otp)
            return
        except Exception as e:
            current_app.logger.error(f"Failed to email OTP to {receiver}: {str(e)}", exc_info=True)
    current_app.logger.info("OTP for %s [%s] is: %s", receiver, channel, otp)
