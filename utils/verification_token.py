"""
Short-lived token identifying a pending registration.
Issued by /auth/register and presented back to /auth/verify-otp as tempUserId.
"""
from datetime import timedelta
from flask import current_app

from utils.auth_utils import decode_token, generate_token

REGISTRATION_PURPOSE = "registration"


def create_registration_token(temp_user):
    """Sign the temp user's id and email for the OTP verification step."""
    minutes = current_app.config.get("REGISTRATION_TOKEN_MINUTES", 15)
    return generate_token(
        {"id": temp_user.id, "email": temp_user.email, "purpose": REGISTRATION_PURPOSE},
        expires_delta=timedelta(minutes=minutes),
    )


def verify_registration_token(token):
    """
    Verify token and return (temp_user_id, email) if valid, else None.
    Access tokens are rejected even though they share the signing key.
    """
    claims = decode_token(token)
    if not claims or claims.get("purpose") != REGISTRATION_PURPOSE:
        return None
    if not claims.get("id") or not claims.get("email"):
        return None
    return claims["id"], claims["email"]
