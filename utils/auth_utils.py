"""
Authentication utility functions: password hashing and bearer tokens
"""
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash


def hash_password(password):
    """Generate password hash"""
    return generate_password_hash(password)


def verify_password(password_hash, password):
    """Verify password against hash"""
    return check_password_hash(password_hash, password)


def generate_token(claims, expires_delta=None):
    """
    Sign claims into an HS256 JWT.
    Lifetime defaults to JWT_EXPIRES_HOURS from the app config.
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=current_app.config.get("JWT_EXPIRES_HOURS", 24))
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + expires_delta
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def decode_token(token):
    """
    Verify signature and expiry; returns the claims dict, or None when invalid.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET_KEY"],
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
        )
    except jwt.InvalidTokenError:
        return None


def generate_access_token(user):
    """Access token carrying the identity claims the API relies on"""
    return generate_token({
        "id": user.id,
        "uuid": user.uuid,
        "email": user.email,
        "role": user.role,
    })
