"""
OTP verification model (PostgreSQL-compatible).
One row per code sent; codes are stored hashed and consumed by flipping is_verified.
"""
from models import db
from datetime import datetime


class OtpVerification(db.Model):
    __tablename__ = 'otp_verifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)  # temp_users.id
    type = db.Column(db.String(10), nullable=False)  # email or mobile
    otp_hash = db.Column(db.String(64), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_expired(self, now=None):
        return (now or datetime.utcnow()) >= self.expires_at

    def __repr__(self):
        return f'<OtpVerification {self.type} user={self.user_id}>'
