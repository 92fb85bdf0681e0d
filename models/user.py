"""
User and pending-registration model definitions
"""
import uuid
from models import db
from datetime import datetime
from utils.auth_utils import hash_password, verify_password
from utils.helpers import format_ist


class User(db.Model):
    """Permanent account, created once both OTP channels are verified"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    mobile_no = db.Column(db.String(15), nullable=False)
    password = db.Column(db.String(255), nullable=False)  # hash, never plain text
    role = db.Column(db.String(20), nullable=False, default='user')  # user, admin
    status = db.Column(db.String(20), nullable=False, default='active')  # active, inactive, blocked
    otp_status = db.Column(db.String(20), default='pending')  # pending, verified
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    wallet = db.relationship('Wallet', backref='user', uselist=False, lazy=True)

    def set_password(self, password):
        self.password = hash_password(password)

    def check_password(self, password):
        return verify_password(self.password, password)

    def to_dict(self):
        return {
            'id': self.id,
            'uuid': self.uuid,
            'name': self.name,
            'email': self.email,
            'mobile_no': self.mobile_no,
            'role': self.role,
            'status': self.status,
            'created_at': format_ist(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email}>'


class TempUser(db.Model):
    """
    Staging record for a registration awaiting OTP verification.
    Deleted when promoted to a User or when it outlives TEMP_USER_TTL_HOURS.
    """
    __tablename__ = 'temp_users'
    # OTP rows are bound to this id, so ids must never be handed out twice
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    mobile_no = db.Column(db.String(15), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    is_email_verified = db.Column(db.Boolean, default=False)
    is_mobile_verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<TempUser {self.email}>'
