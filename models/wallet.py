"""
Wallet model definition
"""
from models import db
from datetime import datetime
from utils.helpers import format_ist


class Wallet(db.Model):
    """One wallet per user, created when registration completes"""
    __tablename__ = 'wallets'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    free_balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    lien_balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    balance_expire_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def total_balance(self):
        return float(self.balance or 0) + float(self.free_balance or 0)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'balance': float(self.balance or 0),
            'free_balance': float(self.free_balance or 0),
            'lien_balance': float(self.lien_balance or 0),
            'total_balance': self.total_balance,
            'balance_expire_at': format_ist(self.balance_expire_at),
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<Wallet user={self.user_id}>'
