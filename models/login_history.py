"""
Login history model definition
"""
from models import db
from datetime import datetime


class LoginHistory(db.Model):
    """Append-only record of every password check made by the login endpoint"""
    __tablename__ = 'login_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    device = db.Column(db.String(100))
    operating_system = db.Column(db.String(100))
    browser = db.Column(db.String(100))
    ip_address = db.Column(db.String(45))
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    status = db.Column(db.String(10), nullable=False)  # Success or Failed
    user_agent = db.Column(db.String(512))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<LoginHistory user={self.user_id} {self.status}>'
