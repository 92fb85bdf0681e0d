"""
Audit trail model definition
"""
from models import db
from datetime import datetime


class AuditTrail(db.Model):
    """Append-only log of mutating catalog actions"""
    __tablename__ = 'audit_trail'

    id = db.Column(db.Integer, primary_key=True)
    table_name = db.Column(db.String(64), nullable=False, index=True)
    row_id = db.Column(db.Integer, nullable=True)
    action = db.Column(db.String(20), nullable=False)  # create, update, delete, status_change
    created_by = db.Column(db.Integer, nullable=True)  # users.id of the actor
    ip_address = db.Column(db.String(45))
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    remark = db.Column(db.String(500))
    status = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<AuditTrail {self.table_name}#{self.row_id} {self.action}>'
