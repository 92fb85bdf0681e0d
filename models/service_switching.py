"""
Service switching (rate plan) model definition
"""
from models import db
from datetime import datetime
from utils.helpers import format_ist


class ServiceSwitching(db.Model):
    """Rate/commission mapping between a gateway API and a product"""
    __tablename__ = 'service_switchings'
    __table_args__ = (
        db.UniqueConstraint('api_id', 'product_id', name='uq_service_switching_api_product'),
    )

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    api_id = db.Column(db.Integer, db.ForeignKey('msg_apis.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    api_code = db.Column(db.String(50), nullable=False)
    rate = db.Column(db.Numeric(10, 4), nullable=False, default=0)
    commission_surcharge = db.Column(db.Numeric(10, 4), nullable=False, default=0)
    flat_per = db.Column(db.String(10), nullable=False, default='flat')  # flat or percent
    gst = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    tds = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    txn_limit = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(10), nullable=False, default='Active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def purchase_text(self):
        amount = f"{float(self.commission_surcharge):g}"
        if self.flat_per == 'flat':
            return f"Surcharge @ {amount} ₹/Txn"
        if self.flat_per == 'percent':
            return f"Commission @ {amount} %"
        return ''

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'api_id': self.api_id,
            'api_name': self.api.api_name if self.api else None,
            'product_id': self.product_id,
            'product_name': self.product.name if self.product else None,
            'api_code': self.api_code,
            'rate': float(self.rate),
            'commission_surcharge': float(self.commission_surcharge),
            'flat_per': self.flat_per,
            'purchase': self.purchase_text,
            'gst': float(self.gst),
            'tds': float(self.tds),
            'txn_limit': self.txn_limit,
            'status': self.status,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<ServiceSwitching api={self.api_id} product={self.product_id}>'
