"""
Messaging configuration models: gateway APIs, content templates, signatures and send logs
"""
from models import db
from datetime import datetime
from utils.helpers import format_ist


class MsgApi(db.Model):
    """Outbound message gateway endpoint"""
    __tablename__ = 'msg_apis'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    api_name = db.Column(db.String(150), nullable=False)
    api_type = db.Column(db.String(20), nullable=False)  # SMS, WhatsApp, Email, Notification
    base_url = db.Column(db.String(500), nullable=False)
    params = db.Column(db.Text, nullable=True)
    method = db.Column(db.String(10), nullable=False, default='GET')
    status = db.Column(db.String(10), nullable=False, default='Active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    service_switchings = db.relationship('ServiceSwitching', backref='api', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'api_name': self.api_name,
            'api_type': self.api_type,
            'base_url': self.base_url,
            'params': self.params,
            'method': self.method,
            'status': self.status,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<MsgApi {self.api_name}>'


class MsgContent(db.Model):
    """Per message-type template across SMS, WhatsApp, mail and push channels"""
    __tablename__ = 'msg_contents'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    message_type = db.Column(db.String(100), nullable=False)
    send_sms = db.Column(db.String(3), nullable=False, default='Yes')
    send_whatsapp = db.Column(db.String(3), nullable=False, default='Yes')
    send_email = db.Column(db.String(3), nullable=False, default='Yes')
    send_notification = db.Column(db.String(3), nullable=False, default='No')
    sms_template_id = db.Column(db.String(100))
    sms_content = db.Column(db.Text)
    whatsapp_content = db.Column(db.Text)
    mail_subject = db.Column(db.String(255))
    mail_content = db.Column(db.Text)
    notification_title = db.Column(db.String(255))
    notification_content = db.Column(db.Text)
    keywords = db.Column(db.String(500))
    status = db.Column(db.String(10), nullable=False, default='Active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE_FIELDS = (
        'message_type', 'send_sms', 'send_whatsapp', 'send_email', 'send_notification',
        'sms_template_id', 'sms_content', 'whatsapp_content', 'mail_subject', 'mail_content',
        'notification_title', 'notification_content', 'keywords', 'status',
    )

    def to_dict(self):
        data = {'id': self.id, 'serial_no': self.serial_no}
        for field in self.EDITABLE_FIELDS:
            data[field] = getattr(self, field)
        data['created_at'] = format_ist(self.created_at)
        data['updated_at'] = format_ist(self.updated_at)
        return data

    def __repr__(self):
        return f'<MsgContent {self.message_type}>'


class MsgSignature(db.Model):
    """Sender signature for SMS / WhatsApp"""
    __tablename__ = 'msg_signatures'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    signature = db.Column(db.String(255), nullable=False)
    signature_type = db.Column(db.String(20), nullable=False)  # sms, whatsapp
    status = db.Column(db.String(10), nullable=False, default='Active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'signature': self.signature,
            'signature_type': self.signature_type,
            'status': self.status,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<MsgSignature {self.signature_type}:{self.signature}>'


class MsgLog(db.Model):
    """Record of a message dispatched through a gateway API (read-only here)"""
    __tablename__ = 'msg_logs'

    id = db.Column(db.Integer, primary_key=True)
    api_id = db.Column(db.Integer, db.ForeignKey('msg_apis.id'), nullable=True)
    numbers = db.Column(db.Text)
    message = db.Column(db.Text)
    base_url = db.Column(db.String(500))
    params = db.Column(db.Text)
    api_response = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'api_id': self.api_id,
            'numbers': self.numbers,
            'message': self.message,
            'base_url': self.base_url,
            'params': self.params,
            'api_response': self.api_response,
            'created_at': format_ist(self.created_at),
        }
