"""
Models package for the messaging catalog API
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models here to ensure they're registered
from models.user import User, TempUser
from models.otp_verification import OtpVerification
from models.wallet import Wallet
from models.login_history import LoginHistory
from models.messaging import MsgApi, MsgContent, MsgSignature, MsgLog
from models.product import ProductCategory, Product, ProductPricing
from models.service_switching import ServiceSwitching
from models.audit_trail import AuditTrail

__all__ = [
    'db',
    'User',
    'TempUser',
    'OtpVerification',
    'Wallet',
    'LoginHistory',
    'MsgApi',
    'MsgContent',
    'MsgSignature',
    'MsgLog',
    'ProductCategory',
    'Product',
    'ProductPricing',
    'ServiceSwitching',
    'AuditTrail',
]
