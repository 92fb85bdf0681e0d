"""
Routes package for the messaging catalog API.
Every blueprint hangs off api_bp, which app.py mounts at API_PREFIX.
"""
from flask import Blueprint

from routes.public import public_bp
from routes.auth import auth_bp
from routes.wallet import wallet_bp
from routes.msg_apis import msg_apis_bp
from routes.msg_contents import msg_contents_bp
from routes.msg_signatures import msg_signatures_bp
from routes.msg_logs import msg_logs_bp
from routes.product_management import product_management_bp
from routes.service_switchings import service_switchings_bp

api_bp = Blueprint('api', __name__)

api_bp.register_blueprint(public_bp)
api_bp.register_blueprint(auth_bp)
api_bp.register_blueprint(wallet_bp)
api_bp.register_blueprint(msg_apis_bp)
api_bp.register_blueprint(msg_contents_bp)
api_bp.register_blueprint(msg_signatures_bp)
api_bp.register_blueprint(msg_logs_bp)
api_bp.register_blueprint(product_management_bp)
api_bp.register_blueprint(service_switchings_bp)

__all__ = [
    'api_bp',
    'public_bp',
    'auth_bp',
    'wallet_bp',
    'msg_apis_bp',
    'msg_contents_bp',
    'msg_signatures_bp',
    'msg_logs_bp',
    'product_management_bp',
    'service_switchings_bp',
]
