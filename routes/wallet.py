"""
Wallet routes
"""
from flask import Blueprint, current_app, g

from models.wallet import Wallet
from routes.auth import token_required
from utils.responses import failed, not_found, ok

wallet_bp = Blueprint('wallet', __name__, url_prefix='/wallet')


@wallet_bp.route('', methods=['GET'])
@token_required
def get_wallet():
    """Wallet of the authenticated user"""
    user_id = g.current_user['id']
    try:
        wallet = Wallet.query.filter_by(user_id=user_id).first()
    except Exception as e:
        current_app.logger.error(f"Wallet lookup failed for user {user_id}: {str(e)}", exc_info=True)
        return failed()

    if not wallet:
        return not_found('Wallet not found')
    return ok('Wallet fetched successfully', data=wallet.to_dict())
