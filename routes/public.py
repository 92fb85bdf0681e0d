"""
Public routes: health probe and uploaded product icons
"""
import os

from flask import Blueprint, current_app, send_from_directory, jsonify
from werkzeug.utils import secure_filename

from utils.responses import not_found

public_bp = Blueprint('public', __name__)


@public_bp.route('/health')
def health():
    """Liveness probe for the process manager / load balancer"""
    return jsonify({'status': 'ok'})


@public_bp.route('/uploads/products/<path:filename>')
def product_icon(filename):
    """Serve a stored product icon"""
    safe_name = secure_filename(filename)
    folder = current_app.config['UPLOAD_FOLDER']
    if not safe_name or not os.path.isfile(os.path.join(folder, safe_name)):
        return not_found('File not found')
    return send_from_directory(folder, safe_name)
