"""
Product icon storage on local disk
"""
import logging
import os
from datetime import datetime
from urllib.parse import urlparse

from flask import current_app, request
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ICON_URL_PATH = 'uploads/products'


class UploadError(ValueError):
    """Rejected upload; message is safe to return to the client"""


def _allowed(filename):
    allowed = current_app.config.get('ALLOWED_IMAGE_EXTENSIONS', {'jpg', 'jpeg', 'png', 'gif'})
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in allowed


def save_product_icon(file_storage):
    """
    Store an uploaded icon and return its public URL.
    Raises UploadError for a missing name, a disallowed extension or an oversized file.
    """
    filename = secure_filename(file_storage.filename or '')
    if not filename:
        raise UploadError('Invalid file name')
    if not _allowed(filename):
        raise UploadError('Only jpg, jpeg, png and gif images are allowed')

    max_size = current_app.config.get('MAX_CONTENT_LENGTH') or 2 * 1024 * 1024
    file_storage.stream.seek(0, os.SEEK_END)
    size = file_storage.stream.tell()
    file_storage.stream.seek(0)
    if size > max_size:
        raise UploadError('Icon must be 2 MB or smaller')

    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    stored_name = f"{datetime.utcnow().strftime('%Y%m%d%H%M%S%f')}_{filename}"
    file_storage.save(os.path.join(folder, stored_name))

    prefix = current_app.config.get('API_PREFIX', '').strip('/')
    path = '/'.join(part for part in (prefix, ICON_URL_PATH, stored_name) if part)
    return f"{request.host_url.rstrip('/')}/{path}"


def delete_icon_if_exists(icon_url):
    """Best-effort removal of a stored icon; never raises."""
    if not icon_url:
        return
    name = os.path.basename(urlparse(icon_url).path)
    if not name:
        return
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], name)
    try:
        if os.path.isfile(path):
            os.remove(path)
    except OSError as e:
        logger.warning("Could not remove icon %s: %s", path, e)
