"""
Input validation.
Each validate_* payload function returns (cleaned, errors); routes reject with the first error.
"""
import math
import re
from urllib.parse import urlparse

from utils.helpers import clean_str, normalize_status, parse_float, parse_int

EMAIL_RE = re.compile(r'^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$')
MOBILE_RE = re.compile(r'^[0-9]{10}$')
OTP_RE = re.compile(r'^[0-9]{6}$')
PASSWORD_SPECIALS = '@$!%*?&'

API_TYPES = ('SMS', 'WhatsApp', 'Email', 'Notification')
HTTP_METHODS = ('GET', 'POST')
SIGNATURE_TYPES = ('sms', 'whatsapp')
YES_NO = ('Yes', 'No')
FLAT_PER = ('flat', 'percent')
CURRENCIES = ('USD', 'INR', 'EUR', 'GBP', 'AUD', 'CAD', 'JPY')


def validate_email(email):
    """True when email looks like an address"""
    return bool(email) and len(email) <= 120 and EMAIL_RE.match(email) is not None


def validate_password(password):
    """Returns (is_valid, error_message)"""
    if not password:
        return False, 'Password is required'
    if not isinstance(password, str):
        return False, 'Password must be a string'
    if len(password) < 6:
        return False, 'Password must be at least 6 characters'
    if not re.search(r'[a-z]', password):
        return False, 'Password must contain at least one lowercase letter'
    if not re.search(r'[A-Z]', password):
        return False, 'Password must contain at least one uppercase letter'
    if not re.search(r'[0-9]', password):
        return False, 'Password must contain at least one number'
    if not any(ch in PASSWORD_SPECIALS for ch in password):
        return False, f'Password must contain at least one special character ({PASSWORD_SPECIALS})'
    return True, None


def validate_status(value, errors, required=True):
    if value is None or str(value).strip() == '':
        if required:
            errors.append('Status is required')
        return None
    status = normalize_status(value)
    if status is None:
        errors.append('Status must be Active or Inactive')
    return status


def _required_text(data, field, label, max_length, errors):
    value = clean_str(data.get(field))
    if value is None:
        errors.append(f'{label} is required')
    elif len(value) > max_length:
        errors.append(f'{label} must be at most {max_length} characters')
    return value


def _positive_int(data, field, label, errors):
    raw = data.get(field)
    if raw is None or str(raw).strip() == '':
        errors.append(f'{label} is required')
        return None
    value = parse_int(raw)
    if value is None or value <= 0:
        errors.append(f'{label} must be a positive integer')
        return None
    return value


def _choice(value, choices, label, errors, required=True):
    """Case-insensitive match against choices; returns the canonical spelling."""
    value = clean_str(value)
    if value is None:
        if required:
            errors.append(f'{label} is required')
        return None
    for choice in choices:
        if choice.lower() == value.lower():
            return choice
    errors.append(f"{label} must be one of: {', '.join(choices)}")
    return None


# ---------- Auth ----------

def validate_registration(data):
    errors = []
    name = clean_str(data.get('name'))
    email = (clean_str(data.get('email')) or '').lower()
    password = data.get('password') or ''
    mobile_no = clean_str(data.get('mobile_no')) or ''

    if not name:
        errors.append('Name is required')
    elif len(name) > 100:
        errors.append('Name must be at most 100 characters')
    if not email:
        errors.append('Email is required')
    elif not validate_email(email):
        errors.append('Invalid email format')
    is_valid, pwd_error = validate_password(password)
    if not is_valid:
        errors.append(pwd_error)
    if not mobile_no:
        errors.append('Mobile number is required')
    elif not MOBILE_RE.match(mobile_no):
        errors.append('Mobile number must be exactly 10 digits')

    cleaned = {'name': name, 'email': email, 'password': password, 'mobile_no': mobile_no}
    return cleaned, errors


def validate_otp_submission(data):
    errors = []
    token = clean_str(data.get('tempUserId'))
    email_otp = clean_str(data.get('emailOtp'))
    mobile_otp = clean_str(data.get('mobileOtp'))

    if not token:
        errors.append('Temp User ID is required')
    for label, value in (('Email OTP', email_otp), ('Mobile OTP', mobile_otp)):
        if not value:
            errors.append(f'{label} is required')
        elif not OTP_RE.match(value):
            errors.append(f'{label} must be 6 digits')

    return {'token': token, 'email_otp': email_otp, 'mobile_otp': mobile_otp}, errors


def validate_login(data):
    errors = []
    email = (clean_str(data.get('email')) or '').lower()
    password = data.get('password') or ''
    if not validate_email(email):
        errors.append('Invalid email')
    if not password:
        errors.append('Password is required')
    elif not isinstance(password, str):
        errors.append('Password must be a string')

    latitude = longitude = None
    if clean_str(data.get('latitude')) is not None:
        latitude = parse_float(data.get('latitude'))
        if latitude is None or not -90 <= latitude <= 90:
            errors.append('Invalid latitude')
    if clean_str(data.get('longitude')) is not None:
        longitude = parse_float(data.get('longitude'))
        if longitude is None or not -180 <= longitude <= 180:
            errors.append('Invalid longitude')

    cleaned = {'email': email, 'password': password, 'latitude': latitude, 'longitude': longitude}
    return cleaned, errors


# ---------- Messaging ----------

def validate_msg_api(data):
    errors = []
    cleaned = {
        'api_name': _required_text(data, 'api_name', 'API name', 150, errors),
        'api_type': _choice(data.get('api_type'), API_TYPES, 'API type', errors),
        'base_url': _required_text(data, 'base_url', 'Base URL', 500, errors),
        'params': clean_str(data.get('params')),
        'method': _choice(data.get('method'), HTTP_METHODS, 'Method', errors),
        'status': validate_status(data.get('status'), errors),
    }
    if cleaned['base_url']:
        parsed = urlparse(cleaned['base_url'])
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            errors.append('Base URL must be a valid http(s) URL')
    return cleaned, errors


MSG_CONTENT_TEXT_FIELDS = ('sms_content', 'whatsapp_content', 'mail_content', 'notification_content')
MSG_CONTENT_FLAG_DEFAULTS = {
    'send_sms': 'Yes',
    'send_whatsapp': 'Yes',
    'send_email': 'Yes',
    'send_notification': 'No',
}


def validate_msg_content(data):
    errors = []
    cleaned = {'message_type': _required_text(data, 'message_type', 'Message type', 100, errors)}
    for flag, default in MSG_CONTENT_FLAG_DEFAULTS.items():
        if clean_str(data.get(flag)) is None:
            cleaned[flag] = default
        else:
            cleaned[flag] = _choice(data.get(flag), YES_NO, flag, errors)
    for field in ('sms_template_id', 'mail_subject', 'notification_title', 'keywords'):
        cleaned[field] = clean_str(data.get(field))
    for field in MSG_CONTENT_TEXT_FIELDS:
        cleaned[field] = clean_str(data.get(field))
    if not any(cleaned[field] for field in MSG_CONTENT_TEXT_FIELDS):
        errors.append('At least one of sms, whatsapp, mail or notification content is required')
    cleaned['status'] = validate_status(data.get('status'), errors, required=False) or 'Active'
    return cleaned, errors


def validate_msg_signature(data):
    errors = []
    cleaned = {
        'signature': _required_text(data, 'signature', 'Signature text', 255, errors),
        'signature_type': _choice(data.get('signature_type'), SIGNATURE_TYPES, 'Signature type', errors),
        'status': validate_status(data.get('status'), errors),
    }
    return cleaned, errors


# ---------- Product management ----------

def validate_category(data):
    errors = []
    cleaned = {
        'name': _required_text(data, 'name', 'Category name', 100, errors),
        'status': validate_status(data.get('status'), errors),
    }
    return cleaned, errors


def validate_product(data):
    errors = []
    description = clean_str(data.get('description')) or ''
    if len(description) > 1000:
        errors.append('Description must be at most 1000 characters')
    cleaned = {
        'category_id': _positive_int(data, 'category_id', 'Category ID', errors),
        'name': _required_text(data, 'name', 'Product name', 150, errors),
        'description': description,
        'status': validate_status(data.get('status'), errors),
    }
    return cleaned, errors


def validate_product_price(data):
    errors = []
    price = parse_float(data.get('price'))
    if clean_str(data.get('price')) is None:
        errors.append('Price is required')
    elif price is None or not math.isfinite(price) or price <= 0:
        errors.append('Price must be a positive number')
    cleaned = {
        'product_id': _positive_int(data, 'product_id', 'Product ID', errors),
        'price': price,
        'currency': _choice(data.get('currency'), CURRENCIES, 'Currency', errors),
    }
    return cleaned, errors


def validate_service_switching(data):
    errors = []
    cleaned = {
        'api_id': _positive_int(data, 'api_id', 'API ID', errors),
        'product_id': _positive_int(data, 'product_id', 'Product ID', errors),
        'api_code': _required_text(data, 'api_code', 'API code', 50, errors),
        'flat_per': _choice(data.get('flat_per'), FLAT_PER, 'Flat/Percent', errors),
        'status': validate_status(data.get('status'), errors, required=False) or 'Active',
    }
    for field, label in (('rate', 'Rate'), ('commission_surcharge', 'Commission/Surcharge'),
                         ('gst', 'GST'), ('tds', 'TDS')):
        value = parse_float(data.get(field, 0))
        if value is None or not math.isfinite(value) or value < 0:
            errors.append(f'{label} must be a non-negative number')
        cleaned[field] = value
    txn_limit = parse_int(data.get('txn_limit', 0))
    if txn_limit is None or txn_limit < 0:
        errors.append('Transaction limit must be a non-negative integer')
    cleaned['txn_limit'] = txn_limit
    return cleaned, errors
