"""
Authentication routes: register, OTP verification, login, plus the bearer-token guard
"""
from datetime import datetime, timedelta
from functools import wraps

from flask import Blueprint, current_app, g, request

from models import db
from models.user import User, TempUser
from models.wallet import Wallet
from models.login_history import LoginHistory
from models.otp_verification import OtpVerification
from utils.auth_utils import hash_password, decode_token, generate_access_token
from utils.helpers import (
    describe_user_agent, get_client_ip, get_request_data, mask_email, mask_mobile,
)
from utils.otp_helper import find_otp, issue_otp
from utils.responses import (
    ResponseCode, api_response, duplicate, failed, not_found, ok, validation_error,
)
from utils.validators import validate_login, validate_otp_submission, validate_registration
from utils.verification_token import create_registration_token, verify_registration_token

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

ALLOWED_LOGIN_ROLES = ('user', 'admin')


def token_required(f):
    """Require a valid bearer access token; claims are exposed as g.current_user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        parts = header.split(' ', 1)
        token = parts[1].strip() if len(parts) == 2 and parts[0].lower() == 'bearer' else None
        if not token:
            return api_response('No token provided', 401, success=False, code=ResponseCode.FAILED)

        claims = decode_token(token)
        # registration tokens share the signing key but are not access tokens
        if not claims or claims.get('purpose') or not claims.get('id'):
            return api_response('Token expired or invalid', 401, success=False, code=ResponseCode.FAILED)

        g.current_user = claims
        return f(*args, **kwargs)
    return decorated_function


def _cleanup_expired_registrations():
    """Drop pending registrations older than TEMP_USER_TTL_HOURS together with their OTP rows."""
    ttl_hours = current_app.config.get('TEMP_USER_TTL_HOURS', 24)
    cutoff = datetime.utcnow() - timedelta(hours=ttl_hours)
    stale_ids = [row.id for row in TempUser.query.filter(TempUser.created_at < cutoff).all()]
    if not stale_ids:
        return
    OtpVerification.query.filter(OtpVerification.user_id.in_(stale_ids)).delete(synchronize_session=False)
    TempUser.query.filter(TempUser.id.in_(stale_ids)).delete(synchronize_session=False)
    db.session.commit()
    current_app.logger.info("Purged %d expired pending registrations", len(stale_ids))


@auth_bp.route('/register', methods=['POST'])
def register():
    """Stage a registration and send email + mobile OTPs"""
    data = get_request_data()
    cleaned, errors = validate_registration(data)
    if errors:
        return validation_error(errors[0])

    email = cleaned['email']
    try:
        _cleanup_expired_registrations()

        if User.query.filter_by(email=email).first() or TempUser.query.filter_by(email=email).first():
            return duplicate('Email already registered or pending verification')

        temp_user = TempUser(
            name=cleaned['name'],
            email=email,
            mobile_no=cleaned['mobile_no'],
            password=hash_password(cleaned['password']),
            is_email_verified=False,
            is_mobile_verified=False,
        )
        db.session.add(temp_user)
        db.session.flush()

        issue_otp(temp_user.email, 'email', temp_user.id)
        issue_otp(temp_user.mobile_no, 'mobile', temp_user.id)
        db.session.commit()

        return ok('OTP sent for email and mobile verification', data={
            'tempUserId': create_registration_token(temp_user),
            'email': mask_email(temp_user.email),
            'mobile': mask_mobile(temp_user.mobile_no),
        })
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Register error for {email}: {str(e)}", exc_info=True)
        return failed()


def _check_otp(temp_user_id, channel, label, plain_otp, now):
    """Returns (otp_row, error_message)."""
    row = find_otp(temp_user_id, channel, plain_otp)
    if row is None:
        return None, f'Invalid {label} OTP'
    if row.is_expired(now):
        return None, f'{label} OTP expired'
    if row.is_verified:
        return None, f'{label} OTP already verified'
    return row, None


@auth_bp.route('/verify-otp', methods=['POST'])
def verify_otp():
    """Verify both OTPs and promote the pending registration to a User with a Wallet"""
    data = get_request_data()
    cleaned, errors = validate_otp_submission(data)
    if errors:
        return validation_error(errors[0])

    identity = verify_registration_token(cleaned['token'])
    if not identity:
        return api_response('Invalid or expired temp user token', 400, success=False,
                            code=ResponseCode.FAILED)
    temp_user_id, token_email = identity
    now = datetime.utcnow()

    try:
        temp_user = db.session.get(TempUser, temp_user_id)
        if temp_user is None or temp_user.email != token_email:
            if User.query.filter_by(email=token_email).first():
                return ok('User already verified')
            return not_found('Temporary user not found')

        email_row, error = _check_otp(temp_user.id, 'email', 'Email', cleaned['email_otp'], now)
        if error:
            return api_response(error, 400, success=False, code=ResponseCode.VALIDATION_ERROR)
        mobile_row, error = _check_otp(temp_user.id, 'mobile', 'Mobile', cleaned['mobile_otp'], now)
        if error:
            return api_response(error, 400, success=False, code=ResponseCode.VALIDATION_ERROR)

        if User.query.filter_by(email=temp_user.email).first():
            return duplicate('User already verified')

        email_row.is_verified = True
        mobile_row.is_verified = True

        user = User(
            name=temp_user.name,
            email=temp_user.email,
            mobile_no=temp_user.mobile_no,
            password=temp_user.password,
            role='user',
            status='active',
            otp_status='verified',
        )
        db.session.add(user)
        db.session.flush()

        validity_days = current_app.config.get('WALLET_VALIDITY_DAYS', 365)
        db.session.add(Wallet(
            user_id=user.id,
            balance=0,
            lien_balance=0,
            free_balance=current_app.config.get('WALLET_FREE_BALANCE', 100),
            balance_expire_at=now + timedelta(days=validity_days),
        ))
        db.session.delete(temp_user)
        db.session.commit()

        current_app.logger.info("Registration completed for user %s", user.id)
        return ok(
            f"User verified and registered successfully using "
            f"{mask_mobile(user.mobile_no)} and {mask_email(user.email)}",
            data=user.to_dict(),
        )
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"OTP verification error: {str(e)}", exc_info=True)
        return failed()


def _record_login(user, status, agent, latitude, longitude):
    _, device, operating_system, browser = agent
    db.session.add(LoginHistory(
        user_id=user.id,
        device=device[:100],
        operating_system=operating_system[:100],
        browser=browser[:100],
        ip_address=get_client_ip(),
        latitude=latitude,
        longitude=longitude,
        status=status,
        user_agent=(request.headers.get('User-Agent') or '')[:512],
    ))


@auth_bp.route('/login', methods=['POST'])
def login():
    """Password login returning a bearer token"""
    data = get_request_data()
    cleaned, errors = validate_login(data)
    if errors:
        return validation_error(errors[0])

    agent = describe_user_agent(request.headers.get('User-Agent'))
    if agent[0]:
        return api_response('Unidentified User Agent', 400, success=False, code=ResponseCode.FAILED)

    email = cleaned['email']
    try:
        temp_user = TempUser.query.filter_by(email=email).first()
        if temp_user:
            if not temp_user.is_mobile_verified:
                channel, receiver, masked = 'mobile', temp_user.mobile_no, mask_mobile(temp_user.mobile_no)
            else:
                channel, receiver, masked = 'email', temp_user.email, mask_email(temp_user.email)
            issue_otp(receiver, channel, temp_user.id)
            db.session.commit()
            return api_response(
                f'{channel.capitalize()} verification pending',
                success=False,
                code=ResponseCode.VERIFICATION_PENDING,
                verify=channel,
                info=masked,
            )

        user = User.query.filter_by(email=email).first()
        if not user:
            return not_found('Invalid email address')

        if not user.check_password(cleaned['password']):
            _record_login(user, 'Failed', agent, cleaned['latitude'], cleaned['longitude'])
            db.session.commit()
            return api_response('Incorrect password', 401, success=False, code=ResponseCode.FAILED)

        if user.role not in ALLOWED_LOGIN_ROLES:
            return api_response('Unauthorized role', 403, success=False, code=ResponseCode.FAILED)
        if user.status != 'active':
            return api_response('Account not active', 403, success=False, code=ResponseCode.FAILED)

        token = generate_access_token(user)
        _record_login(user, 'Success', agent, cleaned['latitude'], cleaned['longitude'])
        db.session.commit()

        return ok('Login successful', data={'token': token, 'user': user.to_dict()})
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Login error for {email}: {str(e)}", exc_info=True)
        return failed()
