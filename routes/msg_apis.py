"""
Message gateway API routes
"""
from flask import Blueprint, current_app
from sqlalchemy import func, or_

from models import db
from models.messaging import MsgApi
from models.service_switching import ServiceSwitching
from routes.auth import token_required
from utils.audit import log_audit_trail
from utils.crud import apply_changes, change_status, delete_record, has_changes
from utils.helpers import get_request_data
from utils.pagination import filter_value, page, read_list_params
from utils.responses import blocked, duplicate, failed, no_changes, not_found, ok, paginated, validation_error
from utils.serial import get_next_serial
from utils.validators import API_TYPES, validate_msg_api

msg_apis_bp = Blueprint('msg_apis', __name__, url_prefix='/msg-apis')

TABLE = 'msg_apis'


def _find_duplicate(api_name, api_type, exclude_id=None):
    query = MsgApi.query.filter(
        func.lower(MsgApi.api_name) == api_name.lower(),
        MsgApi.api_type == api_type,
    )
    if exclude_id is not None:
        query = query.filter(MsgApi.id != exclude_id)
    return query.first()


@msg_apis_bp.route('/add', methods=['POST'])
@token_required
def add_msg_api():
    cleaned, errors = validate_msg_api(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        if _find_duplicate(cleaned['api_name'], cleaned['api_type']):
            return duplicate(f"API '{cleaned['api_name']}' already exists for {cleaned['api_type']}")

        msg_api = MsgApi(serial_no=get_next_serial(MsgApi), **cleaned)
        db.session.add(msg_api)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding msg api: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, msg_api.id, 'create', f"Created API {msg_api.api_name}", msg_api.status)
    return ok('API added successfully', data=msg_api.to_dict())


@msg_apis_bp.route('/get-list', methods=['GET', 'POST'])
@token_required
def list_msg_apis():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = MsgApi.query
        api_type = filter_value(data, 'api_type')
        if api_type:
            matched = [t for t in API_TYPES if t.lower() == api_type.lower()]
            query = query.filter(MsgApi.api_type == (matched[0] if matched else api_type))
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(MsgApi.status) == status.lower())
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(MsgApi.api_name.ilike(pattern), MsgApi.base_url.ilike(pattern)))

        records_total = MsgApi.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(MsgApi.serial_no.asc(), MsgApi.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing msg apis: {str(e)}", exc_info=True)
        return failed()

    return paginated('API list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@msg_apis_bp.route('/byid/<int:api_id>', methods=['GET'])
@token_required
def get_msg_api(api_id):
    msg_api = db.session.get(MsgApi, api_id)
    if not msg_api:
        return not_found('API not found')
    return ok('API fetched successfully', data=msg_api.to_dict())


@msg_apis_bp.route('/update/<int:api_id>', methods=['PUT'])
@token_required
def update_msg_api(api_id):
    cleaned, errors = validate_msg_api(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        msg_api = db.session.get(MsgApi, api_id)
        if not msg_api:
            return not_found('API not found')
        if _find_duplicate(cleaned['api_name'], cleaned['api_type'], exclude_id=api_id):
            return duplicate(f"API '{cleaned['api_name']}' already exists for {cleaned['api_type']}")
        if not has_changes(msg_api, cleaned):
            return no_changes()

        apply_changes(msg_api, cleaned)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating msg api {api_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, api_id, 'update', f"Updated API {msg_api.api_name}", msg_api.status)
    return ok('API updated successfully', data=msg_api.to_dict())


@msg_apis_bp.route('/delete/<int:api_id>', methods=['DELETE'])
@token_required
def delete_msg_api(api_id):
    msg_api = db.session.get(MsgApi, api_id)
    if not msg_api:
        return not_found('API not found')
    if ServiceSwitching.query.filter_by(api_id=api_id).count():
        return blocked('Cannot delete API with assigned service switchings')
    return delete_record(MsgApi, msg_api, TABLE, 'API', f"Deleted API {msg_api.api_name}")


@msg_apis_bp.route('/change-status/<int:api_id>', methods=['POST'])
@token_required
def change_msg_api_status(api_id):
    return change_status(MsgApi, api_id, TABLE, 'API')
