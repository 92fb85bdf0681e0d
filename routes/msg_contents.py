"""
Message content template routes
"""
from flask import Blueprint, current_app
from sqlalchemy import func, or_

from models import db
from models.messaging import MsgContent
from routes.auth import token_required
from utils.audit import log_audit_trail
from utils.crud import apply_changes, change_status, delete_record, has_changes
from utils.helpers import get_request_data
from utils.pagination import filter_value, page, read_list_params
from utils.responses import duplicate, failed, no_changes, not_found, ok, paginated, validation_error
from utils.serial import get_next_serial
from utils.validators import validate_msg_content

msg_contents_bp = Blueprint('msg_contents', __name__, url_prefix='/msg-contents')

TABLE = 'msg_contents'


def _find_duplicate(message_type, exclude_id=None):
    query = MsgContent.query.filter(func.lower(MsgContent.message_type) == message_type.lower())
    if exclude_id is not None:
        query = query.filter(MsgContent.id != exclude_id)
    return query.first()


@msg_contents_bp.route('/add', methods=['POST'])
@token_required
def add_msg_content():
    cleaned, errors = validate_msg_content(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        if _find_duplicate(cleaned['message_type']):
            return duplicate(f"Message type '{cleaned['message_type']}' already exists")

        content = MsgContent(serial_no=get_next_serial(MsgContent), **cleaned)
        db.session.add(content)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding msg content: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, content.id, 'create', f"Created message content {content.message_type}", content.status)
    return ok('Message content added successfully', data=content.to_dict())


@msg_contents_bp.route('/get-list', methods=['GET', 'POST'])
@token_required
def list_msg_contents():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = MsgContent.query
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(MsgContent.status) == status.lower())
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                MsgContent.message_type.ilike(pattern),
                MsgContent.keywords.ilike(pattern),
                MsgContent.mail_subject.ilike(pattern),
            ))

        records_total = MsgContent.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(MsgContent.serial_no.asc(), MsgContent.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing msg contents: {str(e)}", exc_info=True)
        return failed()

    return paginated('Message content list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@msg_contents_bp.route('/byid/<int:content_id>', methods=['GET'])
@token_required
def get_msg_content(content_id):
    content = db.session.get(MsgContent, content_id)
    if not content:
        return not_found('Message content not found')
    return ok('Message content fetched successfully', data=content.to_dict())


@msg_contents_bp.route('/update/<int:content_id>', methods=['PUT'])
@token_required
def update_msg_content(content_id):
    cleaned, errors = validate_msg_content(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        content = db.session.get(MsgContent, content_id)
        if not content:
            return not_found('Message content not found')
        if _find_duplicate(cleaned['message_type'], exclude_id=content_id):
            return duplicate(f"Message type '{cleaned['message_type']}' already exists")
        if not has_changes(content, cleaned):
            return no_changes()

        apply_changes(content, cleaned)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating msg content {content_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, content_id, 'update', f"Updated message content {content.message_type}", content.status)
    return ok('Message content updated successfully', data=content.to_dict())


@msg_contents_bp.route('/delete/<int:content_id>', methods=['DELETE'])
@token_required
def delete_msg_content(content_id):
    content = db.session.get(MsgContent, content_id)
    if not content:
        return not_found('Message content not found')
    return delete_record(MsgContent, content, TABLE, 'Message content',
                         f"Deleted message content {content.message_type}")


@msg_contents_bp.route('/change-status/<int:content_id>', methods=['POST'])
@token_required
def change_msg_content_status(content_id):
    return change_status(MsgContent, content_id, TABLE, 'Message content')
