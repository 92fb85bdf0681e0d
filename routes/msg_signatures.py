"""
SMS / WhatsApp sender signature routes
"""
from flask import Blueprint, current_app
from sqlalchemy import func

from models import db
from models.messaging import MsgSignature
from routes.auth import token_required
from utils.audit import log_audit_trail
from utils.crud import apply_changes, change_status, delete_record, has_changes
from utils.helpers import get_request_data
from utils.pagination import filter_value, page, read_list_params
from utils.responses import duplicate, failed, no_changes, not_found, ok, paginated, validation_error
from utils.serial import get_next_serial
from utils.validators import validate_msg_signature

msg_signatures_bp = Blueprint('msg_signatures', __name__, url_prefix='/msg-signatures')

TABLE = 'msg_signatures'


def _find_duplicate(signature, signature_type, exclude_id=None):
    query = MsgSignature.query.filter(
        func.lower(MsgSignature.signature) == signature.lower(),
        MsgSignature.signature_type == signature_type,
    )
    if exclude_id is not None:
        query = query.filter(MsgSignature.id != exclude_id)
    return query.first()


@msg_signatures_bp.route('/add', methods=['POST'])
@token_required
def add_msg_signature():
    cleaned, errors = validate_msg_signature(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        if _find_duplicate(cleaned['signature'], cleaned['signature_type']):
            return duplicate('Signature already exists for this type')

        signature = MsgSignature(serial_no=get_next_serial(MsgSignature), **cleaned)
        db.session.add(signature)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding msg signature: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, signature.id, 'create',
                    f"Created {signature.signature_type} signature {signature.signature}", signature.status)
    return ok('Signature added successfully', data=signature.to_dict())


@msg_signatures_bp.route('/get-list', methods=['GET', 'POST'])
@token_required
def list_msg_signatures():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = MsgSignature.query
        signature_type = filter_value(data, 'signature_type')
        if signature_type:
            query = query.filter(MsgSignature.signature_type == signature_type.lower())
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(MsgSignature.status) == status.lower())
        if search:
            query = query.filter(MsgSignature.signature.ilike(f"%{search}%"))

        records_total = MsgSignature.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(MsgSignature.serial_no.asc(), MsgSignature.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing msg signatures: {str(e)}", exc_info=True)
        return failed()

    return paginated('Signature list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@msg_signatures_bp.route('/byid/<int:signature_id>', methods=['GET'])
@token_required
def get_msg_signature(signature_id):
    signature = db.session.get(MsgSignature, signature_id)
    if not signature:
        return not_found('Signature not found')
    return ok('Signature fetched successfully', data=signature.to_dict())


@msg_signatures_bp.route('/update/<int:signature_id>', methods=['PUT'])
@token_required
def update_msg_signature(signature_id):
    cleaned, errors = validate_msg_signature(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        signature = db.session.get(MsgSignature, signature_id)
        if not signature:
            return not_found('Signature not found')
        if _find_duplicate(cleaned['signature'], cleaned['signature_type'], exclude_id=signature_id):
            return duplicate('Signature already exists for this type')
        if not has_changes(signature, cleaned):
            return no_changes()

        apply_changes(signature, cleaned)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating msg signature {signature_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, signature_id, 'update', f"Updated signature {signature.signature}", signature.status)
    return ok('Signature updated successfully', data=signature.to_dict())


@msg_signatures_bp.route('/delete/<int:signature_id>', methods=['DELETE'])
@token_required
def delete_msg_signature(signature_id):
    signature = db.session.get(MsgSignature, signature_id)
    if not signature:
        return not_found('Signature not found')
    return delete_record(MsgSignature, signature, TABLE, 'Signature',
                         f"Deleted signature {signature.signature}")


@msg_signatures_bp.route('/change-status/<int:signature_id>', methods=['POST'])
@token_required
def change_msg_signature_status(signature_id):
    return change_status(MsgSignature, signature_id, TABLE, 'Signature')
