"""
Service switching routes: which gateway API serves which product, at what rate
"""
from flask import Blueprint, current_app
from sqlalchemy import func, or_

from models import db
from models.messaging import MsgApi
from models.product import Product
from models.service_switching import ServiceSwitching
from routes.auth import token_required
from utils.audit import log_audit_trail
from utils.crud import apply_changes, change_status, delete_record, has_changes
from utils.helpers import get_request_data, parse_int
from utils.pagination import filter_value, page, read_list_params
from utils.responses import duplicate, failed, no_changes, not_found, ok, paginated, validation_error
from utils.serial import get_next_serial
from utils.validators import validate_service_switching

service_switchings_bp = Blueprint('service_switchings', __name__, url_prefix='/service-switchings')

TABLE = 'service_switchings'


def _check_references(cleaned):
    """404 response when the API or product does not exist, else None."""
    if not db.session.get(MsgApi, cleaned['api_id']):
        return not_found('API not found')
    if not db.session.get(Product, cleaned['product_id']):
        return not_found('Product not found')
    return None


def _find_duplicate(api_id, product_id, exclude_id=None):
    query = ServiceSwitching.query.filter_by(api_id=api_id, product_id=product_id)
    if exclude_id is not None:
        query = query.filter(ServiceSwitching.id != exclude_id)
    return query.first()


@service_switchings_bp.route('/add', methods=['POST'])
@token_required
def add_service_switching():
    cleaned, errors = validate_service_switching(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        missing = _check_references(cleaned)
        if missing:
            return missing
        if _find_duplicate(cleaned['api_id'], cleaned['product_id']):
            return duplicate('Service switching already exists for this API and product')

        switching = ServiceSwitching(serial_no=get_next_serial(ServiceSwitching), **cleaned)
        db.session.add(switching)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding service switching: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, switching.id, 'create',
                    f"Mapped API {switching.api_id} to product {switching.product_id}", switching.status)
    return ok('Service switching added successfully', data=switching.to_dict())


@service_switchings_bp.route('/get-list', methods=['GET', 'POST'])
@token_required
def list_service_switchings():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = (
            ServiceSwitching.query
            .join(MsgApi, ServiceSwitching.api_id == MsgApi.id)
            .join(Product, ServiceSwitching.product_id == Product.id)
        )
        api_id = parse_int(filter_value(data, 'api_id'))
        if api_id:
            query = query.filter(ServiceSwitching.api_id == api_id)
        product_id = parse_int(filter_value(data, 'product_id'))
        if product_id:
            query = query.filter(ServiceSwitching.product_id == product_id)
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(ServiceSwitching.status) == status.lower())
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                ServiceSwitching.api_code.ilike(pattern),
                MsgApi.api_name.ilike(pattern),
                Product.name.ilike(pattern),
            ))

        records_total = ServiceSwitching.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(ServiceSwitching.serial_no.asc(), ServiceSwitching.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing service switchings: {str(e)}", exc_info=True)
        return failed()

    return paginated('Service switching list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@service_switchings_bp.route('/byid/<int:switching_id>', methods=['GET'])
@token_required
def get_service_switching(switching_id):
    switching = db.session.get(ServiceSwitching, switching_id)
    if not switching:
        return not_found('Service switching not found')
    return ok('Service switching fetched successfully', data=switching.to_dict())


@service_switchings_bp.route('/update/<int:switching_id>', methods=['PUT'])
@token_required
def update_service_switching(switching_id):
    cleaned, errors = validate_service_switching(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        switching = db.session.get(ServiceSwitching, switching_id)
        if not switching:
            return not_found('Service switching not found')
        missing = _check_references(cleaned)
        if missing:
            return missing
        if _find_duplicate(cleaned['api_id'], cleaned['product_id'], exclude_id=switching_id):
            return duplicate('Service switching already exists for this API and product')
        if not has_changes(switching, cleaned):
            return no_changes()

        apply_changes(switching, cleaned)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating service switching {switching_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(TABLE, switching_id, 'update',
                    f"Updated switching of API {switching.api_id} for product {switching.product_id}",
                    switching.status)
    return ok('Service switching updated successfully', data=switching.to_dict())


@service_switchings_bp.route('/delete/<int:switching_id>', methods=['DELETE'])
@token_required
def delete_service_switching(switching_id):
    switching = db.session.get(ServiceSwitching, switching_id)
    if not switching:
        return not_found('Service switching not found')
    return delete_record(ServiceSwitching, switching, TABLE, 'Service switching',
                         f"Removed API {switching.api_id} from product {switching.product_id}")


@service_switchings_bp.route('/change-status/<int:switching_id>', methods=['POST'])
@token_required
def change_service_switching_status(switching_id):
    return change_status(ServiceSwitching, switching_id, TABLE, 'Service switching')
