"""
Shared steps of the catalog endpoints: change detection, status toggles and serial-aware deletes
"""
from decimal import Decimal

from flask import current_app

from models import db
from utils.audit import log_audit_trail
from utils.helpers import get_request_data
from utils.responses import failed, not_found, ok, validation_error
from utils.serial import reorder_serials
from utils.validators import validate_status


def _same(current, new):
    if isinstance(current, Decimal) or isinstance(new, Decimal):
        if current is None or new is None:
            return current is new
        return float(current) == float(new)
    return current == new


def has_changes(record, values):
    """True when any value differs from what the record holds."""
    return any(not _same(getattr(record, field), value) for field, value in values.items())


def apply_changes(record, values):
    for field, value in values.items():
        setattr(record, field, value)


def change_status(model, record_id, table_name, label):
    """POST /change-status/<id> handler body shared by every entity with a status column."""
    errors = []
    status = validate_status(get_request_data().get('status'), errors)
    if errors:
        return validation_error(errors[0])

    try:
        record = db.session.get(model, record_id)
        if record is None:
            return not_found(f'{label} not found')
        if record.status == status:
            return ok(f'{label} is already {status}', data=record.to_dict())

        record.status = status
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Status change failed for {table_name}#{record_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(table_name, record_id, 'status_change', f'{label} status changed to {status}', status)
    return ok(f'{label} status updated successfully', data=record.to_dict())


def delete_record(model, record, table_name, label, remark=None, cascaded=()):
    """
    Delete, renumber the remaining serials and audit. Reference checks happen in the caller.
    cascaded lists serial-tracked models whose rows go with the record.
    """
    record_id = record.id
    try:
        db.session.delete(record)
        db.session.flush()
        for related in (model,) + tuple(cascaded):
            reorder_serials(related)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Delete failed for {table_name}#{record_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(table_name, record_id, 'delete', remark or f'{label} deleted', 'Deleted')
    return ok(f'{label} deleted successfully')
