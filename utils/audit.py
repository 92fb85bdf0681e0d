"""
Audit trail utility functions
"""
from flask import current_app, g, has_request_context

from models import db
from models.audit_trail import AuditTrail
from utils.helpers import get_client_ip, get_request_data, parse_float


def _request_context():
    """Actor id, client IP and optional coordinates of the current request."""
    if not has_request_context():
        return None, None, None, None

    claims = getattr(g, 'current_user', None) or {}
    data = get_request_data()
    return (
        claims.get('id'),
        get_client_ip(),
        parse_float(data.get('latitude')),
        parse_float(data.get('longitude')),
    )


def log_audit_trail(table_name, row_id, action, remark, status=None):
    """
    Append one audit row after the primary change has been committed.

    Args:
        table_name: table the change applied to
        row_id: primary key of the changed row
        action: 'create', 'update', 'delete' or 'status_change'
        remark: human-readable description
        status: status label recorded with the entry

    Returns:
        AuditTrail object or None if the insert failed (never raises)
    """
    try:
        created_by, ip_address, latitude, longitude = _request_context()
        entry = AuditTrail(
            table_name=table_name,
            row_id=row_id,
            action=action,
            created_by=created_by,
            ip_address=ip_address,
            latitude=latitude,
            longitude=longitude,
            remark=remark[:500] if remark else remark,
            status=status,
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to write audit trail for {table_name}#{row_id}: {str(e)}", exc_info=True)
        return None
