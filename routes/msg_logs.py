"""
Message log routes (read-only)
"""
from datetime import datetime, timedelta

from flask import Blueprint, current_app

from models.messaging import MsgLog
from routes.auth import token_required
from utils.helpers import clean_str, get_request_data
from utils.pagination import page, read_list_params
from utils.responses import failed, paginated

msg_logs_bp = Blueprint('msg_logs', __name__, url_prefix='/msg-logs')

DATE_FORMAT = '%d-%m-%Y'


def _parse_date(value):
    """DD-MM-YYYY to a datetime at midnight; None when absent or malformed."""
    value = clean_str(value)
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return None


@msg_logs_bp.route('/get-list', methods=['GET', 'POST'])
@token_required
def list_msg_logs():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    start = _parse_date(data.get('startDate'))
    end = _parse_date(data.get('endDate'))
    try:
        query = MsgLog.query
        if start:
            query = query.filter(MsgLog.created_at >= start)
        if end:
            query = query.filter(MsgLog.created_at < end + timedelta(days=1))
        if search:
            pattern = f"%{search}%"
            query = query.filter(MsgLog.numbers.ilike(pattern) | MsgLog.message.ilike(pattern))

        records_total = MsgLog.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(MsgLog.created_at.desc(), MsgLog.id.desc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing msg logs: {str(e)}", exc_info=True)
        return failed()

    return paginated('Message logs fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])
