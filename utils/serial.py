"""
Display-order serial numbers for listing tables.
Neither helper locks the table: concurrent adds can race to the same serial.
"""
from sqlalchemy import func

from models import db


def get_next_serial(model):
    """max(serial_no) + 1, or 1 on an empty table."""
    current = db.session.query(func.max(model.serial_no)).scalar()
    return (current or 0) + 1


def reorder_serials(model):
    """
    Rewrite serial_no as 1..N keeping the existing order (rows without a serial go last).
    Flushes only, the caller commits. O(n) over the whole table.
    """
    rows = (
        model.query
        .order_by(model.serial_no.is_(None), model.serial_no.asc(), model.id.asc())
        .all()
    )
    for position, row in enumerate(rows, start=1):
        if row.serial_no != position:
            row.serial_no = position
    db.session.flush()
