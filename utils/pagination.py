"""
List endpoint helpers: paging parameters and optional filters
"""
from utils.helpers import clean_str, parse_int

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
ALL = 'All'


def read_list_params(data):
    """
    (offset, limit, search) from a list request.
    offset is a page index, so rows skipped = offset * limit.
    """
    offset = parse_int(data.get('offset'), 0)
    if offset is None or offset < 0:
        offset = 0
    limit = parse_int(data.get('limit'), DEFAULT_LIMIT)
    if limit is None or limit <= 0:
        limit = DEFAULT_LIMIT
    limit = min(limit, MAX_LIMIT)
    search = clean_str(data.get('searchValue'))
    return offset, limit, search


def filter_value(data, key):
    """Filter value from the request; None when missing, blank or 'All'."""
    value = clean_str(data.get(key))
    if value is None or value.lower() == ALL.lower():
        return None
    return value


def page(query, offset, limit):
    """One page of an already ordered query."""
    return query.offset(offset * limit).limit(limit).all()
