"""
Request and formatting helpers shared by the route modules
"""
from datetime import timezone
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context, request
from user_agents import parse as parse_user_agent

DEFAULT_DISPLAY_TIMEZONE = 'Asia/Kolkata'
DISPLAY_FORMAT = '%Y-%m-%d %H:%M:%S'
VALID_STATUSES = ('Active', 'Inactive')


def format_ist(value):
    """Render a naive-UTC timestamp in the display timezone, or None."""
    if not value:
        return None
    tz_name = DEFAULT_DISPLAY_TIMEZONE
    if has_app_context():
        tz_name = current_app.config.get('DISPLAY_TIMEZONE', DEFAULT_DISPLAY_TIMEZONE)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name)).strftime(DISPLAY_FORMAT)


def mask_email(email):
    local, _, domain = email.partition('@')
    return f"{local[:2]}****@{domain}"


def mask_mobile(mobile):
    return f"****{mobile[-4:]}"


def get_client_ip():
    """First hop of X-Forwarded-For when behind a proxy, else the socket address."""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


def get_request_data():
    """Body as a dict: JSON, then form (multipart uploads), then query string."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    if request.form:
        return request.form.to_dict()
    return request.args.to_dict()


def parse_int(value, default=None):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value, default=None):
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def normalize_status(value):
    """Map 'active'/'INACTIVE'/... onto the stored 'Active'/'Inactive', or None."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().capitalize()
    return candidate if candidate in VALID_STATUSES else None


def clean_str(value):
    """Strip strings; empty strings become None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def describe_user_agent(raw):
    """Parsed user agent: (is_bot, device, operating_system, browser)."""
    agent = parse_user_agent(raw or '')
    return (
        agent.is_bot,
        str(agent.device.family),
        agent.get_os(),
        agent.get_browser(),
    )
