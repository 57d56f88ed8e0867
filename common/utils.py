"""
Request parsing helpers shared by the API views.

Multipart form posts from the admin SPA send nested objects (address,
emergency contact, insurance, ...) as JSON-encoded strings; these helpers
accept either shape.
"""
import json
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import ValidationError


def parse_json_field(value, field_name, default=None):
    """Return ``value`` as a dict/list, decoding it first when it is a JSON string."""
    if value is None or value == '':
        return default
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid JSON for {field_name}")


def to_decimal(value, field_name, default=None):
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount for {field_name}")


def to_int(value, field_name, default=None):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number for {field_name}")


def parse_datetime_param(value, field_name):
    """
    Parse an ISO date or datetime string into an aware datetime.

    Plain dates resolve to midnight in the current timezone.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = parse_datetime(str(value))
            if parsed is None:
                day = parse_date(str(value))
                if day is None:
                    raise ValidationError(f"Invalid date for {field_name}")
                parsed = datetime.combine(day, time.min)
        except ValueError:
            # Well-formed but impossible, e.g. month 13
            raise ValidationError(f"Invalid date for {field_name}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def require_fields(data, fields, message='Missing Details'):
    """Raise ValidationError when any of ``fields`` is missing or blank."""
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)
