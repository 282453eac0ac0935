"""
Form data scrubbing for debug logs.

The login and user forms carry passwords and every POST carries a CSRF
token; none of those may end up in logs/stockplus.log. Free-text fields
such as transaction notes are clipped so a pasted paragraph does not
flood the log.
"""

from typing import Any, Dict, Mapping, Optional

from werkzeug.datastructures import MultiDict

REDACTED = '[REDACTED]'

# Exact field names posted by the stockplus forms
SENSITIVE_FIELDS = frozenset({
    'password',
    'confirm_password',
    'csrf_token',
    'remember_token',
    'secret_key',
    'session_id',
})

# Any other key containing one of these is treated as sensitive too
SENSITIVE_MARKERS = ('password', 'token', 'secret')

MAX_VALUE_LENGTH = 200


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return lowered in SENSITIVE_FIELDS or any(marker in lowered for marker in SENSITIVE_MARKERS)


def _clip(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
        return f"{value[:MAX_VALUE_LENGTH]}... ({len(value)} chars)"
    return value


def sanitize_dict(data: Optional[Mapping[str, Any]], redact_text: str = REDACTED) -> Optional[Dict[str, Any]]:
    """
    Copy of ``data`` safe to put in a log line.

    >>> sanitize_dict({'username': 'manager', 'password': 'StockPlus2024'})
    {'username': 'manager', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    clean = {}
    for key, value in data.items():
        if is_sensitive(key):
            clean[key] = redact_text
        elif isinstance(value, Mapping):
            clean[key] = sanitize_dict(value, redact_text)
        elif isinstance(value, (list, tuple)):
            clean[key] = [_clip(v) for v in value]
        else:
            clean[key] = _clip(value)
    return clean


def sanitize_form_data(form_data: MultiDict, redact_text: str = REDACTED) -> Dict[str, Any]:
    """Scrub ``request.form``; repeated fields are kept as lists."""
    flat = {
        key: values[0] if len(values) == 1 else values
        for key, values in form_data.to_dict(flat=False).items()
    }
    return sanitize_dict(flat, redact_text)
