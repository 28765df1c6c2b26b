"""
DeviceLab Backend — Input Validation Helpers
==============================================

What:  Field rules shared by the device, scene and test services.
Why:   The same checks run for create, partial update and bulk create, and
       must produce the same messages wherever they fire.
How:   Each check returns the cleaned value or appends a message to an error
       list; callers raise ValidationError.from_errors() once per request so
       several problems are reported together.
"""

import re
from typing import List, Optional

from app.database import is_object_id
from app.exceptions import InvalidIdFormatError
from app.models.mixins import NAME_MAX_LENGTH
from app.models.test import STATE_INACTIVE, TEST_STATES

IPV4_PATTERN = re.compile(
    r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)


def ensure_object_id(value: str, resource: str) -> str:
    """Reject anything that is not a 24-character hex identifier."""
    if not is_object_id(value):
        raise InvalidIdFormatError(resource=resource, value=value)
    return value


def clean_name(value: Optional[str], label: str, errors: List[str]) -> Optional[str]:
    """
    Trim a display name and check it against the length rule.

    `label` is the entity name used in messages ("Device", "Scene", "Test").
    """
    if value is None or not str(value).strip():
        errors.append(f"{label} name is required")
        return None
    name = str(value).strip()
    if len(name) > NAME_MAX_LENGTH:
        errors.append(f"{label} name cannot exceed {NAME_MAX_LENGTH} characters")
        return None
    return name


def clean_ip(value: Optional[str], errors: List[str]) -> Optional[str]:
    """Trim an IPv4 address and check it is a dotted quad of 0-255 octets."""
    if value is None or not str(value).strip():
        errors.append("IP address is required")
        return None
    ip = str(value).strip()
    if not IPV4_PATTERN.match(ip):
        errors.append("Please enter a valid IP address")
        return None
    return ip


def clean_state(value: Optional[str], errors: List[str]) -> str:
    """Default a missing state to inactive; reject anything outside the enum."""
    if value is None:
        return STATE_INACTIVE
    if value not in TEST_STATES:
        errors.append(f"State must be one of: {', '.join(TEST_STATES)}")
    return value
