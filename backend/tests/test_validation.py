"""
DeviceLab Backend — Validation Helper Unit Tests
==================================================

What:  Tests for identifier shape, name, IPv4 and state rules.
How:   Pure functions; no store involved.
"""

import pytest

from app.database import is_object_id, new_object_id
from app.exceptions import InvalidIdFormatError, ValidationError
from app.services.validation import clean_ip, clean_name, clean_state, ensure_object_id


class TestObjectIds:
    """Tests for identifier generation and shape checks."""

    def test_new_object_id_shape(self):
        """A generated id should be 24 hex characters."""
        value = new_object_id()
        assert len(value) == 24
        assert is_object_id(value)

    def test_new_object_ids_are_unique(self):
        """Ids generated back to back should not collide."""
        assert len({new_object_id() for _ in range(200)}) == 200

    def test_uppercase_hex_accepted(self):
        """Uppercase hex digits should pass the shape check."""
        assert is_object_id("ABCDEF0123456789abcdef01")

    @pytest.mark.parametrize("value", ["", "123", "zzzzzzzzzzzzzzzzzzzzzzzz", "a" * 25, None, 12345])
    def test_malformed_ids_rejected(self, value):
        """Wrong length, non-hex and non-string values should fail."""
        assert not is_object_id(value)

    def test_ensure_object_id_message(self):
        """The error message should name the resource."""
        with pytest.raises(InvalidIdFormatError, match="Invalid device ID format"):
            ensure_object_id("not-an-id", "device")


class TestNames:
    """Tests for name trimming and the length limit."""

    def test_name_is_trimmed(self):
        """Surrounding whitespace should be removed."""
        errors = []
        assert clean_name("  Hub  ", "Device", errors) == "Hub"
        assert errors == []

    def test_blank_name_is_missing(self):
        """A whitespace-only name counts as missing."""
        errors = []
        assert clean_name("   ", "Scene", errors) is None
        assert errors == ["Scene name is required"]

    def test_exactly_100_characters_allowed(self):
        """The limit itself is allowed."""
        errors = []
        assert clean_name("x" * 100, "Test", errors) == "x" * 100
        assert errors == []

    def test_101_characters_rejected(self):
        """One past the limit should be rejected."""
        errors = []
        clean_name("x" * 101, "Test", errors)
        assert errors == ["Test name cannot exceed 100 characters"]

    def test_length_checked_after_trimming(self):
        """Padding should not count toward the limit."""
        errors = []
        assert clean_name("  " + "x" * 100 + "  ", "Device", errors) == "x" * 100
        assert errors == []


class TestIpAddresses:
    """Tests for the IPv4 dotted-quad rule."""

    @pytest.mark.parametrize("ip", ["0.0.0.0", "192.168.1.20", "255.255.255.255", "10.0.0.01"])
    def test_valid_addresses(self, ip):
        """Octets from 0 to 255 should be accepted."""
        errors = []
        assert clean_ip(ip, errors) == ip
        assert errors == []

    @pytest.mark.parametrize("ip", ["256.1.1.1", "1.2.3", "1.2.3.4.5", "a.b.c.d", "192.168.1.-1"])
    def test_invalid_addresses(self, ip):
        """Out-of-range octets and wrong shapes should be rejected."""
        errors = []
        assert clean_ip(ip, errors) is None
        assert errors == ["Please enter a valid IP address"]

    def test_address_is_trimmed(self):
        """Surrounding whitespace should be removed."""
        errors = []
        assert clean_ip(" 10.1.1.1 ", errors) == "10.1.1.1"


class TestStates:
    """Tests for the test state enum."""

    def test_missing_state_defaults_to_inactive(self):
        """No state means inactive."""
        assert clean_state(None, []) == "inactive"

    def test_unknown_state_rejected(self):
        """Anything outside active/inactive should be rejected."""
        errors = []
        clean_state("running", errors)
        assert errors == ["State must be one of: active, inactive"]


def test_validation_errors_are_aggregated():
    """Several problems should be joined into one message."""
    exc = ValidationError.from_errors(["Device name is required", "Please enter a valid IP address"])
    assert exc.message == "Validation error: Device name is required, Please enter a valid IP address"
    assert exc.context["errors"] == ["Device name is required", "Please enter a valid IP address"]
