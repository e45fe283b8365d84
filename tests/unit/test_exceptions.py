"""Unit tests for certgen exception classes"""

import pytest
from certgen.exceptions import (
    CertgenError,
    ConfigSourceError,
    InvalidOverrideError,
    SlotValidationError
)


class TestCertgenError:
    """Test base CertgenError exception class"""

    def test_basic_error_message(self):
        """Test error with message only"""
        error = CertgenError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.help_text is None
        assert str(error) == "Something went wrong"

    def test_error_with_help_text(self):
        """Test error with message and help text"""
        error = CertgenError(
            "Something went wrong",
            help_text="Try running 'certgen keys' first"
        )

        assert error.help_text == "Try running 'certgen keys' first"
        assert "Help: Try running 'certgen keys' first" in str(error)

    def test_error_is_exception(self):
        """Test that CertgenError is a proper Exception"""
        assert isinstance(CertgenError("test"), Exception)


class TestConfigSourceError:
    """Test ConfigSourceError exception class"""

    def test_carries_path_and_reason(self):
        """Test path and reason are kept and shown"""
        error = ConfigSourceError("/etc/certgen.yaml", "file not found")

        assert error.path == "/etc/certgen.yaml"
        assert error.reason == "file not found"
        assert "/etc/certgen.yaml" in error.message
        assert "file not found" in error.message
        assert "certgen keys" in error.help_text

    def test_is_certgen_error(self):
        assert isinstance(ConfigSourceError("x", "y"), CertgenError)


class TestInvalidOverrideError:
    """Test InvalidOverrideError exception class"""

    def test_message_mentions_raw_value(self):
        error = InvalidOverrideError("ca-generate")

        assert error.raw == "ca-generate"
        assert "ca-generate" in error.message
        assert "key=value" in error.message
        assert "--set" in error.help_text


class TestSlotValidationError:
    """Test SlotValidationError exception class"""

    def test_single_problem(self):
        """Test singular wording for one problem"""
        error = SlotValidationError(["Cilium CA: ca-common-name is empty"])

        assert error.problems == ["Cilium CA: ca-common-name is empty"]
        assert "1 problem:" in error.message
        assert "  - Cilium CA: ca-common-name is empty" in error.message

    def test_multiple_problems_with_source_hint(self):
        """Test plural wording and source hint in help text"""
        error = SlotValidationError(
            ["first", "second"],
            source_hint="overrides > defaults"
        )

        assert "2 problems:" in error.message
        assert "overrides > defaults" in error.help_text

    def test_is_certgen_error(self):
        with pytest.raises(CertgenError):
            raise SlotValidationError(["x"])
