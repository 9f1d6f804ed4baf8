"""Tests for error types and navigation message mapping."""

import pytest

from pixelcheck.errors import (
    ComparisonError,
    DecodeFailedError,
    InvalidDimensionsError,
    InvalidInputError,
    NavigationFailedError,
    RenderTimeoutError,
    ResultNotFoundError,
    friendly_navigation_message,
)


class TestFriendlyNavigationMessage:
    """Tests for mapping raw browser errors to user-facing text."""

    @pytest.mark.parametrize("raw,expected", [
        ("net::ERR_NAME_NOT_RESOLVED at https://nope.invalid/",
         "Could not resolve domain. Please check the URL."),
        ("net::ERR_CONNECTION_REFUSED at http://localhost:1/",
         "Connection refused. The server may be down."),
        ("net::ERR_CONNECTION_TIMED_OUT at https://slow.example/",
         "Connection timed out. The server is too slow to respond."),
        ("Timeout 90000ms exceeded.",
         "Page took too long to load. Try a simpler page or check your connection."),
        ("net::ERR_CERT_AUTHORITY_INVALID at https://self-signed.example/",
         "SSL certificate error. The site may have an invalid certificate."),
        ("401 Unauthorized",
         "Authentication failed. Please check username and password."),
    ])
    def test_known_errors(self, raw, expected):
        assert friendly_navigation_message(raw) == expected

    def test_unknown_error_passes_through(self):
        raw = "net::ERR_ABORTED at https://example.com/"
        assert friendly_navigation_message(raw) == raw


class TestErrorKinds:
    """Each error exposes a stable classification."""

    @pytest.mark.parametrize("cls,kind", [
        (InvalidInputError, "invalid_input"),
        (NavigationFailedError, "navigation_failed"),
        (RenderTimeoutError, "render_timeout"),
        (DecodeFailedError, "decode_failed"),
    ])
    def test_kind(self, cls, kind):
        err = cls("boom")
        assert isinstance(err, ComparisonError)
        assert err.kind == kind
        assert err.to_payload() == {"error": "boom", "kind": kind}

    def test_not_found(self):
        err = ResultNotFoundError("abc")
        assert err.kind == "not_found"
        assert err.result_id == "abc"
        assert str(err) == "Result not found or expired"

    def test_invalid_dimensions_is_value_error(self):
        err = InvalidDimensionsError("0x0")
        assert isinstance(err, ValueError)
        assert err.kind == "invalid_input"
