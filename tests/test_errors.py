"""Test errors."""

from http import HTTPStatus

from ytwebsub.errors import HTTPError, SubscriptionDeniedError


def test_http_errors() -> None:
    """Test creating HTTPError instances."""
    error = HTTPError("test", 400)
    assert isinstance(error.status_code, HTTPStatus)

    error = HTTPError("test", HTTPStatus.BAD_REQUEST)
    assert isinstance(error.status_code, HTTPStatus)

    assert error.message in str(error)
    assert "400" in str(error)

    error = HTTPError("test", 520)
    assert error.status_code == 520
    assert "520" in str(error)

    error = HTTPError("test", None)
    assert error.status_code is None
    assert error.message in str(error)


def test_subscription_denied_error() -> None:
    """Test creating SubscriptionDeniedError instances."""
    error = SubscriptionDeniedError("channel")
    assert error.reason is None
    assert "channel" in str(error)

    error = SubscriptionDeniedError("channel", "unsupported topic")
    assert error.channel_id == "channel"
    assert "unsupported topic" in str(error)
