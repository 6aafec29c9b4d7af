"""Contains custom exceptions for the ytwebsub package."""

import sys
from http import HTTPStatus

if sys.version_info >= (3, 12):  # pragma: no cover
    from typing import override  # novm
else:
    from typing_extensions import override


class ConfigurationError(Exception):
    """Exception raised when the notifier is configured or used inconsistently."""


class FeedParseError(ValueError):
    """Exception raised when a notification body cannot be parsed as a feed."""


class SubscriptionDeniedError(Exception):
    """Exception raised when the hub denies a subscription request."""

    @override
    def __init__(self, channel_id: str, reason: str | None = None) -> None:
        """Initialize the SubscriptionDeniedError object.

        :param channel_id: The channel ID whose subscription was denied
        :param reason: The reason given by the hub, if any
        """
        super().__init__(channel_id, reason)
        self.channel_id = channel_id
        self.reason = reason

    @override
    def __str__(self) -> str:
        """Return a string representation of the SubscriptionDeniedError object."""
        message = f"Subscription denied for channel: {self.channel_id}"
        return message if self.reason is None else f"{message} ({self.reason})"


class HTTPError(Exception):
    """Exception raised when an HTTP error occurs."""

    @override
    def __init__(self, message: str, status_code: int | HTTPStatus | None) -> None:
        """Initialize the HTTPError object.

        :param message: The error message
        :param status_code: The status code of the error, or None if no response
            was received
        """
        super().__init__(message, status_code)
        try:
            self.status_code = None if status_code is None else HTTPStatus(status_code)
        except ValueError:
            # Unregistered codes such as 520 from a proxy stay as int
            self.status_code = status_code
        self.message = message

    @override
    def __str__(self) -> str:
        """Return a string representation of the HTTPError object."""
        if self.status_code is None:
            return f"No response: {self.message}"

        return f"Status code: {self.status_code}: {self.message}"
