"""Defines Enum classes used in the package."""

__all__ = ["EventKind", "HubMode", "SubscriptionState"]

from enum import Enum


class EventKind(Enum):
    """Enum for the kind of event emitted by the notifier."""

    NOTIFIED = 0
    """A new video notification was received"""

    SUBSCRIBE = 1
    """The hub confirmed a subscription"""

    UNSUBSCRIBE = 2
    """The hub confirmed an unsubscription"""

    ERROR = 3
    """A non-fatal error occurred"""


class HubMode(Enum):
    """Enum for the hub.mode values of the WebSub protocol."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    DENIED = "denied"


class SubscriptionState(Enum):
    """Enum for the state of a subscription."""

    PENDING = 0
    """The request was sent and the hub has not verified it yet"""

    ACTIVE = 1
    """The hub verified the subscription and the lease is running"""

    EXPIRED = 2
    """The lease ran out without being renewed"""

    REMOVED = 3
    """The subscription was removed or denied"""
