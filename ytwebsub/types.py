"""Contains type hints for the library."""

__all__ = [
    "ErrorListener",
    "NotifiedListener",
    "SubscriptionListener",
]

from collections.abc import Awaitable, Callable
from typing import TypeVar

from ytwebsub.models.notification import Notification
from ytwebsub.models.subscription import SubscriptionUpdate

T = TypeVar("T")

NotifiedListener = Callable[[Notification], Awaitable[None]]
SubscriptionListener = Callable[[SubscriptionUpdate], Awaitable[None]]
ErrorListener = Callable[[Exception], Awaitable[None]]
Listener = NotifiedListener | SubscriptionListener | ErrorListener
