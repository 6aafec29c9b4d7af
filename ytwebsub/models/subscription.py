"""Contains the dataclasses for the subscription model."""

__all__ = ["Subscription", "SubscriptionUpdate"]

from dataclasses import dataclass
from datetime import datetime

from ytwebsub.enums import HubMode, SubscriptionState


@dataclass
class Subscription:
    """Represents the subscriber's view of one channel subscription."""

    channel_id: str
    """The channel ID used as the hub topic"""

    state: SubscriptionState
    """The current state of the subscription"""

    lease_expires_at: datetime | None = None
    """When the lease granted by the hub runs out, if known"""

    secret: str | None = None
    """The secret sent to the hub with the request"""

    pending_mode: HubMode | None = None
    """The mode of the request that awaits verification by the hub"""


@dataclass(frozen=True)
class SubscriptionUpdate:
    """Represents a subscription change confirmed by the hub."""

    mode: HubMode
    """Either HubMode.SUBSCRIBE or HubMode.UNSUBSCRIBE"""

    channel_id: str
    """The channel ID of the subscription"""

    lease_seconds: int
    """The lease granted by the hub in seconds, 0 for unsubscriptions"""
