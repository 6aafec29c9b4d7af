"""Contains the SubscriptionManager class which sends subscription requests to the
hub and keeps track of their verification and leases.
"""

__all__ = ["SubscriptionManager"]

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from threading import Lock
from urllib.parse import parse_qs, urlencode, urlparse

from httpx import AsyncClient, RequestError

from ytwebsub.enums import HubMode, SubscriptionState
from ytwebsub.errors import HTTPError
from ytwebsub.models.subscription import Subscription


class SubscriptionManager:
    """Sends subscribe and unsubscribe requests to the hub and tracks the state of
    every requested subscription.

    A subscription only becomes active when the hub verifies it through the
    callback endpoint, see :meth:`confirm_challenge`. Leases are tracked but never
    renewed automatically; call :meth:`request` again to renew.
    """

    _TOPIC_URL = "https://www.youtube.com/xml/feeds/videos.xml"
    _TIMEOUT = 10

    def __init__(
        self,
        *,
        hub_url: str,
        callback_url: str,
        secret: str | None = None,
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
    ) -> None:
        """Create a new SubscriptionManager instance.

        :param hub_url: The URL of the hub to send requests to.
        :param callback_url: The URL the hub should send verifications and
            notifications to.
        :param secret: The secret the hub should sign notifications with.
        :param on_error: A coroutine function called with the error when a request
            to the hub fails. If not provided, the error is logged.
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._hub_url = hub_url
        self._callback_url = callback_url
        self._secret = secret
        self._on_error = on_error
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = Lock()

    @classmethod
    def topic_url(cls, channel_id: str) -> str:
        """Get the hub topic of a channel.

        :param channel_id: The channel ID.
        :return: The URL of the channel's video feed.
        """
        return f"{cls._TOPIC_URL}?{urlencode({'channel_id': channel_id})}"

    @staticmethod
    def channel_id_from_topic(topic: str) -> str | None:
        """Get the channel ID from a hub topic.

        :param topic: The URL of a channel's video feed.
        :return: The channel ID, or None if the topic does not name a channel.
        """
        values = parse_qs(urlparse(topic).query).get("channel_id")
        return values[0] if values else None

    @property
    def subscriptions(self) -> list[Subscription]:
        """Get a snapshot of every tracked subscription.

        :return: The subscriptions.
        """
        with self._lock:
            return [self._snapshot(sub) for sub in self._subscriptions.values()]

    def get(self, channel_id: str) -> Subscription | None:
        """Get a snapshot of a subscription.

        :param channel_id: The channel ID of the subscription.
        :return: The subscription, or None if the channel was never requested.
        """
        with self._lock:
            subscription = self._subscriptions.get(channel_id)
            return None if subscription is None else self._snapshot(subscription)

    def lease_expires_at(self, channel_id: str) -> datetime | None:
        """Get when the lease of a subscription runs out.

        :param channel_id: The channel ID of the subscription.
        :return: The expiry time, or None if unknown.
        """
        subscription = self.get(channel_id)
        return None if subscription is None else subscription.lease_expires_at

    def expiring(self, within: timedelta) -> list[str]:
        """Get the channels whose lease runs out within the given time, including
        those that already ran out.

        :param within: How far ahead to look.
        :return: The channel IDs to renew.
        """
        deadline = self._now() + within

        with self._lock:
            return [
                sub.channel_id
                for sub in self._subscriptions.values()
                if sub.state == SubscriptionState.ACTIVE
                and sub.lease_expires_at is not None
                and sub.lease_expires_at <= deadline
            ]

    async def request(
        self,
        channel_ids: str | Iterable[str],
        *,
        mode: HubMode = HubMode.SUBSCRIBE,
    ) -> None:
        """Send subscribe or unsubscribe requests to the hub.

        Returns once the hub has received the requests. Failures are passed to the
        error callback instead of being raised.

        :param channel_ids: The channel ID(s) to subscribe or unsubscribe.
        :param mode: Either HubMode.SUBSCRIBE or HubMode.UNSUBSCRIBE.
        :raises ValueError: If the mode is HubMode.DENIED.
        """
        if mode == HubMode.DENIED:
            raise ValueError("Cannot request a denial")

        if isinstance(channel_ids, str):
            channel_ids = [channel_ids]

        async with AsyncClient(timeout=self._TIMEOUT) as client:
            for channel_id in channel_ids:
                self._mark_pending(channel_id, mode)
                self._logger.debug(
                    "Sending %s request for channel: %s", mode.value, channel_id
                )

                try:
                    response = await client.post(
                        self._hub_url,
                        data=self._get_form(channel_id, mode),
                        headers={"Content-type": "application/x-www-form-urlencoded"},
                    )
                except RequestError as ex:
                    error = HTTPError(
                        f"Failed to {mode.value} channel: {channel_id}. {ex!r}", None
                    )
                    await self._fail(channel_id, mode, error)
                    continue

                if not response.is_success:
                    error = HTTPError(
                        f"Failed to {mode.value} channel: {channel_id}",
                        response.status_code,
                    )
                    await self._fail(channel_id, mode, error)
                    continue

                self._logger.info(
                    "Successfully sent %s request for channel: %s",
                    mode.value,
                    channel_id,
                )

    def confirm_challenge(
        self,
        mode: HubMode,
        topic: str,
        challenge: str,
        lease_seconds: int = 0,
    ) -> str | None:
        """Confirm a verification request sent by the hub.

        :param mode: The mode the hub is verifying.
        :param topic: The topic the hub is verifying.
        :param challenge: The challenge to echo back.
        :param lease_seconds: The lease granted by the hub, 0 if unknown.
        :return: The challenge if the request matches a subscription awaiting
            verification, None otherwise.
        """
        channel_id = self.channel_id_from_topic(topic)
        if channel_id is None:
            return None

        with self._lock:
            subscription = self._subscriptions.get(channel_id)
            if subscription is None:
                return None

            now = self._now()

            if (
                mode == HubMode.SUBSCRIBE
                and subscription.pending_mode == HubMode.SUBSCRIBE
            ):
                subscription.state = SubscriptionState.ACTIVE
                subscription.lease_expires_at = (
                    now + timedelta(seconds=lease_seconds) if lease_seconds > 0 else None
                )
            elif mode == HubMode.UNSUBSCRIBE and (
                subscription.pending_mode == HubMode.UNSUBSCRIBE
                or subscription.state == SubscriptionState.ACTIVE
            ):
                if subscription.pending_mode != HubMode.UNSUBSCRIBE:
                    self._logger.warning(
                        "Hub verified an unsubscribe that was not requested for "
                        "channel: %s",
                        channel_id,
                    )

                subscription.state = SubscriptionState.REMOVED
                subscription.lease_expires_at = now
            else:
                return None

            subscription.pending_mode = None

        self._logger.info("Hub verified %s for channel: %s", mode.value, channel_id)
        return challenge

    def deny(self, topic: str) -> str | None:
        """Handle the hub denying or revoking a subscription.

        :param topic: The topic of the denied subscription.
        :return: The channel ID of the removed subscription, or None if there was no
            subscription to deny.
        """
        channel_id = self.channel_id_from_topic(topic)
        if channel_id is None:
            return None

        with self._lock:
            subscription = self._subscriptions.get(channel_id)
            if subscription is None or (
                subscription.pending_mode != HubMode.SUBSCRIBE
                and subscription.state != SubscriptionState.ACTIVE
            ):
                return None

            subscription.state = SubscriptionState.REMOVED
            subscription.pending_mode = None
            subscription.lease_expires_at = None

        self._logger.warning("Hub denied subscription for channel: %s", channel_id)
        return channel_id

    def clear(self) -> None:
        """Forget every subscription."""
        with self._lock:
            self._subscriptions.clear()

    def _get_form(self, channel_id: str, mode: HubMode) -> dict[str, str]:
        form = {
            "hub.mode": mode.value,
            "hub.topic": self.topic_url(channel_id),
            "hub.callback": self._callback_url,
            "hub.verify": "async",
        }
        if self._secret:
            form["hub.secret"] = self._secret

        return form

    def _mark_pending(self, channel_id: str, mode: HubMode) -> None:
        with self._lock:
            subscription = self._subscriptions.get(channel_id)
            if subscription is None:
                subscription = Subscription(channel_id, SubscriptionState.PENDING)
                self._subscriptions[channel_id] = subscription
            elif subscription.state == SubscriptionState.REMOVED:
                subscription.state = SubscriptionState.PENDING
                subscription.lease_expires_at = None

            subscription.pending_mode = mode
            subscription.secret = self._secret

    async def _fail(self, channel_id: str, mode: HubMode, error: HTTPError) -> None:
        with self._lock:
            subscription = self._subscriptions.get(channel_id)
            if subscription is not None and subscription.pending_mode == mode:
                subscription.pending_mode = None
                if subscription.state == SubscriptionState.PENDING:
                    del self._subscriptions[channel_id]

        if self._on_error is None:
            self._logger.error("%s", error)
            return

        await self._on_error(error)

    def _snapshot(self, subscription: Subscription) -> Subscription:
        if (
            subscription.state == SubscriptionState.ACTIVE
            and subscription.lease_expires_at is not None
            and subscription.lease_expires_at <= self._now()
        ):
            return replace(subscription, state=SubscriptionState.EXPIRED)

        return replace(subscription)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)
