"""Contains the CallbackHandler class which serves the endpoint the hub sends
verification requests and notifications to.
"""

__all__ = ["CallbackHandler", "Emitter"]

import logging
from collections.abc import Awaitable, Callable
from http import HTTPStatus

from fastapi import APIRouter, Request, Response

from ytwebsub.enums import EventKind, HubMode
from ytwebsub.errors import FeedParseError, SubscriptionDeniedError
from ytwebsub.feed import parse_feed
from ytwebsub.models.ledger import DeduplicationLedger
from ytwebsub.models.subscription import SubscriptionUpdate
from ytwebsub.signature import verify_signature
from ytwebsub.subscriptions import SubscriptionManager

Emitter = Callable[[EventKind, object, str | None], Awaitable[None]]


class CallbackHandler:
    """Handles the requests of the hub on a single path.

    GET (and HEAD) requests are verification challenges, POST requests are
    notifications. The same handler backs both the standalone server and the
    router returned for mounting into another app.
    """

    _SIGNATURE_HEADERS = ("X-Hub-Signature", "X-Hub-Signature-256")

    def __init__(
        self,
        *,
        manager: SubscriptionManager,
        ledger: DeduplicationLedger,
        emit: Emitter,
        path: str = "/",
        secret: str | None = None,
    ) -> None:
        """Create a new CallbackHandler instance.

        :param manager: The manager of the subscriptions to verify.
        :param ledger: The ledger used to drop duplicate notifications.
        :param emit: A coroutine function called with the kind of event, its payload
            and the channel ID it is about.
        :param path: The path of the endpoint.
        :param secret: The secret notifications must be signed with. If not
            provided, signatures are not checked.
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._manager = manager
        self._ledger = ledger
        self._emit = emit
        self._path = path
        self._secret = secret

    @property
    def path(self) -> str:
        """Get the path of the endpoint.

        :return: The path.
        """
        return self._path

    def router(self) -> APIRouter:
        """Get a FastAPI router serving the endpoint.

        :return: The router.
        """
        router = APIRouter()
        router.add_api_route(self._path, self._get, methods=["HEAD", "GET"])
        router.add_api_route(self._path, self._post, methods=["POST"])

        return router

    async def _get(self, request: Request) -> Response:
        """Handle a verification request from the hub."""
        params = request.query_params
        self._logger.debug("Received verification request: %s", params)

        topic = params.get("hub.topic")
        try:
            mode = HubMode(params.get("hub.mode"))
        except ValueError:
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        if topic is None:
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        if mode == HubMode.DENIED:
            return await self._deny(topic, params.get("hub.reason"))

        challenge = params.get("hub.challenge")
        if challenge is None:
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        try:
            lease_seconds = int(params.get("hub.lease_seconds") or 0)
        except ValueError:
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        if lease_seconds < 0:
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        if mode == HubMode.UNSUBSCRIBE:
            lease_seconds = 0

        echo = self._manager.confirm_challenge(mode, topic, challenge, lease_seconds)
        if echo is None:
            self._logger.warning(
                "Rejected %s verification for unknown topic: %s", mode.value, topic
            )
            return Response(status_code=HTTPStatus.NOT_FOUND)

        channel_id = self._manager.channel_id_from_topic(topic)
        kind = EventKind.SUBSCRIBE if mode == HubMode.SUBSCRIBE else EventKind.UNSUBSCRIBE
        await self._emit(
            kind, SubscriptionUpdate(mode, channel_id, lease_seconds), channel_id
        )

        return Response(echo)

    async def _deny(self, topic: str, reason: str | None) -> Response:
        channel_id = self._manager.deny(topic)
        if channel_id is None:
            return Response(status_code=HTTPStatus.NOT_FOUND)

        await self._emit(
            EventKind.ERROR, SubscriptionDeniedError(channel_id, reason), channel_id
        )

        return Response(status_code=HTTPStatus.OK)

    async def _post(self, request: Request) -> Response:
        """Handle a notification from the hub."""
        body = await request.body()

        if self._secret and not verify_signature(
            body, self._secret, self._get_signature(request)
        ):
            self._logger.warning("Rejected notification with a missing or bad signature")
            return Response(status_code=HTTPStatus.FORBIDDEN)

        try:
            notifications = parse_feed(body)
        except FeedParseError as ex:
            self._logger.debug("Received invalid request body: %s", body)
            await self._emit(EventKind.ERROR, ex, None)
            return Response(status_code=HTTPStatus.BAD_REQUEST)

        self._logger.debug("Received push notification: %s", notifications)

        for notification in notifications:
            if not self._ledger.add(notification.video.id):
                self._logger.debug("Ignoring duplicate video (%s)", notification.video.id)
                continue

            await self._emit(EventKind.NOTIFIED, notification, notification.channel.id)

        return Response(status_code=HTTPStatus.OK)

    def _get_signature(self, request: Request) -> str | None:
        for header in self._SIGNATURE_HEADERS:
            value = request.headers.get(header)
            if value is not None:
                return value

        return None
