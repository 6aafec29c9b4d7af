"""Contains the Notifier classes which are used to subscribe to YouTube channels
through a WebSub hub and receive push notifications when their videos are
published or updated.
"""

__all__ = [
    "AsyncNotifier",
    "Channel",
    "EventKind",
    "HubMode",
    "Notification",
    "Notifier",
    "NotifierConfig",
    "Subscription",
    "SubscriptionState",
    "SubscriptionUpdate",
    "Video",
]

import asyncio
import logging
import time
from asyncio import Task
from collections.abc import AsyncIterator, Callable, Coroutine, Iterable, Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import timedelta
from threading import Thread
from typing import Any, Self
from urllib.parse import urlparse

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute
from starlette.routing import Route
from uvicorn import Config, Server

from ytwebsub.enums import EventKind, HubMode, SubscriptionState
from ytwebsub.errors import ConfigurationError
from ytwebsub.handler import CallbackHandler
from ytwebsub.models import NotifierConfig
from ytwebsub.models.ledger import DeduplicationLedger
from ytwebsub.models.notification import Channel, Notification, Video
from ytwebsub.models.subscription import Subscription, SubscriptionUpdate
from ytwebsub.subscriptions import SubscriptionManager
from ytwebsub.types import (
    ErrorListener,
    Listener,
    NotifiedListener,
    SubscriptionListener,
    T,
)


class AsyncNotifier:
    """A class that encapsulates the functionality for subscribing to YouTube
    channels and receiving push notifications.
    """

    _ALL_LISTENER_KEY = "_all"

    def __init__(
        self,
        *,
        hub_callback: str,
        secret: str | None = None,
        middleware: bool = False,
        port: int = 8000,
        path: str = "/",
        hub_url: str = "https://pubsubhubbub.appspot.com/",
        host: str = "0.0.0.0",  # noqa: S104
        ledger_capacity: int = 50,
    ) -> None:
        """Set up the Notifier instance.

        :param hub_callback: The externally reachable base URL of this notifier,
            e.g. ``https://example.com``. The hub sends requests to this URL
            followed by ``path``.
        :param secret: The secret the hub signs notifications with. If not provided,
            notifications are not verified.
        :param middleware: Whether the endpoint is mounted into an app owned by the
            caller with :meth:`listener` instead of served with :meth:`setup`.
        :param port: The port to run the standalone server on.
        :param path: The path of the endpoint.
        :param hub_url: The URL of the WebSub hub.
        :param host: The host to run the standalone server on.
        :param ledger_capacity: The number of recent video IDs remembered to
            suppress duplicate notifications.
        :raises ConfigurationError: If hub_callback is missing or not an HTTP URL.
        """
        if not hub_callback or urlparse(hub_callback).scheme not in ("http", "https"):
            raise ConfigurationError(
                f"hub_callback must be an HTTP(S) URL, got {hub_callback!r}"
            )

        self._logger = logging.getLogger(self.__class__.__name__)

        self._config = NotifierConfig(
            hub_callback=hub_callback,
            secret=secret,
            middleware=middleware,
            port=port,
            path=path,
            hub_url=hub_url,
            host=host,
            ledger_capacity=ledger_capacity,
        )

        self._listeners: dict[EventKind, dict[str, list[Listener]]] = {
            kind: {} for kind in EventKind
        }
        self._ledger = DeduplicationLedger(capacity=ledger_capacity)
        self._manager = SubscriptionManager(
            hub_url=hub_url,
            callback_url=self._config.callback_url,
            secret=secret,
            on_error=self._on_error,
        )
        self._handler = CallbackHandler(
            manager=self._manager,
            ledger=self._ledger,
            emit=self._emit,
            path=self._config.path,
            secret=secret,
        )
        self._server: Server | None = None

    @property
    def config(self) -> NotifierConfig:
        """Get the configuration of the notifier.

        :return: The configuration.
        """
        return self._config

    @property
    def callback_url(self) -> str:
        """Get the URL the hub sends requests to.

        :return: The callback URL.
        """
        return self._config.callback_url

    @property
    def is_ready(self) -> bool:
        """Check if the standalone server is ready to receive push notifications.

        :return: True if the server has started, False otherwise.
        """
        return self._server is not None and self._server.started

    @property
    def subscriptions(self) -> list[Subscription]:
        """Get a snapshot of every subscription requested by this notifier.

        :return: The subscriptions.
        """
        return self._manager.subscriptions

    def get_subscription(self, channel_id: str) -> Subscription | None:
        """Get a snapshot of a subscription.

        :param channel_id: The channel ID of the subscription.
        :return: The subscription, or None if the channel was never requested.
        """
        return self._manager.get(channel_id)

    def expiring(self, within: timedelta) -> list[str]:
        """Get the channels whose lease runs out within the given time. Subscribing
        to them again renews the lease.

        :param within: How far ahead to look.
        :return: The channel IDs.
        """
        return self._manager.expiring(within)

    def _listener(
        self, *, kind: EventKind, channel_ids: str | Iterable[str] | None = None
    ) -> Callable[[Listener], Listener]:
        """Decorate the function to add a listener for events.

        :param kind: The kind of event to listen for.
        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The decorator function.
        :raises ValueError: If the channel ID is '_all'.
        """

        def decorator(func: Listener) -> Listener:
            self._add_listener(func, kind, channel_ids)

            return func

        return decorator

    def on_notified(
        self, *, channel_ids: str | Iterable[str] | None = None
    ) -> Callable[[NotifiedListener], NotifiedListener]:
        """Decorate the function to add a listener for new notifications.

        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The decorator function.
        """
        return self._listener(kind=EventKind.NOTIFIED, channel_ids=channel_ids)

    def on_subscribe(
        self, *, channel_ids: str | Iterable[str] | None = None
    ) -> Callable[[SubscriptionListener], SubscriptionListener]:
        """Decorate the function to add a listener for subscriptions confirmed by
        the hub.

        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The decorator function.
        """
        return self._listener(kind=EventKind.SUBSCRIBE, channel_ids=channel_ids)

    def on_unsubscribe(
        self, *, channel_ids: str | Iterable[str] | None = None
    ) -> Callable[[SubscriptionListener], SubscriptionListener]:
        """Decorate the function to add a listener for unsubscriptions confirmed by
        the hub.

        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The decorator function.
        """
        return self._listener(kind=EventKind.UNSUBSCRIBE, channel_ids=channel_ids)

    def on_error(self) -> Callable[[ErrorListener], ErrorListener]:
        """Decorate the function to add a listener for errors that happen outside
        the caller's control, such as failed hub requests and malformed feeds.

        :return: The decorator function.
        """
        return self._listener(kind=EventKind.ERROR)

    def _add_listener(
        self,
        func: Listener,
        kind: EventKind,
        channel_ids: str | Iterable[str] | None = None,
    ) -> Self:
        """Add a listener for events.

        :param func: The listener function to add.
        :param kind: The kind of event to listen for.
        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The Notifier instance to allow for method chaining.
        :raises ValueError: If the channel ID is '_all'.
        """
        if channel_ids is None:
            self._get_listeners(kind, None).append(func)
            self._logger.debug(
                "Added %s listener (%s) for all channels", kind.name, func.__name__
            )
            return self

        if isinstance(channel_ids, str):
            channel_ids = [channel_ids]

        for channel_id in channel_ids:
            if channel_id == self._ALL_LISTENER_KEY:
                message = f"Channel ID cannot be '{self._ALL_LISTENER_KEY}'"
                raise ValueError(message)

            self._get_listeners(kind, channel_id).append(func)
            self._logger.debug(
                "Added %s listener (%s) for channel: %s",
                kind.name,
                func.__name__,
                channel_id,
            )

        return self

    def add_notified_listener(
        self, func: NotifiedListener, channel_ids: str | Iterable[str] | None = None
    ) -> Self:
        """Add a listener for new notifications.
        Alias for _add_listener(func, EventKind.NOTIFIED, channel_ids).

        :param func: The listener function to add.
        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The Notifier instance to allow for method chaining.
        """
        return self._add_listener(func, EventKind.NOTIFIED, channel_ids)

    def add_subscribe_listener(
        self,
        func: SubscriptionListener,
        channel_ids: str | Iterable[str] | None = None,
    ) -> Self:
        """Add a listener for subscriptions confirmed by the hub.
        Alias for _add_listener(func, EventKind.SUBSCRIBE, channel_ids).

        :param func: The listener function to add.
        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The Notifier instance to allow for method chaining.
        """
        return self._add_listener(func, EventKind.SUBSCRIBE, channel_ids)

    def add_unsubscribe_listener(
        self,
        func: SubscriptionListener,
        channel_ids: str | Iterable[str] | None = None,
    ) -> Self:
        """Add a listener for unsubscriptions confirmed by the hub.
        Alias for _add_listener(func, EventKind.UNSUBSCRIBE, channel_ids).

        :param func: The listener function to add.
        :param channel_ids: The channel ID(s) to listen for.
            If not provided, the listener will be called for all channels.
        :return: The Notifier instance to allow for method chaining.
        """
        return self._add_listener(func, EventKind.UNSUBSCRIBE, channel_ids)

    def add_error_listener(self, func: ErrorListener) -> Self:
        """Add a listener for errors.
        Alias for _add_listener(func, EventKind.ERROR).

        :param func: The listener function to add.
        :return: The Notifier instance to allow for method chaining.
        """
        return self._add_listener(func, EventKind.ERROR)

    def _get_listeners(
        self, kind: EventKind, channel_id: str | None
    ) -> list[Listener]:
        """Get the listeners for the given kind and channel ID.

        :param kind: The kind of event.
        :param channel_id: The channel ID to get the listeners for.
            If not provided, the listeners for all channels
        :return: The listeners for the given kind and channel ID.
        """
        key = channel_id or self._ALL_LISTENER_KEY
        listeners = self._listeners[kind].get(key, None)
        if listeners is None:
            listeners = []
            self._listeners[kind][key] = listeners

        return listeners

    async def _emit(self, kind: EventKind, payload: object, channel_id: str | None) -> None:
        """Call the listeners of an event one after another.

        :param kind: The kind of event.
        :param payload: The argument passed to each listener.
        :param channel_id: The channel ID the event is about, if any.
        """
        listeners = list(self._listeners[kind].get(self._ALL_LISTENER_KEY, []))
        if channel_id is not None:
            listeners += self._listeners[kind].get(channel_id, [])

        if kind == EventKind.ERROR and not listeners:
            self._logger.error("Unhandled error: %s", payload)
            return

        for func in listeners:
            try:
                await func(payload)
            except Exception:
                self._logger.exception(
                    "Listener (%s) failed to handle %s event", func.__name__, kind.name
                )

    async def _on_error(self, error: Exception) -> None:
        await self._emit(EventKind.ERROR, error, None)

    @staticmethod
    def _verify_app(*, app: FastAPI, path: str) -> None:
        """Verify if the given app instance has a route that conflicts with
            the notifier's routes.

        :param app: The FastAPI app instance to verify.
        :param path: The path of the notifier's endpoint.
        :raises ValueError: If the path is already used by the app.
        """
        for route in app.routes:
            if isinstance(route, (APIRoute, Route)) and route.path == path:
                raise ValueError(
                    f"Endpoint {path} is reserved for {__package__} "
                    "so it cannot be used by the app"
                )

    def listener(self, app: FastAPI | None = None) -> APIRouter:
        """Get the router serving the callback endpoint, to be mounted into an app
        owned by the caller.

        :param app: The FastAPI app to include the router in. If not provided, the
            caller includes the returned router itself.
        :return: The router.
        :raises ConfigurationError: If the notifier is not in middleware mode.
        :raises ValueError: If the given app already has a route on the path.
        """
        if not self._config.middleware:
            raise ConfigurationError(
                "listener() requires middleware=True, use setup() instead"
            )

        router = self._handler.router()

        if app is not None:
            self._verify_app(app=app, path=self._config.path)
            app.include_router(router)

        self._logger.info("Callback URL: %s", self.callback_url)

        return router

    def _create_server(self, *, log_level: int, **configs: object) -> Server:
        """Create the standalone server.

        :param log_level: The log level to use for the uvicorn server.
        :param configs: Additional arguments to pass to the Config class of uvicorn.
        :return: The server.
        :raises ConfigurationError: If the notifier is in middleware mode.
        """
        if self._config.middleware:
            raise ConfigurationError(
                "setup() cannot be used with middleware=True, use listener() instead"
            )

        app = FastAPI()
        app.include_router(self._handler.router())

        config = Config(
            app=app,
            host=self._config.host,
            port=self._config.port,
            log_level=log_level,
            **configs,  # ty: ignore[invalid-argument-type]
        )
        self._server = Server(config=config)

        self._logger.info("Callback URL: %s", self.callback_url)

        return self._server

    async def setup(self, *, log_level: int = logging.WARNING, **configs: object) -> None:
        """Start the standalone server to receive push notifications in an existing
            event loop and wait until the server stops.

        :param log_level: The log level to use for the uvicorn server.
        :param configs: Additional arguments to pass to the Config class of uvicorn.
        :raises ConfigurationError: If the notifier is in middleware mode.
        """
        server = self._create_server(log_level=log_level, **configs)

        try:
            await server.serve()
        except KeyboardInterrupt:  # pragma: no cover
            pass
        finally:
            self._on_exit()

    @asynccontextmanager
    async def run_in_background(
        self, *, log_level: int = logging.WARNING, **configs: object
    ) -> AsyncIterator[Task]:
        """Run the standalone server in an existing event loop and return once it is
        ready.

        :param log_level: The log level to use for the server.
        :param configs: Additional configurations to pass to the server.
        :raises ConfigurationError: If the notifier is in middleware mode.
        """
        if self._config.middleware:
            raise ConfigurationError(
                "run_in_background() cannot be used with middleware=True"
            )

        task = asyncio.create_task(self.setup(log_level=log_level, **configs))
        try:
            while not self.is_ready:
                if task.done():
                    task.result()
                    raise RuntimeError("Server stopped before it was ready")

                await asyncio.sleep(0.1)

            yield task
        finally:
            self.stop()
            await task

    async def subscribe(self, channel_ids: str | Iterable[str]) -> Self:
        """Subscribe to YouTube channels to receive push notifications.

        Returns once the hub has received the request. The subscription becomes
        active when the hub verifies it, which emits a subscribe event. Failed
        requests emit an error event instead of raising. Subscribing to an active
        channel renews its lease.

        :param channel_ids: The channel ID(s) to subscribe to.
        :return: The current instance for method chaining.
        """
        await self._manager.request(channel_ids, mode=HubMode.SUBSCRIBE)
        return self

    async def unsubscribe(self, channel_ids: str | Iterable[str]) -> Self:
        """Unsubscribe from YouTube channels to stop receiving push notifications.

        :param channel_ids: The channel ID(s) to unsubscribe from.
        :return: The current instance for method chaining.
        """
        await self._manager.request(channel_ids, mode=HubMode.UNSUBSCRIBE)
        return self

    def stop(self) -> None:
        """Stop the standalone server, if running, and forget every subscription and
        notified video.
        """
        if self._server is not None:
            self._server.should_exit = True
            self._server = None

        self._manager.clear()
        self._ledger.clear()

    def _on_exit(self) -> None:
        """Perform a task after the notifier is stopped."""
        self.stop()


class Notifier(AsyncNotifier):
    """A class that encapsulates the functionality for subscribing to YouTube
    channels and receiving push notifications, without an event loop of the
    caller.
    """

    def subscribe(self, channel_ids: str | Iterable[str]) -> Self:  # noqa: D102
        self._run_coroutine(super().subscribe(channel_ids))
        return self

    def unsubscribe(self, channel_ids: str | Iterable[str]) -> Self:  # noqa: D102
        self._run_coroutine(super().unsubscribe(channel_ids))
        return self

    def setup(self, *, log_level: int = logging.WARNING, **configs: object) -> None:
        """Start the standalone server to receive push notifications in the
            current thread and wait until the server stops.

        :param log_level: The log level to use for the uvicorn server.
        :param configs: Additional arguments to pass to the Config class of uvicorn.
        :raises ConfigurationError: If the notifier is in middleware mode.
        """
        server = self._create_server(log_level=log_level, **configs)

        try:
            server.run()
        except KeyboardInterrupt:  # pragma: no cover
            pass
        finally:
            self._on_exit()

    @contextmanager
    def run_in_background(
        self, *, log_level: int = logging.WARNING, **configs: object
    ) -> Iterator[Thread]:
        """Start the standalone server in a separate thread and return once it is
        ready.

        :param log_level: The log level to use for the uvicorn server.
        :param configs: Additional arguments to pass to the Config class of uvicorn.
        :return: The thread that runs the server.
        :raises ConfigurationError: If the notifier is in middleware mode.
        """
        if self._config.middleware:
            raise ConfigurationError(
                "run_in_background() cannot be used with middleware=True"
            )

        configs["log_level"] = log_level

        thread = Thread(target=self.setup, kwargs=configs, daemon=True)
        thread.start()
        try:
            while not self.is_ready:
                if not thread.is_alive():
                    raise RuntimeError("Server stopped before it was ready")

                time.sleep(0.1)
            yield thread
        finally:
            self.stop()
            thread.join()

    @staticmethod
    def _run_coroutine(coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine to completion.

        :param coro: The coroutine to run.
        :return: The result of the coroutine.
        :raises RuntimeError: If called from a running event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)

        coro.close()
        raise RuntimeError(
            "Notifier cannot be used inside a running event loop, "
            "use AsyncNotifier instead"
        )
