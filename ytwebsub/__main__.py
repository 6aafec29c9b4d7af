"""Script for end-to-end testing the Notifier."""

import logging
import os

from dotenv import load_dotenv

from ytwebsub import Notification, Notifier, SubscriptionUpdate

if __name__ == "__main__":  # pragma: no cover
    load_dotenv()

    notifier = Notifier(
        hub_callback=os.environ["HUB_CALLBACK"],
        secret=os.getenv("HUB_SECRET"),
    )

    @notifier.on_subscribe()
    async def _(update: SubscriptionUpdate) -> None:
        print(f"Subscribed to {update.channel_id} for {update.lease_seconds}s")  # noqa: T201

    @notifier.on_notified()
    async def _(notification: Notification) -> None:
        print(f"New video from {notification.channel.name}: {notification.video.title}")  # noqa: T201

    logging.basicConfig(level=logging.INFO)
    with notifier.run_in_background() as thread:
        # Channel ID of CNN by default
        notifier.subscribe(os.getenv("CHANNEL_ID", "UCupvZG-5ko_eiXAupbDfxWw"))
        thread.join()
