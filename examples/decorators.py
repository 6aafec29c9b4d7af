"""This is an example of how to use decorators to listen to events."""

from ytwebsub import Notification, Notifier, SubscriptionUpdate


def main() -> None:
    """Run the application."""
    notifier = Notifier(hub_callback="https://example.com")

    @notifier.on_notified()
    async def listener1(notification: Notification) -> None:
        """Listener called when a video is published or updated for any channel."""
        print("listener 1 called")
        print(notification)

    @notifier.on_notified(channel_ids="UCupvZG-5ko_eiXAupbDfxWw")
    async def listener2(notification: Notification) -> None:
        """Listener called when a video is published or updated on a specific
        channel.
        """
        print("listener 2 called")
        print(notification)

    @notifier.on_subscribe()
    @notifier.on_unsubscribe()
    async def listener3(update: SubscriptionUpdate) -> None:
        """Listener called when the hub confirms a subscription change."""
        print(f"{update.mode.value} confirmed for {update.channel_id}")

    @notifier.on_error()
    async def listener4(error: Exception) -> None:
        """Listener called when a hub request fails or a feed cannot be parsed."""
        print(f"error: {error}")

    with notifier.run_in_background() as thread:
        notifier.subscribe(["UCupvZG-5ko_eiXAupbDfxWw", "UChLtXXpo4Ge1ReTEboVvTDg"])
        thread.join()


if __name__ == "__main__":
    main()
