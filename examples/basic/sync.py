"""The following example demonstrates how to use the Notifier to listen for
new videos from a channel.
"""

from ytwebsub import Notification, Notifier


def main() -> None:
    """Run the application."""
    notifier = Notifier(hub_callback="https://example.com", secret="Your secret here")

    @notifier.on_notified()
    async def listener(notification: Notification) -> None:
        print(
            f"New video from {notification.channel.name}: {notification.video.title}"
        )

    with notifier.run_in_background() as thread:
        notifier.subscribe("UCuFFtHWoLl5fauMMD5Ww2jA")  # Channel ID of CBC News
        thread.join()


if __name__ == "__main__":
    main()
