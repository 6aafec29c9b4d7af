"""THe following is an example of a simple Notifier with logging module."""

import logging

from ytwebsub import Notification, Notifier


def main() -> None:
    """Run the application."""
    logger = logging.getLogger(__name__)
    notifier = Notifier(hub_callback="https://example.com")

    @notifier.on_notified()
    async def listener(notification: Notification) -> None:
        """Listener called when a video is published or updated for any channel."""
        logger.info(
            "New video from %s: %s",
            notification.channel.name,
            notification.video.title,
        )

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    with notifier.run_in_background() as thread:
        notifier.subscribe("UCuFFtHWoLl5fauMMD5Ww2jA")  # Channel ID of CBC News
        thread.join()


if __name__ == "__main__":
    main()
