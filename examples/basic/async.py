"""The following example demonstrates how to use the AsyncNotifier to listen for
new videos from a channel.
"""

import asyncio

from ytwebsub import AsyncNotifier, Notification


async def main() -> None:
    """Run the application."""
    notifier = AsyncNotifier(hub_callback="https://example.com")

    @notifier.on_notified()
    async def listener(notification: Notification) -> None:
        """It is called when a video is published or updated for any channel."""
        print(
            f"New video from {notification.channel.name}: {notification.video.title}"
        )

    async with notifier.run_in_background() as task:
        await notifier.subscribe("UCuFFtHWoLl5fauMMD5Ww2jA")  # Channel ID of CBC News
        await task


if __name__ == "__main__":
    asyncio.run(main())
