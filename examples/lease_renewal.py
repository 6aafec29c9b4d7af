"""This is an example of how to renew subscriptions before their lease runs out.
The notifier does not renew leases by itself.
"""

import asyncio
from datetime import timedelta

from ytwebsub import AsyncNotifier, SubscriptionUpdate


async def main() -> None:
    """Run the application."""
    notifier = AsyncNotifier(hub_callback="https://example.com")

    @notifier.on_subscribe()
    async def listener(update: SubscriptionUpdate) -> None:
        print(f"Lease of {update.channel_id} is {update.lease_seconds} seconds")

    async with notifier.run_in_background():
        await notifier.subscribe("UCupvZG-5ko_eiXAupbDfxWw")

        while True:
            await asyncio.sleep(timedelta(hours=1).total_seconds())

            channel_ids = notifier.expiring(timedelta(hours=2))
            if channel_ids:
                await notifier.subscribe(channel_ids)


if __name__ == "__main__":
    asyncio.run(main())
