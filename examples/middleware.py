"""This is an example of how to mount the notifier into an existing FastAPI app."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ytwebsub import AsyncNotifier, Notification

notifier = AsyncNotifier(
    hub_callback="https://example.com",
    path="/websub",
    middleware=True,
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Subscribe once the app is serving and clean up when it stops."""
    await notifier.subscribe("UCupvZG-5ko_eiXAupbDfxWw")
    yield
    notifier.stop()


app = FastAPI(lifespan=lifespan)


@app.get("/health")
async def health() -> dict[str, str]:
    """Route owned by the app."""
    return {"status": "ok"}


@notifier.on_notified()
async def listener(notification: Notification) -> None:
    """Listener called when a video is published or updated for any channel."""
    print(f"New video from {notification.channel.name}: {notification.video.title}")


notifier.listener(app)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)  # noqa: S104
