"""Contains fixtures and utility functions."""

import hashlib
import hmac
from datetime import UTC, datetime

from ytwebsub import Channel, Notification, Video
from ytwebsub.subscriptions import SubscriptionManager

HUB_CALLBACK = "http://localhost:8000"
HUB_URL = "https://pubsubhubbub.appspot.com/"
SECRET = "password"  # noqa: S105

CHANNEL_ID = "UCupvZG-5ko_eiXAupbDfxWw"


def get_topic(channel_id: str = CHANNEL_ID) -> str:
    """Get the hub topic of a channel."""
    return SubscriptionManager.topic_url(channel_id)


def get_notification(video_id: str = "VIDEO_ID") -> Notification:
    """Create a mock notification."""
    return Notification(
        video=Video(
            id=video_id,
            title="Video title",
            link=f"http://www.youtube.com/watch?v={video_id}",
        ),
        channel=Channel(
            id=CHANNEL_ID,
            name="Channel title",
            link=f"http://www.youtube.com/channel/{CHANNEL_ID}",
        ),
        published=datetime(2015, 3, 6, 21, 40, 57, tzinfo=UTC),
        updated=datetime(2015, 3, 9, 19, 5, 24, tzinfo=UTC),
    )


# ruff: noqa: E501


def get_entry(video_id: str = "VIDEO_ID", channel_id: str = CHANNEL_ID) -> str:
    """Create an Atom entry as pushed by the hub."""
    return f"""
      <entry>
        <id>yt:video:{video_id}</id>
        <yt:videoId>{video_id}</yt:videoId>
        <yt:channelId>{channel_id}</yt:channelId>
        <title>Video title</title>
        <link rel="alternate" href="http://www.youtube.com/watch?v={video_id}"/>
        <author>
         <name>Channel title</name>
         <uri>http://www.youtube.com/channel/{channel_id}</uri>
        </author>
        <published>2015-03-06T21:40:57+00:00</published>
        <updated>2015-03-09T19:05:24.552394234+00:00</updated>
      </entry>
    """


def get_feed(*entries: str, channel_id: str = CHANNEL_ID) -> str:
    """Create an Atom feed as pushed by the hub."""
    return f"""
    <feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns="http://www.w3.org/2005/Atom">
      <link rel="hub" href="https://pubsubhubbub.appspot.com"/>
      <link rel="self" href="https://www.youtube.com/xml/feeds/videos.xml?channel_id={channel_id}"/>
      <title>YouTube video feed</title>
      <updated>2015-04-01T19:05:24.552394234+00:00</updated>
      {"".join(entries)}
    </feed>
    """


DELETED_FEED = f"""
    <feed xmlns:at="http://purl.org/atompub/tombstones/1.0" xmlns="http://www.w3.org/2005/Atom">
        <at:deleted-entry ref="yt:video:VIDEO_ID" when="2024-09-09T22:34:19.642702+00:00">
          <link href="https://www.youtube.com/watch?v=VIDEO_ID" />
          <at:by>
              <name>Channel title</name>
              <uri>https://www.youtube.com/channel/{CHANNEL_ID}</uri>
          </at:by>
        </at:deleted-entry>
    </feed>
    """

# ruff: enable


def sign(body: str | bytes, secret: str = SECRET, algorithm: str = "sha1") -> str:
    """Create the X-Hub-Signature header of a body."""
    if isinstance(body, str):
        body = body.encode()

    digest = hmac.new(secret.encode(), body, getattr(hashlib, algorithm)).hexdigest()
    return f"{algorithm}={digest}"
