"""Contains the dataclasses for the notification model."""

__all__ = ["Channel", "Notification", "Video"]

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Video:
    """Represents a YouTube video."""

    id: str
    """The unique ID of the video"""

    title: str
    """The title of the video"""

    link: str
    """The URL of the video"""


@dataclass(frozen=True)
class Channel:
    """Represents a YouTube channel."""

    id: str
    """The unique ID of the channel"""

    name: str
    """The name of the channel"""

    link: str
    """The URL of the channel"""


@dataclass(frozen=True)
class Notification:
    """Represents a video update pushed by the hub."""

    video: Video
    """The video the notification is about"""

    channel: Channel
    """The channel that owns the video"""

    published: datetime
    """The published time of the video"""

    updated: datetime
    """The updated time of the video"""
