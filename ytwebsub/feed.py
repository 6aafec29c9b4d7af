"""Contains the parser for the Atom feeds pushed by the hub."""

__all__ = ["parse_feed", "parse_timestamp"]

import logging
import re
from datetime import datetime
from pyexpat import ExpatError
from typing import Any

import xmltodict

from ytwebsub.errors import FeedParseError
from ytwebsub.models.notification import Channel, Notification, Video

_logger = logging.getLogger(__name__)

_NAMESPACES = {
    "http://www.w3.org/2005/Atom": None,
    "http://www.youtube.com/xml/schemas/2015": "yt",
    "http://purl.org/atompub/tombstones/1.0": "at",
    "http://search.yahoo.com/mrss/": "media",
}

_FRACTION_PATTERN = re.compile(r"\.\d+")


def parse_timestamp(timestamp: str) -> datetime:
    """Parse an Atom timestamp.

    :param timestamp: The timestamp, e.g. ``2015-04-01T19:05:24.552394234+00:00``.
    :return: The timezone-aware datetime, without fractional seconds.
    :raises ValueError: If the timestamp is not valid.
    """
    # Fractions can have nanosecond precision, which strptime cannot handle
    timestamp = _FRACTION_PATTERN.sub("", timestamp.strip(), count=1)
    if timestamp.endswith("Z"):
        timestamp = f"{timestamp[:-1]}+00:00"

    return datetime.strptime(timestamp, "%Y-%m-%dT%H:%M:%S%z")


def _text(value: Any) -> str:
    """Get the text content of an element parsed by xmltodict."""
    if value is None:
        return ""

    if isinstance(value, dict):
        return value.get("#text") or ""

    return str(value)


def _link(links: list[dict[str, str]]) -> str:
    """Get the alternate link, or the first link if there is none."""
    for link in links:
        if link.get("@rel", "alternate") == "alternate":
            return link["@href"]

    return links[0]["@href"]


def _parse_entry(entry: dict[str, Any]) -> Notification:
    video_id = _text(entry.get("yt:videoId"))
    if not video_id:
        raise ValueError("Entry has no video ID")

    channel_id = _text(entry["yt:channelId"])
    if not channel_id:
        raise ValueError("Entry has no channel ID")

    author = entry.get("author") or {}
    links = entry.get("link") or [{"@href": f"https://www.youtube.com/watch?v={video_id}"}]

    return Notification(
        video=Video(id=video_id, title=_text(entry.get("title")), link=_link(links)),
        channel=Channel(
            id=channel_id,
            name=_text(author.get("name")),
            link=_text(author.get("uri")),
        ),
        published=parse_timestamp(_text(entry["published"])),
        updated=parse_timestamp(_text(entry["updated"])),
    )


def parse_feed(body: bytes | str) -> list[Notification]:
    """Parse a feed pushed by the hub into notifications.

    Entries that cannot be parsed are skipped. The feed as a whole is rejected only
    if it is not a feed at all, or if it has entries and none of them parse.

    :param body: The raw request body.
    :return: The notifications in document order.
    :raises FeedParseError: If the body cannot be parsed.
    """
    try:
        document = xmltodict.parse(
            body,
            process_namespaces=True,
            namespaces=_NAMESPACES,
            force_list=("entry", "link"),
        )
    except ExpatError as ex:
        raise FeedParseError(f"Invalid XML: {ex}") from ex

    if not isinstance(document, dict) or "feed" not in document:
        raise FeedParseError("Document is not a feed")

    feed = document["feed"] or {}
    if not isinstance(feed, dict):
        raise FeedParseError("Feed has no elements")

    if "at:deleted-entry" in feed:
        _logger.debug("Ignoring deleted entries: %s", feed["at:deleted-entry"])

    entries = feed.get("entry") or []
    notifications = []

    for entry in entries:
        try:
            notifications.append(_parse_entry(entry))
        except (TypeError, KeyError, ValueError, AttributeError):
            _logger.warning("Skipping unparseable entry: %s", entry, exc_info=True)

    if entries and not notifications:
        raise FeedParseError(f"None of the {len(entries)} entries could be parsed")

    return notifications
