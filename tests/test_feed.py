"""Test parsing the feeds pushed by the hub."""

from datetime import UTC, datetime, timedelta

import pytest

from tests import CHANNEL_ID, DELETED_FEED, get_entry, get_feed, get_notification
from ytwebsub.errors import FeedParseError
from ytwebsub.feed import parse_feed, parse_timestamp


def test_parse_timestamp() -> None:
    """Test parsing timestamps."""
    expected = datetime(2015, 4, 1, 19, 5, 24, tzinfo=UTC)

    assert parse_timestamp("2015-04-01T19:05:24.552394234+00:00") == expected
    assert parse_timestamp("2015-04-01T19:05:24+00:00") == expected
    assert parse_timestamp("2015-04-01T19:05:24Z") == expected

    parsed = parse_timestamp("2015-04-01T12:05:24-07:00")
    assert parsed == expected
    assert parsed.utcoffset() == timedelta(hours=-7)

    with pytest.raises(ValueError):
        parse_timestamp("yesterday")


def test_parse_single_entry() -> None:
    """Test parsing a feed with one entry."""
    notifications = parse_feed(get_feed(get_entry()).encode())

    assert notifications == [get_notification()]


def test_parse_multiple_entries() -> None:
    """Test that entries are parsed in document order."""
    body = get_feed(get_entry("V1"), get_entry("V2"), get_entry("V3"))

    notifications = parse_feed(body)

    assert [notification.video.id for notification in notifications] == [
        "V1",
        "V2",
        "V3",
    ]


def test_parse_multiple_links() -> None:
    """Test that the alternate link is used when an entry has several links."""
    entry = get_entry().replace(
        '<link rel="alternate"',
        '<link rel="related" href="http://example.com/related"/>\n<link rel="alternate"',
    )

    (notification,) = parse_feed(get_feed(entry))

    assert notification.video.link == "http://www.youtube.com/watch?v=VIDEO_ID"


def test_parse_empty_title() -> None:
    """Test that an empty title is parsed as an empty string."""
    entry = get_entry().replace("<title>Video title</title>", "<title/>")

    (notification,) = parse_feed(get_feed(entry))

    assert notification.video.title == ""


def test_skip_unparseable_entries() -> None:
    """Test that entries without an ID are skipped while the others are kept."""
    broken = get_entry("BROKEN").replace("<yt:videoId>BROKEN</yt:videoId>", "")
    no_channel = get_entry("NO_CHANNEL").replace(
        f"<yt:channelId>{CHANNEL_ID}</yt:channelId>", ""
    )

    notifications = parse_feed(get_feed(broken, get_entry("V1"), no_channel))

    assert [notification.video.id for notification in notifications] == ["V1"]


def test_no_entry_parseable() -> None:
    """Test that a feed is rejected when none of its entries can be parsed."""
    broken = get_entry().replace("<yt:videoId>VIDEO_ID</yt:videoId>", "")

    with pytest.raises(FeedParseError):
        parse_feed(get_feed(broken, broken))


def test_feed_without_entries() -> None:
    """Test that feeds without entries yield no notifications."""
    assert parse_feed(DELETED_FEED) == []
    assert parse_feed(get_feed()) == []
    assert parse_feed('<feed xmlns="http://www.w3.org/2005/Atom"/>') == []


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"Invalid",
        b"<feed>",
        b"<rss><channel/></rss>",
        b"<feed>text only</feed>",
    ],
)
def test_invalid_feed(body: bytes) -> None:
    """Test that bodies which are not feeds are rejected."""
    with pytest.raises(FeedParseError):
        parse_feed(body)
