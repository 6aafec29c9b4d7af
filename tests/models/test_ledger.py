"""Test class DeduplicationLedger."""

from threading import Thread

import pytest

from ytwebsub.models.ledger import DeduplicationLedger

CAPACITY = 10


@pytest.fixture
def ledger() -> DeduplicationLedger:
    """Create a DeduplicationLedger instance."""
    return DeduplicationLedger(capacity=CAPACITY)


def test_capacity(ledger: DeduplicationLedger) -> None:
    """Test the capacity of the DeduplicationLedger class."""
    assert ledger.capacity == CAPACITY

    for i in range(CAPACITY):
        ledger.record(str(i))

    ledger.capacity = 2
    assert ledger.capacity == 2
    assert len(ledger) == 2
    assert ledger.contains(str(CAPACITY - 1))
    assert not ledger.contains("0")

    with pytest.raises(ValueError):
        ledger.capacity = 0

    with pytest.raises(ValueError):
        DeduplicationLedger(capacity=-1)


def test_contains(ledger: DeduplicationLedger) -> None:
    """Test the contains method of the DeduplicationLedger class."""
    assert not ledger.contains("V1")

    ledger.record("V1")

    assert ledger.contains("V1")
    assert not ledger.contains("V2")


def test_add(ledger: DeduplicationLedger) -> None:
    """Test the add method of the DeduplicationLedger class."""
    assert ledger.add("V1")
    assert not ledger.add("V1")
    assert len(ledger) == 1


def test_eviction(ledger: DeduplicationLedger) -> None:
    """Test that the oldest ID is evicted once the capacity is exceeded."""
    for i in range(CAPACITY + 1):
        ledger.record(str(i))

    assert len(ledger) == CAPACITY
    assert not ledger.contains("0")
    for i in range(1, CAPACITY + 1):
        assert ledger.contains(str(i))


def test_eviction_is_not_lru(ledger: DeduplicationLedger) -> None:
    """Test that checking or recording an ID again does not refresh it."""
    for i in range(CAPACITY):
        ledger.record(str(i))

    assert ledger.contains("0")
    ledger.record("0")
    ledger.record("new")

    assert not ledger.contains("0")
    assert ledger.contains("1")


def test_clear(ledger: DeduplicationLedger) -> None:
    """Test the clear method of the DeduplicationLedger class."""
    ledger.record("V1")
    ledger.clear()

    assert len(ledger) == 0
    assert not ledger.contains("V1")


def test_concurrent_add() -> None:
    """Test that only one of many concurrent additions of an ID succeeds."""
    ledger = DeduplicationLedger(capacity=CAPACITY)
    results = []

    def add() -> None:
        results.append(ledger.add("V1"))

    threads = [Thread(target=add) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
