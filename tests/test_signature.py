"""Test the verification of notification signatures."""

import pytest

from tests import SECRET, sign
from ytwebsub.signature import verify_signature

BODY = b"<feed/>"


@pytest.mark.parametrize("algorithm", ["sha1", "sha256", "sha384", "sha512"])
def test_valid_signature(algorithm: str) -> None:
    """Test that signatures made with a supported algorithm are accepted."""
    assert verify_signature(BODY, SECRET, sign(BODY, algorithm=algorithm))


def test_algorithm_is_case_insensitive() -> None:
    """Test that the algorithm name is matched case-insensitively."""
    algorithm, digest = sign(BODY).split("=")
    assert verify_signature(BODY, SECRET, f"{algorithm.upper()}={digest}")


def test_invalid_signature() -> None:
    """Test that wrong, missing or malformed signatures are rejected."""
    assert not verify_signature(BODY, SECRET, None)
    assert not verify_signature(BODY, SECRET, "")
    assert not verify_signature(BODY, SECRET, "sha1")
    assert not verify_signature(BODY, SECRET, "sha1=password")
    assert not verify_signature(BODY, SECRET, sign(BODY, secret="other"))
    assert not verify_signature(b"<feed></feed>", SECRET, sign(BODY))


def test_unsupported_algorithm() -> None:
    """Test that digests made with an unsupported algorithm are rejected."""
    assert not verify_signature(BODY, SECRET, sign(BODY, algorithm="md5"))


def test_non_ascii_signature() -> None:
    """Test that digests with non-ASCII characters are rejected."""
    assert not verify_signature(BODY, SECRET, "sha1=éabc")
    assert not verify_signature(BODY, SECRET, "sha256=中")
