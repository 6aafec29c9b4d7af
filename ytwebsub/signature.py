"""Contains the verification of signed notification bodies."""

__all__ = ["SUPPORTED_ALGORITHMS", "verify_signature"]

import hashlib
import hmac

SUPPORTED_ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}


def verify_signature(body: bytes, secret: str, header: str | None) -> bool:
    """Check the X-Hub-Signature header of a notification against its body.

    :param body: The raw request body.
    :param secret: The secret shared with the hub.
    :param header: The header value in the form ``algorithm=hexdigest``.
    :return: True if the signature matches, False if it is missing, malformed,
        uses an unsupported algorithm or does not match.
    """
    if header is None or "=" not in header:
        return False

    algorithm, _, value = header.partition("=")
    digestmod = SUPPORTED_ALGORITHMS.get(algorithm.strip().lower())
    if digestmod is None:
        return False

    value = value.strip().lower()
    if not value.isascii():
        return False

    hash_obj = hmac.new(secret.encode(), body, digestmod)
    return hmac.compare_digest(hash_obj.hexdigest(), value)
