"""Content fingerprints for integrity checks."""

import hashlib

from common.constants import HASH_ALGORITHM

from .models import FINGERPRINT_PATTERN, Fingerprint


def fingerprint(content: str | bytes) -> Fingerprint:
    """
    Generate a SHA256 fingerprint of some content.

    Text is hashed over its exact UTF-8 encoding, with no line ending
    normalization. Bytes are hashed as given.

    Args:
        content: Decoded text or raw bytes

    Returns:
        Fingerprint tagged "sha256"
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    hash_obj = hashlib.sha256(content)
    return Fingerprint(algorithm=HASH_ALGORITHM, digest=hash_obj.hexdigest())


def verify(content: str | bytes, expected: str | Fingerprint) -> bool:
    """Check that content hashes to the expected fingerprint."""
    if isinstance(expected, str):
        expected = Fingerprint.parse(expected)
    return fingerprint(content) == expected


def is_valid_fingerprint(text: str) -> bool:
    """
    Validate fingerprint format.

    Args:
        text: Fingerprint string to validate

    Returns:
        True if it matches sha256:<64 hex characters>, False otherwise
    """
    match = FINGERPRINT_PATTERN.match(text)
    return match is not None and match.group(1) == HASH_ALGORITHM
