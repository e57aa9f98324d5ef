"""Content fingerprints for emitted artifacts."""

import hashlib
import posixpath
from typing import Any, Callable

from .constants import DEFAULT_HASH_FUNCTION
from .errors import ConfigurationError
from .patching import patch_occurrences


FingerprintFunction = Callable[[str], str]


def compute_fingerprint(payload: str, algorithm: str = DEFAULT_HASH_FUNCTION) -> str:
    """Compute the full hex digest of a text payload.

    The payload is encoded the way OutputDirectory decoded it, so the digest
    is the digest of the bytes on disk.
    """
    try:
        digest = hashlib.new(algorithm)
    except ValueError as e:
        raise ConfigurationError(f"Unsupported hash function '{algorithm}': {e}")
    digest.update(payload.encode("utf-8", "surrogateescape"))
    return digest.hexdigest()


def fingerprint_function(algorithm: str = DEFAULT_HASH_FUNCTION) -> FingerprintFunction:
    """Return a one-argument fingerprint callable bound to ``algorithm``.

    The algorithm is checked eagerly so a bad configuration fails before any
    file is renamed.
    """
    compute_fingerprint("", algorithm)
    return lambda payload: compute_fingerprint(payload, algorithm)


def truncate_fingerprint(fingerprint: str, length: Any = None) -> str:
    """Truncate ``fingerprint`` to ``length`` characters.

    Only a non-negative integer, or a string of decimal digits, truncates.
    Anything else (None, floats, booleans, negative numbers) means no
    truncation.
    """
    if isinstance(length, bool):
        return fingerprint
    if isinstance(length, str) and length.isdecimal():
        length = int(length)
    if not isinstance(length, int) or length < 0:
        return fingerprint
    return fingerprint[:length]


def fingerprint_artifact(fingerprint: FingerprintFunction, payload: str, own_name: str) -> str:
    """Fingerprint an artifact without the references it holds to its own name.

    Scripts point at their source map and maps point back at their script, so
    both embed the fingerprint being computed. Hashing the payload with its
    own basename removed keeps the result stable once the rename is applied.
    """
    return fingerprint(patch_occurrences(payload, posixpath.basename(own_name), ""))
