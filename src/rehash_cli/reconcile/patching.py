"""Textual substitution of fingerprints and filenames inside payloads.

Every rewrite of artifact content goes through :func:`patch_occurrences`, so
the matching strategy lives in one place.
"""

import re


# A token boundary is anything that cannot continue a filename or a hex digest.
_TOKEN_CHAR = r"[A-Za-z0-9_.\-]"


def patch_occurrences(payload: str, old: str, new: str, whole_token: bool = False) -> str:
    """Replace every occurrence of ``old`` in ``payload`` with ``new``.

    Args:
        payload (str): Text to patch.
        old (str): Exact text to look for. Regex metacharacters are literal.
        new (str): Replacement text.
        whole_token (bool): Only replace occurrences not embedded in a longer
            filename-like token.

    Returns:
        str: Patched payload (the same object when ``old`` is empty or equal to ``new``).
    """
    if not old or old == new:
        return payload
    if not whole_token:
        return payload.replace(old, new)

    pattern = re.compile(rf"(?<!{_TOKEN_CHAR}){re.escape(old)}(?!{_TOKEN_CHAR})")
    return pattern.sub(lambda _match: new, payload)
