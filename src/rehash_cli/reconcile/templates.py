"""Naming template parsing and filename rendering."""

import re
from typing import Optional

from .constants import (
    CONTENT_PLACEHOLDER_REGEX,
    FINGERPRINT_PLACEHOLDER_REGEX,
    ID_TOKEN,
    NAME_TOKEN,
    PLACEHOLDER_KINDS,
)
from .models import NamingTemplate, UnitId


_QUERY_REGEX = re.compile(r"\?.*")


def parse_naming_template(raw: Optional[str]) -> NamingTemplate:
    """Extract the fingerprint placeholder kind and truncation from a template.

    A template without a fingerprint placeholder yields a NamingTemplate whose
    ``fingerprint_kind`` is None; units named by it cannot be reconciled.

    Args:
        raw (Optional[str]): Template such as ``"[name].[chunkhash:8].js"``.

    Returns:
        NamingTemplate: Parsed template.
    """
    raw = raw or ""
    match = FINGERPRINT_PLACEHOLDER_REGEX.search(raw)
    if not match:
        return NamingTemplate(raw=raw)

    length = match.group(2)
    return NamingTemplate(
        raw=raw,
        fingerprint_kind=PLACEHOLDER_KINDS[match.group(1).lower()],
        truncate_length=int(length) if length is not None else None,
    )


def get_file_type(filename: str) -> str:
    """Return the last dot-delimited segment of ``filename``, ignoring any query string."""
    return _QUERY_REGEX.sub("", filename).split(".")[-1]


def render_filename(template: NamingTemplate, unit_id: UnitId, unit_name: Optional[str],
                    fingerprint: str, ext: str) -> str:
    """Build the filename a unit gets for a given content fingerprint.

    The template's last segment is replaced by ``ext`` so the rendered name
    keeps the extension of the file being renamed.

    Args:
        template (NamingTemplate): Governing naming template.
        unit_id (UnitId): Unit id substituted for ``[id]``.
        unit_name (Optional[str]): Unit name substituted for ``[name]``.
        fingerprint (str): Already truncated content fingerprint.
        ext (str): Extension of the file being renamed.

    Returns:
        str: Rendered filename.
    """
    parts = template.raw.split(".")
    stem = ".".join(parts[:-1] + [ext])
    stem = stem.replace(ID_TOKEN, str(unit_id))
    stem = stem.replace(NAME_TOKEN, unit_name if unit_name is not None else str(unit_id))
    return CONTENT_PLACEHOLDER_REGEX.sub(lambda _match: fingerprint, stem)
