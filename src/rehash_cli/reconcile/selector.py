"""Selection of unit files eligible for rehashing."""

import posixpath
import re
from typing import Iterable, List, Optional

from .constants import DEFAULT_MANIFEST_CHUNK_NAME, DEFAULT_SCRIPT_EXTENSIONS, SOURCE_MAP_EXTENSION
from .models import BuildUnit, NamingTemplate
from .store import OutputDirectory
from .templates import get_file_type


def _matches_unit(filename: str, unit: BuildUnit) -> bool:
    """Whether the unit id or name appears in ``filename`` as a whole word."""
    tokens = [str(unit.id)]
    if unit.name:
        tokens.append(unit.name)
    for token in tokens:
        if re.search(rf"\b{re.escape(token)}\b", filename, re.IGNORECASE):
            return True
    return False


def is_manifest_file(filename: str, manifest_filename: Optional[str],
                     manifest_chunk_name: str = DEFAULT_MANIFEST_CHUNK_NAME) -> bool:
    """Whether ``filename`` is the runtime manifest script (or named after it)."""
    if manifest_filename and filename == manifest_filename:
        return True
    return posixpath.basename(filename).startswith(manifest_chunk_name)


def select_candidates(unit: BuildUnit, template: NamingTemplate, output_dir: OutputDirectory,
                      manifest_filename: Optional[str] = None,
                      script_extensions: Iterable[str] = DEFAULT_SCRIPT_EXTENSIONS,
                      manifest_chunk_name: str = DEFAULT_MANIFEST_CHUNK_NAME) -> List[str]:
    """Filter a unit's files down to the scripts whose name must be recomputed.

    Args:
        unit (BuildUnit): Unit being reconciled.
        template (NamingTemplate): Template governing the unit (entry or non-entry).
        output_dir (OutputDirectory): Where the unit's files were emitted.
        manifest_filename (Optional[str]): Current name of the manifest script.
        script_extensions (Iterable[str]): Extensions treated as script output.
        manifest_chunk_name (str): Name of the unit holding the manifest script.

    Returns:
        List[str]: Candidate filenames, in the unit's file order.
    """
    # Structural or missing placeholders never encoded content
    if not template.uses_content_fingerprint:
        return []

    extensions = {ext.lower() for ext in script_extensions}
    candidates = []
    for filename in unit.files:
        file_type = get_file_type(filename).lower()
        if file_type == SOURCE_MAP_EXTENSION or file_type not in extensions:
            continue
        if is_manifest_file(filename, manifest_filename, manifest_chunk_name):
            continue
        if not _matches_unit(filename, unit):
            continue
        if not output_dir.exists(filename):
            continue
        candidates.append(filename)
    return candidates
