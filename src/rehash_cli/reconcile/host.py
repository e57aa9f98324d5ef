"""Loading a finished compilation from a bundler stats file.

The stats file is the JSON a bundler writes after emitting its output::

    {
      "outputPath": "dist",
      "output": {"filename": "[name].[chunkhash:8].js",
                 "chunkFilename": "[id].[chunkhash:8].js"},
      "chunks": [
        {"id": 0, "name": "app", "hash": "abcdef1234567890",
         "files": ["app.abcdef12.js", "app.abcdef12.js.map"], "entry": true}
      ],
      "assets": ["app.abcdef12.js", "app.abcdef12.js.map"]
    }

A relative ``outputPath`` is resolved against the stats file's directory.
``assets`` is optional; the asset table defaults to every declared chunk file.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ReconcileError
from .models import BuildUnit, Compilation
from .store import InMemoryAssetStore


def _parse_unit(raw: Dict[str, Any]) -> BuildUnit:
    if 'id' not in raw:
        raise ReconcileError(f"Chunk without an id in stats file: {raw!r}")
    if not raw.get('hash'):
        raise ReconcileError(f"Chunk {raw['id']} has no 'hash' in stats file")
    files = raw.get('files') or []
    if not isinstance(files, list):
        raise ReconcileError(f"Chunk {raw['id']} has a non-list 'files' entry")
    return BuildUnit(
        id=raw['id'],
        name=raw.get('name') or None,
        pre_emit_fingerprint=str(raw['hash']),
        files=[str(f) for f in files],
        is_entry=bool(raw.get('entry', False)),
    )


def load_compilation(stats_path: Union[str, Path], output_path: Optional[Union[str, Path]] = None) -> Compilation:
    """Build a Compilation from a stats file.

    Args:
        stats_path: Path to the stats JSON.
        output_path: Overrides the stats file's ``outputPath``.

    Returns:
        Compilation: Units, templates and a seeded asset table.

    Raises:
        ReconcileError: If the stats file is missing required fields.
    """
    stats_path = Path(stats_path)
    try:
        stats = json.loads(stats_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ReconcileError(f"Malformed stats file {stats_path}: {e}") from e
    if not isinstance(stats, dict):
        raise ReconcileError(f"Stats file {stats_path} must contain a JSON object")

    output = stats.get('output') or {}
    root = Path(output_path or stats.get('outputPath') or '.')
    if not root.is_absolute():
        root = (Path.cwd() if output_path else stats_path.parent) / root

    units = [_parse_unit(raw) for raw in stats.get('chunks') or []]

    declared: List[str] = stats.get('assets') or [f for unit in units for f in unit.files]
    assets = InMemoryAssetStore()
    for name in declared:
        if (root / name).is_file():
            assets.set(name, root / name)

    filename = output.get('filename', '')
    return Compilation(
        output_path=root,
        entry_template=filename,
        non_entry_template=output.get('chunkFilename') or filename,
        units=units,
        assets=assets,
    )


def dump_assets(compilation: Compilation) -> List[str]:
    """Asset names currently known to the compilation's asset table, sorted."""
    return sorted(compilation.assets)
