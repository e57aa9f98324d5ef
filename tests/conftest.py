"""Shared fixtures for reconciliation tests."""

from pathlib import Path
from typing import Dict, List

import pytest

from rehash_cli.reconcile import BuildUnit, Compilation, InMemoryAssetStore, OutputDirectory


class RecordingOutputDirectory(OutputDirectory):
    """OutputDirectory that records every mutation."""

    def __init__(self, root: Path):
        super().__init__(root)
        self.writes: List[str] = []
        self.deletes: List[str] = []

    def write_text(self, name, payload):
        self.writes.append(name)
        return super().write_text(name, payload)

    def delete(self, name):
        self.deletes.append(name)
        super().delete(name)

    @property
    def operations(self):
        return self.writes + self.deletes


def keyed_fingerprint(mapping: Dict[str, str], default: str = "0" * 32):
    """Fingerprint function returning ``mapping[marker]`` for the first marker found in the payload."""
    seen: List[str] = []

    def fingerprint(payload: str) -> str:
        seen.append(payload)
        for marker, value in mapping.items():
            if marker in payload:
                return value
        return default

    fingerprint.seen = seen
    return fingerprint


@pytest.fixture
def dist(tmp_path):
    """Empty bundler output directory."""
    out = tmp_path / "dist"
    out.mkdir()
    return out


@pytest.fixture
def write_files(dist):
    """Write ``{name: text}`` into the output directory."""

    def _write(files: Dict[str, str]) -> Dict[str, str]:
        for name, text in files.items():
            path = dist / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(text.encode("utf-8"))
        return files

    return _write


@pytest.fixture
def make_compilation(dist):
    """Build a Compilation whose asset table lists every given file."""

    def _make(units: List[BuildUnit], entry="[name].[chunkhash:8].js",
              non_entry="[name].[chunkhash:8].js", assets=None) -> Compilation:
        if assets is None:
            assets = {f: f"source:{f}" for unit in units for f in unit.files}
        return Compilation(
            output_path=dist,
            entry_template=entry,
            non_entry_template=non_entry,
            units=units,
            assets=InMemoryAssetStore(assets),
        )

    return _make
