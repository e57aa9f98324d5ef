"""Data models for fingerprint reconciliation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .constants import CONTENT_KIND
from .store import AssetStore


UnitId = Union[int, str]


@dataclass(frozen=True)
class NamingTemplate:
    """Output naming template and the fingerprint placeholder it carries."""
    raw: str
    fingerprint_kind: Optional[str] = None  # "content", "structural" or None
    truncate_length: Optional[int] = None

    @property
    def uses_content_fingerprint(self) -> bool:
        """Whether filenames built from this template encode unit content."""
        return self.fingerprint_kind == CONTENT_KIND


@dataclass(frozen=True)
class BuildUnit:
    """One emitted chunk as reported by the bundler."""
    id: UnitId
    name: Optional[str]
    pre_emit_fingerprint: str
    files: List[str] = field(default_factory=list)
    is_entry: bool = False

    @property
    def label(self) -> str:
        """Human readable identifier used in reports."""
        return self.name if self.name else str(self.id)


@dataclass(frozen=True)
class RenamePlan:
    """Result of reconciling one script file of a unit."""
    unit_id: UnitId
    old_filename: str
    new_filename: str
    old_fingerprint: str
    new_fingerprint: str
    unit_name: Optional[str] = None
    old_map_filename: Optional[str] = None
    new_map_filename: Optional[str] = None


@dataclass
class ManifestArtifacts:
    """Manifest script, its map and the JSON manifest held in memory for one run."""
    script_name: Optional[str] = None
    script: Optional[str] = None
    script_map: Optional[str] = None
    json: Optional[Dict[str, Any]] = None

    @property
    def has_script(self) -> bool:
        return self.script is not None

    @property
    def has_json(self) -> bool:
        return self.json is not None


@dataclass
class Compilation:
    """Host view of a finished build.

    Attributes:
        output_path: Directory the bundler emitted into.
        entry_template: Raw naming template for entry units.
        non_entry_template: Raw naming template for every other unit.
        units: Build units in bundler order.
        assets: The bundler's asset table.
    """
    output_path: Path
    entry_template: str
    non_entry_template: str
    units: List[BuildUnit]
    assets: AssetStore


@dataclass
class ReconcileResult:
    """Summary of one reconciliation run."""
    renames: List[RenamePlan] = field(default_factory=list)
    manifest_rename: Optional[RenamePlan] = None
    manifest_json_written: bool = False
    skipped_units: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def stats(self) -> Dict[str, int]:
        return {
            'renamed': len(self.renames),
            'maps_renamed': sum(1 for plan in self.renames if plan.new_map_filename),
            'skipped_units': len(self.skipped_units),
            'manifest_renamed': 1 if self.manifest_rename else 0,
        }

    def rename_map(self) -> Dict[str, str]:
        """Flatten every rename in this run to an ``{old: new}`` mapping."""
        mapping: Dict[str, str] = {}
        plans = list(self.renames)
        if self.manifest_rename:
            plans.append(self.manifest_rename)
        for plan in plans:
            mapping[plan.old_filename] = plan.new_filename
            if plan.old_map_filename and plan.new_map_filename:
                mapping[plan.old_map_filename] = plan.new_map_filename
        return mapping
