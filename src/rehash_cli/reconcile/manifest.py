"""Reconciliation of the runtime manifest script and the JSON manifest.

The manifest script maps unit ids to their fingerprints (``5:"abcdef12"``),
its source map carries the same text with escaped quotes, and the JSON
manifest maps logical asset names (``app.js``) to fingerprinted filenames.
All three are loaded once, patched in memory for every unit rename, then the
manifest script is renamed after its own patched content and the JSON
manifest is written last.
"""

import copy
import json
import posixpath
from typing import Iterable, List, Optional, Tuple

from .constants import (
    DEFAULT_MANIFEST_CHUNK_NAME,
    DEFAULT_MANIFEST_JSON_NAME,
    MANIFEST_JSON_INDENT,
    SOURCE_MAP_SUFFIX,
)
from .errors import ManifestParseError
from .fingerprint import FingerprintFunction, fingerprint_artifact, truncate_fingerprint
from .models import BuildUnit, ManifestArtifacts, NamingTemplate, RenamePlan, UnitId
from .patching import patch_occurrences
from .renamer import AssetRenamer
from .store import OutputDirectory
from .templates import get_file_type, render_filename


def find_manifest_unit(units: Iterable[BuildUnit],
                       chunk_name: str = DEFAULT_MANIFEST_CHUNK_NAME) -> Tuple[Optional[BuildUnit], Optional[str]]:
    """Locate the manifest unit and its script (its first non-map file)."""
    for unit in units:
        if unit is None or unit.name != chunk_name:
            continue
        for filename in unit.files:
            if not filename.endswith(SOURCE_MAP_SUFFIX):
                return unit, filename
    return None, None


def script_association(unit_id: UnitId, fingerprint: str) -> str:
    """Text the manifest script uses to associate a unit id with a fingerprint."""
    return f'{unit_id}:"{fingerprint}"'


def escaped_script_association(unit_id: UnitId, fingerprint: str) -> str:
    """The association as it appears inside a JSON-encoded source map."""
    return f'{unit_id}:\\"{fingerprint}\\"'


def update_manifest_json(manifest_json: dict, keys: Iterable[str], find: str, replace: str) -> List[str]:
    """Replace ``find`` with ``replace`` in the string values of ``keys``.

    Returns:
        List[str]: Keys whose value changed.
    """
    changed = []
    for key in keys:
        value = manifest_json.get(key)
        if not isinstance(value, str):
            continue
        patched = patch_occurrences(value, find, replace)
        if patched != value:
            manifest_json[key] = patched
            changed.append(key)
    return changed


class ManifestReconciler:
    """Patches manifest artifacts after every unit rename is known."""

    def __init__(self, output_dir: OutputDirectory, renamer: AssetRenamer,
                 non_entry_template: NamingTemplate, fingerprint: FingerprintFunction,
                 manifest_json_name: str = DEFAULT_MANIFEST_JSON_NAME,
                 manifest_chunk_name: str = DEFAULT_MANIFEST_CHUNK_NAME):
        self.output_dir = output_dir
        self.renamer = renamer
        self.template = non_entry_template
        self.fingerprint = fingerprint
        self.manifest_json_name = manifest_json_name
        self.manifest_chunk_name = manifest_chunk_name
        self.artifacts = ManifestArtifacts()
        self.unit: Optional[BuildUnit] = None
        self.warnings: List[str] = []
        self._loaded_script: Optional[str] = None
        self._loaded_map: Optional[str] = None
        self._loaded_json: Optional[dict] = None

    # Loading

    def load(self, units: Iterable[BuildUnit]) -> ManifestArtifacts:
        """Read the manifest script, its map and the JSON manifest if present.

        Raises:
            ManifestParseError: If the JSON manifest is not a JSON object.
        """
        unit, script_name = find_manifest_unit(units, self.manifest_chunk_name)
        if script_name and self.output_dir.exists(script_name):
            self.unit = unit
            self.artifacts.script_name = script_name
            self.artifacts.script = self.output_dir.read_text(script_name)
            map_name = script_name + SOURCE_MAP_SUFFIX
            if self.output_dir.exists(map_name):
                self.artifacts.script_map = self.output_dir.read_text(map_name)

        if self.output_dir.exists(self.manifest_json_name):
            self.artifacts.json = self._parse_json(self.output_dir.read_text(self.manifest_json_name))

        self._loaded_script = self.artifacts.script
        self._loaded_map = self.artifacts.script_map
        self._loaded_json = copy.deepcopy(self.artifacts.json)
        return self.artifacts

    def _parse_json(self, text: str) -> dict:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"Malformed {self.manifest_json_name}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestParseError(
                f"Malformed {self.manifest_json_name}: expected an object, got {type(data).__name__}"
            )
        return data

    # Per-unit reference patch

    def apply_plans(self, plans: Iterable[RenamePlan]) -> None:
        """Point every manifest artifact at the new fingerprints of renamed units."""
        for plan in plans:
            self.apply_plan(plan)

    def apply_plan(self, plan: RenamePlan) -> None:
        # Without a pre-emit fingerprint there is no association to look for
        if not plan.old_fingerprint:
            return
        artifacts = self.artifacts
        if artifacts.has_script:
            old = script_association(plan.unit_id, plan.old_fingerprint)
            artifacts.script = patch_occurrences(
                artifacts.script, old, script_association(plan.unit_id, plan.new_fingerprint)
            )
            if artifacts.script_map is not None:
                artifacts.script_map = patch_occurrences(
                    artifacts.script_map,
                    escaped_script_association(plan.unit_id, plan.old_fingerprint),
                    escaped_script_association(plan.unit_id, plan.new_fingerprint),
                )

        if artifacts.has_json and plan.unit_name:
            ext = get_file_type(plan.old_filename)
            key = f"{plan.unit_name}.{ext}"
            update_manifest_json(
                artifacts.json, [key, key + SOURCE_MAP_SUFFIX], plan.old_fingerprint, plan.new_fingerprint
            )

    # Manifest self-rename

    def plan_self_rename(self) -> Optional[RenamePlan]:
        """Compute the manifest script's new name from its patched content.

        Returns:
            Optional[RenamePlan]: None when there is no manifest script, when
            its name is unchanged, or when the non-entry template carries no
            content fingerprint.
        """
        artifacts = self.artifacts
        if not artifacts.has_script or self.unit is None:
            return None
        if not self.template.uses_content_fingerprint:
            self.warnings.append(
                f"Manifest script {artifacts.script_name} kept its name: "
                f"'{self.template.raw}' has no content fingerprint"
            )
            return None

        length = self.template.truncate_length
        new_fingerprint = truncate_fingerprint(
            fingerprint_artifact(self.fingerprint, artifacts.script, artifacts.script_name), length
        )
        new_name = render_filename(
            self.template, self.unit.id, self.manifest_chunk_name, new_fingerprint,
            get_file_type(artifacts.script_name),
        )
        if new_name == artifacts.script_name:
            return None

        map_names = (None, None)
        if artifacts.script_map is not None:
            map_names = (artifacts.script_name + SOURCE_MAP_SUFFIX, new_name + SOURCE_MAP_SUFFIX)
        return RenamePlan(
            unit_id=self.unit.id,
            unit_name=self.unit.name,
            old_filename=artifacts.script_name,
            new_filename=new_name,
            old_fingerprint=truncate_fingerprint(self.unit.pre_emit_fingerprint, length),
            new_fingerprint=new_fingerprint,
            old_map_filename=map_names[0],
            new_map_filename=map_names[1],
        )

    def apply_self_rename(self, plan: Optional[RenamePlan]) -> None:
        """Write the manifest script and map under their final names.

        Without a plan the files keep their names and are only rewritten when
        a unit patch changed their content.
        """
        artifacts = self.artifacts
        if not artifacts.has_script:
            return

        old_name = artifacts.script_name
        new_name = plan.new_filename if plan else old_name
        if plan is None and artifacts.script == self._loaded_script and artifacts.script_map == self._loaded_map:
            return

        ref_old, ref_new = posixpath.basename(old_name), posixpath.basename(new_name)
        artifacts.script = self.renamer.rename(artifacts.script, old_name, new_name, ref_old, ref_new)
        if artifacts.script_map is not None:
            artifacts.script_map = self.renamer.rename(
                artifacts.script_map, old_name + SOURCE_MAP_SUFFIX, new_name + SOURCE_MAP_SUFFIX,
                ref_old, ref_new,
            )
        artifacts.script_name = new_name

        if plan and artifacts.has_json:
            key = f"{self.manifest_chunk_name}.{get_file_type(old_name)}"
            update_manifest_json(artifacts.json, [key, key + SOURCE_MAP_SUFFIX], old_name, new_name)

    # JSON manifest flush

    def flush_json(self) -> bool:
        """Replace the JSON manifest on disk with the patched mapping.

        Nothing is written when no JSON manifest was loaded or no rename
        touched it.

        Returns:
            bool: Whether a JSON manifest was written.
        """
        if not self.artifacts.has_json or self.artifacts.json == self._loaded_json:
            return False
        if self.output_dir.exists(self.manifest_json_name):
            self.output_dir.delete(self.manifest_json_name)
        self.output_dir.write_text(
            self.manifest_json_name,
            json.dumps(self.artifacts.json, indent=MANIFEST_JSON_INDENT, ensure_ascii=False),
        )
        return True
