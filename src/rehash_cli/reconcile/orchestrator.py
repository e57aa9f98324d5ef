"""Phase-gated orchestration of a reconciliation run.

A run moves through ``PARSE_TEMPLATES -> RECONCILE_UNITS ->
RECONCILE_MANIFEST -> FLUSH_MANIFEST_JSON -> DONE``. Manifest artifacts
record every unit at once, so they are only touched after the last unit has
been renamed; each phase refuses to start unless its predecessor finished.
"""

import posixpath
from enum import Enum
from typing import Callable, Dict, List, Optional

from .config import ReconcileConfig
from .constants import SOURCE_MAP_SUFFIX
from .errors import PhaseError, RenameCollisionError
from .fingerprint import FingerprintFunction, fingerprint_artifact, fingerprint_function, truncate_fingerprint
from .manifest import ManifestReconciler, find_manifest_unit
from .models import BuildUnit, Compilation, NamingTemplate, ReconcileResult, RenamePlan
from .renamer import AssetRenamer
from .selector import select_candidates
from .store import OutputDirectory
from .templates import get_file_type, parse_naming_template, render_filename


class Phase(Enum):
    """Reconciliation phases, in execution order."""
    PARSE_TEMPLATES = "parse-templates"
    RECONCILE_UNITS = "reconcile-units"
    RECONCILE_MANIFEST = "reconcile-manifest"
    FLUSH_MANIFEST_JSON = "flush-manifest-json"
    DONE = "done"


_PHASE_ORDER = list(Phase)


class Reconciler:
    """Renames content-fingerprinted assets after their real content."""

    def __init__(self, compilation: Compilation, config: Optional[ReconcileConfig] = None,
                 fingerprint: Optional[FingerprintFunction] = None,
                 output_dir: Optional[OutputDirectory] = None):
        """Initialize the reconciler.

        Args:
            compilation (Compilation): Finished build to reconcile.
            config (Optional[ReconcileConfig]): Options, defaults when None.
            fingerprint (Optional[FingerprintFunction]): Full content digest
                function; defaults to the configured hash function.
            output_dir (Optional[OutputDirectory]): Output directory access;
                defaults to the compilation's output path.
        """
        self.compilation = compilation
        self.config = config or ReconcileConfig()
        self.config.validate()
        self.fingerprint = fingerprint or fingerprint_function(self.config.hash_function)
        self.output_dir = output_dir or OutputDirectory(compilation.output_path)
        self.assets = compilation.assets
        self.renamer = AssetRenamer(self.output_dir, self.assets)

        self.phase: Optional[Phase] = None
        self.entry_template: Optional[NamingTemplate] = None
        self.non_entry_template: Optional[NamingTemplate] = None
        self.manifest: Optional[ManifestReconciler] = None
        self.result = ReconcileResult()
        self._claims: Dict[str, str] = {}

    # Phase gate

    def _enter(self, phase: Phase) -> None:
        index = _PHASE_ORDER.index(phase)
        expected = _PHASE_ORDER[index - 1] if index else None
        if self.phase is not expected:
            current = self.phase.value if self.phase else "start"
            raise PhaseError(f"Cannot enter '{phase.value}' from '{current}'")
        self.phase = phase

    # Public entry points

    def run(self) -> ReconcileResult:
        """Reconcile every unit, then the manifest artifacts.

        Returns:
            ReconcileResult: Renames performed and warnings collected.

        Raises:
            ReconcileError: On a malformed JSON manifest or a rename collision.
            OSError: If deleting or writing an artifact fails.
        """
        self.parse_templates()
        self.reconcile_units()
        self.reconcile_manifest()
        self.flush_manifest_json()
        self._enter(Phase.DONE)
        return self.result

    def plan(self) -> List[RenamePlan]:
        """Compute the unit renames ``run`` would perform, without any I/O besides reads."""
        entry, non_entry = self._parse_templates()
        manifest_name = self._manifest_script_name()
        plans = []
        for unit in self.compilation.units:
            template = entry if unit.is_entry else non_entry
            for filename in self._candidates(unit, template, manifest_name):
                plan = self._plan_file(unit, template, filename)
                if plan is not None:
                    plans.append(plan)
        return plans

    # Phases

    def parse_templates(self) -> None:
        """Parse both naming templates and load the manifest artifacts."""
        self._enter(Phase.PARSE_TEMPLATES)
        self.entry_template, self.non_entry_template = self._parse_templates()
        self.manifest = ManifestReconciler(
            self.output_dir,
            self.renamer,
            self.non_entry_template,
            self.fingerprint,
            manifest_json_name=self.config.manifest_json_name,
            manifest_chunk_name=self.config.manifest_chunk_name,
        )
        # A malformed JSON manifest aborts here, before anything is renamed.
        self.manifest.load(self.compilation.units)
        if self.manifest.artifacts.script_name:
            self._claims[self.manifest.artifacts.script_name] = self.manifest.artifacts.script_name

    def reconcile_units(self) -> None:
        """Rename every candidate file of every unit."""
        self._enter(Phase.RECONCILE_UNITS)
        manifest_name = self.manifest.artifacts.script_name
        for unit in self.compilation.units:
            template = self.entry_template if unit.is_entry else self.non_entry_template
            if not template.uses_content_fingerprint:
                self.result.skipped_units.append(unit.label)
                continue
            for filename in self._candidates(unit, template, manifest_name):
                plan = self._plan_file(unit, template, filename)
                if plan is None:
                    continue
                self.result.renames.append(self._apply(plan))

    def reconcile_manifest(self) -> None:
        """Patch the manifest artifacts with every unit rename, then rename the manifest script."""
        self._enter(Phase.RECONCILE_MANIFEST)
        self.manifest.apply_plans(self.result.renames)
        plan = self.manifest.plan_self_rename()
        if plan is not None:
            self._claim(plan.new_filename, plan.old_filename)
            if plan.new_map_filename:
                self._claim(plan.new_map_filename, plan.old_map_filename)
        self.manifest.apply_self_rename(plan)
        self.result.manifest_rename = plan
        self.result.warnings.extend(self.manifest.warnings)

    def flush_manifest_json(self) -> None:
        """Write the JSON manifest exactly once."""
        self._enter(Phase.FLUSH_MANIFEST_JSON)
        self.result.manifest_json_written = self.manifest.flush_json()

    # Helpers

    def _parse_templates(self):
        return (
            parse_naming_template(self.compilation.entry_template),
            parse_naming_template(self.compilation.non_entry_template),
        )

    def _manifest_script_name(self) -> Optional[str]:
        _unit, name = find_manifest_unit(self.compilation.units, self.config.manifest_chunk_name)
        return name

    def _candidates(self, unit: BuildUnit, template: NamingTemplate, manifest_name: Optional[str]) -> List[str]:
        return select_candidates(
            unit,
            template,
            self.output_dir,
            manifest_filename=manifest_name,
            script_extensions=self.config.script_extensions,
            manifest_chunk_name=self.config.manifest_chunk_name,
        )

    def _plan_file(self, unit: BuildUnit, template: NamingTemplate, filename: str) -> Optional[RenamePlan]:
        """Work out the content-derived name of one file; None when it already matches."""
        payload = self.output_dir.read_text(filename)
        length = template.truncate_length
        new_fingerprint = truncate_fingerprint(fingerprint_artifact(self.fingerprint, payload, filename), length)
        new_name = render_filename(template, unit.id, unit.name, new_fingerprint, get_file_type(filename))
        if new_name == filename:
            return None

        old_map, new_map = None, None
        if self.output_dir.exists(filename + SOURCE_MAP_SUFFIX):
            old_map, new_map = filename + SOURCE_MAP_SUFFIX, new_name + SOURCE_MAP_SUFFIX
        return RenamePlan(
            unit_id=unit.id,
            unit_name=unit.name,
            old_filename=filename,
            new_filename=new_name,
            old_fingerprint=truncate_fingerprint(unit.pre_emit_fingerprint, length),
            new_fingerprint=new_fingerprint,
            old_map_filename=old_map,
            new_map_filename=new_map,
        )

    def _claim(self, new_name: str, old_name: str) -> None:
        """Reserve ``new_name`` for ``old_name`` or fail if something else owns it."""
        owner = self._claims.get(new_name)
        if owner is not None and owner != old_name:
            raise RenameCollisionError(new_name, old_name, owner)
        if owner is None and new_name in self.assets:
            raise RenameCollisionError(new_name, old_name, f"existing asset {new_name}")
        self._claims[new_name] = old_name

    def _apply(self, plan: RenamePlan) -> RenamePlan:
        """Rename a unit script and its sibling map on disk and in the asset table."""
        self._claim(plan.new_filename, plan.old_filename)
        if plan.new_map_filename:
            self._claim(plan.new_map_filename, plan.old_map_filename)

        ref_old = posixpath.basename(plan.old_filename)
        ref_new = posixpath.basename(plan.new_filename)
        payload = self.output_dir.read_text(plan.old_filename)
        self.renamer.rename(payload, plan.old_filename, plan.new_filename, ref_old, ref_new)
        if plan.new_map_filename:
            self.renamer.rename(
                self.output_dir.read_text(plan.old_map_filename),
                plan.old_map_filename,
                plan.new_map_filename,
                ref_old,
                ref_new,
            )
        return plan


def after_emit(compilation: Compilation, callback: Callable[[Optional[BaseException]], None],
               config: Optional[ReconcileConfig] = None,
               fingerprint: Optional[FingerprintFunction] = None) -> Optional[ReconcileResult]:
    """Host hook run once the bundler has emitted its output.

    ``callback`` is invoked exactly once: with None on success, or with the
    exception that aborted the run.
    """
    try:
        result = Reconciler(compilation, config, fingerprint=fingerprint).run()
    except Exception as e:
        callback(e)
        return None
    callback(None)
    return result
