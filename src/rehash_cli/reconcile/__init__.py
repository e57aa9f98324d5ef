"""Post-emit reconciliation of content fingerprints in output filenames."""

from .config import ReconcileConfig
from .errors import (
    ConfigurationError,
    ManifestParseError,
    PhaseError,
    ReconcileError,
    RenameCollisionError,
)
from .fingerprint import compute_fingerprint, truncate_fingerprint
from .host import load_compilation
from .manifest import ManifestReconciler
from .models import (
    BuildUnit,
    Compilation,
    ManifestArtifacts,
    NamingTemplate,
    ReconcileResult,
    RenamePlan,
)
from .orchestrator import Phase, Reconciler, after_emit
from .patching import patch_occurrences
from .renamer import AssetRenamer
from .selector import select_candidates
from .store import AssetStore, InMemoryAssetStore, OutputDirectory
from .templates import parse_naming_template, render_filename

__all__ = [
    # Orchestration
    'Reconciler',
    'Phase',
    'after_emit',
    'ReconcileConfig',
    'load_compilation',

    # Components
    'parse_naming_template',
    'render_filename',
    'compute_fingerprint',
    'truncate_fingerprint',
    'patch_occurrences',
    'select_candidates',
    'AssetRenamer',
    'ManifestReconciler',

    # Models
    'BuildUnit',
    'Compilation',
    'ManifestArtifacts',
    'NamingTemplate',
    'ReconcileResult',
    'RenamePlan',
    'AssetStore',
    'InMemoryAssetStore',
    'OutputDirectory',

    # Errors
    'ReconcileError',
    'ConfigurationError',
    'ManifestParseError',
    'PhaseError',
    'RenameCollisionError',
]
