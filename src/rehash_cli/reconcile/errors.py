"""Exceptions raised during fingerprint reconciliation."""


class ReconcileError(Exception):
    """Base class for all reconciliation failures."""


class ConfigurationError(ReconcileError):
    """Raised when reconciliation options are invalid."""


class ManifestParseError(ReconcileError):
    """Raised when the JSON manifest cannot be trusted for patching."""


class RenameCollisionError(ReconcileError):
    """Raised when two renames in one run target the same filename."""

    def __init__(self, new_name: str, old_name: str, owner: str):
        self.new_name = new_name
        self.old_name = old_name
        self.owner = owner
        super().__init__(
            f"Cannot rename {old_name} to {new_name}: target already owned by {owner}"
        )


class PhaseError(ReconcileError):
    """Raised when reconciliation phases are entered out of order."""
