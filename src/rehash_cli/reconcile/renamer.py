"""Rename of a single emitted asset on disk and in the asset table."""

from .patching import patch_occurrences
from .store import AssetStore, OutputDirectory


class AssetRenamer:
    """Moves one artifact to a new filename and keeps the asset table in step."""

    def __init__(self, output_dir: OutputDirectory, assets: AssetStore):
        """Initialize the renamer.

        Args:
            output_dir (OutputDirectory): Output directory holding the artifacts.
            assets (AssetStore): The bundler's asset table.
        """
        self.output_dir = output_dir
        self.assets = assets

    def rename(self, payload: str, old_name: str, new_name: str,
               self_ref_old: str, self_ref_new: str) -> str:
        """Rewrite a payload's self references and move it to ``new_name``.

        The old file is deleted before the new one is written; a failure of
        either step propagates and nothing is rolled back. Callers must only
        invoke this once ``new_name`` is final.

        Args:
            payload (str): Current artifact content.
            old_name (str): Filename the artifact is stored under now.
            new_name (str): Filename to move it to.
            self_ref_old (str): Text inside the payload naming the old artifact
                (a map's backlink to its script, a script's map comment).
            self_ref_new (str): Replacement for ``self_ref_old``.

        Returns:
            str: The payload as written.
        """
        payload = patch_occurrences(payload, self_ref_old, self_ref_new)

        if old_name == new_name:
            # Content changed but the name did not: overwrite in place.
            self.output_dir.write_text(new_name, payload)
            if new_name not in self.assets:
                self.assets.set(new_name, payload)
            return payload

        self.output_dir.delete(old_name)
        self.output_dir.write_text(new_name, payload)
        self.assets.move(old_name, new_name, payload)
        return payload
