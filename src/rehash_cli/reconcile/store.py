"""Asset table interface and output directory access."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class AssetStore(ABC):
    """The bundler's table of emitted assets, keyed by output filename."""

    @abstractmethod
    def get(self, name: str) -> Any:
        """Return the payload registered under ``name`` (None if absent)."""
        pass

    @abstractmethod
    def set(self, name: str, payload: Any) -> None:
        """Register ``payload`` under ``name``."""
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        """Forget ``name``. Removing an unknown name is a no-op."""
        pass

    @abstractmethod
    def __contains__(self, name: str) -> bool:
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[str]:
        pass

    def move(self, old_name: str, new_name: str, payload: Any = None) -> None:
        """Re-key an entry, keeping its payload.

        When ``old_name`` is unknown, ``payload`` is registered under
        ``new_name`` instead so the table still lists the file on disk.
        """
        if old_name in self:
            payload = self.get(old_name)
        self.set(new_name, payload)
        if old_name != new_name:
            self.remove(old_name)


class InMemoryAssetStore(AssetStore):
    """Dictionary backed asset table."""

    def __init__(self, assets: Optional[Dict[str, Any]] = None):
        self._assets: Dict[str, Any] = dict(assets or {})

    def get(self, name: str) -> Any:
        return self._assets.get(name)

    def set(self, name: str, payload: Any) -> None:
        self._assets[name] = payload

    def remove(self, name: str) -> None:
        self._assets.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._assets

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._assets))

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._assets)


class OutputDirectory:
    """Text file access relative to the bundler's output path.

    Payloads are UTF-8 with surrogateescape and no newline translation, so a
    rewrite leaves untouched bytes identical even when a file is not valid UTF-8.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def read_text(self, name: str) -> str:
        return self.path(name).read_bytes().decode('utf-8', 'surrogateescape')

    def write_text(self, name: str, payload: str) -> Path:
        p = self.path(name)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(payload.encode('utf-8', 'surrogateescape'))
        return p

    def delete(self, name: str) -> None:
        self.path(name).unlink()
