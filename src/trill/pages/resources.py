"""Resource loading for page templates.

``FileResources`` reads text files under a root directory. Contents are
cached process-wide behind a lock, so concurrent requests share one copy;
pass ``cache=False`` in development to see edits immediately.
"""

import threading
from pathlib import Path
from typing import Protocol


class ResourceLoader(Protocol):
    """Where page templates come from."""

    def exists(self, name: str) -> bool: ...

    def get_content(self, name: str) -> str | None: ...


class FileResources:
    """Text resources under *root*. Names outside the root never resolve."""

    __slots__ = ("_cache", "_enabled", "_lock", "_root")

    def __init__(self, root: str | Path, *, cache: bool = True) -> None:
        self._root = Path(root).resolve()
        self._enabled = cache
        self._cache: dict[str, str] = {}
        self._lock = threading.Lock()

    def _resolve(self, name: str) -> Path | None:
        path = (self._root / name).resolve()
        if not path.is_relative_to(self._root) or not path.is_file():
            return None
        return path

    def exists(self, name: str) -> bool:
        if self._enabled and name in self._cache:
            return True
        return self._resolve(name) is not None

    def get_content(self, name: str) -> str | None:
        if self._enabled:
            with self._lock:
                cached = self._cache.get(name)
            if cached is not None:
                return cached

        path = self._resolve(name)
        if path is None:
            return None
        content = path.read_text(encoding="utf-8")

        if self._enabled:
            with self._lock:
                self._cache.setdefault(name, content)
        return content
