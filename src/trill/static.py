"""Static file resolution.

Maps request paths under a URL prefix to files in a directory. Symlinks
are resolved and the final path must stay inside the directory, so
``/../secret`` never escapes it. Directories resolve to their index file.
"""

from pathlib import Path


class StaticFiles:
    """Resolve request paths to files under *directory*.

    Usage::

        static = StaticFiles("./public", prefix="/")
        static.resolve("/css/site.css")  # Path or None
    """

    __slots__ = ("_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/",
        *,
        index: str = "index.html",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index

        # Normalize prefix: leading slash, no trailing. Root becomes "".
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    def resolve(self, path: str) -> Path | None:
        """The file to serve for *path*, or ``None``."""
        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                return None
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return None
        if file_path.is_dir():
            file_path = file_path / self._index
        if not file_path.is_file():
            return None
        return file_path
