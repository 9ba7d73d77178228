"""Immutable multi-value parameters — query strings and posted forms.

Both parse to ``field -> [values]``; ``__getitem__`` returns the first value.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class Params(Mapping[str, str]):
    """Immutable request parameters parsed from a URL-encoded string."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    @classmethod
    def parse(cls, encoded: bytes | str) -> Params:
        """Parse ``a=1&b=2`` (query string or form body)."""
        if isinstance(encoded, bytes):
            encoded = encoded.decode("utf-8")
        return cls(parse_qs(encoded, keep_blank_values=True))

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Params({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))
