"""Alias table: shorter spellings for well-known (owner, method) pairs.

Every Renderer owns one, but no rendering rule reads it yet. A rule that
wants to shorten a call should look the pair up here before falling back to
the method name.
"""

from __future__ import annotations

DEFAULT_ALIASES: dict[tuple[str, str], str] = {
    ("Kernel", "p"): "p",
    ("Object", "dup"): "dup",
}


class AliasTable:
    """Mapping of (owner type, method) to a replacement identifier."""

    def __init__(self, entries: dict[tuple[str, str], str] | None = None) -> None:
        self._entries: dict[tuple[str, str], str] = dict(DEFAULT_ALIASES)
        if entries is not None:
            self._entries.update(entries)

    def set(self, key: tuple[str, str], value: str) -> None:
        self._entries[key] = value

    def get(self, key: tuple[str, str]) -> str | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
