"""Reference-counted cache of prepared HRTF sets."""

from __future__ import annotations

from dataclasses import dataclass

from .easy import EasyHrtf


@dataclass
class _Entry:
    easy: EasyHrtf
    filename: str | None
    samplerate: float
    count: int = 1


class HrtfCache:
    """Shares prepared HRTF sets between users of the same file and rate.

    Newer entries are kept in front. A released set is closed once nobody
    holds it, except when it is the only set left in the cache.
    """

    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def _find(self, filename: str | None, samplerate: float) -> _Entry | None:
        for entry in self._entries:
            if entry.samplerate == samplerate and entry.filename == filename:
                return entry
        return None

    def lookup(self, filename: str | None, samplerate: float) -> EasyHrtf | None:
        """Return a cached set and take a reference to it, or None."""
        entry = self._find(filename, samplerate)
        if entry is None:
            return None
        entry.count += 1
        return entry.easy

    def store(
        self, easy: EasyHrtf, filename: str | None, samplerate: float
    ) -> EasyHrtf:
        """Add a set to the cache and return the set to use.

        If an equal entry already exists, ``easy`` is closed and the cached
        set is returned instead.
        """
        entry = self._find(filename, samplerate)
        if entry is not None:
            easy.close()
            return entry.easy
        self._entries.insert(0, _Entry(easy, filename, samplerate))
        return easy

    def release(self, easy: EasyHrtf) -> None:
        """Drop one reference to a cached set.

        Raises ValueError if the set is not in the cache.
        """
        for position, entry in enumerate(self._entries):
            if entry.easy is easy:
                break
        else:
            raise ValueError("HRTF set is not cached")

        has_next = position + 1 < len(self._entries)
        if entry.count == 1 and (position > 0 or has_next):
            del self._entries[position]
            easy.close()
        else:
            entry.count -= 1

    def release_all(self) -> None:
        """Close every cached set and empty the cache."""
        for entry in self._entries:
            entry.easy.close()
        self._entries.clear()