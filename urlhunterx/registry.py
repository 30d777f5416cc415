from __future__ import annotations

import threading
from typing import Iterable, Iterator, Optional, Tuple

from . import tlds as tld_data
from .normalize import normalize_suffix, to_punycode


class SuffixMatcher:
    __slots__ = ("_index",)

    def __init__(self, suffixes: Iterable[str]):
        self._index = frozenset(suffixes)

    def contains(self, token: str) -> bool:
        return token in self._index

    def __len__(self) -> int:
        return len(self._index)


class TLDRegistry:
    __slots__ = ("_tlds", "_matcher", "_hash")

    def __init__(self, tlds: Iterable[str]):
        cleaned = set()
        for raw in tlds:
            value = normalize_suffix(raw or "")
            if not value:
                continue
            cleaned.add(value)
            puny = to_punycode(value)
            if puny:
                cleaned.add(puny)
        self._tlds: Tuple[str, ...] = tuple(sorted(cleaned))
        self._matcher = SuffixMatcher(self._tlds)
        self._hash = hash(self._tlds)

    @classmethod
    def default(cls) -> "TLDRegistry":
        return default_registry()

    @property
    def tlds(self) -> Tuple[str, ...]:
        return self._tlds

    @property
    def matcher(self) -> SuffixMatcher:
        return self._matcher

    def contains(self, token: str) -> bool:
        return self._matcher.contains(token.lower())

    def union(self, other: "TLDRegistry") -> "TLDRegistry":
        return TLDRegistry(self._tlds + other.tlds)

    def extend(self, tlds: Iterable[str]) -> "TLDRegistry":
        extra = tuple(tlds)
        if not extra:
            return self
        return TLDRegistry(self._tlds + extra)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.contains(token)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tlds)

    def __len__(self) -> int:
        return len(self._tlds)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TLDRegistry):
            return NotImplemented
        return self._tlds == other._tlds

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"TLDRegistry({len(self._tlds)} suffixes)"


_default_lock = threading.Lock()
_default_registry: Optional[TLDRegistry] = None


def default_registry() -> TLDRegistry:
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = TLDRegistry(tld_data.TLDS + tld_data.PSEUDO_TLDS)
        return _default_registry
