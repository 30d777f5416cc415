from __future__ import annotations

from typing import List, Optional

from .models import DomainParts
from .normalize import normalize_host
from .registry import TLDRegistry


class DomainSplitter:
    def __init__(self, registry: Optional[TLDRegistry] = None):
        self.registry = registry or TLDRegistry.default()

    def split(self, host: str) -> DomainParts:
        cleaned = normalize_host(host)
        labels = cleaned.split(".")
        if len(labels) <= 1:
            return DomainParts("", cleaned, "")

        boundary = self._find_boundary(labels)
        if boundary is None:
            return DomainParts("", cleaned, "")

        return DomainParts(
            ".".join(labels[:boundary]),
            labels[boundary],
            ".".join(labels[boundary + 1 :]),
        )

    def registrable_domain(self, host: str) -> str:
        return self.split(host).registrable

    def _find_boundary(self, labels: List[str]) -> Optional[int]:
        # grow the suffix leftwards while the registry still knows it
        matcher = self.registry.matcher
        longest = None
        for i in range(len(labels) - 1, -1, -1):
            if not matcher.contains(".".join(labels[i:])):
                break
            longest = i
        if longest is None:
            return None
        # the whole host is a known suffix; keep one label as the root
        return max(longest - 1, 0)
