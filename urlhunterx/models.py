from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple


class DomainParts(NamedTuple):
    subdomain: str
    root_domain: str
    tld: str

    def join(self) -> str:
        return ".".join(part for part in self if part)

    @property
    def registrable(self) -> str:
        if self.root_domain and self.tld:
            return f"{self.root_domain}.{self.tld}"
        return ""


class Strictness(enum.IntEnum):
    SCHEME_ONLY = 0
    SCHEME_OR_HOST = 1
    ANY = 2

    @classmethod
    def from_name(cls, name: str) -> "Strictness":
        key = name.strip().lower().replace("-", "_")
        aliases = {"scheme": cls.SCHEME_ONLY, "host": cls.SCHEME_OR_HOST, "any": cls.ANY}
        if key in aliases:
            return aliases[key]
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"unknown strictness: {name}") from None


@dataclass(frozen=True)
class Span:
    offset: int
    end: int
    text: str
    kind: str

    @property
    def length(self) -> int:
        return self.end - self.offset


@dataclass(frozen=True)
class Occurrence:
    source: str
    line_no: int
    snippet: str


@dataclass(frozen=True)
class Finding:
    kind: str
    value: str
    occurrence: Occurrence
    offset: int
