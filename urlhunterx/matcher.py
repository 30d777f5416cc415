from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import regex

from .errors import MatcherConfigError
from .extractors import iter_spans
from .models import Span, Strictness
from .patterns import (
    ABSOLUTE_PATH,
    IPV6_ADDRESS_NON_EMPTY,
    MULTI_SEGMENT_PATH,
    PATH_CONT,
    any_of,
    domain_pattern,
    email_pattern,
    web_url_pattern,
)
from .registry import TLDRegistry
from .schemes import DEFAULT_SCHEME_LISTS, SchemeLists


@dataclass(frozen=True)
class ExtractorConfig:
    # schemes/hosts: None means the defaults; an empty tuple is rejected
    strictness: Strictness = Strictness.ANY
    schemes: Optional[Tuple[str, ...]] = None
    hosts: Optional[Tuple[str, ...]] = None
    custom_tlds: Tuple[str, ...] = ()
    scheme_lists: SchemeLists = DEFAULT_SCHEME_LISTS
    registry: Optional[TLDRegistry] = None
    prefer_longest: bool = True

    def effective_registry(self) -> TLDRegistry:
        base = self.registry or TLDRegistry.default()
        return base.extend(self.custom_tlds)


@dataclass(frozen=True)
class Alternative:
    kind: str
    tier: Strictness
    rx: regex.Pattern


class CompiledMatcher:
    def __init__(self, config: ExtractorConfig, alternatives: List[Alternative]):
        self.config = config
        self.alternatives: Tuple[Alternative, ...] = tuple(alternatives)
        self.prefer_longest = config.prefer_longest

    @property
    def strictness(self) -> Strictness:
        return self.config.strictness

    def search(self, text: str, pos: int = 0) -> Optional[Span]:
        return next(iter_spans(self, text, pos), None)

    def finditer(self, text: str) -> Iterator[Span]:
        return iter_spans(self, text)

    def __repr__(self) -> str:
        kinds = ",".join(alt.kind for alt in self.alternatives)
        return f"CompiledMatcher(strictness={self.strictness.name}, alternatives=[{kinds}])"


# strictness level at which each form is first enabled
FORM_TIERS = {
    "scheme": Strictness.SCHEME_ONLY,
    "host": Strictness.SCHEME_OR_HOST,
    "ipv6": Strictness.SCHEME_OR_HOST,
    "email": Strictness.ANY,
    "path": Strictness.ANY,
}


def _validate_overrides(name: str, values: Optional[Tuple[str, ...]]) -> None:
    if values is None:
        return
    if not values or any(not v or not v.strip() for v in values):
        raise MatcherConfigError(f"{name} override must contain at least one non-empty value")


def scheme_form(config: ExtractorConfig) -> str:
    if config.schemes is not None:
        return "(?i:" + any_of(s.strip() for s in config.schemes) + ")://" + PATH_CONT
    lists = config.scheme_lists
    heads = []
    if lists.authority:
        heads.append(any_of(lists.authority) + "://")
    if lists.no_authority:
        heads.append(any_of(lists.no_authority) + ":")
    return "(?i:" + "|".join(heads) + ")" + PATH_CONT


def host_literal(config: ExtractorConfig) -> str:
    if config.hosts is not None:
        return "(?i:" + any_of(h.strip() for h in config.hosts) + r")\b"
    return domain_pattern(config.effective_registry().tlds)


def build_alternatives(config: ExtractorConfig) -> List[Tuple[str, str]]:
    try:
        strictness = Strictness(config.strictness)
    except ValueError:
        raise MatcherConfigError(f"unknown strictness: {config.strictness!r}") from None
    _validate_overrides("scheme", config.schemes)
    _validate_overrides("host", config.hosts)
    if config.schemes is None and config.scheme_lists.is_empty():
        raise MatcherConfigError("scheme lists are empty")

    forms = [("scheme", scheme_form(config))]
    if strictness >= Strictness.SCHEME_OR_HOST:
        domain = host_literal(config)
        forms.append(("host", web_url_pattern(domain)))
        forms.append(("ipv6", IPV6_ADDRESS_NON_EMPTY))
        if strictness >= Strictness.ANY:
            forms.append(("email", email_pattern(domain)))
            forms.append(("path", ABSOLUTE_PATH))
            forms.append(("path", MULTI_SEGMENT_PATH))
    return forms


def compile_matcher(config: ExtractorConfig) -> CompiledMatcher:
    alternatives = []
    for kind, source in build_alternatives(config):
        try:
            rx = regex.compile(source)
        except regex.error as exc:
            raise MatcherConfigError(f"{kind} pattern rejected: {exc}") from exc
        alternatives.append(Alternative(kind, FORM_TIERS[kind], rx))
    return CompiledMatcher(config, alternatives)


class MatcherFactory:
    # one Future per config; concurrent callers wait on the first build
    def __init__(self, compiler: Callable[[ExtractorConfig], CompiledMatcher] = compile_matcher):
        self._compiler = compiler
        self._lock = threading.Lock()
        self._cells: Dict[ExtractorConfig, Future] = {}

    def get(self, config: ExtractorConfig) -> CompiledMatcher:
        with self._lock:
            cell = self._cells.get(config)
            owner = cell is None
            if owner:
                cell = Future()
                self._cells[config] = cell
        if owner:
            try:
                cell.set_result(self._compiler(config))
            except Exception as exc:
                cell.set_exception(exc)
        return cell.result()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cells)

    def clear(self) -> None:
        with self._lock:
            self._cells.clear()
