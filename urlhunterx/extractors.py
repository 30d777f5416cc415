from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional

from .models import Finding, Occurrence, Span
from .text_utils import refang_text, strip_html_tags, trim_snippet

if TYPE_CHECKING:
    from .matcher import CompiledMatcher


def _leftmost(candidates, prefer_longest: bool):
    best = None
    for m, alt in candidates:
        if best is None or m.start() < best[0].start():
            best = (m, alt)
        elif prefer_longest and m.start() == best[0].start() and m.end() > best[0].end():
            best = (m, alt)
    return best


def _pick(candidates, prefer_longest: bool):
    best = _leftmost(candidates, prefer_longest)
    while best is not None:
        m, alt = best
        # a stricter form that starts inside and runs past the end takes over
        crossing = [
            (c, a)
            for c, a in candidates
            if a.tier < alt.tier and m.start() < c.start() < m.end() < c.end()
        ]
        if not crossing:
            break
        best = _leftmost(crossing, prefer_longest)
    return best


def iter_spans(matcher: "CompiledMatcher", text: str, pos: int = 0) -> Iterator[Span]:
    alternatives = matcher.alternatives
    # next match of each alternative, reused until the scan passes its start
    pending: List[Optional[object]] = [None] * len(alternatives)
    exhausted = [False] * len(alternatives)
    while pos <= len(text):
        for idx, alt in enumerate(alternatives):
            if exhausted[idx]:
                continue
            m = pending[idx]
            if m is None or m.start() < pos:
                m = alt.rx.search(text, pos)
                pending[idx] = m
                if m is None:
                    exhausted[idx] = True
        candidates = [(m, alt) for m, alt in zip(pending, alternatives) if m is not None]
        best = _pick(candidates, matcher.prefer_longest)
        if best is None:
            return
        m, alt = best
        yield Span(m.start(), m.end(), m.group(0), alt.kind)
        pos = m.end() if m.end() > m.start() else m.end() + 1


def find_all(matcher: "CompiledMatcher", text: str) -> List[Span]:
    return list(iter_spans(matcher, text))


def find_all_strings(matcher: "CompiledMatcher", text: str) -> List[str]:
    return [span.text for span in iter_spans(matcher, text)]


@dataclass(frozen=True)
class SpanScan:
    # restartable; each iteration rescans from the start
    matcher: "CompiledMatcher"
    text: str

    def __iter__(self) -> Iterator[Span]:
        return iter_spans(self.matcher, self.text)

    def offsets(self) -> set[tuple[int, int]]:
        return {(span.offset, span.length) for span in self}


def extract_from_text(
    line: str,
    source: str,
    line_no: int,
    matcher: "CompiledMatcher",
    refang: bool = False,
    strip_html: bool = False,
) -> List[Finding]:
    findings: List[Finding] = []
    raw = line.rstrip("\r\n")
    if not raw.strip():
        return findings

    text = strip_html_tags(raw) if strip_html else raw
    if refang:
        text = refang_text(text)
    occ = Occurrence(source=source, line_no=line_no, snippet=trim_snippet(text))
    for span in iter_spans(matcher, text):
        findings.append(Finding(span.kind, span.text, occ, span.offset))
    return findings
