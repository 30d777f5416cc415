# tests/test_extractors.py
import time

import pytest

from conftest import EXPECTED
from urlhunterx.extractors import SpanScan, extract_from_text, find_all, find_all_strings, iter_spans
from urlhunterx.models import Strictness


@pytest.mark.parametrize("strictness", list(Strictness))
def test_reference_corpus(matcher_for, reference_text, strictness):
    assert find_all_strings(matcher_for(strictness), reference_text) == EXPECTED[strictness]


def test_match_sets_grow_with_strictness(matcher_for, reference_text):
    sets = [
        {(s.offset, s.length) for s in find_all(matcher_for(level), reference_text)}
        for level in Strictness
    ]
    assert sets[0] <= sets[1] <= sets[2]


def test_spans_are_ordered_and_disjoint(matcher_for, reference_text):
    spans = find_all(matcher_for(Strictness.ANY), reference_text)
    for prev, cur in zip(spans, spans[1:]):
        assert prev.end <= cur.offset
    for span in spans:
        assert reference_text[span.offset : span.end] == span.text


def test_balanced_parentheses_kept(matcher_for):
    text = "(https://example.com/a(b)c)."
    assert find_all_strings(matcher_for(Strictness.SCHEME_ONLY), text) == ["https://example.com/a(b)c"]


def test_scheme_is_case_insensitive(matcher_for):
    m = matcher_for(Strictness.SCHEME_ONLY)
    assert find_all_strings(m, "HTTPS://EXAMPLE.COM") == ["HTTPS://EXAMPLE.COM"]
    assert find_all_strings(m, "https://example.com") == ["https://example.com"]


def test_bare_ipv4_bounds(matcher_for):
    m = matcher_for(Strictness.SCHEME_OR_HOST)
    assert find_all_strings(m, "ping 300.1.1.1") == []
    assert find_all_strings(m, "ping 192.168.1.1") == ["192.168.1.1"]


def test_email_only_at_any(matcher_for):
    text = "contact: admin@example.org."
    [span] = find_all(matcher_for(Strictness.ANY), text)
    assert (span.text, span.kind, span.offset) == ("admin@example.org", "email", 9)
    [host] = find_all(matcher_for(Strictness.SCHEME_OR_HOST), text)
    assert (host.text, host.kind) == ("example.org", "host")


def test_longest_alternative_wins_at_same_start(matcher_for):
    text = "www.example.com/a."
    [longest] = find_all(matcher_for(Strictness.ANY), text)
    assert (longest.text, longest.kind) == ("www.example.com/a.", "path")
    [first] = find_all(matcher_for(Strictness.ANY, prefer_longest=False), text)
    assert (first.text, first.kind) == ("www.example.com/a", "host")


def test_no_matches_and_empty_text(matcher_for):
    m = matcher_for(Strictness.ANY)
    assert find_all(m, "") == []
    assert list(iter_spans(m, "plain words only")) == []


def test_span_scan_is_restartable(matcher_for):
    scan = SpanScan(matcher_for(Strictness.SCHEME_ONLY), "a http://a.example b https://b.example")
    first = [s.text for s in scan]
    assert first == ["http://a.example", "https://b.example"]
    assert [s.text for s in scan] == first
    assert scan.offsets() == {(2, 16), (21, 17)}


def test_extract_from_text_refangs(matcher_for):
    findings = extract_from_text(
        "ioc: hxxps://evil[.]example[.]com/x\n",
        "feed.txt",
        3,
        matcher_for(Strictness.SCHEME_ONLY),
        refang=True,
    )
    assert [(f.kind, f.value) for f in findings] == [("scheme", "https://evil.example.com/x")]
    assert findings[0].occurrence.line_no == 3
    assert findings[0].occurrence.source == "feed.txt"


def test_extract_from_text_strips_html(matcher_for):
    findings = extract_from_text(
        '<a href="x">https://example.com/page</a>',
        "page.html",
        1,
        matcher_for(Strictness.SCHEME_ONLY),
        strip_html=True,
    )
    assert [(f.value, f.offset) for f in findings] == [("https://example.com/page", 12)]
    assert extract_from_text("   \n", "blank", 1, matcher_for(Strictness.ANY)) == []


def test_scheme_url_survives_earlier_path_candidate(matcher_for):
    text = "a/https://example.com"
    per_level = [find_all(matcher_for(level), text) for level in Strictness]
    for spans in per_level:
        assert [(s.offset, s.length, s.kind) for s in spans] == [(2, 19, "scheme")]


@pytest.mark.parametrize(
    "text",
    [
        "see a/https://example.com/x and b/http://example.org",
        "mail admin@example.org or visit docs/http://example.net/a",
        "(https://example.com/a(b)c). www.example.com",
    ],
)
def test_stricter_spans_kept_at_looser_levels(matcher_for, text):
    scheme_only, scheme_or_host, any_form = (
        {(s.offset, s.length) for s in find_all(matcher_for(level), text)} for level in Strictness
    )
    assert scheme_only <= scheme_or_host
    assert scheme_only <= any_form


@pytest.mark.parametrize("strictness", [Strictness.SCHEME_OR_HOST, Strictness.ANY])
@pytest.mark.parametrize("text", ["a" * 100000, "QUJD" * 25000, "a-" * 50000])
def test_long_tokens_scan_quickly(matcher_for, strictness, text):
    m = matcher_for(strictness)
    started = time.perf_counter()
    assert find_all(m, text) == []
    assert time.perf_counter() - started < 5.0


def test_labels_longer_than_dns_limit_are_not_hosts(matcher_for):
    m = matcher_for(Strictness.SCHEME_OR_HOST)
    assert find_all_strings(m, "a" * 63 + ".com") == ["a" * 63 + ".com"]
    assert find_all_strings(m, "a" * 64 + ".com") == []
