# tests/test_matcher.py
import threading
import time

import pytest

from urlhunterx.errors import MatcherConfigError
from urlhunterx.extractors import find_all_strings
from urlhunterx.matcher import ExtractorConfig, MatcherFactory, build_alternatives, compile_matcher
from urlhunterx.models import Strictness
from urlhunterx.schemes import SchemeLists


@pytest.mark.parametrize(
    "strictness,kinds",
    [
        (Strictness.SCHEME_ONLY, ["scheme"]),
        (Strictness.SCHEME_OR_HOST, ["scheme", "host", "ipv6"]),
        (Strictness.ANY, ["scheme", "host", "ipv6", "email", "path", "path"]),
    ],
)
def test_forms_per_strictness(strictness, kinds):
    forms = build_alternatives(ExtractorConfig(strictness=strictness))
    assert [kind for kind, _ in forms] == kinds


@pytest.mark.parametrize(
    "config",
    [
        ExtractorConfig(schemes=()),
        ExtractorConfig(schemes=("http", " ")),
        ExtractorConfig(hosts=()),
        ExtractorConfig(strictness=7),
        ExtractorConfig(scheme_lists=SchemeLists((), (), ())),
    ],
)
def test_invalid_config_rejected(config):
    with pytest.raises(MatcherConfigError):
        compile_matcher(config)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        compile_matcher(ExtractorConfig(hosts=()))


def test_scheme_override(matcher_for):
    m = matcher_for(Strictness.SCHEME_ONLY, schemes=("ftp",))
    text = "get http://example.com or FTP://files.example.com/pub"
    assert find_all_strings(m, text) == ["FTP://files.example.com/pub"]


def test_host_override(matcher_for):
    m = matcher_for(Strictness.SCHEME_OR_HOST, hosts=("example.org",))
    text = "mirror at example.org/dl and example.com/dl"
    assert find_all_strings(m, text) == ["example.org/dl"]


def test_custom_tlds_extend_host_form(matcher_for):
    text = "call api.service.internal/v1 now"
    assert find_all_strings(matcher_for(Strictness.SCHEME_OR_HOST), text) == []
    m = matcher_for(Strictness.SCHEME_OR_HOST, custom_tlds=("internal",))
    assert find_all_strings(m, text) == ["api.service.internal/v1"]


def test_compiled_matcher_search_and_tiers(matcher_for):
    m = matcher_for(Strictness.SCHEME_OR_HOST)
    span = m.search("see www.example.com and http://example.org")
    assert (span.offset, span.text, span.kind) == (4, "www.example.com", "host")
    assert m.search("nothing here") is None
    assert [alt.tier for alt in m.alternatives] == [
        Strictness.SCHEME_ONLY,
        Strictness.SCHEME_OR_HOST,
        Strictness.SCHEME_OR_HOST,
    ]
    assert m.search("see www.example.com and http://example.org", 5).text == "http://example.org"
    assert "SCHEME_OR_HOST" in repr(m)


def test_factory_returns_same_instance_for_equal_configs():
    factory = MatcherFactory()
    a = factory.get(ExtractorConfig(strictness=Strictness.SCHEME_ONLY))
    b = factory.get(ExtractorConfig(strictness=Strictness.SCHEME_ONLY))
    c = factory.get(ExtractorConfig(strictness=Strictness.ANY))
    assert a is b
    assert a is not c
    assert len(factory) == 2


def test_factory_builds_once_under_contention():
    calls = []
    lock = threading.Lock()

    def slow_compiler(config):
        with lock:
            calls.append(config)
        time.sleep(0.05)
        return object()

    factory = MatcherFactory(compiler=slow_compiler)
    config = ExtractorConfig()
    results = []
    start = threading.Barrier(8)

    def worker():
        start.wait()
        results.append(factory.get(config))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_factory_caches_build_failure():
    calls = []

    def failing(config):
        calls.append(config)
        raise MatcherConfigError("boom")

    factory = MatcherFactory(compiler=failing)
    for _ in range(2):
        with pytest.raises(MatcherConfigError):
            factory.get(ExtractorConfig())
    assert len(calls) == 1
    factory.clear()
    assert len(factory) == 0
