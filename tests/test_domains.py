# tests/test_domains.py
import pytest

from urlhunterx.domains import DomainSplitter
from urlhunterx.models import DomainParts


@pytest.mark.parametrize(
    "host,expected",
    [
        ("www.example.com", ("www", "example", "com")),
        ("localhost", ("", "localhost", "")),
        ("subdomain.example.co.uk", ("subdomain", "example", "co.uk")),
        ("a.b.c.example.com.au", ("a.b.c", "example", "com.au")),
        ("example.com", ("", "example", "com")),
        ("WWW.Example.COM.", ("www", "example", "com")),
        ("service.internal", ("", "service.internal", "")),
        ("co.uk", ("", "co", "uk")),
        ("shop.example.onion", ("shop", "example", "onion")),
        ("", ("", "", "")),
    ],
)
def test_split(splitter, host, expected):
    assert splitter.split(host) == expected


def test_custom_suffix_only_affects_extended_registry(registry):
    custom = DomainSplitter(registry.extend(["internal"]))
    assert custom.split("service.internal") == ("", "service", "internal")
    assert custom.split("www.example.com") == ("www", "example", "com")
    assert DomainSplitter(registry).split("service.internal") == ("", "service.internal", "")


@pytest.mark.parametrize("host", ["www.example.com", "a.b.example.co.uk", "x.y.example.com.au"])
def test_resplitting_registrable_domain_is_stable(splitter, host):
    parts = splitter.split(host)
    again = splitter.split(f"{parts.root_domain}.{parts.tld}")
    assert (again.root_domain, again.tld) == (parts.root_domain, parts.tld)
    assert again.subdomain == ""


def test_parts_rebuild_cleaned_host(splitter):
    parts = splitter.split(" Mail.Example.co.uk ")
    assert isinstance(parts, DomainParts)
    assert parts.join() == "mail.example.co.uk"
    assert parts.registrable == "example.co.uk"
    assert splitter.registrable_domain("localhost") == ""
