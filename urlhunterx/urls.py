from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

from .domains import DomainSplitter
from .errors import PortSyntaxError, URLSyntaxError
from .models import DomainParts
from .normalize import DEFAULT_PORTS, normalize_host


@dataclass(frozen=True)
class ParsedURL:
    original: str
    scheme: str
    netloc: str
    username: Optional[str]
    password: Optional[str]
    host: str
    port: Optional[int]
    path: str
    query: str
    fragment: str
    subdomain: str = ""
    root_domain: str = ""
    tld: str = ""
    extension: str = ""

    @property
    def domain(self) -> str:
        return self.host

    @property
    def etld_plus_one(self) -> str:
        if self.root_domain and self.tld:
            return f"{self.root_domain}.{self.tld}"
        return ""

    @property
    def effective_port(self) -> Optional[int]:
        if self.port is not None:
            return self.port
        return DEFAULT_PORTS.get(self.scheme)

    @property
    def is_ip(self) -> bool:
        return is_ip_literal(self.host)

    def to_dict(self) -> dict:
        return {
            "url": self.original,
            "scheme": self.scheme,
            "host": self.host,
            "port": self.port,
            "path": self.path,
            "query": self.query,
            "fragment": self.fragment,
            "subdomain": self.subdomain,
            "root_domain": self.root_domain,
            "tld": self.tld,
            "etld_plus_one": self.etld_plus_one,
            "extension": self.extension,
        }


def is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        return False


def add_default_scheme(raw: str, scheme: str) -> str:
    if raw.startswith("//"):
        return f"{scheme}:{raw}"
    if raw.startswith("://"):
        return f"{scheme}{raw}"
    if "//" not in raw:
        return f"{scheme}://{raw}"
    return raw


def split_host_port(hostport: str) -> Tuple[str, str]:
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            raise URLSyntaxError(f"unterminated IPv6 literal: {hostport!r}")
        host, rest = hostport[1:end], hostport[end + 1 :]
        if not rest:
            return host, ""
        if not rest.startswith(":"):
            raise URLSyntaxError(f"unexpected text after IPv6 literal: {hostport!r}")
        return host, rest[1:]
    if hostport.count(":") > 1:
        # bare IPv6 literal, no room for a port
        return hostport, ""
    host, sep, port = hostport.rpartition(":")
    if not sep:
        return hostport, ""
    return host, port


def parse_port(value: str) -> Optional[int]:
    if value == "":
        return None
    if not value.isascii() or not value.isdigit():
        raise PortSyntaxError(f"invalid port: {value!r}")
    port = int(value)
    if port > 65535:
        raise PortSyntaxError(f"port out of range: {port}")
    return port


def path_extension(path: str) -> str:
    segment = path.rsplit("/", 1)[-1]
    idx = segment.rfind(".")
    if idx == -1:
        return ""
    return segment[idx:]


class URLParser:
    def __init__(self, default_scheme: str = "http", splitter: Optional[DomainSplitter] = None):
        self.default_scheme = default_scheme
        self.splitter = splitter or DomainSplitter()

    def parse(self, raw: str) -> ParsedURL:
        value = raw.strip()
        if not value:
            raise URLSyntaxError("empty URL")
        decorated = add_default_scheme(value, self.default_scheme) if self.default_scheme else value
        try:
            parts = urlsplit(decorated)
        except ValueError as exc:
            raise URLSyntaxError(f"cannot parse {raw!r}: {exc}") from exc

        userinfo, _, hostport = parts.netloc.rpartition("@")
        username = password = None
        if userinfo:
            username, sep, pwd = userinfo.partition(":")
            password = pwd if sep else None

        host_raw, port_raw = split_host_port(hostport)
        port = parse_port(port_raw)
        host = normalize_host(host_raw)

        domain = DomainParts("", "", "")
        if host and not is_ip_literal(host):
            domain = self.splitter.split(host)

        return ParsedURL(
            original=raw,
            scheme=parts.scheme.lower(),
            netloc=parts.netloc,
            username=username,
            password=password,
            host=host,
            port=port,
            path=parts.path,
            query=parts.query,
            fragment=parts.fragment,
            subdomain=domain.subdomain,
            root_domain=domain.root_domain,
            tld=domain.tld,
            extension=path_extension(parts.path),
        )
