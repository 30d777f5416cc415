from __future__ import annotations

import hashlib
from typing import Optional


DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "sftp": 22,
    "ssh": 22,
    "telnet": 23,
    "gopher": 70,
    "imap": 143,
    "ldap": 389,
    "ldaps": 636,
    "nntp": 119,
    "rtsp": 554,
    "redis": 6379,
    "mongodb": 27017,
    "postgres": 5432,
    "postgresql": 5432,
    "irc": 6667,
    "ircs": 6697,
    "gemini": 1965,
}


def normalize_host(host: str) -> str:
    return host.strip().strip(".").lower()


def normalize_suffix(suffix: str) -> str:
    return normalize_host(suffix)


def to_punycode(value: str) -> Optional[str]:
    if value.isascii():
        return value
    try:
        return value.encode("idna").decode("ascii")
    except UnicodeError:
        return None


def stable_key(kind: str, value: str) -> str:
    h = hashlib.blake2b(digest_size=16)
    h.update(kind.encode("utf-8", errors="ignore"))
    h.update(b"\x00")
    h.update(value.encode("utf-8", errors="ignore"))
    return h.hexdigest()
