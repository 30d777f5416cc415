from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import requests

from .console import RichLogger
from .errors import TLDSourceError

IANA_TLDS_URL = "https://data.iana.org/TLD/tlds-alpha-by-domain.txt"
PUBLIC_SUFFIX_URL = "https://publicsuffix.org/list/public_suffix_list.dat"
DEFAULT_SOURCES = (IANA_TLDS_URL, PUBLIC_SUFFIX_URL)

DEFAULT_USER_AGENT = "urlhunterx-tldsgen/1.0"
DEFAULT_TIMEOUT = 30
DEFAULT_OUTPUT = Path(__file__).with_name("tlds.py")

PSEUDO_TLDS = (
    "bit",
    "example",
    "exit",
    "gnu",
    "i2p",
    "invalid",
    "local",
    "localhost",
    "onion",
    "test",
    "zkey",
)

PRIVATE_BEGIN = "===BEGIN PRIVATE DOMAINS==="


def resolve_user_agent(explicit: Optional[str] = None) -> str:
    if explicit and explicit.strip():
        return explicit.strip()
    value = os.environ.get("URLHUNTERX_USER_AGENT", "")
    return value.strip() or DEFAULT_USER_AGENT


def fetch_text(url: str, user_agent: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    try:
        resp = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    except requests.RequestException as exc:
        raise TLDSourceError(f"Network error fetching {url}: {exc}") from exc
    if resp.status_code >= 400:
        raise TLDSourceError(f"Fetching {url} failed with status {resp.status_code}")
    return resp.text


def parse_iana(text: str) -> List[str]:
    tlds = []
    for line in text.splitlines():
        raw = line.strip()
        if not raw or raw.startswith("#"):
            continue
        tlds.append(raw.lower())
    return tlds


def parse_public_suffix_list(text: str, include_private: bool = False) -> List[str]:
    suffixes = []
    for line in text.splitlines():
        raw = line.strip()
        if raw.startswith("//"):
            if PRIVATE_BEGIN in raw and not include_private:
                break
            continue
        if not raw:
            continue
        rule = raw.split()[0]
        if rule.startswith(("*.", "!")):
            continue
        suffixes.append(rule.lower())
    return suffixes


def merge_suffixes(*groups: Iterable[str]) -> List[str]:
    merged = set()
    for group in groups:
        for value in group:
            value = value.strip(".").lower()
            if not value:
                continue
            if any(label.startswith("xn--") for label in value.split(".")):
                continue
            merged.add(value)
    return sorted(merged)


def render_module(tlds: Sequence[str], sources: Sequence[str], pseudo: Sequence[str] = PSEUDO_TLDS) -> str:
    lines = [
        "# This file is autogenerated by `urlhunterx tlds`. Please do not edit manually.",
        '"""Public suffixes and pseudo-TLDs backing the default TLD registry.',
        "",
        "Sources:",
    ]
    lines.extend(f"  - {src}" for src in sources)
    lines.append('"""')
    lines.append("")
    lines.append("TLDS = (")
    lines.extend(f'    "{value}",' for value in tlds)
    lines.append(")")
    lines.append("")
    lines.append("PSEUDO_TLDS = (")
    lines.extend(f'    "{value}",' for value in sorted(pseudo))
    lines.append(")")
    return "\n".join(lines) + "\n"


def write_module(path: Path, content: str) -> None:
    tmp_path = path.with_suffix(path.suffix + ".part")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)


def generate(
    output: Path = DEFAULT_OUTPUT,
    logger: Optional[RichLogger] = None,
    include_private: bool = False,
    user_agent: Optional[str] = None,
) -> List[str]:
    logger = logger or RichLogger()
    agent = resolve_user_agent(user_agent)
    logger.info(f"Fetching {len(DEFAULT_SOURCES)} suffix sources")
    with ThreadPoolExecutor(max_workers=len(DEFAULT_SOURCES)) as executor:
        futures = [executor.submit(fetch_text, url, agent) for url in DEFAULT_SOURCES]
        iana_text, psl_text = (f.result() for f in futures)

    iana = parse_iana(iana_text)
    psl = parse_public_suffix_list(psl_text, include_private=include_private)
    logger.debug(f"IANA entries: {len(iana)}, public suffix rules: {len(psl)}")
    tlds = merge_suffixes(iana, psl)
    if not tlds:
        raise TLDSourceError("suffix sources returned no usable entries")

    write_module(output, render_module(tlds, DEFAULT_SOURCES))
    logger.done(f"Wrote {len(tlds)} suffixes to {output}")
    return tlds
