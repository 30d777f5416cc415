from __future__ import annotations

import re
from typing import Iterator


def trim_snippet(text: str, max_len: int = 240) -> str:
    value = text.strip()
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def strip_html_tags(text: str) -> str:
    # tags become spaces so offsets still line up with the raw line
    if "<" not in text or ">" not in text:
        return text
    return re.sub(r"<[^<>]{1,500}>", lambda m: " " * len(m.group(0)), text)


def iter_printable_strings(data: bytes, min_len: int = 6) -> Iterator[str]:
    for m in re.finditer(rb"[\t\x20-\x7e]{%d,}" % min_len, data):
        yield m.group(0).decode("ascii")


def refang_text(text: str) -> str:
    refanged = text
    refanged = re.sub(r"(?i)\bhxxp(s?)(?=\[?:)", lambda m: "http" + m.group(1).lower(), refanged)
    refanged = re.sub(r"(?i)\bfxp(?=\[?:)", "ftp", refanged)
    refanged = re.sub(r"\[\.\]|\(\.\)|\{\.\}", ".", refanged)
    refanged = re.sub(r"\[:\]|\(:\)", ":", refanged)
    refanged = re.sub(r"\[/\]", "/", refanged)
    refanged = re.sub(r"(?i)\[(?:at|@)\]|\((?:at|@)\)", "@", refanged)
    return refanged
