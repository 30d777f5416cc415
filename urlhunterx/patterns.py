from __future__ import annotations

from typing import Iterable

import regex

# Character classes follow RFC 3987 section 2.2. The "END" variants drop
# punctuation that usually belongs to the surrounding prose rather than the
# URL, so "see https://example.com/." does not swallow the final period.
UNRESERVED_CHAR = r"a-zA-Z0-9\-._~"
END_UNRESERVED_CHAR = r"a-zA-Z0-9\-_~"
MID_SUB_DELIM_CHAR = r"!$&'*+,;="
END_SUB_DELIM_CHAR = r"$&+="
UCS_CHAR = (
    r"\u00A0-\uD7FF\uF900-\uFDCF\uFDF0-\uFFEF"
    r"\U00010000-\U0001FFFD\U00020000-\U0002FFFD\U00030000-\U0003FFFD"
    r"\U00040000-\U0004FFFD\U00050000-\U0005FFFD\U00060000-\U0006FFFD"
    r"\U00070000-\U0007FFFD\U00080000-\U0008FFFD\U00090000-\U0009FFFD"
    r"\U000A0000-\U000AFFFD\U000B0000-\U000BFFFD\U000C0000-\U000CFFFD"
    r"\U000D0000-\U000DFFFD\U000E1000-\U000EFFFD"
)
PRIVATE_CHAR = r"\uE000-\uF8FF\U000F0000-\U000FFFFD\U00100000-\U0010FFFD"

MID_PATH_SEGMENT_CHAR = UNRESERVED_CHAR + "%" + MID_SUB_DELIM_CHAR + ":@" + UCS_CHAR
END_PATH_SEGMENT_CHAR = END_UNRESERVED_CHAR + "%" + END_SUB_DELIM_CHAR

MID_CHAR = r"/?#\\" + MID_PATH_SEGMENT_CHAR + PRIVATE_CHAR
# Non-ASCII characters may end a path unless they are punctuation or spaces.
END_CHAR = rf"(?:[/#{END_PATH_SEGMENT_CHAR}{PRIVATE_CHAR}]|(?![\p{{P}}\p{{Z}}])[{UCS_CHAR}])"

WELL_PAREN = rf"\((?:[{MID_CHAR}]|\([{MID_CHAR}]*\))*\)"
WELL_BRACK = rf"\[(?:[{MID_CHAR}]|\[[{MID_CHAR}]*\])*\]"
WELL_BRACE = rf"\{{(?:[{MID_CHAR}]|\{{[{MID_CHAR}]*\}})*\}}"
WELL_ALL = f"{WELL_PAREN}|{WELL_BRACK}|{WELL_BRACE}"

PATH_CONT = rf"(?:[{MID_CHAR}]*(?:{WELL_ALL}|{END_CHAR}))+"

IRI_CHAR = r"\p{L}\p{M}\p{N}"
# Labels and label counts are capped at the DNS limits (63 chars, 127 labels).
IRI_LABEL = rf"[{IRI_CHAR}](?:[{IRI_CHAR}\-]{{0,61}}[{IRI_CHAR}])?"
SUBDOMAIN = rf"(?:{IRI_LABEL}\.){{1,126}}"
PUNYCODE_TLD = r"xn--[a-z0-9-]+"

OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
IPV4_ADDRESS = rf"{OCTET}\.{OCTET}\.{OCTET}\.{OCTET}"

H4 = r"[0-9a-fA-F]{1,4}"
# One alternative per count of leading groups before the "::" elision.
IPV6_ADDRESS_NON_EMPTY = (
    "(?:"
    rf"(?:{H4}:){{7}}(?:{H4}|:)|"
    rf"(?:{H4}:){{6}}(?:{IPV4_ADDRESS}|:{H4}|:)|"
    rf"(?:{H4}:){{5}}(?::{IPV4_ADDRESS}|(?::{H4}){{1,2}}|:)|"
    rf"(?:{H4}:){{4}}(?:(?::{H4}){{0,1}}:{IPV4_ADDRESS}|(?::{H4}){{1,3}}|:)|"
    rf"(?:{H4}:){{3}}(?:(?::{H4}){{0,2}}:{IPV4_ADDRESS}|(?::{H4}){{1,4}}|:)|"
    rf"(?:{H4}:){{2}}(?:(?::{H4}){{0,3}}:{IPV4_ADDRESS}|(?::{H4}){{1,5}}|:)|"
    rf"(?:{H4}:){{1}}(?:(?::{H4}){{0,4}}:{IPV4_ADDRESS}|(?::{H4}){{1,6}}|:)|"
    # a bare "::" is left to IPV6_ADDRESS
    rf":(?:(?::{H4}){{0,5}}:{IPV4_ADDRESS}|(?::{H4}){{1,7}})"
    ")"
)
IPV6_ADDRESS = rf"(?:{IPV6_ADDRESS_NON_EMPTY}|::)"

PORT = r"(?::[0-9]+)?"
EMAIL_LOCAL_CHAR = r"a-zA-Z0-9._%\-+"
EMAIL_LOCAL_PART = rf"(?<![{EMAIL_LOCAL_CHAR}])[{EMAIL_LOCAL_CHAR}]++"

RELATIVE_PATH_CHAR = r"A-Za-z0-9_/?=&#.\-"
ABSOLUTE_PATH = rf"/[{RELATIVE_PATH_CHAR}]*"
MULTI_SEGMENT_PATH = rf"[{RELATIVE_PATH_CHAR}]+?(?:/[{RELATIVE_PATH_CHAR}]+)+"


def any_of(values: Iterable[str]) -> str:
    # longest first so the first alternative that hits is the longest
    ordered = sorted(set(values), key=lambda v: (-len(v), v))
    return "(?:" + "|".join(regex.escape(v) for v in ordered) + ")"


def tld_pattern(tlds: Iterable[str]) -> str:
    ascii_tlds = []
    unicode_tlds = []
    for tld in tlds:
        if tld.isascii():
            ascii_tlds.append(tld)
        else:
            unicode_tlds.append(tld)

    ascii_alts = [PUNYCODE_TLD]
    if ascii_tlds:
        ascii_alts.append(any_of(ascii_tlds))
    pattern = "(?i:" + "|".join(ascii_alts) + r")\b"
    # Unicode scripts have no reliable word boundary, so these are unterminated.
    if unicode_tlds:
        pattern = f"{pattern}|{any_of(unicode_tlds)}"
    return f"(?:{pattern})"


def domain_pattern(tlds: Iterable[str]) -> str:
    # only start at the head of a label run
    return rf"(?<![{IRI_CHAR}])" + SUBDOMAIN + tld_pattern(tlds)


def host_pattern(domain: str) -> str:
    return rf"(?:{domain}|\[{IPV6_ADDRESS}\]|\b{IPV4_ADDRESS}\b)"


def web_url_pattern(domain: str) -> str:
    return host_pattern(domain) + PORT + rf"(?:/{PATH_CONT}|/)?"


def email_pattern(domain: str) -> str:
    return EMAIL_LOCAL_PART + "@" + domain


IPV4_RX = regex.compile(IPV4_ADDRESS)
IPV6_RX = regex.compile(IPV6_ADDRESS)
PATH_CONT_RX = regex.compile(PATH_CONT)
