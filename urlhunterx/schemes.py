from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

# Permanent and provisional IANA schemes that are written with "://".
SCHEMES = (
    "aaa",
    "aaas",
    "about",
    "acap",
    "acct",
    "acr",
    "afp",
    "afs",
    "attachment",
    "bb",
    "beshare",
    "blob",
    "cap",
    "chrome",
    "chrome-extension",
    "cifs",
    "coap",
    "coap+tcp",
    "coap+ws",
    "coaps",
    "coaps+tcp",
    "coaps+ws",
    "content",
    "crid",
    "dab",
    "dat",
    "data",
    "dav",
    "dict",
    "dlna-playcontainer",
    "dlna-playsingle",
    "dns",
    "dntp",
    "doi",
    "dtn",
    "dvb",
    "ed2k",
    "facetime",
    "feed",
    "finger",
    "fish",
    "ftp",
    "geo",
    "git",
    "go",
    "gopher",
    "graph",
    "gtalk",
    "h323",
    "hcap",
    "http",
    "https",
    "iax",
    "icap",
    "im",
    "imap",
    "info",
    "ipfs",
    "ipn",
    "ipns",
    "ipp",
    "ipps",
    "irc",
    "irc6",
    "ircs",
    "iris",
    "itms",
    "jabber",
    "jar",
    "jms",
    "ldap",
    "ldaps",
    "lvlt",
    "maps",
    "market",
    "matrix",
    "message",
    "mms",
    "modem",
    "mongodb",
    "moz",
    "msrp",
    "msrps",
    "mtqp",
    "mumble",
    "mupdate",
    "mvn",
    "news",
    "nfs",
    "nntp",
    "notes",
    "opaquelocktoken",
    "pop",
    "pres",
    "proxy",
    "psyc",
    "query",
    "redis",
    "rediss",
    "res",
    "resource",
    "rmi",
    "rsync",
    "rtmfp",
    "rtmp",
    "rtsp",
    "rtsps",
    "rtspu",
    "service",
    "session",
    "sftp",
    "sip",
    "sips",
    "skype",
    "smb",
    "snews",
    "snmp",
    "soap.beep",
    "soap.beeps",
    "soldat",
    "spotify",
    "ssh",
    "steam",
    "stun",
    "stuns",
    "submit",
    "svn",
    "teamspeak",
    "telnet",
    "tftp",
    "things",
    "thismessage",
    "tip",
    "tn3270",
    "tool",
    "turn",
    "turns",
    "tv",
    "udp",
    "unreal",
    "ut2004",
    "v-event",
    "vemmi",
    "ventrilo",
    "view-source",
    "vnc",
    "webcal",
    "ws",
    "wss",
    "wtai",
    "wyciwyg",
    "xcon",
    "xcon-userid",
    "xfire",
    "xmlrpc.beep",
    "xmlrpc.beeps",
    "xri",
    "ymsgr",
    "z39.50r",
    "z39.50s",
)

# Widely used schemes that never made it into the IANA registry.
SCHEMES_UNOFFICIAL = (
    "gemini",
    "jdbc",
    "moz-extension",
    "postgres",
    "postgresql",
    "slack",
    "zoommtg",
    "zoomus",
)

# Schemes followed by ":" rather than "://".
SCHEMES_NO_AUTHORITY = (
    "bitcoin",
    "cid",
    "file",
    "magnet",
    "mailto",
    "mid",
    "sms",
    "tel",
    "xmpp",
)


def _clean(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted({v.strip().lower() for v in values if v and v.strip()}))


@dataclass(frozen=True)
class SchemeLists:
    official: Tuple[str, ...] = SCHEMES
    unofficial: Tuple[str, ...] = SCHEMES_UNOFFICIAL
    no_authority: Tuple[str, ...] = SCHEMES_NO_AUTHORITY

    @classmethod
    def build(
        cls,
        official: Iterable[str] = SCHEMES,
        unofficial: Iterable[str] = SCHEMES_UNOFFICIAL,
        no_authority: Iterable[str] = SCHEMES_NO_AUTHORITY,
    ) -> "SchemeLists":
        off = _clean(official)
        unoff = tuple(s for s in _clean(unofficial) if s not in off)
        seen = set(off) | set(unoff)
        return cls(off, unoff, tuple(s for s in _clean(no_authority) if s not in seen))

    @property
    def authority(self) -> Tuple[str, ...]:
        return self.official + self.unofficial

    def is_empty(self) -> bool:
        return not (self.official or self.unofficial or self.no_authority)


DEFAULT_SCHEME_LISTS = SchemeLists.build()
