from __future__ import annotations


class URLHunterError(Exception):
    pass


class MatcherConfigError(URLHunterError, ValueError):
    pass


class URLSyntaxError(URLHunterError, ValueError):
    pass


class PortSyntaxError(URLSyntaxError):
    pass


class TLDSourceError(URLHunterError, RuntimeError):
    pass
