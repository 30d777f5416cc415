from __future__ import annotations

import argparse
import json
import os
import sys
import zipfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .console import RichLogger
from .domains import DomainSplitter
from .errors import MatcherConfigError, TLDSourceError, URLSyntaxError
from .input_sources import InputItem, iter_input_items, read_list_file
from .matcher import ExtractorConfig, MatcherFactory
from .models import Strictness
from .registry import TLDRegistry
from .results import FindingSink, ResultStore
from .scanner import Scanner
from .tldsgen import DEFAULT_OUTPUT, generate
from .urls import URLParser

DEFAULT_MAX_LINE_LEN = 200000
DEFAULT_MAX_FILE_MB = 25


def default_thread_count() -> int:
    return min(32, (os.cpu_count() or 4) + 4)


def _add_tld_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--tld",
        action="append",
        default=[],
        help="Extra public suffix to recognize (repeatable), e.g. --tld internal.",
    )
    p.add_argument("--tlds-file", help="File with one extra suffix per line.")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="urlhunterx",
        description="Extract URLs, emails and IP literals from text and split hosts at their public suffix.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("extract", help="Extract URL-like spans from files, directories, ZIP archives or stdin.")
    ex.add_argument("paths", nargs="*", default=["-"], help="Inputs to scan ('-' reads stdin, the default).")
    ex.add_argument(
        "--strictness",
        choices=("scheme", "host", "any"),
        default="any",
        help="scheme: only scheme-prefixed URLs; host: also bare hosts and IPs; any: also emails and paths.",
    )
    ex.add_argument("--scheme", action="append", help="Only match these schemes (repeatable).")
    ex.add_argument("--host", action="append", help="Only match these hosts (repeatable).")
    _add_tld_args(ex)
    ex.add_argument("--refang", action="store_true", help="Undo defanging such as hxxp:// and example[.]com.")
    ex.add_argument("--strip-html", action="store_true", help="Blank out HTML tags before matching.")
    ex.add_argument("--unique", action="store_true", help="Print each value once per kind.")
    ex.add_argument("--json", action="store_true", help="Emit JSON lines with source, line, offset, length, kind.")
    ex.add_argument(
        "--threads",
        type=int,
        default=default_thread_count(),
        help="Worker threads for scanning (default: auto).",
    )
    ex.add_argument(
        "--max-file-mb",
        type=int,
        default=DEFAULT_MAX_FILE_MB,
        help="Skip files larger than this many MiB (default: 25).",
    )
    ex.add_argument("--follow-symlinks", action="store_true", help="Follow symlinks while walking directories.")
    ex.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")

    sp = sub.add_parser("split", help="Split hosts into subdomain, root domain and TLD.")
    sp.add_argument("hosts", nargs="*", help="Hosts to split.")
    sp.add_argument("--file", help="File with one host per line.")
    _add_tld_args(sp)
    sp.add_argument("--json", action="store_true", help="Emit JSON lines instead of a table.")
    sp.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")

    pp = sub.add_parser("parse", help="Parse URLs and show their host breakdown.")
    pp.add_argument("urls", nargs="*", help="URLs to parse.")
    pp.add_argument("--file", help="File with one URL per line.")
    pp.add_argument("--default-scheme", default="http", help="Scheme assumed for URLs without one (default: http).")
    _add_tld_args(pp)
    pp.add_argument("--json", action="store_true", help="Emit JSON lines instead of a table.")
    pp.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")

    tl = sub.add_parser("tlds", help="Regenerate the bundled TLD list from IANA and the Public Suffix List.")
    tl.add_argument("--output", default=str(DEFAULT_OUTPUT), help="Module to write (default: the bundled tlds.py).")
    tl.add_argument("--include-private", action="store_true", help="Also keep the PSL private-domain section.")
    tl.add_argument("--user-agent", help="User-Agent header (or set URLHUNTERX_USER_AGENT).")
    tl.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")

    return ap


def _custom_tlds(args) -> List[str]:
    values = list(args.tld or [])
    if args.tlds_file:
        values.extend(read_list_file(Path(args.tlds_file).expanduser()))
    return values


def _collect_values(values: Iterable[str], list_file: Optional[str]) -> List[str]:
    collected = [v.strip() for v in values if v and v.strip()]
    if list_file:
        collected.extend(read_list_file(Path(list_file).expanduser()))
    return collected


def _scan_items(
    items: List[InputItem],
    scanner: Scanner,
    threads: int,
    logger: RichLogger,
) -> Dict[str, int]:
    stats = {"files_total": len(items), "files_skipped": 0, "findings": 0, "new_findings": 0}
    if not items:
        return stats

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]Scanning inputs"),
        BarColumn(bar_width=None),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=logger.console,
        transient=True,
        redirect_stdout=False,
    )

    with progress:
        task_id = progress.add_task("scan", total=len(items))
        with ThreadPoolExecutor(max_workers=max(1, min(threads, len(items)))) as executor:
            future_map = {executor.submit(scanner.scan_item, item): item for item in items}
            for future in as_completed(future_map):
                item = future_map[future]
                try:
                    item_stats = future.result()
                except (OSError, ValueError, zipfile.BadZipFile) as exc:
                    logger.warn(f"Failed to scan {item.display_name}: {exc}")
                    stats["files_skipped"] += 1
                    progress.advance(task_id)
                    continue

                stats["files_skipped"] += item_stats.get("skipped", 0)
                stats["findings"] += item_stats.get("findings", 0)
                stats["new_findings"] += item_stats.get("new_findings", 0)
                if item_stats.get("findings", 0) > 0:
                    logger.debug(
                        f"Hit {item.display_name}: findings={item_stats['findings']}, lines={item_stats['lines']}"
                    )
                progress.advance(task_id)

    return stats


def run_extract(args) -> int:
    logger = RichLogger(verbose=args.verbose)

    try:
        config = ExtractorConfig(
            strictness=Strictness.from_name(args.strictness),
            schemes=tuple(args.scheme) if args.scheme else None,
            hosts=tuple(args.host) if args.host else None,
            custom_tlds=tuple(_custom_tlds(args)),
        )
        matcher = MatcherFactory().get(config)
    except (MatcherConfigError, ValueError, OSError) as exc:
        logger.error(str(exc))
        return 2
    logger.debug(repr(matcher))

    failures = 0
    items: List[InputItem] = []
    for raw in args.paths:
        try:
            items.extend(iter_input_items(Path(raw), args.follow_symlinks, logger))
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            logger.error(f"Cannot read input {raw}: {exc}")
            failures += 1

    store = ResultStore()
    sink = FindingSink(sys.stdout, as_json=args.json, unique_only=args.unique)
    scanner = Scanner(
        matcher=matcher,
        store=store,
        sink=sink,
        logger=logger,
        refang=args.refang,
        strip_html=args.strip_html,
        max_line_len=DEFAULT_MAX_LINE_LEN,
        max_file_mb=args.max_file_mb,
    )
    stats = _scan_items(items, scanner, args.threads, logger)
    sys.stdout.flush()

    summary = store.summary()
    table = Table(title="Findings Summary", header_style="bold")
    table.add_column("Kind", style="cyan")
    table.add_column("Unique", justify="right")
    table.add_column("Total", justify="right")
    for kind, kstats in sorted(summary.get("kinds", {}).items()):
        table.add_row(kind, str(kstats.get("unique", 0)), str(kstats.get("total", 0)))
    logger.console.print(table)
    logger.done(
        f"Scanned {stats['files_total'] - stats['files_skipped']}/{stats['files_total']} inputs, "
        f"{stats['findings']} findings ({stats['new_findings']} unique)"
    )
    return 1 if failures else 0


def run_split(args) -> int:
    logger = RichLogger(verbose=args.verbose)
    try:
        hosts = _collect_values(args.hosts, args.file)
        registry = TLDRegistry.default().extend(_custom_tlds(args))
    except OSError as exc:
        logger.error(str(exc))
        return 2
    if not hosts:
        logger.error("No hosts to split.")
        return 2

    splitter = DomainSplitter(registry)
    rows = []
    for host in hosts:
        parts = splitter.split(host)
        rows.append(
            {
                "host": host,
                "subdomain": parts.subdomain,
                "root_domain": parts.root_domain,
                "tld": parts.tld,
                "etld_plus_one": parts.registrable,
            }
        )

    if args.json:
        for row in rows:
            sys.stdout.write(json.dumps(row, ensure_ascii=False) + "\n")
        return 0

    table = Table(title="Domain Split", header_style="bold")
    for col in ("Host", "Subdomain", "Root domain", "TLD"):
        table.add_column(col, style="cyan" if col == "Host" else None)
    for row in rows:
        table.add_row(row["host"], row["subdomain"], row["root_domain"], row["tld"])
    Console().print(table)
    return 0


def run_parse(args) -> int:
    logger = RichLogger(verbose=args.verbose)
    try:
        urls = _collect_values(args.urls, args.file)
        registry = TLDRegistry.default().extend(_custom_tlds(args))
    except OSError as exc:
        logger.error(str(exc))
        return 2
    if not urls:
        logger.error("No URLs to parse.")
        return 2

    parser = URLParser(default_scheme=args.default_scheme, splitter=DomainSplitter(registry))
    parsed = []
    failures = 0
    for raw in urls:
        try:
            parsed.append(parser.parse(raw))
        except URLSyntaxError as exc:
            logger.warn(f"Skipping {raw}: {exc}")
            failures += 1

    if args.json:
        for url in parsed:
            sys.stdout.write(json.dumps(url.to_dict(), ensure_ascii=False) + "\n")
        return 1 if failures else 0

    table = Table(title="Parsed URLs", header_style="bold")
    for col in ("URL", "Scheme", "Host", "Port", "Subdomain", "Root domain", "TLD", "Path", "Ext"):
        table.add_column(col, style="cyan" if col == "URL" else None)
    for url in parsed:
        table.add_row(
            url.original,
            url.scheme,
            url.host,
            "" if url.port is None else str(url.port),
            url.subdomain,
            url.root_domain,
            url.tld,
            url.path,
            url.extension,
        )
    Console().print(table)
    return 1 if failures else 0


def run_tlds(args) -> int:
    logger = RichLogger(verbose=args.verbose)
    try:
        generate(
            output=Path(args.output).expanduser(),
            logger=logger,
            include_private=args.include_private,
            user_agent=args.user_agent,
        )
    except (TLDSourceError, OSError) as exc:
        logger.error(str(exc))
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.command == "extract":
        return run_extract(args)
    if args.command == "split":
        return run_split(args)
    if args.command == "parse":
        return run_parse(args)
    if args.command == "tlds":
        return run_tlds(args)
    return 2
