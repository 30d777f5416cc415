from __future__ import annotations

import io
from typing import Dict, List

from .console import RichLogger
from .extractors import extract_from_text
from .input_sources import InputItem, detect_text_encoding, is_likely_binary
from .matcher import CompiledMatcher
from .results import FindingSink, ResultStore
from .text_utils import iter_printable_strings

LINE_OVERLAP = 256


def chunk_line(raw: str, max_len: int, overlap: int = LINE_OVERLAP) -> List[str]:
    if len(raw) <= max_len:
        return [raw]
    chunks = []
    start = 0
    while start < len(raw):
        end = min(len(raw), start + max_len)
        chunks.append(raw[start:end])
        if end == len(raw):
            break
        start = max(0, end - overlap)
    return chunks


class Scanner:
    def __init__(
        self,
        matcher: CompiledMatcher,
        store: ResultStore,
        sink: FindingSink,
        logger: RichLogger,
        refang: bool = False,
        strip_html: bool = False,
        max_line_len: int = 200000,
        max_file_mb: int = 25,
    ):
        self.matcher = matcher
        self.store = store
        self.sink = sink
        self.logger = logger
        self.refang = refang
        self.strip_html = strip_html
        self.max_line_len = max(1024, max_line_len)
        self.max_file_bytes = max(1, max_file_mb) * 1024 * 1024

    def _process_line(self, line: str, source: str, line_no: int, stats: Dict[str, int]) -> None:
        for f in extract_from_text(
            line,
            source,
            line_no,
            self.matcher,
            refang=self.refang,
            strip_html=self.strip_html,
        ):
            is_new = self.store.add(f)
            self.sink.write(f, is_new)
            stats["findings"] += 1
            if is_new:
                stats["new_findings"] += 1

    def scan_item(self, item: InputItem) -> Dict[str, int]:
        stats = {"lines": 0, "findings": 0, "new_findings": 0, "skipped": 0}

        if item.size_bytes == 0:
            self.logger.debug(f"Empty file: {item.display_name}")
            stats["skipped"] += 1
            return stats

        if item.size_bytes > self.max_file_bytes:
            self.logger.warn(f"Skipping too-large file ({item.size_bytes} bytes): {item.display_name}")
            stats["skipped"] += 1
            return stats

        with item.open_binary() as bf:
            sample = bf.read(4096)
            bf.seek(0)

            if is_likely_binary(sample):
                self.logger.debug(f"Mining printable strings from binary file: {item.display_name}")
                buf = bf.read(self.max_file_bytes)
                for idx, text in enumerate(iter_printable_strings(buf), start=1):
                    stats["lines"] += 1
                    for chunk in chunk_line(text, self.max_line_len):
                        self._process_line(chunk, item.display_name, idx, stats)
                return stats

            enc = detect_text_encoding(sample)
            tf = io.TextIOWrapper(bf, encoding=enc, errors="replace", newline="")
            for line_no, line in enumerate(tf, start=1):
                stats["lines"] += 1
                for chunk in chunk_line(line.rstrip("\r\n"), self.max_line_len):
                    self._process_line(chunk, item.display_name, line_no, stats)

        return stats
