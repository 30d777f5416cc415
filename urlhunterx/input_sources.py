from __future__ import annotations

import io
import sys
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from .console import RichLogger

STDIN_NAME = "-"


def detect_text_encoding(sample: bytes) -> str:
    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe") or sample.startswith(b"\xfe\xff"):
        return "utf-16"
    return "utf-8"


def is_likely_binary(sample: bytes) -> bool:
    if not sample:
        return False
    if sample.startswith((b"\xff\xfe", b"\xfe\xff")):
        return False
    if b"\x00" in sample:
        return True
    window = sample[:2048]
    control = sum(1 for b in window if b < 32 and b not in (9, 10, 12, 13, 27))
    return control / len(window) > 0.1


@dataclass(frozen=True)
class InputItem:
    display_name: str
    size_bytes: int
    file_path: Optional[Path] = None
    zip_path: Optional[Path] = None
    zip_member: Optional[str] = None
    data: Optional[bytes] = None

    @property
    def is_zip_member(self) -> bool:
        return self.zip_member is not None

    def open_binary(self) -> BinaryIO:
        if self.data is not None:
            return io.BytesIO(self.data)
        if self.is_zip_member:
            assert self.zip_path is not None
            with zipfile.ZipFile(self.zip_path, "r") as zf:
                return io.BytesIO(zf.read(self.zip_member))
        assert self.file_path is not None
        return open(self.file_path, "rb")


def stdin_item() -> InputItem:
    data = sys.stdin.buffer.read()
    return InputItem(display_name="<stdin>", size_bytes=len(data), data=data)


def _zip_items(zip_path: Path) -> Iterator[InputItem]:
    with zipfile.ZipFile(zip_path, "r") as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            yield InputItem(
                display_name=f"{zip_path.name}:{info.filename}",
                size_bytes=info.file_size,
                zip_path=zip_path,
                zip_member=info.filename,
            )


def iter_input_items(input_path: Path, follow_symlinks: bool, logger: RichLogger) -> Iterator[InputItem]:
    if str(input_path) == STDIN_NAME:
        yield stdin_item()
        return

    if not input_path.exists():
        raise FileNotFoundError(str(input_path))

    if input_path.is_file():
        if input_path.suffix.lower() == ".zip":
            logger.info(f"Input is a ZIP archive: {input_path}")
            yield from _zip_items(input_path)
            return
        yield InputItem(display_name=str(input_path), size_bytes=input_path.stat().st_size, file_path=input_path)
        return

    for p in sorted(input_path.rglob("*")):
        try:
            if (not follow_symlinks) and p.is_symlink():
                continue
            if p.is_dir():
                continue
            if p.suffix.lower() == ".zip":
                yield from _zip_items(p)
                continue
            yield InputItem(display_name=str(p), size_bytes=p.stat().st_size, file_path=p)
        except (OSError, zipfile.BadZipFile) as e:
            logger.warn(f"Skipping unreadable path: {p} ({e})")


def read_list_file(path: Path) -> list[str]:
    if not path.exists():
        raise FileNotFoundError(str(path))
    values: list[str] = []
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            raw = line.strip()
            if not raw or raw.startswith("#") or raw.startswith("//"):
                continue
            values.append(raw)
    return values
