# tests/test_scanner.py
import io
import json
import zipfile

import pytest

from urlhunterx.input_sources import detect_text_encoding, is_likely_binary, iter_input_items, read_list_file
from urlhunterx.models import Strictness
from urlhunterx.results import FindingSink, ResultStore
from urlhunterx.scanner import Scanner, chunk_line


@pytest.fixture
def make_scanner(matcher_for, quiet_logger):
    def build(strictness=Strictness.ANY, **kwargs):
        out = io.StringIO()
        store = ResultStore()
        sink = FindingSink(out, as_json=kwargs.pop("as_json", False), unique_only=kwargs.pop("unique_only", False))
        scanner = Scanner(matcher_for(strictness), store, sink, quiet_logger, **kwargs)
        return scanner, store, out

    return build


def _items(path, logger):
    return list(iter_input_items(path, False, logger))


def test_scan_text_file(tmp_path, make_scanner, quiet_logger):
    p = tmp_path / "notes.txt"
    p.write_text("see https://example.com/a\nand www.example.org twice www.example.org\n", encoding="utf-8")
    scanner, store, out = make_scanner(Strictness.SCHEME_OR_HOST)
    [item] = _items(p, quiet_logger)
    stats = scanner.scan_item(item)
    assert stats["lines"] == 2
    assert stats["findings"] == 3
    assert stats["new_findings"] == 2
    assert out.getvalue().splitlines() == ["https://example.com/a", "www.example.org", "www.example.org"]
    assert store.summary()["kinds"]["host"] == {"total": 2, "unique": 1}


def test_scan_json_output_and_unique(tmp_path, make_scanner, quiet_logger):
    p = tmp_path / "feed.log"
    p.write_text("a http://x.example.com b http://x.example.com\n", encoding="utf-8")
    scanner, _, out = make_scanner(Strictness.SCHEME_ONLY, as_json=True, unique_only=True)
    scanner.scan_item(_items(p, quiet_logger)[0])
    [line] = out.getvalue().splitlines()
    rec = json.loads(line)
    assert rec == {
        "kind": "scheme",
        "value": "http://x.example.com",
        "source": str(p),
        "line_no": 1,
        "offset": 2,
        "length": 20,
    }


def test_scan_utf16_file(tmp_path, make_scanner, quiet_logger):
    p = tmp_path / "wide.txt"
    p.write_bytes("go to https://example.com/ü now\n".encode("utf-16"))
    scanner, _, out = make_scanner(Strictness.SCHEME_ONLY)
    scanner.scan_item(_items(p, quiet_logger)[0])
    assert out.getvalue().splitlines() == ["https://example.com/ü"]


def test_scan_binary_file_uses_printable_runs(tmp_path, make_scanner, quiet_logger):
    p = tmp_path / "blob.bin"
    p.write_bytes(b"\x00\x01\x02junk http://example.com/bin \x00\x7f\x00short\x00")
    scanner, _, out = make_scanner(Strictness.SCHEME_ONLY)
    stats = scanner.scan_item(_items(p, quiet_logger)[0])
    assert out.getvalue().splitlines() == ["http://example.com/bin"]
    assert stats["findings"] == 1


def test_scan_zip_members(tmp_path, make_scanner, quiet_logger):
    archive = tmp_path / "dump.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("a/one.txt", "https://one.example.com\n")
        zf.writestr("two.txt", "https://two.example.com\n")
    scanner, _, out = make_scanner(Strictness.SCHEME_ONLY)
    items = _items(archive, quiet_logger)
    assert [i.display_name for i in items] == ["dump.zip:a/one.txt", "dump.zip:two.txt"]
    for item in items:
        scanner.scan_item(item)
    assert out.getvalue().splitlines() == ["https://one.example.com", "https://two.example.com"]


def test_empty_file_skipped(tmp_path, make_scanner, quiet_logger):
    p = tmp_path / "empty.txt"
    p.write_bytes(b"")
    scanner, _, _ = make_scanner()
    assert scanner.scan_item(_items(p, quiet_logger)[0])["skipped"] == 1


def test_directory_walk_and_missing_path(tmp_path, quiet_logger):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "x.txt").write_text("x", encoding="utf-8")
    (tmp_path / "y.txt").write_text("y", encoding="utf-8")
    names = [i.display_name for i in _items(tmp_path, quiet_logger)]
    assert names == [str(tmp_path / "sub" / "x.txt"), str(tmp_path / "y.txt")]
    with pytest.raises(FileNotFoundError):
        _items(tmp_path / "missing", quiet_logger)


def test_chunk_line_overlaps():
    chunks = chunk_line("a" * 2500, 1024, overlap=100)
    assert [len(c) for c in chunks] == [1024, 1024, 652]
    assert chunk_line("short", 1024) == ["short"]


def test_encoding_and_binary_sniffing():
    assert detect_text_encoding(b"\xef\xbb\xbfabc") == "utf-8-sig"
    assert detect_text_encoding(b"\xff\xfea\x00") == "utf-16"
    assert detect_text_encoding(b"abc") == "utf-8"
    assert is_likely_binary(b"abc\x00def")
    assert not is_likely_binary(b"\xff\xfea\x00b\x00")
    assert not is_likely_binary("plain text ünïcode\n".encode("utf-8"))
    assert not is_likely_binary(b"")


def test_read_list_file(tmp_path):
    p = tmp_path / "tlds.txt"
    p.write_text("# comment\ninternal\n\n// note\nlan\n", encoding="utf-8")
    assert read_list_file(p) == ["internal", "lan"]
