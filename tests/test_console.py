# tests/test_console.py
import io

from rich.console import Console

from urlhunterx.console import RichLogger


def _logger(verbose):
    buf = io.StringIO()
    return RichLogger(console=Console(file=buf, width=120), verbose=verbose), buf


def test_levels_written_to_console():
    logger, buf = _logger(verbose=False)
    logger.info("starting scan")
    logger.warn("skipped big.bin")
    logger.debug("hidden detail")
    out = buf.getvalue()
    assert "INFO" in out and "starting scan" in out
    assert "WARN" in out and "skipped big.bin" in out
    assert "hidden detail" not in out
    assert vars(logger).keys() == {"console", "verbose", "_lock"}


def test_debug_shown_when_verbose():
    logger, buf = _logger(verbose=True)
    logger.debug("matcher ready")
    logger.done("finished")
    out = buf.getvalue()
    assert "DEBUG" in out and "matcher ready" in out
    assert "DONE" in out
