import sys

from DiscordNexus import __version__
from DiscordNexus.kernel.crash import CrashReporter


def _raise() -> None:
    raise ValueError("fatal thing")


def test_write_records_version_and_traceback(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("CLIENT_TOKEN", "super-secret-token")
    reporter = CrashReporter(str(tmp_path / "crashdumps"))
    try:
        _raise()
    except ValueError as exc:
        path = reporter.write(exc, context="startup")

    text = open(path, encoding="utf-8").read()
    assert __version__ in text
    assert "Context: startup" in text
    assert "ValueError: fatal thing" in text
    assert "super-secret-token" not in text


def test_install_and_uninstall_excepthook(tmp_path) -> None:
    previous = sys.excepthook
    reporter = CrashReporter(str(tmp_path / "crashdumps"))

    reporter.install()
    try:
        assert sys.excepthook == reporter._excepthook
    finally:
        reporter.uninstall()

    assert sys.excepthook is previous
    assert (tmp_path / "crashdumps").is_dir()
