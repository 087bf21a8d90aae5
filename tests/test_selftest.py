import io

from tty2048 import selftest
from tty2048.selftest import run_selftest


def test_selftest_passes():
    out = io.StringIO()
    assert run_selftest(out) == 0
    assert out.getvalue() == "All 13 tests executed successfully\n"


def test_selftest_reports_failure(monkeypatch):
    monkeypatch.setattr(
        selftest,
        "CASES",
        (
            ((0, 0, 0, 1), (1, 0, 0, 0)),
            ((1, 1, 0, 0), (1, 1, 0, 0)),
        ),
    )

    out = io.StringIO()
    assert run_selftest(out) == 1
    assert out.getvalue() == "1 1 0 0 => 2 0 0 0 expected 1 1 0 0 => 1 1 0 0\n"
