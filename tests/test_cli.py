import logging
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from descent import descent_cli

GOOD_SOURCE = "begin\n  x := 1 + 2;\n  call show(x)\nend\n"
BAD_SOURCE = "begin\n  while x = y loop\n    z := 1\n  end\nend\n"


def test_run_descent_string_input(capsys: pytest.CaptureFixture[str]) -> None:
    assert descent_cli.run_descent(GOOD_SOURCE, is_string=True)
    out = capsys.readouterr().out
    assert "<string> parsed successfully" in out


def test_run_descent_file_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    src_file = tmp_path / "good.txt"
    src_file.write_text(GOOD_SOURCE)
    assert descent_cli.run_descent(str(src_file))
    assert f"{src_file} parsed successfully" in capsys.readouterr().out


def test_run_descent_reports_error_trail(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    src_file = tmp_path / "bad.txt"
    src_file.write_text(BAD_SOURCE)
    assert not descent_cli.run_descent(str(src_file))
    err = capsys.readouterr().err.splitlines()
    assert err[0] == f"Syntax error in {src_file}:"
    assert err[1] == "  <statement part> at line 5"
    assert err[4] == "        <while statement> at line 5"
    assert err[-1].strip() == (
        f'Token: "end" at line 5. In file {src_file}. <loop> is expected'
    )


def test_run_descent_trace(capsys: pytest.CaptureFixture[str]) -> None:
    descent_cli.run_descent("begin x := 1 end", is_string=True, trace=True)
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "-> <statement part>"
    assert out[-1] == "<string> parsed successfully"


def test_run_descent_lex_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert not descent_cli.run_descent('begin s := "oops end', is_string=True)
    assert "Lexical error in <string>: Unterminated string" in capsys.readouterr().err


def test_run_descent_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        descent_cli.run_descent(str(tmp_path / "nope.txt"))


@pytest.mark.parametrize("source,status", [(GOOD_SOURCE, 0), (BAD_SOURCE, 1)])
def test_main_exit_status(
    monkeypatch: pytest.MonkeyPatch, source: str, status: int
) -> None:
    monkeypatch.setattr(sys, "argv", ["descent", "-s", source])
    with pytest.raises(SystemExit) as e:
        descent_cli.main()
    assert e.value.code == status


def test_main_file_with_trace(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    src_file = tmp_path / "prog.txt"
    src_file.write_text(GOOD_SOURCE)
    monkeypatch.setattr(sys, "argv", ["descent", str(src_file), "--trace"])
    with pytest.raises(SystemExit) as e:
        descent_cli.main()
    assert e.value.code == 0
    assert "-> <procedure statement>" in capsys.readouterr().out


def test_main_verbose_logs_parser_activity(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(sys, "argv", ["descent", "-v", "-s", "begin x := 1 end"])
    with caplog.at_level(logging.DEBUG, logger="descent"):
        with pytest.raises(SystemExit):
            descent_cli.main()
    assert any("entering <statement part>" in r.getMessage() for r in caplog.records)


def test_main_requires_source(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["descent"])
    with pytest.raises(SystemExit) as e:
        descent_cli.main()
    assert e.value.code == 2


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(source=st.text(max_size=60))  # type: ignore[misc]
def test_run_descent_never_crashes_on_text(
    source: str, capsys: pytest.CaptureFixture[str]
) -> None:
    accepted = descent_cli.run_descent(source, is_string=True)
    captured = capsys.readouterr()
    if accepted:
        assert "parsed successfully" in captured.out
    else:
        assert "error in <string>" in captured.err


def test_run_descent_long_program(capsys: pytest.CaptureFixture[str]) -> None:
    body = ";\n".join(f"x{i} := x{i} + " + " + ".join(["1"] * 50) for i in range(1500))
    assert descent_cli.run_descent(f"begin\n{body}\nend\n", is_string=True)
    assert "parsed successfully" in capsys.readouterr().out


def test_run_descent_reports_recursion_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    class ExhaustedParser:
        def __init__(self, *args: object, **kwargs: object) -> None:
            pass

        def parse(self) -> None:
            raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(descent_cli, "Parser", ExhaustedParser)
    assert not descent_cli.run_descent("begin x := 1 end", is_string=True)
    assert "Nesting too deep in <string>" in capsys.readouterr().err
