import pytest

from line_lens.cli import main


def run(argv) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def test_blame(scenario, capsys, utc):
    status = run(["blame", str(scenario.path("hello.txt")), "2"])

    assert status == 0
    out = capsys.readouterr().out
    assert out == f" John Roe | 2023-11-14 23:13 | Shout the second line ({scenario.second[:7]})\n"


def test_blame_custom_format(scenario, capsys):
    status = run(
        ["--format", "%h %a: %m", "--max-msg-len", "5", "blame", str(scenario.path("hello.txt")), "1"]
    )

    assert status == 0
    assert capsys.readouterr().out == f"{scenario.first[:7]} Jane Doe: Initi...\n"


def test_blame_format_from_environment(scenario, capsys, monkeypatch):
    monkeypatch.setenv("LINE_LENS_FORMAT", "by %a")
    assert run(["blame", str(scenario.path("hello.txt")), "1"]) == 0
    assert capsys.readouterr().out == "by Jane Doe\n"


def test_blame_outside_repository(tmp_path, capsys):
    loose = tmp_path / "loose.txt"
    loose.write_text("x\n")

    assert run(["blame", str(loose), "1"]) == 1
    assert "No blame information" in capsys.readouterr().err


def test_diff(scenario, capsys):
    assert run(["diff", str(scenario.path("hello.txt")), "2"]) == 0

    out = capsys.readouterr().out
    assert f"Diff for {scenario.second[:7]}" in out
    assert "-two" in out
    assert "+TWO" in out


def test_diff_root_commit(scenario, capsys):
    assert run(["diff", str(scenario.path("hello.txt")), "1"]) == 0
    assert "first commit" in capsys.readouterr().out


def test_invalid_option(scenario, capsys):
    assert run(["--max-msg-len", "-4", "blame", str(scenario.path("hello.txt")), "1"]) == 1
    assert "Invalid configuration" in capsys.readouterr().err
