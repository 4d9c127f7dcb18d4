"""Tests for CLI tool."""

from __future__ import annotations

import shlex
import subprocess
import sys

import pytest

from uniqueby import __version__
from uniqueby.cli.main import EXAMPLES, main


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "uniqueby.cli.main", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "uniqueby: Composite identifiers" in result.stdout
    assert "describe" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert f"uniqueby {__version__}" in result.stdout


def test_cli_encode() -> None:
    """Test encoding from the command line."""
    result = _run(
        "encode", "--total", "client_id=10", "--primary-key", "431", "--group", "client_id=2"
    )
    assert result.returncode == 0
    assert result.stdout.strip() == "4312"


def test_cli_decode() -> None:
    """Test decoding from the command line."""
    result = _run("decode", "--total", "client_id=10", "--primary-key-name", "bill_id", "4312")
    assert result.returncode == 0
    assert result.stdout.splitlines() == ["bill_id=431", "client_id=2"]


def test_cli_no_command(capsys: pytest.CaptureFixture[str]) -> None:
    """Test running without a command prints help."""
    assert main([]) == 0
    assert "usage: uniqueby" in capsys.readouterr().out


def test_cli_describe(capsys: pytest.CaptureFixture[str]) -> None:
    """Test describing a mixed layout."""
    assert main(["describe", "--total", "client_id=10", "--total", "type=2"]) == 0

    out = capsys.readouterr().out
    assert "Composite id: 2 group fields" in out
    assert "radix 10 (4 bits)" in out
    assert "Group modulus: 20" in out
    assert "Group bits: 5" in out


def test_cli_bits(capsys: pytest.CaptureFixture[str]) -> None:
    """Test bit-width fields."""
    assert main(["encode", "--bits", "shard=4", "--primary-key", "1", "--group", "shard=3"]) == 0
    assert capsys.readouterr().out.strip() == "19"


def test_cli_mixed_radix_kinds(capsys: pytest.CaptureFixture[str]) -> None:
    """Test totals and bit-widths can't be combined."""
    assert main(["describe", "--total", "a=10", "--bits", "b=2"]) == 1
    assert "both total ([10]) and bits ([2]) passed" in capsys.readouterr().err


def test_cli_no_fields(capsys: pytest.CaptureFixture[str]) -> None:
    """Test a schema needs fields."""
    assert main(["describe"]) == 1
    assert "must pass either total or bits" in capsys.readouterr().err


def test_cli_bad_radix(capsys: pytest.CaptureFixture[str]) -> None:
    """Test unparsable radices are reported by field."""
    assert main(["describe", "--total", "a=ten"]) == 1
    assert "field `a` must be a positive integer" in capsys.readouterr().err


def test_cli_bad_group_value(capsys: pytest.CaptureFixture[str]) -> None:
    """Test invalid group values exit with an error."""
    code = main(
        ["encode", "--total", "client_id=10", "--primary-key", "1", "--group", "client_id=x"]
    )
    assert code == 1
    assert "must be integer-coercible" in capsys.readouterr().err


def test_cli_unknown_group_field(capsys: pytest.CaptureFixture[str]) -> None:
    """Test group values for undeclared fields are rejected."""
    code = main(["encode", "--total", "a=10", "--primary-key", "1", "--group", "b=1"])
    assert code == 1
    assert "unknown group keys" in capsys.readouterr().err


def test_cli_malformed_assignment() -> None:
    """Test NAME=VALUE arguments are validated by argparse."""
    with pytest.raises(SystemExit):
        main(["describe", "--total", "client_id"])


@pytest.mark.parametrize(
    "command",
    [line.strip() for line in EXAMPLES.splitlines() if line.strip().startswith("uniqueby ")],
)
def test_cli_help_examples(command: str, capsys: pytest.CaptureFixture[str]) -> None:
    """Test every example shown in --help runs successfully."""
    assert main(shlex.split(command)[1:]) == 0
    assert capsys.readouterr().err == ""
