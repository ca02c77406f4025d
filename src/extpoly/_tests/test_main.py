import logging

import pytest

from extpoly.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def _last_line(capsys):
    return capsys.readouterr().out.strip().splitlines()[-1]


def test_multiply_simplified(capsys):
    assert main(["--memory", "multiply", "1 + x^50", "1 + y^100"]) == 0
    assert _last_line(capsys) == "1.0 + 1.0*y^100 + 1.0*x^50 + 1.0*x^50*y^100"


def test_multiply_file_backed(capsys):
    assert main(["multiply", "x + 1", "x - 1"]) == 0
    assert _last_line(capsys) == "1.0*x^2 + -1.0"


def test_multiply_without_simplify(capsys):
    assert main(["--memory", "-q", "--no-simplify", "multiply", "x + 1", "x - 1"]) == 0
    assert _last_line(capsys) == "4"


def test_multiply_three_factors_quiet(capsys):
    assert main(["--memory", "-q", "multiply", "1 + x", "1 + y", "1 + z"]) == 0
    assert _last_line(capsys) == "8"


def test_mix_writes_ordered_output(tmp_path, capsys):
    out = tmp_path / "mixed.txt"
    assert main(["--memory", "-q", "-o", str(out), "mix", "2", "50", "x", "2", "100", "y"]) == 0
    assert _last_line(capsys) == "9"
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "=1.0"
    assert lines[-1] == "x^100*y^200=1.0"
    assert len(lines) == 9


def test_malformed_polynomial_fails(capsys):
    assert main(["--memory", "multiply", "1 + 3x", "y"]) == 1


def test_bad_mixing_arguments_fail():
    assert main(["--memory", "mix", "-1", "5", "x"]) == 1


@pytest.mark.parametrize("argv", [
    ["mix", "1", "2"],
    ["mix", "one", "2", "x"],
    ["--interval", "0", "multiply", "x"],
    [],
])
def test_usage_errors_exit(argv):
    with pytest.raises(SystemExit):
        main(argv)


def test_parser_defaults():
    args = build_parser().parse_args(["multiply", "x"])
    assert not args.no_simplify
    assert not args.memory
    assert args.output is None
    assert args.polynomials == ["x"]


def test_mix_builds_factors_from_strings(caplog, capsys):
    with caplog.at_level(logging.INFO, logger="extpoly"):
        assert main(["--memory", "mix", "1", "3", "x", "1", "2", "x"]) == 0
    messages = [record.getMessage() for record in caplog.records]
    assert "Polynomial from (1, 3): 1.0 + 1.0*x^3" in messages
    assert "Polynomial from (1, 2): 1.0 + 1.0*x^2" in messages
    assert _last_line(capsys) == "1.0 + 1.0*x^2 + 1.0*x^3 + 1.0*x^5"
