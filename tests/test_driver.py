# tests/test_driver.py
"""
Command-line driver, profiles, output routing, timings and the results file.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from polyexpand import artifact, cli, config, row, runtime
from polyexpand.bignat import BigNat
from polyexpand.evaluate import evaluate
from polyexpand.fmt import abbr_digits, format_duration, format_polynomial, format_term_line, strip_ansi
from polyexpand.output_manager import OutputManager
from polyexpand.reference import reference_power
from polyexpand.runtime import APPLY, CFG
from polyexpand.timing import PhaseTimer, PhaseTimings
from polyexpand.utility import UserInputError, parse_int, validate_output_setting
from polyexpand.workspace import ensure_workspace_seeded, workspace_dir

# ---------- helpers -----------------------------------------------------------


@pytest.fixture
def run(monkeypatch, capsys):
    """Call cli.main without colorama rewrapping the captured streams."""
    monkeypatch.setattr(cli, "colorama_init", lambda **kw: None)

    def _run(*argv: str) -> tuple[int, str, str]:
        code = cli.main(list(argv))
        out, err = capsys.readouterr()
        return code, strip_ansi(out), strip_ansi(err)

    return _run


def feed_input(monkeypatch, *answers: str) -> None:
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


# ---------- formatting ----------------------------------------------------------


@pytest.mark.parametrize("n, expected", [
    (0, "1"),
    (1, "x + 1"),
    (2, "x^2 + 2*x + 1"),
    (4, "x^4 + 4*x^3 + 6*x^2 + 4*x + 1"),
])
def test_format_polynomial(n, expected):
    assert format_polynomial(row(n)) == expected


def test_format_term_line():
    rec = evaluate(4, 2).terms[2]
    assert format_term_line(rec, 2) == "Term (6*x^2): 6 * (2^2) = 6 * 4 = 24"


def test_abbr_digits():
    s = "1234567890" * 5
    assert abbr_digits(s, 3, 3, 10, "...") == "123...890"
    assert abbr_digits("12345", 3, 3, 10) == "12345"


def test_abbreviation_follows_profile():
    APPLY({"DISPLAY": {"ABBREVIATE": True},
           "FORMATTING": {"NUM_ABBR_HEAD": 2, "NUM_ABBR_TAIL": 2, "NUM_ABBR_THRESHOLD": 5, "ELLIPSIS": "~"}})
    rec = evaluate(1, 10**9).terms[0]
    assert "10~00" in format_term_line(rec, 10**9)


@pytest.mark.parametrize("seconds, expected", [(0.0125, "12.500 ms"), (2.5, "2.500 s"), (75.25, "1:15.250")])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


# ---------- input parsing --------------------------------------------------------


@pytest.mark.parametrize("text, value", [("4", 4), (" 100 ", 100), ("1_000", 1000), ("+7", 7), ("0", 0)])
def test_parse_int(text, value):
    assert parse_int(text, label="n", minimum=0) == value


@pytest.mark.parametrize("text", ["", "abc", "1.5", "1e3", "1__0", "7_", "--3"])
def test_parse_int_rejects_text(text):
    with pytest.raises(UserInputError, match="Invalid input"):
        parse_int(text, label="n")


def test_parse_int_minimum():
    assert parse_int("-3", label="x") == -3
    with pytest.raises(UserInputError, match="0 or greater"):
        parse_int("-3", label="x", minimum=0)


def test_prompt_retries_until_valid(capsys):
    answers = iter(["-1", "two", "3"])
    assert cli.prompt_int("n? ", label="n", minimum=0, input_fn=lambda _p: next(answers)) == 3
    err = strip_ansi(capsys.readouterr().err)
    assert err.count("Invalid input") == 2


@pytest.mark.parametrize("target", ["x.py", "notes.md", "con", "pyproject.toml"])
def test_validate_output_setting_rejects(target):
    with pytest.raises(ValueError):
        validate_output_setting(target)


@pytest.mark.parametrize("target", [None, "", "./", "results/", "run.log"])
def test_validate_output_setting_accepts(target):
    assert validate_output_setting(target) == target


# ---------- workspace & profiles -----------------------------------------------------


def test_workspace_follows_env(isolated_workspace):
    assert workspace_dir() == isolated_workspace.resolve()


def test_seed_copies_default_profile_once():
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded and copied["profiles"] >= 1
    assert (root / "profiles" / "default.toml").is_file()
    _, seeded_again, _ = ensure_workspace_seeded()
    assert not seeded_again


def test_load_default_profile():
    ensure_workspace_seeded()
    s = config.load_settings("default")
    assert s.name == "default"
    assert "_PROFILE_" not in s.data
    APPLY(s)
    assert CFG("RESULTS.TRIGGER_DEGREE") == 100
    assert CFG("DISPLAY.SHOW_TRACE") is True
    assert CFG("NOT.THERE", "fallback") == "fallback"


def test_broken_profile_is_user_error(isolated_workspace):
    ensure_workspace_seeded()
    (isolated_workspace / "profiles" / "bad.toml").write_text("[BEHAVIOUR\nDEBUG = 1\n", encoding="utf-8")
    with pytest.raises(UserInputError, match="bad.toml"):
        config.load_settings("bad")


def test_runtime_deps_only_needed_for_verify(monkeypatch, capsys):
    monkeypatch.setattr(runtime, "find_spec", lambda name: None)
    assert runtime.ensure_runtime_deps(strict=True, verify=False) is True
    assert capsys.readouterr().out == ""
    assert runtime.ensure_runtime_deps(strict=True, verify=True) is False
    out = strip_ansi(capsys.readouterr().out)
    assert "sympy, gmpy2" in out
    assert "colorama" not in out
    assert runtime.ensure_runtime_deps(strict=False, verify=True) is True


def test_apply_records_profile_name():
    ensure_workspace_seeded()
    APPLY(config.load_settings("default"))
    assert runtime.current().profile_name == "default"
    APPLY({"DISPLAY": {"SHOW_TRACE": False}})
    assert CFG("DISPLAY.SHOW_TRACE") is False
    assert CFG("DISPLAY") == {"SHOW_TRACE": False}


def test_missing_profile():
    with pytest.raises(FileNotFoundError):
        config.load_settings("nope")


# ---------- output manager -------------------------------------------------------------


def test_output_manager_single_file(isolated_workspace, capsys):
    om = OutputManager(output_file="logs/run.log", quiet=True)
    om.write("\x1b[33mhello\x1b[0m")
    om.close()
    assert capsys.readouterr().out == ""
    assert (isolated_workspace / "logs" / "run.log").read_text(encoding="utf-8") == "hello\n\n"


def test_output_manager_split_per_degree(isolated_workspace):
    om = OutputManager(output_file="results/", quiet=True, degree=7)
    om.write("a")
    om.write("b")
    assert om.getvalue() == "a\nb\n"
    om.close()
    assert (isolated_workspace / "results" / "7.txt").read_text(encoding="utf-8") == "a\nb\n"


def test_output_manager_split_needs_degree():
    with pytest.raises(ValueError):
        OutputManager(output_file="results/")


# ---------- timings & results file ---------------------------------------------------------


def test_phase_timer_accumulates():
    timer = PhaseTimer()
    with timer.phase("generation"):
        row(50)
    with timer.phase("evaluation"):
        evaluate(20, 3)
    t = timer.timings
    assert t.generation > 0 and t.evaluation > 0
    assert t.rendering == 0.0
    assert set(t.as_ms()) == {"generation", "rendering", "evaluation"}
    with pytest.raises(ValueError), timer.phase("sleeping"):
        pass


def test_rendering_phase_includes_writing_the_polynomial():
    import time

    class SlowPolynomialOutput(OutputManager):
        def write(self, *args, **kw):
            if str(args[0]).startswith("f(x) ="):
                time.sleep(0.05)
            super().write(*args, **kw)

    om = SlowPolynomialOutput(quiet=True)
    _, timings = cli.run_expansion(4, lambda: 2, om)
    assert timings.rendering >= 0.05
    assert "f(x) = x^4 + 4*x^3 + 6*x^2 + 4*x + 1\n" in om.getvalue()


def test_should_write_trigger_degree():
    assert artifact.should_write(100)
    assert not artifact.should_write(99)
    assert artifact.should_write(5, "anything.txt")
    APPLY({"RESULTS": {"TRIGGER_DEGREE": -1}})
    assert not artifact.should_write(100)


def test_results_file_round_trip(tmp_path):
    path = tmp_path / "out" / "res.txt"
    timings = PhaseTimings(generation=0.001, rendering=0.002, evaluation=0.0035)
    artifact.write_results(path, 100, 3, timings, BigNat.from_unsigned(4**100))
    data = artifact.parse_results(path.read_text(encoding="utf-8"))
    assert data == {
        "n": "100",
        "x": "3",
        "generation_ms": "1.000",
        "rendering_ms": "2.000",
        "evaluation_ms": "3.500",
        "result": str(4**100),
    }


# ---------- CLI ------------------------------------------------------------------------------


def test_cli_one_shot(run):
    code, out, err = run("4", "2")
    assert code == 0, err
    assert "{ 1, 4, 6, 4, 1 }" in out
    assert "f(x) = x^4 + 4*x^3 + 6*x^2 + 4*x + 1" in out
    assert "Term (4*x^3): 4 * (2^3) = 4 * 8 = 32" in out
    assert "Total = 81" in out
    assert "(2 + 1)^4 = 3^4 = 81" in out
    assert "(The results match)" in out
    assert "written to" not in out


def test_cli_no_trace(run):
    code, out, _ = run("4", "2", "--no-trace")
    assert code == 0
    assert "Term (" not in out
    assert "Total = 81" in out


def test_cli_prompts_for_missing_values(run, monkeypatch):
    feed_input(monkeypatch, "-2", "3", "oops", "5")
    code, out, err = run()
    assert code == 0
    assert "f(x) = x^3 + 3*x^2 + 3*x + 1" in out
    assert "Total = 216" in out
    assert err.count("Invalid input") == 2


def test_cli_prompts_only_for_x(run, monkeypatch):
    feed_input(monkeypatch, "5")
    code, out, _ = run("1")
    assert code == 0
    assert "Total = 6" in out


def test_cli_rejects_negative_x_argument(run):
    code, _, err = run("3", "-1")
    assert code == 2
    assert "x must be 0 or greater" in err


def test_cli_rejects_bad_degree(run):
    code, _, err = run("abc", "2")
    assert code == 2
    assert "Invalid input" in err


def test_cli_unknown_profile(run):
    code, _, err = run("--profile", "ghost", "2", "2")
    assert code == 2
    assert "Unknown profile" in err and "default" in err


def write_profile(workspace, stem: str, body: str) -> None:
    ensure_workspace_seeded()
    (workspace / "profiles" / f"{stem}.toml").write_text(body, encoding="utf-8")


def test_cli_leaves_int_digit_limit_alone(run, isolated_workspace):
    import sys
    before = sys.get_int_max_str_digits()
    write_profile(isolated_workspace, "small", "[BEHAVIOUR]\nMAX_DIGITS = 50\n")
    code, out, err = run("--profile", "small", "3", "2")
    assert code == 0, err
    assert "Total = 27" in out
    assert sys.get_int_max_str_digits() == before


def test_cli_debug_names_selected_profile(run, isolated_workspace, monkeypatch):
    import sys
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    write_profile(isolated_workspace, "terse",
                  "[_PROFILE_]\nname = \"terse-trace\"\n\n[DISPLAY]\nSHOW_TRACE = false\n")
    code, _, err = run("--profile", "terse", "2", "5", "--debug", "--quiet")
    assert code == 0
    assert "[debug] active profile: terse-trace" in err
    assert "DISPLAY.SHOW_TRACE" in err


def test_cli_writes_results_for_degree_hundred(run, isolated_workspace):
    code, out, err = run("100", "2", "--no-trace", "--quiet")
    assert code == 0, err
    assert out == ""
    data = artifact.parse_results((isolated_workspace / "resultados_n100.txt").read_text(encoding="utf-8"))
    assert data["n"] == "100"
    assert data["x"] == "2"
    for key in ("generation_ms", "rendering_ms", "evaluation_ms"):
        assert float(data[key]) >= 0.0
    assert data["result"] == str(reference_power(3, 100))
    assert data["result"] == evaluate(100, 2).total.to_decimal_string()


def test_cli_results_flag_for_other_degree(run, tmp_path):
    target = tmp_path / "mine.txt"
    code, out, _ = run("6", "1", "--results", str(target))
    assert code == 0
    assert f"written to '{target}'" in out
    assert artifact.parse_results(target.read_text(encoding="utf-8"))["result"] == "64"


def test_cli_output_file(run, isolated_workspace):
    code, _, _ = run("2", "9", "--output", "runs.log")
    assert code == 0
    text = (isolated_workspace / "runs.log").read_text(encoding="utf-8")
    assert "Total = 100" in text
    assert "\x1b[" not in text


def test_cli_forbidden_output(run):
    code, _, err = run("2", "9", "--output", "evil.py")
    assert code == 1
    assert "Forbidden output file extension" in err


def test_cli_verify(run):
    code, out, err = run("12", "7", "--verify", "--no-trace")
    assert code == 0, err
    assert "Verified against sympy/gmpy2." in out


def test_cli_debug_prints_timings(run, monkeypatch):
    import sys
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    code, _, err = run("3", "1", "--debug", "--quiet")
    assert code == 0
    assert "[debug] active profile: default" in err
    assert "[debug] generation" in err
    assert "[debug] result has 1 digit(s)" in err


def test_cli_identity_mismatch_is_internal_error(run, monkeypatch):
    from polyexpand.evaluate import Evaluation

    real = cli.evaluate_from_row

    def broken(coefficients, x):
        ev = real(coefficients, x)
        return Evaluation(ev.n, ev.x, ev.terms, ev.total, ev.total + BigNat.from_unsigned(1), False)

    monkeypatch.setattr(cli, "evaluate_from_row", broken)
    code, out, err = run("3", "1")
    assert code == 1
    assert "(Error: the results do NOT match)" in out
    assert "Internal error" in err


def test_cli_where_and_init(run, isolated_workspace):
    code, out, _ = run("where")
    assert code == 0
    assert str(isolated_workspace.resolve()) in out
    code, out, _ = run("init")
    assert code == 0
    assert (isolated_workspace / "profiles" / "default.toml").is_file()


def test_cli_interrupt(run, monkeypatch):
    def _raise(prompt=""):
        raise EOFError
    monkeypatch.setattr("builtins.input", _raise)
    code, _, err = run()
    assert code == 130
    assert "Aborted" in err
