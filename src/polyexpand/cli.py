# src/polyexpand/cli.py

"""
Polynomial expander - (x+1)^n term by term with arbitrary-precision integers

Description:
    Reads a degree n and a value x, builds row n of Pascal's triangle,
    prints f(x) = (x+1)^n expanded, evaluates it term by term and checks
    the total against (x+1)^n computed directly. Phase timings and the
    result are written to a results file for the trigger degree (100).

usage: see polyexpand -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import traceback
from collections.abc import Callable
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from polyexpand import __version__ as _ver
from polyexpand import artifact
from polyexpand import config as CONFIG
from polyexpand.coefficients import row
from polyexpand.evaluate import Evaluation, IdentityMismatchError, evaluate_from_row
from polyexpand.fmt import (
    format_cross_check,
    format_duration,
    format_number,
    format_polynomial,
    format_row,
    format_term_line,
)
from polyexpand.output_manager import OutputManager
from polyexpand.runtime import APPLY, CFG, ensure_runtime_deps
from polyexpand.runtime import current as _rt_current
from polyexpand.timing import PhaseTimer, PhaseTimings
from polyexpand.utility import (
    UserInputError,
    clear_screen,
    flatten_dotted,
    parse_int,
    typename,
    validate_output_setting,
)
from polyexpand.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

RULE = "-" * 42


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    try:
        faulthandler.enable()
    except (AttributeError, ValueError):
        # stderr without a real file descriptor (captured or replaced)
        pass

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"[debug] {msg}", file=sys.stderr)


def prompt_int(prompt: str, *, label: str, minimum: int | None = None,
               input_fn: Callable[[str], str] | None = None) -> int:
    """Ask until the answer parses; invalid answers print a one-line error and re-ask."""
    ask = input_fn or input
    while True:
        answer = ask(prompt)
        try:
            return parse_int(answer, label=label, minimum=minimum)
        except UserInputError as e:
            _print_user_error(str(e))


def run_expansion(
    n: int,
    get_x: Callable[[], int],
    om: OutputManager,
    *,
    show_trace: bool = True,
) -> tuple[Evaluation, PhaseTimings]:
    """
    Generate, render and evaluate (x+1)^n, timing each phase.
    x is requested through get_x only after the polynomial has been shown.
    """
    timer = PhaseTimer()

    with timer.phase("generation"):
        coefficients = row(n)
    om.write(f"   Coefficients (row {n} of Pascal's triangle): {format_row(coefficients)}")

    om.write(f"\n{Fore.CYAN}Polynomial:{Style.RESET_ALL}")
    with timer.phase("rendering"):
        om.write(f"f(x) = {format_polynomial(coefficients)}")

    x = get_x()

    with timer.phase("evaluation"):
        ev = evaluate_from_row(coefficients, x)

    om.write(f"\nComputing f({x}) step by step:")
    om.write(RULE)
    if show_trace:
        for rec in ev.terms:
            om.write(f"   {format_term_line(rec, x)}")
    om.write(RULE)
    om.write(f"Total = {Fore.YELLOW}{Style.BRIGHT}{format_number(ev.total)}{Style.RESET_ALL}\n")
    for line in format_cross_check(ev):
        om.write(line)

    return ev, timer.timings


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace profile folder and copy the packaged profiles if missing.

      where
          Show the workspace and package paths.

    Missing n or x are asked for interactively.
    """)

    p = argparse.ArgumentParser(
        description="Polynomial expander — (x+1)^n term by term with exact integers",
        usage=(
            "polyexpand [n [x]] [--profile NAME] [--output OUTPUT] [--results FILE]\n"
            "                  [--quiet] [--no-trace] [--verify] [--debug]\n"
            "       polyexpand init | where\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[n [x]]",
                   help="degree n (>= 0) and value x (>= 0), or a command")
    p.add_argument("--profile", default=None, help="Settings profile to use (default: 'default')")
    p.add_argument("--output", default=None, help="Also write the report to a file (or 'dir/' for one file per n)")
    p.add_argument("--results", default=None,
                   help="Write the timings/result file to FILE, whatever the degree")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output (file output still happens)")
    p.add_argument("--no-trace", action="store_true", help="Omit the per-term lines")
    p.add_argument("--verify", action="store_true", help="Re-check every value against sympy/gmpy2")
    p.add_argument("--debug", action="store_true", help="Show phase timings and internal trace info")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except (KeyboardInterrupt, EOFError):
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv) or _rt_current().debug
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _configure_text_streams() -> None:
    # Respect an explicit user choice
    if os.environ.get("PYTHONIOENCODING"):
        return
    # Only touch redirected output (pipes/files), leave TTY as-is
    if sys.stdout.isatty() or not hasattr(sys.stdout, "reconfigure"):
        return
    enc = (sys.stdout.encoding or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _load_profile(name: str | None) -> None:
    """Load and apply a profile; an unknown explicit name is a user error."""
    if name and not CONFIG.has_profile(name):
        available = ", ".join(CONFIG.list_all_profiles()) or "(none)"
        raise UserInputError(f"Unknown profile: '{name}'. Available profiles: {available}")

    profile_name = name or "default"
    if not CONFIG.has_profile(profile_name):
        _debug("no default profile in the workspace, using built-in defaults")
        return

    selected = CONFIG.load_settings(profile_name)
    cli_debug = _rt_current().debug
    APPLY(selected)
    if cli_debug:
        _rt_current().debug = True

    if _rt_current().debug:
        print(f"[debug] active profile: {_rt_current().profile_name}", file=sys.stderr)
        print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        print("[debug] profile keys (runtime value/type):", file=sys.stderr)
        flat = flatten_dotted(_rt_current().settings)
        for k in sorted(flat, key=str.lower):
            v = flat[k]
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    command = args.items[0] if args.items else None
    if command == "init":
        ws, copied = seed_workspace(overwrite=False)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('polyexpand')}")
        return 0

    _MAX_ITEMS = 2
    if len(args.items) > _MAX_ITEMS:
        parser.error("expected at most two positionals: n and x")

    # First run: make sure the default profile exists
    ensure_workspace_seeded()
    _load_profile(args.profile)

    # CLI flags win over the profile
    rt.debug = rt.debug or bool(args.debug)
    rt.verify = rt.verify or bool(args.verify)

    if not ensure_runtime_deps(strict=True, verify=rt.verify):
        return 1

    try:
        output_target = validate_output_setting(args.output)
        if output_target is None:
            output_target = validate_output_setting(CFG("OUTPUT.OUTPUT_FILE", None))
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    interactive = len(args.items) < _MAX_ITEMS
    if interactive and not args.quiet and not rt.debug and sys.stdout.isatty():
        clear_screen()

    if not args.quiet:
        print(f"{Fore.YELLOW}{Style.BRIGHT}Polynomial generator (x+1)^n  v{_ver}{Style.RESET_ALL}")
        print("=" * 30)

    given_x = parse_int(args.items[1], label="x", minimum=0) if len(args.items) == _MAX_ITEMS else None
    if args.items:
        n = parse_int(args.items[0], label="n", minimum=0)
    else:
        n = prompt_int("\nDegree of the polynomial (n, non-negative integer): ", label="n", minimum=0)

    def get_x() -> int:
        if given_x is not None:
            return given_x
        return prompt_int("\nValue of 'x' to compute f(x) (non-negative integer): ", label="x", minimum=0)

    show_trace = bool(CFG("DISPLAY.SHOW_TRACE", True)) and not args.no_trace
    om = OutputManager(output_file=output_target, quiet=args.quiet, degree=n)
    try:
        ev, timings = run_expansion(n, get_x, om, show_trace=show_trace)
    finally:
        om.close()

    for name, ms in timings.as_ms().items():
        _debug(f"{name:<10} {format_duration(ms / 1000.0)}")
    _debug(f"result has {ev.total.digit_count()} digit(s)")

    try:
        ev.ensure_identity()
    except IdentityMismatchError as e:
        print(f"{Fore.RED}{Style.BRIGHT}Internal error:{Style.RESET_ALL} {e}", file=sys.stderr)
        return 1

    if rt.verify:
        from polyexpand.reference import verify_evaluation

        problems = verify_evaluation(ev)
        if problems:
            print(f"{Fore.RED}Verification failed:{Style.RESET_ALL}", file=sys.stderr)
            for p in problems:
                print(f"  - {p}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"{Fore.GREEN}Verified against sympy/gmpy2.{Style.RESET_ALL}")

    if artifact.should_write(n, args.results):
        path = artifact.results_path(args.results)
        try:
            artifact.write_results(path, n, ev.x, timings, ev.total)
        except OSError as e:
            _print_user_error(f"could not write '{path}': {e}")
            return 1
        if not args.quiet:
            print(f"Timings and result written to '{path}'")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
