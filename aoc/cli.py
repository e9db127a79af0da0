import argparse
import itertools
import logging
import sys
from functools import partial
from importlib.metadata import version

from . import config
from .cookies import login
from .cookies import logout
from .exceptions import AocError
from .exceptions import DeadTokenError
from .exceptions import IoFailure
from .exceptions import MalformedFilter
from .exceptions import UnknownPuzzle
from .filters import WILDCARD
from .filters import Filter
from .filters import resolve
from .inputs import InputProvider
from .leaderboard import download_leaderboard
from .leaderboard import format_leaderboards
from .leaderboard import load_leaderboards
from .registry import default_registry
from .report import print_report
from .scheduler import DEFAULT_TIMEOUT
from .scheduler import Scheduler
from .utils import aoc_years


log = logging.getLogger(__name__)
COMMANDS = ("solve", "login", "logout", "stats")


def _die(err, rc):
    print(f"aoc: error: {err}", file=sys.stderr)
    sys.exit(rc)


def _add_filters(parser):
    parser.add_argument(
        "puzzles",
        nargs="*",
        metavar="yYYdDDpP",
        help=(
            "Puzzles to select, e.g. y21 (a year), y21d01 (a day), y21d01p2 (a part) "
            "or d01 (day 1 of every year). Selects everything by default."
        ),
    )


def _parser():
    parser = argparse.ArgumentParser(
        prog="aoc",
        description="Run your Advent of Code solvers against your personal inputs.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s v{version('advent-of-code-runner')}",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        help=(
            "Increased logging (-v INFO, -vv DEBUG). "
            "Default level is logging.WARNING."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", metavar="{solve,login,logout,stats}")
    add = partial(subparsers.add_parser, parents=[common])

    solve = add("solve", help="run solvers (the default command)")
    _add_filters(solve)
    solve.add_argument(
        "-t",
        "--timeout",
        metavar="T",
        type=int,
        default=DEFAULT_TIMEOUT,
        help=(
            "Kill a solver if it exceeded this timeout, in seconds "
            "(default: %(default)s). Can use value '0' to disable timeout."
        ),
    )
    solve.add_argument(
        "-w",
        "--workers",
        metavar="N",
        type=int,
        help="Number of parallel workers (default: number of logical processors).",
    )
    solve.add_argument(
        "--threads",
        action="store_true",
        help=(
            "Run solvers in threads instead of subprocesses. "
            "Timeouts are not enforced with threads."
        ),
    )
    solve.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help=(
            "Capture output from solvers, and hide the progress. "
            "Can be used to suppress unwanted terminal output from a solver."
        ),
    )

    login_ = add("login", help="save your adventofcode.com session")
    login_.add_argument("token", nargs="?", help="session cookie (read from stdin if omitted)")
    login_.add_argument(
        "--no-check",
        action="store_false",
        dest="check",
        help="don't verify the session with adventofcode.com",
    )

    add("logout", help="delete your saved session")

    stats = add("stats", help="show personal leaderboard statistics")
    _add_filters(stats)
    stats.add_argument(
        "--fetch",
        action="store_true",
        help="download your personal leaderboards for the selected years first",
    )
    return parser


def _argv():
    # `solve` is the default subcommand, and may be given anywhere on the line
    argv = sys.argv[1:]
    words = [arg for arg in argv if not arg.startswith("-")]
    if {"-h", "--help", "--version"}.intersection(argv) and not words:
        return argv
    if words and words[0] in COMMANDS:
        argv.remove(words[0])
        return [words[0], *argv]
    return ["solve", *argv]


def main():
    """
    Run the selected puzzle solvers, in parallel, and render the results. Also
    manages the session token and renders personal leaderboard statistics.
    """
    parser = _parser()
    args = parser.parse_args(_argv())
    if args.verbose is None:
        log_level = logging.WARNING
    elif args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level)
    log.debug("called with %r", args)
    if args.command == "login":
        rc = _login(args)
    elif args.command == "logout":
        logout()
        rc = 0
    elif args.command == "stats":
        rc = _stats(args)
    else:
        rc = _solve(args)
    sys.exit(rc)


def _solve(args):
    registry = default_registry()
    try:
        ids = resolve(args.puzzles or [WILDCARD], registry)
    except (MalformedFilter, UnknownPuzzle) as err:
        _die(err, 2)
    if not ids:
        log.info("no puzzle solvers registered, nothing to run")
    provider = InputProvider()
    days = {pid.day_key for pid in ids}
    if provider.token is None and not all(provider.has_cached(*key) for key in days):
        config.print_missing_token_message()
    scheduler = Scheduler(
        registry,
        provider,
        workers=args.workers,
        timeout=args.timeout,
        processes=not args.threads,
        capture=args.quiet,
    )
    on_result = None
    if not args.quiet and sys.stderr.isatty():
        counter = itertools.count(1)

        def on_result(result):
            sys.stderr.write(f"\r{next(counter)}/{len(ids)} finished, last: {result.id}")
            sys.stderr.flush()

    results = scheduler.run(ids, on_result=on_result)
    if on_result is not None:
        sys.stderr.write("\r\x1b[K")
        sys.stderr.flush()
    n_failed = print_report(results, timeout=args.timeout)
    return 1 if n_failed else 0


def _login(args):
    try:
        login(args.token, check=args.check)
    except DeadTokenError as err:
        _die(err, 1)
    return 0


def _stats(args):
    try:
        filter = Filter.parse(args.puzzles or [WILDCARD])
    except MalformedFilter as err:
        _die(err, 2)
    if args.fetch:
        token = config.read_session_token()
        if token is None:
            config.print_missing_token_message()
            return 1
        for year in aoc_years():
            if filter.matches_year(year):
                try:
                    download_leaderboard(year, token)
                except AocError as err:
                    _die(err, 1)
    try:
        boards = load_leaderboards(filter)
    except IoFailure as err:
        _die(err, 1)
    if not boards:
        print(f"No leaderboard statistics found in {config.leaderboard_dir()}", file=sys.stderr)
        return 0
    print(format_leaderboards(boards), end="")
    return 0
