import logging
from itertools import groupby
from operator import attrgetter

from . import config
from .ident import day_id
from .scheduler import DEFAULT_TIMEOUT
from .scheduler import Success
from .utils import colored


log = logging.getLogger(__name__)


def format_time(t, timeout=DEFAULT_TIMEOUT):
    """
    Used for rendering the puzzle solve time in color:
    - green, if you're under a quarter of the timeout (15s default)
    - yellow, if you're over a quarter but under a half (30s by default)
    - red, if you're really slow (>30s by default)
    """
    if not timeout:
        timeout = float("inf")
    if t < timeout / 4:
        color = "green"
    elif t < timeout / 2:
        color = "yellow"
    else:
        color = "red"
    runtime = colored(f"{t: 7.2f}s", color)
    return runtime


def known_answer(pid):
    """The correct answer for this puzzle part, if it was saved, else None."""
    path = config.answers_dir() / f"{pid}_personal_puzzle_answer.txt"
    try:
        answer = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return answer or None


def format_result(result, timeout=DEFAULT_TIMEOUT):
    outcome = result.outcome
    runtime = format_time(outcome.duration, timeout)
    line = f"part {result.id.part}   {runtime}   "
    if not isinstance(outcome, Success):
        # longest correct answer seen so far has been 57 chars, errors get the same room
        error = str(outcome.error)[:100]
        return line + colored("✖", "red") + f" {error}"
    answer = outcome.output[:60]
    expected = known_answer(result.id)
    if expected is None:
        icon = colored("?", "magenta")
    elif expected == outcome.output:
        icon = colored("✔", "green")
    else:
        icon = colored("✖", "red")
        answer = f"{answer} (expected: {expected})"
    return line + f"{icon} {answer}"


def render(results, timeout=DEFAULT_TIMEOUT):
    """
    Yields one line per RunResult, grouped by day and sorted by (year, day, part).
    The day label is only shown on the first line of each day.
    """
    results = sorted(results, key=attrgetter("id"))
    for (year, day), group in groupby(results, key=lambda r: r.id.day_key):
        label = day_id(year, day)
        for result in group:
            yield f"{label:<6}   {format_result(result, timeout)}"
            label = ""


def print_report(results, timeout=DEFAULT_TIMEOUT):
    """Print the rendered results on stdout, and return the number of failures."""
    results = list(results)
    for line in render(results, timeout):
        print(line)
    n_failed = sum(not result.ok for result in results)
    log.debug("%d of %d puzzle part(s) failed", n_failed, len(results))
    return n_failed
