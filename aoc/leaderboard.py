"""
Personal leaderboard statistics.

adventofcode.com shows your personal times, ranks and scores for each year at
https://adventofcode.com/<year>/leaderboard/self when logged in. The table found
there is saved per year into the leaderboard directory (either manually, or with
``aoc stats --fetch``), and rendered here with added MIN/MED/MAX rows.
"""
from __future__ import annotations

import logging
import re
import typing as t
from datetime import timedelta

from . import config
from .exceptions import AocError
from .exceptions import DeadTokenError
from .exceptions import LeaderboardError
from .ident import check_day
from .utils import get_soup
from .utils import atomic_write_file
from .utils import http


log = logging.getLogger(__name__)

FOREVER = timedelta(hours=24)
W_LABEL = len("Day")
W_TIME = len("00:00:00")
W_RANK_MIN = len("Rank")
W_SCORE_MIN = len("Score")
_file_re = re.compile(r"y(\d{2})_personal_leaderboard_statistics\.txt")
_header1_re = re.compile(r"---Part 1---[\-]*\s+[\-]*---Part 2---")
_header2_re = re.compile(r"Day(\s+Time\s+Rank\s+Score){2}")


class Stats(t.NamedTuple):
    """Your personal result for one part of one day."""

    time: timedelta
    rank: int
    score: int


class Row(t.NamedTuple):
    label: int | str
    parts: tuple[Stats | None, Stats | None]


def _parse_duration(txt):
    """Parse a string like 01:11:16 (hours, minutes, seconds) into a timedelta"""
    if txt == ">24h":
        return FOREVER
    try:
        h, m, s = [int(x) for x in txt.split(":")]
    except ValueError:
        raise ValueError(f"Input does not match pattern hh:mm:ss: {txt!r}") from None
    if not (0 <= m < 60 and 0 <= s < 60) or h < 0:
        raise ValueError(f"Invalid time: {txt!r}")
    return timedelta(hours=h, minutes=m, seconds=s)


def _format_duration(td):
    if td >= FOREVER:
        return ">24h"
    h, rem = divmod(int(td.total_seconds()), 60 * 60)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def _parse_stats(time, rank, score):
    if (time, rank, score) == ("-", "-", "-"):
        return None
    rank_ = int(rank)
    if rank_ <= 0:
        raise ValueError(f"Rank must be greater than zero: {rank!r}")
    score_ = int(score)
    if score_ < 0:
        raise ValueError(f"Score must not be negative: {score!r}")
    return Stats(_parse_duration(time), rank_, score_)


def parse_row(line):
    cols = line.split()
    if len(cols) != 7:
        raise ValueError(f"Failed to tokenize table row: {line!r}")
    label, *vals = cols
    try:
        day = check_day(int(label))
    except (ValueError, AocError):
        raise ValueError(f"Failed to parse row label {label!r}") from None
    return Row(day, (_parse_stats(*vals[:3]), _parse_stats(*vals[3:])))


# medians of an even number of values use the mean of the middle two:
# times and ranks round up, scores round down. ">24h" is sticky.


def _mean_time(a, b):
    if a >= FOREVER or b >= FOREVER:
        return FOREVER
    secs = -(-int(a.total_seconds() + b.total_seconds()) // 2)
    return timedelta(seconds=secs)


def _mean_rank(a, b):
    return -(-(a + b) // 2)


def _mean_score(a, b):
    return (a + b) // 2


def min_med_max(values, mean):
    """(min, median, max) of the given values, or None if there are none."""
    values = sorted(values)
    if not values:
        return None
    n = len(values)
    if n % 2:
        med = values[n // 2]
    else:
        med = mean(values[n // 2 - 1], values[n // 2])
    return values[0], med, values[-1]


def totals(rows):
    """The MIN, MED and MAX rows, computed per column over the given day rows."""
    columns = []
    for i in range(2):
        stats = [row.parts[i] for row in rows if row.parts[i] is not None]
        if not stats:
            columns.append([None] * 3)
            continue
        times = min_med_max([s.time for s in stats], _mean_time)
        ranks = min_med_max([s.rank for s in stats], _mean_rank)
        scores = min_med_max([s.score for s in stats], _mean_score)
        columns.append([Stats(*x) for x in zip(times, ranks, scores)])
    labels = ["MIN", "MED", "MAX"]
    return [Row(label, (p1, p2)) for label, p1, p2 in zip(labels, *columns)]


class Leaderboard:
    def __init__(self, year, days):
        self.year = year
        self.days = list(days)
        self.totals = totals(self.days) if len(self.days) >= 2 else []
        self.widths = self._compute_widths()

    def _compute_widths(self):
        widths = []
        for i in range(2):
            w_rank, w_score = W_RANK_MIN, W_SCORE_MIN
            for row in self.days:
                stats = row.parts[i]
                if stats is not None:
                    w_rank = max(w_rank, len(str(stats.rank)))
                    w_score = max(w_score, len(str(stats.score)))
            widths.append((w_rank, w_score))
        return widths

    @property
    def width(self):
        part_widths = [W_TIME + 2 + r + 2 + s for r, s in self.widths]
        return W_LABEL + sum(3 + w for w in part_widths)

    def _format_row(self, row):
        line = f"{row.label:>{W_LABEL}}"
        for stats, (w_r, w_s) in zip(row.parts, self.widths):
            if stats is None:
                time, rank, score = "-", "-", "-"
            else:
                time, rank, score = _format_duration(stats.time), stats.rank, stats.score
            line += f"   {time:>{W_TIME}}  {rank:>{w_r}}  {score:>{w_s}}"
        return line

    def __str__(self):
        lines = [f"Advent of Code {self.year} - Personal Leaderboard Statistics", ""]
        header1 = " " * W_LABEL
        header2 = "Day"
        for i, (w_r, w_s) in enumerate(self.widths, start=1):
            total = W_TIME + 2 + w_r + 2 + w_s
            header1 += f"   {f'Part {i}':-^{total}}"
            header2 += f"   {'Time':>{W_TIME}}  {'Rank':>{w_r}}  {'Score':>{w_s}}"
        lines += [header1, header2]
        lines += [self._format_row(row) for row in self.days]
        if self.totals:
            lines.append("-" * self.width)
            lines += [self._format_row(row) for row in self.totals]
        return "\n".join(lines) + "\n"


def parse_leaderboard(year, lines, filter=None):
    """
    Parse the lines of a personal leaderboard table. Days not matching `filter` are
    dropped. Returns None if no days remain.
    """
    lines = iter(lines)
    try:
        line = next(lines, "")
        if not _header1_re.search(line):
            raise ValueError(f"Not the first line of the table header: {line!r}")
        line = next(lines, "")
        if not _header2_re.search(line):
            raise ValueError(f"Not the second line of the table header: {line!r}")
        rows = [parse_row(line) for line in lines if line.strip()]
    except ValueError as err:
        raise LeaderboardError(f"Failed to parse {year} leaderboard: {err}") from err
    if filter is not None:
        rows = [row for row in rows if filter.matches_year_day(year, row.label)]
    if not rows:
        return None
    return Leaderboard(year, rows)


def leaderboard_path(year):
    return config.leaderboard_dir() / f"y{year % 100:02d}_personal_leaderboard_statistics.txt"


def _years_on_disk():
    path = config.leaderboard_dir()
    try:
        names = sorted(p.name for p in path.iterdir())
    except OSError as err:
        raise LeaderboardError(f"Failed to read leaderboards from {path} ({err})") from err
    years = []
    for name in names:
        match = _file_re.fullmatch(name)
        if match is None:
            msg = (
                f"Failed to read leaderboards from {path}: file name {name!r} does "
                "not match pattern 'yYY_personal_leaderboard_statistics.txt'"
            )
            raise LeaderboardError(msg)
        years.append(2000 + int(match.group(1)))
    return sorted(years)


def load_leaderboards(filter):
    """All cached leaderboards for the years (and days) matching `filter`."""
    boards = []
    for year in _years_on_disk():
        if not filter.matches_year(year):
            continue
        path = leaderboard_path(year)
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as err:
            raise LeaderboardError(f"Failed to open {year} leaderboard ({err})") from err
        board = parse_leaderboard(year, lines, filter)
        if board is not None:
            boards.append(board)
    log.debug("loaded %d leaderboard(s)", len(boards))
    return boards


def format_leaderboards(boards):
    delim = "\n" + "=" * 53 + "\n\n"
    return delim.join(str(board) for board in boards)


def download_leaderboard(year, token):
    """
    Save your personal stats table for `year` from adventofcode.com into the
    leaderboard directory. Returns the saved path, or None if you haven't collected
    any stars that year.
    """
    url = f"https://adventofcode.com/{year}/leaderboard/self"
    response = http.get(url, token=token, redirect=False)
    if 300 <= response.status < 400:
        # expired tokens 302 redirect to the overall leaderboard
        raise DeadTokenError(f"the auth token ...{token[-4:]} is dead")
    if response.status >= 400:
        raise AocError(f"HTTP {response.status} at {url}")
    soup = get_soup(response.data)
    if soup.article is None or soup.article.pre is None:
        if "You haven't collected any stars" in soup.text:
            log.info("no stars collected in %s", year)
            return None
        raise LeaderboardError(f"no stats table found at {url}")
    path = leaderboard_path(year)
    txt = soup.article.pre.text
    # strip the "these are your personal times" preamble above the table
    lines = txt.splitlines()
    for i, line in enumerate(lines):
        if _header1_re.search(line):
            txt = "\n".join(lines[i:]) + "\n"
            break
    atomic_write_file(path, txt)
    log.info("saved %s leaderboard to %s", year, path)
    return path
