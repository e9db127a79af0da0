from __future__ import annotations

import logging
import typing as t
from collections.abc import Mapping
from types import MappingProxyType

from .exceptions import AocError
from .ident import PuzzleId
from .ident import check_day
from .ident import day_id
from .utils import get_plugins


log = logging.getLogger(__name__)


class Solution(t.NamedTuple):
    """
    The solvers for one day's puzzle.

    Without ``prep``, both solvers are called with the raw puzzle input (a str).
    With ``prep``, the input is passed to ``prep`` once and both solvers are called
    with its return value instead. For the process pool, all three callables and
    the value returned by ``prep`` must be picklable (e.g. module level functions).
    """

    year: int
    day: int
    part1: t.Callable[[t.Any], t.Any]
    part2: t.Callable[[t.Any], t.Any]
    prep: t.Callable[[str], t.Any] | None = None


class PuzzleEntry(t.NamedTuple):
    id: PuzzleId
    solver: t.Callable[[t.Any], t.Any]
    prep: t.Callable[[str], t.Any] | None = None


class Registry(Mapping):
    """Read-only mapping of PuzzleId -> PuzzleEntry, built once at startup."""

    def __init__(self, solutions=()):
        entries = {}
        for solution in solutions:
            year, day = solution.year, check_day(solution.day)
            key = day_id(year, day)
            if PuzzleId(year, day, 1) in entries:
                raise AocError(f"Duplicate solution for {key}")
            for part, solver in enumerate([solution.part1, solution.part2], start=1):
                pid = PuzzleId(year, day, part)
                entries[pid] = PuzzleEntry(pid, solver, solution.prep)
            log.debug("registered %s (prep=%s)", key, solution.prep is not None)
        self._entries = MappingProxyType(dict(sorted(entries.items())))

    def __getitem__(self, pid):
        return self._entries[pid]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"<{type(self).__name__} with {len(self)} puzzles>"

    def prep_for(self, year, day):
        """The prep callable shared by the parts of a day, if any."""
        entry = self._entries.get(PuzzleId(year, day, 1))
        return None if entry is None else entry.prep


def _load_plugin_solutions():
    # each entry point in the "aoc.puzzles" group refers to a Solution, or to an
    # iterable of Solutions, in some installed package
    solutions = []
    for ep in get_plugins():
        obj = ep.load()
        if isinstance(obj, Solution):
            obj = [obj]
        found = list(obj)
        log.debug("plugin %s provided %d solution(s)", ep.name, len(found))
        solutions += found
    return solutions


def default_registry(plugins=True):
    """The built-in solutions, plus those provided by installed plugins."""
    from .puzzles import SOLUTIONS

    solutions = list(SOLUTIONS)
    if plugins:
        solutions += _load_plugin_solutions()
    return Registry(solutions)
