"""
Parallel execution of puzzle solvers.

Requested puzzle parts run on a pool of workers sized to the number of logical
processors. When a day has a prep function, its parts share a `PrepEntry`: prep
runs at most once per day, and each part's solver only starts after prep has
succeeded. Every failure (exception, invalid answer, timeout, dead worker) is
recorded as the `Failure` outcome of the affected part(s) and never stops any
other task.
"""
from __future__ import annotations

import concurrent.futures
import contextlib
import logging
import os
import threading
import time
import typing as t
from functools import partial
from itertools import groupby
from operator import attrgetter

import pebble

from .exceptions import AocError
from .exceptions import InputFetchFailure
from .exceptions import PrepFailure
from .exceptions import SolverFailure
from .exceptions import UnknownPuzzle
from .ident import PuzzleId
from .ident import day_id
from .utils import coerce
from .utils import num_workers


# from https://adventofcode.com/about
# every problem has a solution that completes in at most 15 seconds on ten-year-old hardware
DEFAULT_TIMEOUT = 60
log = logging.getLogger(__name__)


class Success(t.NamedTuple):
    output: str
    duration: float


class Failure(t.NamedTuple):
    error: AocError
    duration: float

    @property
    def stage(self) -> str:
        return "prep" if isinstance(self.error, PrepFailure) else "solve"


class RunResult(t.NamedTuple):
    id: PuzzleId
    outcome: Success | Failure

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)


def _call(func, arg, capture=False):
    # runs inside a worker. errors are returned rather than raised, because an
    # arbitrary exception instance might not survive the trip back from a subprocess
    with contextlib.ExitStack() as ctx:
        if capture:
            null = ctx.enter_context(open(os.devnull, "w"))
            ctx.enter_context(contextlib.redirect_stderr(null))
            ctx.enter_context(contextlib.redirect_stdout(null))
        t0 = time.perf_counter()
        try:
            value = func(arg)
        except Exception as err:
            return False, repr(err), time.perf_counter() - t0
        return True, value, time.perf_counter() - t0


def _solve(solver, arg, capture=False):
    ok, value, walltime = _call(solver, arg, capture=capture)
    if ok:
        try:
            value = coerce(value)
        except AocError as err:
            return False, str(err), walltime
    return ok, value, walltime


class PrepEntry:
    """
    Compute-once cell holding the prep result of one day.

    The first call to `demand` starts the computation. It and every later call get
    the same future, which resolves to an ``(ok, value, walltime)`` tuple. On
    failure, ``value`` is a single `PrepFailure` shared by all parts of the day.
    """

    def __init__(self, year, day, prep):
        self.year = year
        self.day = day
        self.prep = prep
        self._lock = threading.Lock()
        self._cell = None

    def __repr__(self):
        if self._cell is None:
            state = "idle"
        else:
            state = "done" if self._cell.done() else "running"
        return f"<{type(self).__name__} {day_id(self.year, self.day)} ({state})>"

    def demand(self, start, unpack):
        """
        `start` is called with the prep function, only on the first demand, and must
        return a future for the running computation. `unpack` turns that finished
        future into an ``(ok, value-or-message, walltime)`` tuple.
        """
        with self._lock:
            if self._cell is None:
                log.debug("starting prep for %s", day_id(self.year, self.day))
                self._cell = concurrent.futures.Future()
                try:
                    task = start(self.prep)
                except Exception as err:
                    self._cell.set_result((False, PrepFailure(repr(err)), 0.0))
                else:
                    task.add_done_callback(partial(self._settle, unpack))
            return self._cell

    def _settle(self, unpack, task):
        ok, value, walltime = unpack(task)
        if not ok:
            value = PrepFailure(f"prep failed: {value}")
        log.debug("prep for %s done (ok=%s)", day_id(self.year, self.day), ok)
        self._cell.set_result((ok, value, walltime))


class _Collector:
    # gathers exactly one RunResult per requested id, from any thread

    def __init__(self, expected, on_result=None):
        self._expected = frozenset(expected)
        self._on_result = on_result
        self._results = {}
        self._lock = threading.Lock()
        self._done = threading.Event()
        if not self._expected:
            self._done.set()

    def record(self, pid, outcome):
        result = RunResult(pid, outcome)
        with self._lock:
            if pid not in self._expected or pid in self._results:
                raise AocError(f"unexpected result for {pid}")
            self._results[pid] = result
            finished = len(self._results) == len(self._expected)
        log.debug("%s finished (%d/%d)", pid, len(self._results), len(self._expected))
        try:
            if self._on_result is not None:
                self._on_result(result)
        finally:
            if finished:
                self._done.set()

    def wait(self):
        self._done.wait()
        return sorted(self._results.values(), key=attrgetter("id"))


class Scheduler:
    """
    Runs puzzle solvers from `registry` against inputs from `provider`.

    With ``processes=True`` every task runs in a pebble process pool, so that a
    solver exceeding `timeout` seconds can be killed. With ``processes=False`` a
    thread pool is used and timeouts are not enforced.
    """

    def __init__(
        self,
        registry,
        provider,
        workers=None,
        timeout=DEFAULT_TIMEOUT,
        processes=True,
        capture=False,
    ):
        self.registry = registry
        self.provider = provider
        self.workers = workers or num_workers()
        self.timeout = timeout or None  # 0 disables the timeout
        self.processes = processes
        self.capture = capture

    def _pool(self):
        if self.processes:
            return pebble.ProcessPool(max_workers=self.workers)
        return pebble.ThreadPool(max_workers=self.workers)

    def _submit(self, pool, func, *args):
        if self.processes:
            return pool.submit(func, self.timeout, *args, capture=self.capture)
        return pool.submit(func, *args, capture=self.capture)

    def _unpack(self, future):
        # (ok, value-or-error-message, walltime) for a finished task
        try:
            return future.result()
        except concurrent.futures.TimeoutError:
            return False, f"timed out after {self.timeout}s", self.timeout
        except pebble.ProcessExpired as err:
            return False, f"worker process died ({err})", 0.0
        except Exception as err:
            # e.g. the arguments or the return value could not be pickled
            return False, repr(err), 0.0

    def _input_order(self, days):
        # cached inputs first, so that solvers can start while downloading the rest
        cached = [key for key in days if self.provider.has_cached(*key)]
        missing = [key for key in days if key not in cached]
        if missing:
            log.info("%d puzzle input(s) need downloading", len(missing))
        return cached + missing

    def run(self, ids, on_result=None):
        """
        Execute every requested puzzle part and return one `RunResult` per id,
        sorted by id. `on_result` is called with each RunResult as it arrives.
        """
        ids = sorted(set(ids))
        unknown = [pid for pid in ids if pid not in self.registry]
        if unknown:
            raise UnknownPuzzle(f"No registered puzzle {', '.join(map(str, unknown))}")
        collector = _Collector(ids, on_result=on_result)
        if not ids:
            return collector.wait()
        days = {key: list(g) for key, g in groupby(ids, key=attrgetter("day_key"))}
        log.info("running %d puzzle part(s) on %d worker(s)", len(ids), self.workers)
        with self._pool() as pool:
            for year, day in self._input_order(days):
                self._run_day(pool, collector, year, day, days[year, day])
            results = collector.wait()
        return results

    def _run_day(self, pool, collector, year, day, pids):
        prep = self.registry.prep_for(year, day)
        try:
            data = self.provider.fetch(year, day)
        except InputFetchFailure as err:
            log.warning("no input for %s: %s", day_id(year, day), err)
            msg = f"input unavailable: {err}"
            error = SolverFailure(msg) if prep is None else PrepFailure(msg)
            for pid in pids:
                collector.record(pid, Failure(error, 0.0))
            return
        if prep is None:
            for pid in pids:
                self._start_part(pool, collector, pid, data)
            return
        entry = PrepEntry(year, day, prep)
        start = partial(self._start_prep, pool, data)
        for pid in pids:
            cell = entry.demand(start, self._unpack)
            cell.add_done_callback(partial(self._after_prep, pool, collector, pid))

    def _start_prep(self, pool, data, prep):
        return self._submit(pool, _call, prep, data)

    def _after_prep(self, pool, collector, pid, cell):
        ok, value, walltime = cell.result()
        if not ok:
            collector.record(pid, Failure(value, walltime))
            return
        try:
            self._start_part(pool, collector, pid, value)
        except Exception as err:
            # callbacks run on pool threads, nobody else would see this error
            log.exception("failed to start %s after prep", pid)
            collector.record(pid, Failure(SolverFailure(repr(err)), 0.0))

    def _start_part(self, pool, collector, pid, arg):
        solver = self.registry[pid].solver
        future = self._submit(pool, _solve, solver, arg)
        future.add_done_callback(partial(self._after_part, collector, pid))

    def _after_part(self, collector, pid, future):
        ok, value, walltime = self._unpack(future)
        if ok:
            outcome = Success(value, walltime)
        else:
            outcome = Failure(SolverFailure(value), walltime)
        collector.record(pid, outcome)
