"""
Puzzle selection on the command line.

A filter token looks like ``y21d01p2``. Each component is optional and a missing
component is a wildcard: ``y21d01`` selects both parts of a day, ``y21`` a whole
year, ``d01`` day 1 of every year and ``*`` everything. A puzzle is selected if
it matches at least one token.
"""
from __future__ import annotations

import logging
import re
import typing as t

from .exceptions import MalformedFilter
from .exceptions import UnknownPuzzle
from .ident import check_day
from .ident import check_part


log = logging.getLogger(__name__)

WILDCARD = "*"
_token_re = re.compile(r"(?:y(?P<year>\d{2}))?(?:d(?P<day>\d{2}))?(?:p(?P<part>\d))?")


class FilterTerm(t.NamedTuple):
    year: int | None = None
    day: int | None = None
    part: int | None = None

    @classmethod
    def parse(cls, token):
        if not token:
            raise MalformedFilter("Input is empty (please use '*' as a wildcard)")
        if token == WILDCARD:
            return cls()
        match = _token_re.fullmatch(token)
        if match is None:
            raise MalformedFilter(f"Input {token!r} does not match pattern yYYdDDpP")
        year, day, part = match.group("year", "day", "part")
        try:
            return cls(
                year=None if year is None else 2000 + int(year),
                day=None if day is None else check_day(int(day)),
                part=None if part is None else check_part(int(part)),
            )
        except MalformedFilter as err:
            raise MalformedFilter(f"Invalid filter {token!r}: {err}") from None

    @property
    def is_wildcard(self):
        return self == FilterTerm()

    def matches_year(self, year):
        return self.year in (None, year)

    def matches_year_day(self, year, day):
        return self.matches_year(year) and self.day in (None, day)

    def matches(self, puzzle_id):
        year, day, part = puzzle_id
        return self.matches_year_day(year, day) and self.part in (None, part)


class Filter:
    """Union of filter terms. Token order and duplicates are irrelevant."""

    def __init__(self, terms=()):
        self.terms = frozenset(terms)

    @classmethod
    def parse(cls, tokens):
        return cls(FilterTerm.parse(token) for token in tokens)

    @classmethod
    def everything(cls):
        return cls([FilterTerm()])

    def __eq__(self, other):
        if not isinstance(other, Filter):
            return NotImplemented
        return self.terms == other.terms

    def __hash__(self):
        return hash(self.terms)

    def __repr__(self):
        return f"<{type(self).__name__} {sorted(self.terms, key=str)}>"

    def matches_year(self, year):
        return any(term.matches_year(year) for term in self.terms)

    def matches_year_day(self, year, day):
        return any(term.matches_year_day(year, day) for term in self.terms)

    def matches(self, puzzle_id):
        return any(term.matches(puzzle_id) for term in self.terms)


def resolve(tokens, registry):
    """
    Resolve filter tokens into the set of registered puzzle ids they select.

    Every token must be well-formed (else `MalformedFilter`) and, apart from the
    ``*`` wildcard, must select at least one registered puzzle (else `UnknownPuzzle`
    naming the token). An empty token sequence selects nothing.
    """
    selected = set()
    for token in tokens:
        term = FilterTerm.parse(token)
        matched = {pid for pid in registry if term.matches(pid)}
        if not matched and not term.is_wildcard:
            raise UnknownPuzzle(f"No registered puzzle matches {token!r}")
        log.debug("filter %s selected %d puzzle(s)", token, len(matched))
        selected |= matched
    return frozenset(selected)
