import re
import typing as t

from .exceptions import MalformedFilter
from .utils import aoc_years


DAYS = range(1, 26)
PARTS = (1, 2)


class PuzzleId(t.NamedTuple):
    """
    Key of one unit of work: a single part of a single day's puzzle.
    Tuple ordering gives the display order (year, then day, then part).
    """

    year: int
    day: int
    part: int

    def __str__(self):
        return f"{day_id(self.year, self.day)}p{self.part}"

    @property
    def day_key(self):
        return self.year, self.day

    @classmethod
    def parse(cls, txt):
        """Inverse of str(), e.g. "y21d03p2" -> PuzzleId(2021, 3, 2)."""
        match = re.fullmatch(r"y(\d{2})d(\d{2})p(\d)", txt)
        if match is None:
            raise MalformedFilter(f"Expected pattern yYYdDDpP, got {txt!r}")
        yy, dd, p = map(int, match.groups())
        return cls(check_year(2000 + yy), check_day(dd), check_part(p))


def day_id(year, day):
    """The short form used in file names, e.g. (2021, 1) -> "y21d01"."""
    return f"y{year % 100:02d}d{day:02d}"


def check_year(year):
    years = aoc_years()
    if year not in years:
        raise MalformedFilter(f"Year {year} is out of range [{years[0]},{years[-1]}]")
    return year


def check_day(day):
    if day not in DAYS:
        raise MalformedFilter(f"Day {day} is out of range [1,25]")
    return day


def check_part(part):
    if part not in PARTS:
        raise MalformedFilter(f"Puzzle part {part} is out of range [1,2]")
    return part
