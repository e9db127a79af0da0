class AocError(Exception):
    """base exception for this package"""


class MalformedFilter(AocError):
    """a puzzle filter token is not of the form yYYdDDpP"""


class UnknownPuzzle(AocError):
    """a puzzle filter token does not select any registered puzzle"""


class PrepFailure(AocError):
    """the shared preprocessing step of a day failed"""


class SolverFailure(AocError):
    """a solver raised, timed out, or returned an unusable answer"""


class CoercionError(AocError):
    """the answer returned by a solver can not be rendered as a string"""


class InputFetchFailure(AocError):
    """the puzzle input could not be provided"""


class PuzzleNotFound(InputFetchFailure):
    """the puzzle does not exist, or is not unlocked yet"""


class NetworkError(InputFetchFailure):
    """downloading from adventofcode.com failed"""


class CacheError(InputFetchFailure):
    """reading or writing the local input cache failed"""


class IoFailure(AocError):
    """access to a local file or directory failed"""


class LeaderboardError(IoFailure):
    """personal leaderboard statistics are unreadable"""


class DeadTokenError(AocError):
    """the auth is expired/incorrect"""
