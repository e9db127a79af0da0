from . import exceptions
from . import utils
from .exceptions import AocError
from .filters import resolve
from .ident import PuzzleId
from .registry import Registry
from .registry import Solution
from .scheduler import Scheduler
from .version import __version__

__all__ = [
    "AocError",
    "PuzzleId",
    "Registry",
    "Scheduler",
    "Solution",
    "exceptions",
    "resolve",
    "utils",
    "__version__",
]
