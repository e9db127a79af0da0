import logging

import urllib3

from . import config
from .exceptions import CacheError
from .exceptions import NetworkError
from .exceptions import PuzzleNotFound
from .ident import day_id
from .utils import atomic_write_file
from .utils import http


log = logging.getLogger(__name__)
URL = "https://adventofcode.com/{year}/day/{day}/input"


class InputProvider:
    """
    Personal puzzle inputs. They will usually be retrieved from the cache, but if
    this is the first time an input is needed it is downloaded and then cached.
    Your puzzle inputs never change, they're safe to cache indefinitely.
    """

    def __init__(self, token=None):
        # None means: look up the session token lazily, only if a download is needed
        self._token = token

    @property
    def token(self):
        if self._token is None:
            self._token = config.read_session_token()
        return self._token

    @staticmethod
    def path(year, day):
        return config.inputs_dir() / f"{day_id(year, day)}_personal_puzzle_input.txt"

    def has_cached(self, year, day):
        return self.path(year, day).is_file()

    def fetch(self, year, day):
        path = self.path(year, day)
        try:
            # use previously received data, if any existing
            data = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.debug("input cache miss %s", path)
        except (OSError, UnicodeDecodeError) as err:
            raise CacheError(f"Failed to read {path} ({err})") from err
        else:
            log.debug("input cache hit %s", path)
            return data.rstrip("\r\n")
        data = self._download(year, day)
        try:
            atomic_write_file(path, data)
        except OSError as err:
            raise CacheError(f"Failed to save puzzle input to {path} ({err})") from err
        return data.rstrip("\r\n")

    def _download(self, year, day):
        token = self.token
        if token is None:
            raise NetworkError("Not logged in (run `aoc login`, or set AOC_SESSION)")
        url = URL.format(year=year, day=day)
        sanitized = "..." + token[-4:]
        log.info("getting data year=%s day=%s token=%s", year, day, sanitized)
        try:
            response = http.get(url, token=token)
        except urllib3.exceptions.HTTPError as err:
            raise NetworkError(f"Request to {url} failed ({err})") from err
        if response.status == 404:
            raise PuzzleNotFound(f"{day_id(year, day)} not available yet")
        if response.status >= 400:
            # adventofcode.com answers HTTP 400 (not 401) for a bad session cookie
            log.error("got %s status code token=%s", response.status, sanitized)
            log.debug(response.data.decode(errors="replace"))
            raise NetworkError(f"HTTP {response.status} at {url}. Are you logged in?")
        log.info("saving the puzzle input token=%s", sanitized)
        return response.data.decode()
