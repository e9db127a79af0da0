from __future__ import annotations

import logging
import math
import os
import platform
import shutil
import sys
import time
import typing as t
from collections import deque
from datetime import datetime
from functools import cache
from importlib.metadata import entry_points
from importlib.metadata import version
from pathlib import Path
from tempfile import NamedTemporaryFile
from zoneinfo import ZoneInfo

import bs4
import urllib3

from .exceptions import CoercionError
from .exceptions import DeadTokenError

if sys.version_info >= (3, 10):
    # Python 3.10+
    from importlib.metadata import EntryPoints as _EntryPointsType
else:
    # Python 3.9
    from importlib.metadata import EntryPoint

    _EntryPointsType = list[EntryPoint]

log: logging.Logger = logging.getLogger(__name__)
AOC_TZ = ZoneInfo("America/New_York")
_v = version("advent-of-code-runner")
USER_AGENT = f"advent-of-code-runner v{_v} (personal puzzle runner)"


class HttpClient:
    # every request to adventofcode.com goes through this wrapper
    # so that we can put in user agent header, rate-limit, etc.

    pool_manager: urllib3.PoolManager
    req_count: dict[t.Literal["GET"], int]

    def __init__(self) -> None:
        proxy_url = os.environ.get("http_proxy") or os.environ.get("https_proxy")
        if proxy_url:
            self.pool_manager = urllib3.ProxyManager(
                proxy_url, headers={"User-Agent": USER_AGENT}
            )
        else:
            self.pool_manager = urllib3.PoolManager(headers={"User-Agent": USER_AGENT})
        self.req_count = {"GET": 0}
        self._max_t = 3.0
        self._cooloff = 0.16
        self._history = deque([time.time() - self._max_t] * 4, maxlen=4)

    def _limiter(self) -> None:
        now = time.time()
        t0 = self._history[0]
        if now - t0 < self._max_t:
            # made 4 requests within 3 seconds - you're past the speed limit
            # of 1 req/second and will get a delay of 160ms initially, then
            # increasing exponentially on subsequent occasions.
            msg = "you're being rate-limited - slow down on the requests! (delay=%.02fs)"
            log.warning(msg, self._cooloff)
            time.sleep(self._cooloff)
            self._cooloff *= 2  # double it for repeat offenders
            self._cooloff = min(self._cooloff, 10)
        self._history.append(now)

    def get(
        self, url: str, token: str | None = None, redirect: bool = True
    ) -> urllib3.BaseHTTPResponse:
        # getting user inputs, leaderboards, settings page
        if token is None:
            headers = self.pool_manager.headers
        else:
            headers = self.pool_manager.headers | {"Cookie": f"session={token}"}
        self._limiter()
        resp = self.pool_manager.request("GET", url, headers=headers, redirect=redirect)
        self.req_count["GET"] += 1
        return resp


http: HttpClient = HttpClient()


def _ensure_intermediate_dirs(path: Path) -> None:
    path.expanduser().parent.mkdir(parents=True, exist_ok=True)


def atomic_write_file(path: Path, contents_str: str) -> None:
    """
    Atomically write a string to a file by writing it to a temporary file, and then
    renaming it to the final destination name. Parallel readers never see a partially
    written file.
    """
    _ensure_intermediate_dirs(path)
    with NamedTemporaryFile("w", dir=path.parent, encoding="utf-8", delete=False) as f:
        log.debug("writing to tempfile @ %s", f.name)
        f.write(contents_str)
    log.debug("moving %s -> %s", f.name, path)
    shutil.move(f.name, path)


def aoc_years() -> range:
    """Years with at least one unlocked puzzle."""
    aoc_now = datetime.now(tz=AOC_TZ)
    return range(2015, aoc_now.year + int(aoc_now.month == 12))


def num_workers() -> int:
    """
    Number of logical processors available to this process, or 1 if that can not be
    determined.
    """
    try:
        n = len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        n = os.cpu_count()
    return n or 1


def get_owner(token: str) -> str:
    """
    Find owner of the token.
    Raises `DeadTokenError` if the token is expired/invalid.
    Returns a string like "authtype.username.userid"
    """
    url = "https://adventofcode.com/settings"
    response = http.get(url, token=token, redirect=False)
    if response.status != 200:
        # bad tokens will 302 redirect to main page
        log.info("session ...%s is dead - status_code=%s", token[-4:], response.status)
        raise DeadTokenError(f"the auth token ...{token[-4:]} is dead")
    soup = get_soup(response.data)
    auth_source = "unknown"
    username = "unknown"
    userid = soup.code.text.split("-")[1]
    for span in soup.find_all("span"):
        if span.text.startswith("Link to "):
            auth_source = span.text[8:]
            auth_source = auth_source.replace("https://twitter.com/", "twitter/")
            auth_source = auth_source.replace("https://github.com/", "github/")
            auth_source = auth_source.replace("https://www.reddit.com/u/", "reddit/")
            auth_source, sep, username = auth_source.partition("/")
            if not sep:
                log.warning("problem in parsing %s", span.text)
                auth_source = username = "unknown"
            log.debug("found %r", span.text)
        elif span.img is not None:
            if "googleusercontent.com" in span.img.attrs.get("src", ""):
                log.debug("found google user content img, getting google username")
                auth_source = "google"
                username = span.text
                break
    return ".".join([auth_source, username, userid])


def coerce(val: t.Any) -> str:
    """
    Render a solver's answer as the string that adventofcode.com would accept.
    Integral floats (and numpy scalars) are converted to int first. Raises
    `CoercionError` for missing, empty, non-finite or unsupported answers.
    """
    orig_val = val
    orig_type = type(val)
    if val is None:
        raise CoercionError("solver returned no answer (None)")
    if isinstance(val, bytes):
        val = val.decode()
    if orig_type.__module__ == "numpy" and getattr(val, "ndim", None) == 0:
        # deal with numpy scalars
        val = val.item()
    if isinstance(val, bool):
        raise CoercionError(f"refusing to coerce {orig_type.__name__} value {orig_val!r}")
    if isinstance(val, (float, complex)):
        if val.imag != 0.0 or not math.isfinite(val.real):
            raise CoercionError(f"invalid answer {orig_val!r}")
        if not val.real.is_integer():
            raise CoercionError(f"non-integral answer {orig_val!r}")
        val = int(val.real)
        log.warning("coerced %s value %r", orig_type.__name__, orig_val)
    if isinstance(val, int):
        val = str(val)
    if not isinstance(val, str):
        raise CoercionError(f"unsupported answer type {orig_type.__name__}")
    if not val:
        raise CoercionError("solver returned an empty answer")
    return val


_ANSIColor = t.Literal[
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"
]
_ansi_colors = t.get_args(_ANSIColor)
if platform.system() == "Windows":
    os.system("color")  # hack - makes ANSI colors work in the windows cmd window


def colored(txt: str, color: _ANSIColor | None) -> str:
    if color is None:
        return txt
    code = _ansi_colors.index(color.casefold())
    reset = "\x1b[0m"
    return f"\x1b[{code + 30}m{txt}{reset}"


def get_plugins(group: str = "aoc.puzzles") -> _EntryPointsType:
    """
    Currently installed plugins providing puzzle solutions.
    """
    try:
        # Python 3.10+
        return entry_points(group=group)
    except TypeError:
        # Python 3.9
        return entry_points().get(group, [])


@cache
def get_soup(html):
    return bs4.BeautifulSoup(html, "html.parser")
