import logging
import os
import sys
from pathlib import Path
from textwrap import dedent

from .utils import colored


log = logging.getLogger(__name__)


AOC_DATA_DIR = Path(os.environ.get("AOC_DIR", Path("~", ".config", "aoc")))
AOC_DATA_DIR = AOC_DATA_DIR.expanduser()
AOC_CONFIG_DIR = Path(os.environ.get("AOC_CONFIG_DIR", AOC_DATA_DIR)).expanduser()
INPUTS_SUBDIR = "personal_puzzle_inputs"
ANSWERS_SUBDIR = "personal_puzzle_answers"
LEADERBOARD_SUBDIR = "personal_leaderboard_statistics"


def token_path():
    return AOC_CONFIG_DIR / "token"


def inputs_dir():
    return AOC_DATA_DIR / INPUTS_SUBDIR


def answers_dir():
    return AOC_DATA_DIR / ANSWERS_SUBDIR


def leaderboard_dir():
    return AOC_DATA_DIR / LEADERBOARD_SUBDIR


def read_session_token():
    """
    Discover the session token from the environment or from the token file.
    Returns None if no token is configured anywhere.
    """
    # export your session id as AOC_SESSION env var
    token = os.getenv("AOC_SESSION")
    if token:
        log.debug("using session token from AOC_SESSION")
        return token

    # or put it in a plaintext file at ~/.config/aoc/token (see `aoc login`)
    path = token_path()
    try:
        txt = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("no token file at %s", path)
        return None
    words = txt.split()
    if not words:
        log.warning("token file %s is empty", path)
        return None
    return words[0]


def missing_token_message():
    return dedent(
        f"""\
        ERROR: AoC session ID is needed to download your puzzle inputs!
        You can find it in your browser cookies after login.
            1) Run `aoc login` and paste the cookie value, or
            2) Save the cookie into a text file {token_path()}, or
            3) Export the cookie in environment variable AOC_SESSION

        Alternatively, download your inputs manually and save them as
        {inputs_dir() / "y21d01_personal_puzzle_input.txt"} (and so on).
        """
    )


def print_missing_token_message():
    print(colored(missing_token_message(), color="red"), file=sys.stderr)
