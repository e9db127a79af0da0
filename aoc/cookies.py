import logging
import os
import sys
from textwrap import dedent

from . import config
from .exceptions import DeadTokenError
from .utils import _ensure_intermediate_dirs
from .utils import colored
from .utils import get_owner


log = logging.getLogger(__name__)


def login_instructions():
    return dedent(
        f"""\
        To download your personal puzzle inputs, aoc needs the "session" cookie of
        adventofcode.com. Log in with your browser, open the developer tools and copy
        the value of the "session" cookie. It will be saved to {config.token_path()}.

        If you'd rather not share your session, download the inputs manually and save
        them as {config.inputs_dir() / "y21d01_personal_puzzle_input.txt"} (and so on).
        """
    )


def login(token=None, check=True):
    """
    Save the session token to the token file. If `token` is not given, it is read
    from stdin. With `check`, the token is verified against adventofcode.com first
    (`DeadTokenError` if it doesn't work). Returns the path written.
    """
    path = config.token_path()
    if token is None:
        print(login_instructions(), file=sys.stderr)
        print("Session cookie: ", end="", file=sys.stderr, flush=True)
        token = sys.stdin.readline()
    token = token.strip()
    if not token:
        raise DeadTokenError("no session token provided")
    if check:
        owner = get_owner(token)
        print(f"...{token[-4:]} is alive (owner: {owner})")
    else:
        log.info("not checking token ...%s", token[-4:])
    if os.environ.get("AOC_SESSION"):
        msg = "AOC_SESSION is set in your environment and takes precedence over %s"
        log.warning(msg, path)
    _ensure_intermediate_dirs(path)
    path.write_text(token, encoding="utf-8")
    log.info("wrote session to %s", path)
    print(colored(f"Saved session token to {path}", color="green"))
    return path


def logout():
    """Delete the token file, if any. Returns whether there was one."""
    path = config.token_path()
    try:
        path.unlink()
    except FileNotFoundError:
        log.info("no token file at %s", path)
        print(f"Not logged in (no token at {path})")
        return False
    print(f"Removed session token {path}")
    return True
