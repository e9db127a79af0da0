import logging

import pytest

from aoc.exceptions import CacheError
from aoc.exceptions import NetworkError
from aoc.exceptions import PuzzleNotFound
from aoc.inputs import InputProvider


URL = "https://adventofcode.com/2021/day/1/input"


def test_saved_data_is_reused_if_available(pook, save_input):
    mock = pook.get(url=URL, response_body="fake data")
    save_input(2021, 1, "saved data for year 2021 day 1\n")
    provider = InputProvider()
    assert provider.has_cached(2021, 1)
    assert provider.fetch(2021, 1) == "saved data for year 2021 day 1"
    assert mock.calls == 0


def test_get_from_server(pook, test_token, inputs_dir):
    mock = pook.get(url=URL, response_body="fake data for year 2021 day 1\n")
    provider = InputProvider()
    assert not provider.has_cached(2021, 1)
    assert provider.fetch(2021, 1) == "fake data for year 2021 day 1"
    assert mock.calls == 1
    cached = inputs_dir / "y21d01_personal_puzzle_input.txt"
    assert cached.read_text() == "fake data for year 2021 day 1\n"
    # second fetch hits the cache
    assert provider.fetch(2021, 1) == "fake data for year 2021 day 1"
    assert mock.calls == 1


def test_cache_dir_is_created(pook, aoc_data_dir):
    pook.get(url=URL, response_body="data")
    InputProvider(token="explicit").fetch(2021, 1)
    assert (aoc_data_dir / "personal_puzzle_inputs" / "y21d01_personal_puzzle_input.txt").is_file()


def test_env_token_wins(pook, test_token, monkeypatch):
    monkeypatch.setenv("AOC_SESSION", "envtoken")
    assert InputProvider().token == "envtoken"


def test_token_from_file(test_token):
    assert InputProvider().token == "thetesttoken"


def test_not_logged_in(pook):
    mock = pook.get(url=URL, response_body="data")
    with pytest.raises(NetworkError("Not logged in (run `aoc login`, or set AOC_SESSION)")):
        InputProvider().fetch(2021, 1)
    assert mock.calls == 0


def test_puzzle_not_available_yet(pook, test_token):
    mock = pook.get(url=URL, response_body="Not Found", reply=404)
    with pytest.raises(PuzzleNotFound("y21d01 not available yet")):
        InputProvider().fetch(2021, 1)
    assert mock.calls == 1


def test_server_error(pook, test_token, caplog, inputs_dir):
    mock = pook.get(url=URL, response_body="AWS meltdown", reply=500)
    with pytest.raises(NetworkError(f"HTTP 500 at {URL}. Are you logged in?")):
        InputProvider().fetch(2021, 1)
    assert mock.calls == 1
    assert ("aoc.inputs", logging.ERROR, "got 500 status code token=...oken") in caplog.record_tuples
    assert not (inputs_dir / "y21d01_personal_puzzle_input.txt").exists()


def test_unreadable_cache(inputs_dir):
    (inputs_dir / "y21d01_personal_puzzle_input.txt").mkdir()
    with pytest.raises(CacheError) as cm:
        InputProvider(token="whatever").fetch(2021, 1)
    assert str(cm.value).startswith("Failed to read ")
