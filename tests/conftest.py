import pook as pook_mod
import pytest

from aoc import config
from aoc.registry import Registry
from aoc.registry import Solution
from aoc.utils import http


@pytest.fixture(autouse=True)
def mocked_sleep(mocker):
    no_sleep_till_brooklyn = mocker.patch("time.sleep")
    # nerf the rate-limiter - tests don't actually talk to AoC server at all
    http._max_t = -1.0
    return no_sleep_till_brooklyn


@pytest.fixture
def aoc_data_dir(tmp_path):
    data_dir = tmp_path / ".config" / "aoc-data"
    data_dir.mkdir(parents=True)
    return data_dir


@pytest.fixture
def aoc_config_dir(tmp_path):
    token_dir = tmp_path / ".config" / "aoc-config"
    token_dir.mkdir(parents=True)
    return token_dir


@pytest.fixture(autouse=True)
def remove_user_env(aoc_data_dir, monkeypatch, aoc_config_dir):
    monkeypatch.setattr(config, "AOC_DATA_DIR", aoc_data_dir)
    monkeypatch.setattr(config, "AOC_CONFIG_DIR", aoc_config_dir)
    monkeypatch.delenv("AOC_SESSION", raising=False)


@pytest.fixture
def test_token(aoc_config_dir):
    token_file = aoc_config_dir / "token"
    token_file.write_text("thetesttoken")
    return token_file


@pytest.fixture
def pook():
    pook_mod.on()
    yield pook_mod
    pook_mod.off()


@pytest.fixture
def inputs_dir(aoc_data_dir):
    path = aoc_data_dir / config.INPUTS_SUBDIR
    path.mkdir()
    return path


@pytest.fixture
def save_input(inputs_dir):
    def save(year, day, data):
        path = inputs_dir / f"y{year % 100:02d}d{day:02d}_personal_puzzle_input.txt"
        path.write_text(data)
        return path

    return save


def _length(data):
    return len(data)


def _upper(data):
    return data.upper()


@pytest.fixture
def toy_registry():
    return Registry(
        [
            Solution(2021, 1, _length, _upper),
            Solution(2021, 2, _length, _upper),
            Solution(2021, 3, _length, _upper),
            Solution(2022, 1, _length, _upper),
        ]
    )
