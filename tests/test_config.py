from aoc import config


def test_no_token():
    assert config.read_session_token() is None


def test_token_from_file(test_token):
    test_token.write_text("thetesttoken   # saved by aoc login\n")
    assert config.read_session_token() == "thetesttoken"


def test_empty_token_file(test_token, caplog):
    test_token.write_text("\n")
    assert config.read_session_token() is None
    assert f"token file {test_token} is empty" in caplog.text


def test_env_wins(test_token, monkeypatch):
    monkeypatch.setenv("AOC_SESSION", "fromenv")
    assert config.read_session_token() == "fromenv"


def test_dirs(aoc_data_dir, aoc_config_dir):
    assert config.token_path() == aoc_config_dir / "token"
    assert config.inputs_dir() == aoc_data_dir / "personal_puzzle_inputs"
    assert config.answers_dir() == aoc_data_dir / "personal_puzzle_answers"
    assert config.leaderboard_dir() == aoc_data_dir / "personal_leaderboard_statistics"


def test_missing_token_message(capsys, aoc_config_dir):
    config.print_missing_token_message()
    out, err = capsys.readouterr()
    assert not out
    assert "ERROR: AoC session ID is needed" in err
    assert str(aoc_config_dir / "token") in err
    assert "y21d01_personal_puzzle_input.txt" in err
