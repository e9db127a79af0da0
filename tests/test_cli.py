import pytest

from aoc.cli import main
from aoc.registry import Registry


y21d01 = "199\n200\n208\n210\n200\n207\n240\n269\n260\n263"
y21d02 = "forward 5\ndown 5\nforward 8\nup 3\ndown 8\nforward 2"


@pytest.fixture
def inputs(save_input):
    save_input(2021, 1, y21d01)
    save_input(2021, 2, y21d02)


@pytest.mark.parametrize(
    "argv, command, puzzles",
    [
        (["aoc"], "solve", []),
        (["aoc", "solve"], "solve", []),
        (["aoc", "*"], "solve", ["*"]),
        (["aoc", "y21", "d03"], "solve", ["y21", "d03"]),
        (["aoc", "-v", "y21d01p2"], "solve", ["y21d01p2"]),
        (["aoc", "stats", "y21"], "stats", ["y21"]),
        (["aoc", "-vv", "stats"], "stats", []),
    ],
)
def test_default_subcommand(mocker, argv, command, puzzles):
    handler = mocker.patch(f"aoc.cli._{command}", return_value=0)
    mocker.patch("sys.argv", argv)
    with pytest.raises(SystemExit(0)):
        main()
    [args] = handler.call_args.args
    assert args.command == command
    assert args.puzzles == puzzles


def test_solve_options(mocker):
    handler = mocker.patch("aoc.cli._solve", return_value=0)
    mocker.patch("sys.argv", ["aoc", "-t", "5", "-w", "3", "--threads", "-q", "y21d01"])
    with pytest.raises(SystemExit(0)):
        main()
    [args] = handler.call_args.args
    assert args.timeout == 5
    assert args.workers == 3
    assert args.threads
    assert args.quiet
    assert args.puzzles == ["y21d01"]


def test_solve(inputs, mocker, capsys):
    mocker.patch("sys.argv", ["aoc", "solve", "--threads", "y21d01", "y21d02p2"])
    with pytest.raises(SystemExit(0)):
        main()
    out, err = capsys.readouterr()
    lines = out.splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("y21d01   part 1")
    assert lines[0].endswith(" 7")
    assert lines[1].startswith("         part 2")
    assert lines[1].endswith(" 5")
    assert lines[2].startswith("y21d02   part 2")
    assert lines[2].endswith(" 900")


def test_solve_checks_answers(inputs, aoc_data_dir, mocker, capsys):
    answers = aoc_data_dir / "personal_puzzle_answers"
    answers.mkdir()
    (answers / "y21d01p1_personal_puzzle_answer.txt").write_text("8\n")
    mocker.patch("sys.argv", ["aoc", "--threads", "y21d01p1"])
    # wrong answers don't change the exit status
    with pytest.raises(SystemExit(0)):
        main()
    out, err = capsys.readouterr()
    assert out.rstrip().endswith("7 (expected: 8)")


def test_solve_input_unavailable(save_input, mocker, capsys, pook):
    save_input(2021, 1, y21d01)
    mocker.patch("sys.argv", ["aoc", "--threads", "y21d01", "y21d03"])
    with pytest.raises(SystemExit(1)):
        main()
    out, err = capsys.readouterr()
    assert "ERROR: AoC session ID is needed" in err
    assert "input unavailable: Not logged in" in out
    assert len(out.splitlines()) == 4


@pytest.mark.parametrize(
    "argv, msg",
    [
        (["aoc", "y21d26"], "aoc: error: Invalid filter 'y21d26': Day 26 is out of range [1,25]\n"),
        (["aoc", "bogus"], "aoc: error: Input 'bogus' does not match pattern yYYdDDpP\n"),
        (["aoc", "y21d01", "y21d24"], "aoc: error: No registered puzzle matches 'y21d24'\n"),
        (["aoc", "stats", "y21d00"], "aoc: error: Invalid filter 'y21d00': Day 0 is out of range [1,25]\n"),
    ],
)
def test_bad_filters(mocker, capsys, argv, msg):
    scheduler = mocker.patch("aoc.cli.Scheduler")
    mocker.patch("sys.argv", argv)
    with pytest.raises(SystemExit(2)):
        main()
    out, err = capsys.readouterr()
    assert err == msg
    assert not out
    scheduler.assert_not_called()


def test_stats(aoc_data_dir, mocker, capsys):
    path = aoc_data_dir / "personal_leaderboard_statistics"
    path.mkdir()
    (path / "y21_personal_leaderboard_statistics.txt").write_text(
        "      --------Part 1--------   --------Part 2--------\n"
        "Day       Time   Rank  Score       Time   Rank  Score\n"
        "  1   00:20:32   6893      0   00:24:50   5662      0\n"
    )
    mocker.patch("sys.argv", ["aoc", "stats"])
    with pytest.raises(SystemExit(0)):
        main()
    out, err = capsys.readouterr()
    assert out == (
        "Advent of Code 2021 - Personal Leaderboard Statistics\n"
        "\n"
        "      -------Part 1--------   -------Part 2--------\n"
        "Day       Time  Rank  Score       Time  Rank  Score\n"
        "  1   00:20:32  6893      0   00:24:50  5662      0\n"
    )


def test_stats_io_failure(mocker, capsys):
    mocker.patch("sys.argv", ["aoc", "stats"])
    with pytest.raises(SystemExit(1)):
        main()
    out, err = capsys.readouterr()
    assert err.startswith("aoc: error: Failed to read leaderboards from ")


def test_stats_fetch_not_logged_in(mocker, capsys):
    download = mocker.patch("aoc.cli.download_leaderboard")
    mocker.patch("sys.argv", ["aoc", "stats", "--fetch", "y21"])
    with pytest.raises(SystemExit(1)):
        main()
    out, err = capsys.readouterr()
    assert "ERROR: AoC session ID is needed" in err
    download.assert_not_called()


def test_stats_fetch(test_token, mocker, capsys):
    download = mocker.patch("aoc.cli.download_leaderboard")
    load = mocker.patch("aoc.cli.load_leaderboards", return_value=[])
    mocker.patch("sys.argv", ["aoc", "stats", "--fetch", "y20", "y21d01"])
    with pytest.raises(SystemExit(0)):
        main()
    assert download.call_args_list == [
        mocker.call(2020, "thetesttoken"),
        mocker.call(2021, "thetesttoken"),
    ]
    load.assert_called_once()
    out, err = capsys.readouterr()
    assert "No leaderboard statistics found" in err


def test_login_logout(pook, aoc_config_dir, mocker):
    mocker.patch("sys.argv", ["aoc", "login", "--no-check", "abcd"])
    with pytest.raises(SystemExit(0)):
        main()
    assert (aoc_config_dir / "token").read_text() == "abcd"
    mocker.patch("sys.argv", ["aoc", "logout"])
    with pytest.raises(SystemExit(0)):
        main()
    assert not (aoc_config_dir / "token").exists()


def test_login_dead(pook, mocker, capsys):
    pook.get("https://adventofcode.com/settings", reply=302)
    mocker.patch("sys.argv", ["aoc", "login", "deadtoken"])
    with pytest.raises(SystemExit(1)):
        main()
    out, err = capsys.readouterr()
    assert err == "aoc: error: the auth token ...oken is dead\n"


def test_solve_nothing_registered(mocker, capsys):
    mocker.patch("aoc.cli.default_registry", return_value=Registry())
    mocker.patch("sys.argv", ["aoc", "solve"])
    with pytest.raises(SystemExit(0)):
        main()
    out, err = capsys.readouterr()
    assert out == ""
    assert "ERROR" not in err
