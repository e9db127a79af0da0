"""--- Day 2: Dive! ---"""


def _commands(data):
    for line in data.splitlines():
        direction, n = line.split()
        if direction not in ("forward", "down", "up"):
            raise ValueError(f"unknown command {direction!r}")
        yield direction, int(n)


def part1(data):
    x = y = 0
    for direction, n in _commands(data):
        if direction == "forward":
            x += n
        elif direction == "down":
            y += n
        else:
            y -= n
    return x * y


def part2(data):
    x = y = aim = 0
    for direction, n in _commands(data):
        if direction == "forward":
            x += n
            y += aim * n
        elif direction == "down":
            aim += n
        else:
            aim -= n
    return x * y
