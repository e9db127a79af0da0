"""--- Day 1: Sonar Sweep ---"""


def parse(data):
    return [int(line) for line in data.splitlines()]


def part1(depths):
    return sum(b > a for a, b in zip(depths, depths[1:]))


def part2(depths):
    # comparing sliding windows of 3 only depends on the elements that differ
    return sum(b > a for a, b in zip(depths, depths[3:]))
