"""--- Day 3: Binary Diagnostic ---"""


def parse(data):
    numbers = data.split()
    if not numbers:
        raise ValueError("Input list is empty")
    width = len(numbers[0])
    for number in numbers:
        if len(number) != width or set(number) - {"0", "1"}:
            raise ValueError(f"Bad binary number: {number!r}")
    return numbers


def part1(numbers):
    width = len(numbers[0])
    gamma = ""
    for i in range(width):
        ones = sum(n[i] == "1" for n in numbers)
        gamma += "1" if ones > len(numbers) // 2 else "0"
    epsilon = gamma.translate(str.maketrans("01", "10"))
    return int(gamma, 2) * int(epsilon, 2)


def _rating(numbers, keep_most_common):
    i = 0
    while len(numbers) > 1:
        ones = [n for n in numbers if n[i] == "1"]
        zeros = [n for n in numbers if n[i] == "0"]
        if keep_most_common:
            numbers = ones if len(ones) >= len(zeros) else zeros
        else:
            numbers = zeros if len(zeros) <= len(ones) else ones
        i += 1
    [result] = numbers
    return int(result, 2)


def part2(numbers):
    oxygen = _rating(numbers, keep_most_common=True)
    co2 = _rating(numbers, keep_most_common=False)
    return oxygen * co2
