from ..registry import Solution
from . import y21d01
from . import y21d02
from . import y21d03


SOLUTIONS = [
    Solution(2021, 1, y21d01.part1, y21d01.part2, y21d01.parse),
    Solution(2021, 2, y21d02.part1, y21d02.part2),
    Solution(2021, 3, y21d03.part1, y21d03.part2, y21d03.parse),
]
