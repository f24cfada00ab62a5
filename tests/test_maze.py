import unittest

from backtrack_search.errors import InvalidInputError
from backtrack_search.frame import search
from backtrack_search.maze import MazeProblem, find_paths, normalize_grid, parse_grid

GRID = [
    [1, 1, 1],
    [1, 1, 1],
    [0, 1, 1],
]

STEPS = {"D": (1, 0), "R": (0, 1), "U": (-1, 0), "L": (0, -1)}


def _walk(grid, path: str) -> list[tuple[int, int]]:
    row, col = 0, 0
    cells = [(row, col)]
    for letter in path:
        d_row, d_col = STEPS[letter]
        row, col = row + d_row, col + d_col
        cells.append((row, col))
    return cells


class MazeTests(unittest.TestCase):
    def test_all_simple_paths_in_move_order(self) -> None:
        result = find_paths(GRID)
        self.assertEqual(
            result.paths,
            ["DRDR", "DRRD", "DRURDD", "RDDR", "RDRD", "RRDD", "RRDLDR"],
        )

    def test_paths_are_simple_and_avoid_blocked_cells(self) -> None:
        for path in find_paths(GRID).paths:
            cells = _walk(GRID, path)
            with self.subTest(path=path):
                self.assertEqual(cells[-1], (2, 2))
                self.assertEqual(len(cells), len(set(cells)))
                self.assertNotIn((2, 0), cells)
                for row, col in cells:
                    self.assertTrue(0 <= row < 3 and 0 <= col < 3)

    def test_includes_zig_zag_path(self) -> None:
        paths = find_paths(GRID).paths
        self.assertTrue(any("U" in path and "D" in path for path in paths))

    def test_blocked_endpoints_yield_nothing(self) -> None:
        blocked_start = [[0, 1], [1, 1]]
        blocked_end = [[1, 1], [1, 0]]
        self.assertEqual(find_paths(blocked_start).paths, [])
        self.assertEqual(find_paths(blocked_end).paths, [])

    def test_source_equals_destination(self) -> None:
        self.assertEqual(find_paths([[1]]).paths, [""])

    def test_no_route(self) -> None:
        result = find_paths([[1, 0], [0, 1]])
        self.assertEqual(result.paths, [])
        self.assertEqual(result.stats.solutions_found, 0)

    def test_custom_endpoints_and_cap(self) -> None:
        result = find_paths(GRID, source=(2, 2), destination=(0, 0), max_paths=2)
        self.assertEqual(len(result.paths), 2)
        self.assertTrue(all(path[0] in "UL" for path in result.paths))

    def test_callers_grid_untouched_and_state_restored(self) -> None:
        grid = [row[:] for row in GRID]
        find_paths(grid)
        self.assertEqual(grid, GRID)

        problem = MazeProblem(normalize_grid(GRID), (0, 0), (2, 2))
        search(problem)
        self.assertEqual(problem.visited, [[False] * 3 for _ in range(3)])
        self.assertEqual((problem.row, problem.col), (0, 0))
        self.assertEqual(problem.path, [])

    def test_rejects_malformed_grids(self) -> None:
        with self.assertRaises(InvalidInputError):
            find_paths([])
        with self.assertRaises(InvalidInputError):
            find_paths([[1, 1], [1]])
        with self.assertRaises(InvalidInputError):
            find_paths([[1, 1, 1], [1, 1, 1]])
        with self.assertRaises(InvalidInputError):
            find_paths(GRID, source=(3, 0))

    def test_parse_grid(self) -> None:
        self.assertEqual(parse_grid("111,111,011"), GRID)
        self.assertEqual(parse_grid("1 1\n0 1\n"), [[1, 1], [0, 1]])
        with self.assertRaises(InvalidInputError):
            parse_grid("12,11")


if __name__ == "__main__":
    unittest.main()
