import unittest

from backtrack_search.errors import InvalidInputError
from backtrack_search.frame import SearchConfig, SearchMode, search
from backtrack_search.sudoku import (
    SudokuProblem,
    normalize_puzzle,
    render_sudoku_grid,
    solve_sudoku,
)


PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

# Cell (0, 8) can only hold a 9, but column 8 already has one.
UNSOLVABLE = "123456780" + "000000009" + "0" * 63


def _grid(text: str) -> list[list[int]]:
    return [[int(char) for char in text[row * 9 : (row + 1) * 9]] for row in range(9)]


def _is_valid_solution(text: str) -> bool:
    grid = _grid(text)
    digits = set(range(1, 10))
    for index in range(9):
        if set(grid[index]) != digits:
            return False
        if {grid[row][index] for row in range(9)} != digits:
            return False
        box_row, box_col = 3 * (index // 3), 3 * (index % 3)
        box = {
            grid[r][c]
            for r in range(box_row, box_row + 3)
            for c in range(box_col, box_col + 3)
        }
        if box != digits:
            return False
    return True


class SudokuTests(unittest.TestCase):
    def test_solves_reference_puzzle(self) -> None:
        result = solve_sudoku(PUZZLE)
        self.assertTrue(result.solved)
        self.assertEqual(result.stats.solutions_found, 1)
        self.assertEqual(result.solutions, [SOLUTION])
        self.assertTrue(_is_valid_solution(result.solution))

    def test_solution_keeps_the_givens(self) -> None:
        result = solve_sudoku(PUZZLE)
        for given, solved in zip(PUZZLE, result.solution):
            if given != "0":
                self.assertEqual(given, solved)

    def test_fewest_candidates_order(self) -> None:
        result = solve_sudoku(PUZZLE, cell_order="fewest-candidates")
        self.assertEqual(result.solution, SOLUTION)

    def test_unique_puzzle_has_one_solution(self) -> None:
        result = solve_sudoku(PUZZLE, max_solutions=2, cell_order="fewest-candidates")
        self.assertEqual(result.solutions, [SOLUTION])

    def test_unsolvable_reports_failure(self) -> None:
        result = solve_sudoku(UNSOLVABLE)
        self.assertFalse(result.solved)
        self.assertIsNone(result.solution)
        self.assertEqual(result.solutions, [])

    def test_grid_is_restored_after_failed_search(self) -> None:
        grid = _grid(UNSOLVABLE)
        before = [row[:] for row in grid]
        problem = SudokuProblem(grid)
        result = search(problem, SearchConfig(mode=SearchMode.FIRST))
        self.assertFalse(result.found)
        self.assertEqual(problem.grid, before)

    def test_grid_is_restored_after_first_solution(self) -> None:
        grid = _grid(PUZZLE)
        before = [row[:] for row in grid]
        problem = SudokuProblem(grid)
        result = search(problem, SearchConfig(mode=SearchMode.FIRST))
        self.assertEqual(result.solutions, [SOLUTION])
        self.assertEqual(problem.grid, before)
        self.assertEqual(problem.empty, PUZZLE.count("0"))

    def test_rejects_conflicting_puzzle(self) -> None:
        bad = "550000000" + "0" * 72
        with self.assertRaises(ValueError):
            solve_sudoku(bad)

    def test_rejects_box_conflict(self) -> None:
        bad = "500000000" + "050000000" + "0" * 63
        with self.assertRaises(InvalidInputError):
            solve_sudoku(bad)

    def test_rejects_malformed_grids(self) -> None:
        with self.assertRaises(InvalidInputError):
            solve_sudoku("123")
        with self.assertRaises(InvalidInputError):
            normalize_puzzle([[0] * 9 for _ in range(8)])
        with self.assertRaises(InvalidInputError):
            normalize_puzzle([[0] * 8 for _ in range(9)])

    def test_accepts_rows(self) -> None:
        rows = [list(PUZZLE[row * 9 : (row + 1) * 9]) for row in range(9)]
        rows[0][2] = "."
        self.assertEqual(normalize_puzzle(rows), PUZZLE)
        self.assertEqual(normalize_puzzle(_grid(PUZZLE)), PUZZLE)

    def test_render_grid_output(self) -> None:
        rendered = render_sudoku_grid(PUZZLE)
        self.assertIn("|", rendered)
        self.assertIn(".", rendered)
        lines = rendered.splitlines()
        self.assertEqual(len(lines), 11)
        self.assertEqual(lines[0], "5 3 . | . 7 . | . . .")
        self.assertEqual(lines[3], "------+-------+------")
        self.assertEqual(lines[7], "------+-------+------")
        self.assertEqual(lines[-1], ". . . | . 8 . | . 7 9")


if __name__ == "__main__":
    unittest.main()
