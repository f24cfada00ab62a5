from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Literal, Sequence

from .errors import InvalidInputError
from .frame import SearchConfig, SearchMode, SearchProblem, search
from .metrics import SearchStats

logger = logging.getLogger(__name__)

SIZE = 9
BOX = 3
SYMBOLS = tuple(range(1, SIZE + 1))

CellOrder = Literal["row-major", "fewest-candidates"]
Move = tuple[int, int, int]


@dataclass
class SudokuResult:
    puzzle: str
    solutions: list[str]
    stats: SearchStats

    @property
    def solved(self) -> bool:
        return bool(self.solutions)

    @property
    def solution(self) -> str | None:
        return self.solutions[0] if self.solutions else None

    def to_dict(self) -> dict[str, object]:
        return {
            "puzzle": self.puzzle,
            "solved": self.solved,
            "solutions": self.solutions,
            "solutions_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }


def normalize_puzzle(puzzle: str | Sequence[Sequence[int | str]]) -> str:
    """Return the puzzle as 81 characters, ``0`` for an empty cell.

    Accepts a string (``0`` or ``.`` for empty, any other separator ignored)
    or nine rows of nine cells.
    """
    if isinstance(puzzle, str):
        cleaned = [char for char in puzzle if char in "0123456789."]
    else:
        rows = list(puzzle)
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise InvalidInputError("Sudoku grid must be 9 rows of 9 cells.")
        cleaned = []
        for row in rows:
            for cell in row:
                text = str(cell)
                if len(text) != 1 or text not in "0123456789.":
                    raise InvalidInputError(f"Invalid Sudoku cell value: {cell!r}.")
                cleaned.append(text)
    if len(cleaned) != SIZE * SIZE:
        raise InvalidInputError("Sudoku puzzle must contain exactly 81 cells.")
    return "".join("0" if char == "." else char for char in cleaned)


class SudokuProblem(SearchProblem[Move, str]):
    """Fill the empty cells of a 9 x 9 grid, one cell per frame.

    Each frame branches only on a single empty cell. When that cell has no
    legal symbol the frame is exhausted and its parent moves on to its own
    next symbol.
    """

    def __init__(self, grid: list[list[int]], cell_order: CellOrder = "row-major") -> None:
        self.grid = grid
        self.cell_order = cell_order
        self.empty = sum(row.count(0) for row in grid)

    def is_complete(self) -> bool:
        return self.empty == 0

    def _first_empty(self) -> tuple[int, int] | None:
        for row in range(SIZE):
            for col in range(SIZE):
                if self.grid[row][col] == 0:
                    return row, col
        return None

    def _most_constrained(self) -> tuple[int, int] | None:
        best: tuple[int, int] | None = None
        best_count = len(SYMBOLS) + 1
        for row in range(SIZE):
            for col in range(SIZE):
                if self.grid[row][col] != 0:
                    continue
                count = sum(1 for digit in SYMBOLS if self.allows(row, col, digit))
                if count < best_count:
                    best, best_count = (row, col), count
                    if count <= 1:
                        return best
        return best

    def candidates(self) -> Iterable[Move]:
        if self.cell_order == "fewest-candidates":
            cell = self._most_constrained()
        else:
            cell = self._first_empty()
        if cell is None:
            return ()
        row, col = cell
        return [(row, col, digit) for digit in SYMBOLS]

    def allows(self, row: int, col: int, digit: int) -> bool:
        grid = self.grid
        for i in range(SIZE):
            if grid[row][i] == digit or grid[i][col] == digit:
                return False
        row_start = BOX * (row // BOX)
        col_start = BOX * (col // BOX)
        for r in range(row_start, row_start + BOX):
            for c in range(col_start, col_start + BOX):
                if grid[r][c] == digit:
                    return False
        return True

    def is_feasible(self, move: Move) -> bool:
        return self.allows(*move)

    def apply(self, move: Move) -> None:
        row, col, digit = move
        self.grid[row][col] = digit
        self.empty -= 1

    def undo(self, move: Move) -> None:
        row, col, _ = move
        self.grid[row][col] = 0
        self.empty += 1

    def snapshot(self) -> str:
        return "".join(str(value) for row in self.grid for value in row)


def _parse_grid(normalized: str) -> list[list[int]]:
    grid = [
        [int(char) for char in normalized[row * SIZE : (row + 1) * SIZE]]
        for row in range(SIZE)
    ]
    seen: set[tuple[str, int, int]] = set()
    for row in range(SIZE):
        for col in range(SIZE):
            digit = grid[row][col]
            if digit == 0:
                continue
            box = (row // BOX) * BOX + (col // BOX)
            keys = {("row", row, digit), ("col", col, digit), ("box", box, digit)}
            if keys & seen:
                raise InvalidInputError("Puzzle contains conflicting digits.")
            seen |= keys
    return grid


def solve_sudoku(
    puzzle: str | Sequence[Sequence[int | str]],
    *,
    max_solutions: int = 1,
    cell_order: CellOrder = "row-major",
) -> SudokuResult:
    if max_solutions < 1:
        raise InvalidInputError("max_solutions must be >= 1.")

    normalized = normalize_puzzle(puzzle)
    grid = _parse_grid(normalized)

    mode = SearchMode.FIRST if max_solutions == 1 else SearchMode.ALL
    result = search(
        SudokuProblem(grid, cell_order),
        SearchConfig(mode=mode, max_solutions=max_solutions),
    )
    if not result.found:
        logger.debug("Sudoku puzzle has no solution: %s", normalized)
    return SudokuResult(puzzle=normalized, solutions=result.solutions, stats=result.stats)


def render_sudoku_grid(grid: str) -> str:
    normalized = normalize_puzzle(grid).replace("0", ".")
    band_rule = "-+-".join("-" * (2 * BOX - 1) for _ in range(SIZE // BOX))
    lines: list[str] = []
    for row in range(SIZE):
        cells = normalized[row * SIZE : (row + 1) * SIZE]
        boxes = [" ".join(cells[start : start + BOX]) for start in range(0, SIZE, BOX)]
        lines.append(" | ".join(boxes))
        if row % BOX == BOX - 1 and row != SIZE - 1:
            lines.append(band_rule)
    return "\n".join(lines)
