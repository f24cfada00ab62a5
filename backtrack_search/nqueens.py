from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Literal, Sequence

from .errors import InvalidInputError
from .frame import SearchConfig, SearchMode, SearchProblem, search
from .metrics import SearchStats

logger = logging.getLogger(__name__)

ColumnOrder = Literal["left-to-right", "center-first"]

EMPTY = "."
QUEEN = "Q"


@dataclass
class NQueensResult:
    size: int
    placements: list[tuple[int, ...]]
    stats: SearchStats

    def boards(self) -> list[list[str]]:
        return [render_nqueens_board(placement).splitlines() for placement in self.placements]

    def to_dict(self, include_boards: bool = False) -> dict[str, object]:
        payload: dict[str, object] = {
            "size": self.size,
            "solutions_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }
        if self.placements:
            payload["placements"] = [list(placement) for placement in self.placements]
            if include_boards:
                payload["boards"] = self.boards()
        return payload


def _ordered_columns(size: int, column_order: ColumnOrder) -> list[int]:
    """Columns in the order a row tries them.

    ``center-first`` alternates outwards from the middle, left before right:
    for six columns that is 2, 3, 1, 4, 0, 5.
    """
    if column_order == "left-to-right":
        return list(range(size))
    left = (size - 1) // 2
    right = size // 2
    order = [left] if left == right else [left, right]
    for offset in range(1, left + 1):
        order.extend((left - offset, right + offset))
    return order


class NQueensProblem(SearchProblem[int, tuple[int, ...]]):
    """Place one queen per row, top to bottom, on an n x n board.

    ``board`` holds the marks; ``placement[row]`` is the queen's column for
    every row filled so far. Queens only ever sit in rows above the current
    one, so the attack check scans upwards.
    """

    def __init__(self, size: int, column_order: ColumnOrder = "left-to-right") -> None:
        self.size = size
        self.board = [[EMPTY] * size for _ in range(size)]
        self.placement: list[int] = []
        self.columns = _ordered_columns(size, column_order)

    @property
    def row(self) -> int:
        return len(self.placement)

    def is_complete(self) -> bool:
        return self.row == self.size

    def candidates(self) -> Iterable[int]:
        return self.columns

    def is_feasible(self, move: int) -> bool:
        board = self.board
        row = self.row

        r = row - 1
        while r >= 0:
            if board[r][move] == QUEEN:
                return False
            r -= 1

        r, c = row - 1, move - 1
        while r >= 0 and c >= 0:
            if board[r][c] == QUEEN:
                return False
            r -= 1
            c -= 1

        r, c = row - 1, move + 1
        while r >= 0 and c < self.size:
            if board[r][c] == QUEEN:
                return False
            r -= 1
            c += 1
        return True

    def apply(self, move: int) -> None:
        self.board[self.row][move] = QUEEN
        self.placement.append(move)

    def undo(self, move: int) -> None:
        self.placement.pop()
        self.board[self.row][move] = EMPTY

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self.placement)


def solve_nqueens(
    size: int,
    *,
    max_solutions: int | None = None,
    count_only: bool = False,
    column_order: ColumnOrder = "left-to-right",
) -> NQueensResult:
    if size < 1:
        raise InvalidInputError("Board size must be at least 1.")
    if max_solutions is not None and max_solutions < 1:
        raise InvalidInputError("max_solutions must be >= 1.")

    problem = NQueensProblem(size, column_order)
    config = SearchConfig(
        mode=SearchMode.ALL, max_solutions=max_solutions, collect=not count_only
    )
    result = search(problem, config)
    logger.debug("N-Queens n=%d: %d solutions", size, result.stats.solutions_found)
    return NQueensResult(size=size, placements=result.solutions, stats=result.stats)


def render_nqueens_board(placement: Sequence[int]) -> str:
    size = len(placement)
    rows = []
    for queen_col in placement:
        row = " ".join(QUEEN if col == queen_col else EMPTY for col in range(size))
        rows.append(row)
    return "\n".join(rows)
