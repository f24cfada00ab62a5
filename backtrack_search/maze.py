"""Every simple path through a grid maze.

The walker starts at ``source`` and may step down, right, up or left onto any
open cell it has not already visited on the current path, so paths can zig-zag
back towards the start. Paths are reported as strings of direction letters in
the order the moves are tried (``D``, ``R``, ``U``, ``L``).
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import Iterable, Iterator, Sequence

from .errors import InvalidInputError
from .frame import SearchConfig, SearchProblem, search
from .metrics import SearchStats

logger = logging.getLogger(__name__)

Cell = tuple[int, int]

DIRECTIONS = (
    ("D", 1, 0),
    ("R", 0, 1),
    ("U", -1, 0),
    ("L", 0, -1),
)


@dataclass
class MazeResult:
    size: int
    source: Cell
    destination: Cell
    paths: list[str]
    stats: SearchStats

    def to_dict(self) -> dict[str, object]:
        return {
            "size": self.size,
            "source": list(self.source),
            "destination": list(self.destination),
            "paths": self.paths,
            "paths_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }


def normalize_grid(grid: Sequence[Sequence[object]]) -> list[list[bool]]:
    """Copy ``grid`` as a square matrix of booleans, True meaning open."""
    rows = [list(row) for row in grid]
    if not rows:
        raise InvalidInputError("Maze grid must not be empty.")
    size = len(rows)
    for row in rows:
        if len(row) != size:
            raise InvalidInputError("Maze grid must be square.")
    return [[bool(cell) for cell in row] for row in rows]


class MazeProblem(SearchProblem[tuple[str, int, int], str]):
    """Walk from ``source`` to ``destination`` over open, unvisited cells.

    ``visited`` is the only state the walk mutates. The source is marked for
    the duration of the search and every step marks the cell it enters, so
    all cells of the current path, the current cell included, stay marked
    until the walk backs out of them.
    """

    def __init__(self, open_cells: list[list[bool]], source: Cell, destination: Cell) -> None:
        self.open = open_cells
        self.size = len(open_cells)
        self.visited = [[False] * self.size for _ in range(self.size)]
        self.row, self.col = source
        self.source = source
        self.destination = destination
        self.path: list[str] = []

    def is_complete(self) -> bool:
        return (self.row, self.col) == self.destination

    def candidates(self) -> Iterable[tuple[str, int, int]]:
        return DIRECTIONS

    def is_feasible(self, move: tuple[str, int, int]) -> bool:
        _, d_row, d_col = move
        row, col = self.row + d_row, self.col + d_col
        if not (0 <= row < self.size and 0 <= col < self.size):
            return False
        return self.open[row][col] and not self.visited[row][col]

    def apply(self, move: tuple[str, int, int]) -> None:
        letter, d_row, d_col = move
        self.row += d_row
        self.col += d_col
        self.visited[self.row][self.col] = True
        self.path.append(letter)

    def undo(self, move: tuple[str, int, int]) -> None:
        _, d_row, d_col = move
        self.path.pop()
        self.visited[self.row][self.col] = False
        self.row -= d_row
        self.col -= d_col

    def snapshot(self) -> str:
        return "".join(self.path)

    @contextmanager
    def root(self) -> Iterator[None]:
        row, col = self.source
        self.visited[row][col] = True
        try:
            yield
        finally:
            self.visited[row][col] = False


def _check_cell(cell: Cell, size: int, name: str) -> Cell:
    row, col = cell
    if not (0 <= row < size and 0 <= col < size):
        raise InvalidInputError(f"{name} {cell} lies outside the {size}x{size} maze.")
    return row, col


def find_paths(
    grid: Sequence[Sequence[object]],
    *,
    source: Cell = (0, 0),
    destination: Cell | None = None,
    max_paths: int | None = None,
) -> MazeResult:
    """Enumerate every simple path from ``source`` to ``destination``.

    ``grid`` is read, never modified: truthy cells are open, falsy ones are
    blocked. ``destination`` defaults to the bottom-right cell.
    """
    open_cells = normalize_grid(grid)
    size = len(open_cells)
    source = _check_cell(source, size, "Source")
    destination = _check_cell(
        destination if destination is not None else (size - 1, size - 1),
        size,
        "Destination",
    )

    if not open_cells[source[0]][source[1]] or not open_cells[destination[0]][destination[1]]:
        logger.debug("Maze endpoint blocked: source=%s destination=%s", source, destination)
        return MazeResult(
            size=size,
            source=source,
            destination=destination,
            paths=[],
            stats=SearchStats(),
        )

    problem = MazeProblem(open_cells, source, destination)
    result = search(problem, SearchConfig(max_solutions=max_paths))
    return MazeResult(
        size=size,
        source=source,
        destination=destination,
        paths=result.solutions,
        stats=result.stats,
    )


def parse_grid(raw: str) -> list[list[int]]:
    """Parse rows of ``0``/``1`` separated by commas, semicolons or newlines."""
    rows = []
    for line in raw.replace(";", "\n").replace(",", "\n").splitlines():
        line = line.strip()
        if not line:
            continue
        if set(line) - {"0", "1", " "}:
            raise InvalidInputError(f"Maze rows may only contain 0 and 1: {line!r}.")
        rows.append([int(char) for char in line if char != " "])
    return rows
