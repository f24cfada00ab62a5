"""Backtracking search package exports."""

from .combinations import (
    CombinationResult,
    MovePolicy,
    PalindromePartitionProblem,
    PowerSetProblem,
    SubsetSumProblem,
    combination_sum,
    combination_sum_k,
    combination_sum_unique,
    is_palindrome,
    palindrome_partitions,
    power_set,
    skip_equal_siblings,
    subsequence_sum_exists,
)
from .errors import InvalidInputError, SearchError, StackExhaustionError
from .frame import (
    Outcome,
    SearchConfig,
    SearchMode,
    SearchProblem,
    SearchResult,
    applied,
    search,
)
from .maze import MazeProblem, MazeResult, find_paths
from .metrics import SearchStats
from .nqueens import NQueensProblem, NQueensResult, render_nqueens_board, solve_nqueens
from .sudoku import SudokuProblem, SudokuResult, render_sudoku_grid, solve_sudoku

__all__ = [
    "CombinationResult",
    "InvalidInputError",
    "MazeProblem",
    "MazeResult",
    "MovePolicy",
    "NQueensProblem",
    "NQueensResult",
    "Outcome",
    "PalindromePartitionProblem",
    "PowerSetProblem",
    "SearchConfig",
    "SearchError",
    "SearchMode",
    "SearchProblem",
    "SearchResult",
    "SearchStats",
    "StackExhaustionError",
    "SubsetSumProblem",
    "SudokuProblem",
    "SudokuResult",
    "applied",
    "combination_sum",
    "combination_sum_k",
    "combination_sum_unique",
    "find_paths",
    "is_palindrome",
    "palindrome_partitions",
    "power_set",
    "render_nqueens_board",
    "render_sudoku_grid",
    "search",
    "skip_equal_siblings",
    "solve_nqueens",
    "solve_sudoku",
    "subsequence_sum_exists",
]
