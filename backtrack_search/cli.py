from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Sequence

from .combinations import (
    CombinationResult,
    combination_sum,
    combination_sum_k,
    combination_sum_unique,
    palindrome_partitions,
    power_set,
    subsequence_sum_exists,
)
from .errors import SearchError
from .maze import find_paths, parse_grid
from .nqueens import NQueensResult, render_nqueens_board, solve_nqueens
from .sudoku import render_sudoku_grid, solve_sudoku

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("Value must be >= 1.")
    return parsed


def _non_negative_int(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise argparse.ArgumentTypeError("Value must be >= 0.")
    return parsed


def _int_list(raw: str) -> list[int]:
    values = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            values.append(int(token))
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Not an integer: {token!r}.") from exc
    return values


def _cell(raw: str) -> tuple[int, int]:
    parts = [item.strip() for item in raw.split(",")]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("Cell must be formatted as row,col.")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Cell coordinates must be integers.") from exc


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def _print_stats(stats_owner: NQueensResult | CombinationResult) -> None:
    stats = stats_owner.stats
    print(f"Solutions found: {stats.solutions_found}")
    print(f"Nodes visited: {stats.nodes_visited}")
    print(f"Backtracks: {stats.backtracks}")
    print(f"Elapsed: {stats.elapsed_ms:.3f} ms")


def _print_nqueens(result: NQueensResult, max_boards: int) -> None:
    print(f"N-Queens size: {result.size}")
    _print_stats(result)

    if result.placements:
        for index, placement in enumerate(result.placements[:max_boards], start=1):
            print()
            print(f"Solution {index}")
            print(render_nqueens_board(placement))


def _print_sudoku(result_grid: str, solutions: list[str]) -> None:
    print("Input")
    print(render_sudoku_grid(result_grid))
    if not solutions:
        print("\nNo valid solution found.")
        return
    for index, solution in enumerate(solutions, start=1):
        print("\nSolved" if len(solutions) == 1 else f"\nSolution {index}")
        print(render_sudoku_grid(solution))


def _print_combinations(title: str, result: CombinationResult) -> None:
    print(title)
    if not result.solutions:
        print("(none)")
    for solution in result.solutions:
        print("[" + ", ".join(str(item) for item in solution) + "]")
    print()
    _print_stats(result)


def _read_source(inline: str | None, path: str | None, name: str) -> str:
    if (inline is None) == (path is None):
        raise ValueError(f"Provide exactly one of --{name} or --{name}-file.")
    if path is not None:
        return Path(path).read_text(encoding="utf-8")
    return inline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backtrack-search",
        description="Backtracking search: grid solvers, path enumeration, combinations.",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    nqueens = subparsers.add_parser("nqueens", help="Solve the N-Queens problem.")
    nqueens.add_argument("--size", "-n", type=_positive_int, required=True)
    nqueens.add_argument("--max-solutions", type=_positive_int)
    nqueens.add_argument("--count-only", action="store_true")
    nqueens.add_argument(
        "--column-order",
        choices=("left-to-right", "center-first"),
        default="left-to-right",
    )
    nqueens.add_argument("--show-boards", type=_positive_int, default=3)
    nqueens.add_argument("--json", action="store_true")

    sudoku = subparsers.add_parser("sudoku", help="Solve a Sudoku puzzle.")
    sudoku.add_argument("--puzzle")
    sudoku.add_argument("--puzzle-file")
    sudoku.add_argument("--max-solutions", type=_positive_int, default=1)
    sudoku.add_argument(
        "--cell-order",
        choices=("row-major", "fewest-candidates"),
        default="row-major",
    )
    sudoku.add_argument("--json", action="store_true")

    maze = subparsers.add_parser("maze", help="List every path through a 0/1 maze.")
    maze.add_argument("--grid", help="Rows of 0/1 separated by commas, e.g. 111,111,011.")
    maze.add_argument("--grid-file")
    maze.add_argument("--source", type=_cell, default=(0, 0))
    maze.add_argument("--destination", type=_cell)
    maze.add_argument("--max-paths", type=_positive_int)
    maze.add_argument("--json", action="store_true")

    subsets = subparsers.add_parser("subsets", help="List the power set of values.")
    subsets.add_argument("--values", type=_int_list, required=True)
    subsets.add_argument("--json", action="store_true")

    combos = subparsers.add_parser(
        "combination-sum", help="Combinations of values adding up to a target."
    )
    combos.add_argument("--values", type=_int_list, required=True)
    combos.add_argument("--target", type=_non_negative_int, required=True)
    combos.add_argument(
        "--unique",
        action="store_true",
        help="Use each value at most once and drop duplicate combinations.",
    )
    combos.add_argument("--json", action="store_true")

    combos_k = subparsers.add_parser(
        "combination-sum-k", help="k distinct digits 1-9 adding up to a target."
    )
    combos_k.add_argument("--k", type=_positive_int, required=True)
    combos_k.add_argument("--target", type=_non_negative_int, required=True)
    combos_k.add_argument("--json", action="store_true")

    subsequence = subparsers.add_parser(
        "subsequence-sum", help="Check whether a subsequence adds up to a target."
    )
    subsequence.add_argument("--values", type=_int_list, required=True)
    subsequence.add_argument("--target", type=_non_negative_int, required=True)
    subsequence.add_argument("--json", action="store_true")

    partition = subparsers.add_parser(
        "partition", help="Split text into palindromic pieces."
    )
    partition.add_argument("--text", required=True)
    partition.add_argument("--json", action="store_true")

    benchmark = subparsers.add_parser(
        "benchmark", help="Quick N-Queens benchmark across board sizes."
    )
    benchmark.add_argument("--sizes", nargs="+", type=_positive_int, default=[6, 8, 10])
    benchmark.add_argument("--max-solutions", type=_positive_int, default=2)
    benchmark.add_argument(
        "--column-order",
        choices=("left-to-right", "center-first"),
        default="left-to-right",
    )
    benchmark.add_argument("--json", action="store_true")

    return parser


def _run_nqueens(args: argparse.Namespace) -> int:
    result = solve_nqueens(
        args.size,
        max_solutions=args.max_solutions,
        count_only=args.count_only,
        column_order=args.column_order,
    )
    if args.json:
        print(json.dumps(result.to_dict(include_boards=True), indent=2))
    else:
        _print_nqueens(result, max_boards=args.show_boards)
    return 0


def _run_sudoku(args: argparse.Namespace) -> int:
    puzzle = _read_source(args.puzzle, args.puzzle_file, "puzzle")
    result = solve_sudoku(
        puzzle, max_solutions=args.max_solutions, cell_order=args.cell_order
    )
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_sudoku(result.puzzle, result.solutions)
        print()
        print(f"Solutions found: {result.stats.solutions_found}")
        print(f"Nodes visited: {result.stats.nodes_visited}")
        print(f"Backtracks: {result.stats.backtracks}")
        print(f"Elapsed: {result.stats.elapsed_ms:.3f} ms")
    return 0 if result.solved else 1


def _run_maze(args: argparse.Namespace) -> int:
    grid = parse_grid(_read_source(args.grid, args.grid_file, "grid"))
    result = find_paths(
        grid,
        source=args.source,
        destination=args.destination,
        max_paths=args.max_paths,
    )
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Maze size: {result.size}x{result.size}")
    print(f"From {result.source} to {result.destination}")
    print(f"Total paths: {len(result.paths)}")
    for path in result.paths:
        print(path or "(already there)")
    return 0


def _emit(title: str, result: CombinationResult, as_json: bool) -> int:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_combinations(title, result)
    return 0


def _run_subsets(args: argparse.Namespace) -> int:
    return _emit("Subsets", power_set(args.values), args.json)


def _run_combination_sum(args: argparse.Namespace) -> int:
    if args.unique:
        result = combination_sum_unique(args.values, args.target)
    else:
        result = combination_sum(args.values, args.target)
    return _emit(f"Combinations adding up to {args.target}", result, args.json)


def _run_combination_sum_k(args: argparse.Namespace) -> int:
    result = combination_sum_k(args.k, args.target)
    return _emit(f"{args.k} digits adding up to {args.target}", result, args.json)


def _run_subsequence_sum(args: argparse.Namespace) -> int:
    exists = subsequence_sum_exists(args.values, args.target)
    if args.json:
        print(json.dumps({"values": args.values, "target": args.target, "exists": exists}))
    else:
        print(f"Subsequence adding up to {args.target}: {'yes' if exists else 'no'}")
    return 0


def _run_partition(args: argparse.Namespace) -> int:
    return _emit("Palindrome partitions", palindrome_partitions(args.text), args.json)


BENCHMARK_COLUMNS = (
    ("size", "size", 4),
    ("solutions_found", "solutions", 9),
    ("nodes_visited", "nodes", 8),
    ("backtracks", "backtracks", 10),
    ("pruned", "pruned", 8),
    ("max_depth", "depth", 5),
    ("elapsed_ms", "elapsed_ms", 10),
)


def _run_benchmark(args: argparse.Namespace) -> int:
    rows: list[dict[str, float | int]] = []
    for size in args.sizes:
        result = solve_nqueens(
            size=size,
            max_solutions=args.max_solutions,
            count_only=True,
            column_order=args.column_order,
        )
        rows.append({"size": size, **result.stats.to_dict()})

    if args.json:
        print(json.dumps(rows, indent=2))
        return 0

    print("  ".join(label.rjust(width) for _, label, width in BENCHMARK_COLUMNS))
    for row in rows:
        cells = []
        for name, _, width in BENCHMARK_COLUMNS:
            value = row[name]
            text = f"{value:.3f}" if isinstance(value, float) else str(value)
            cells.append(text.rjust(width))
        print("  ".join(cells))
    return 0


COMMANDS = {
    "nqueens": _run_nqueens,
    "sudoku": _run_sudoku,
    "maze": _run_maze,
    "subsets": _run_subsets,
    "combination-sum": _run_combination_sum,
    "combination-sum-k": _run_combination_sum_k,
    "subsequence-sum": _run_subsequence_sum,
    "partition": _run_partition,
    "benchmark": _run_benchmark,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    handler = COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    try:
        return handler(args)
    except (ValueError, OSError, SearchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
