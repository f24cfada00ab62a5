import contextlib
import io
import json
import unittest
from unittest import mock

from backtrack_search.cli import main
from backtrack_search.errors import StackExhaustionError


def _run(*argv: str) -> tuple[int, str, str]:
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()


class CliTests(unittest.TestCase):
    def test_nqueens_json(self) -> None:
        code, out, _ = _run("nqueens", "--size", "4", "--json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["solutions_found"], 2)

    def test_nqueens_text(self) -> None:
        code, out, _ = _run("nqueens", "-n", "4", "--show-boards", "1")
        self.assertEqual(code, 0)
        self.assertIn("Solution 1", out)
        self.assertNotIn("Solution 2", out)

    def test_sudoku_unsolvable_exit_code(self) -> None:
        code, out, _ = _run("sudoku", "--puzzle", "123456780" + "000000009" + "0" * 63)
        self.assertEqual(code, 1)
        self.assertIn("No valid solution found.", out)

    def test_sudoku_requires_one_source(self) -> None:
        code, _, err = _run("sudoku")
        self.assertEqual(code, 2)
        self.assertIn("Error:", err)

    def test_maze(self) -> None:
        code, out, _ = _run("maze", "--grid", "111,111,011", "--json")
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(out)["paths"]), 7)

    def test_combination_commands(self) -> None:
        code, out, _ = _run("combination-sum", "--values", "2,3,6,7", "--target", "7", "--json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["solutions"], [[2, 2, 3], [7]])

        code, out, _ = _run(
            "combination-sum", "--values", "10,1,2,7,6,1,5", "--target", "8", "--unique"
        )
        self.assertEqual(code, 0)
        self.assertIn("[1, 1, 6]", out)

        code, out, _ = _run("combination-sum-k", "--k", "3", "--target", "7", "--json")
        self.assertEqual(json.loads(out)["solutions"], [[1, 2, 4]])

    def test_partition_and_subsets(self) -> None:
        code, out, _ = _run("partition", "--text", "aab", "--json")
        self.assertEqual(json.loads(out)["solutions"], [["a", "a", "b"], ["aa", "b"]])

        code, out, _ = _run("subsets", "--values", "1,2", "--json")
        self.assertEqual(len(json.loads(out)["solutions"]), 4)

    def test_subsequence_sum(self) -> None:
        code, out, _ = _run("subsequence-sum", "--values", "1,2,3,4", "--target", "5")
        self.assertEqual(code, 0)
        self.assertIn("yes", out)

    def test_invalid_input_reported(self) -> None:
        code, _, err = _run("combination-sum-k", "--k", "12", "--target", "5")
        self.assertEqual(code, 2)
        self.assertIn("exceeds", err)

    def test_benchmark(self) -> None:
        code, out, _ = _run("benchmark", "--sizes", "4", "5", "--json")
        self.assertEqual(code, 0)
        rows = json.loads(out)
        self.assertEqual([row["size"] for row in rows], [4, 5])
        self.assertEqual(rows[0]["solutions_found"], 2)
        self.assertIn("max_depth", rows[0])

    def test_benchmark_table(self) -> None:
        code, out, _ = _run("benchmark", "--sizes", "4")
        self.assertEqual(code, 0)
        header, row = out.splitlines()
        self.assertEqual(
            header.split(),
            ["size", "solutions", "nodes", "backtracks", "pruned", "depth", "elapsed_ms"],
        )
        self.assertEqual(row.split()[:2], ["4", "2"])

    def test_stack_exhaustion_reported(self) -> None:
        with mock.patch(
            "backtrack_search.cli.solve_nqueens", side_effect=StackExhaustionError(900)
        ):
            code, _, err = _run("nqueens", "--size", "4")
        self.assertEqual(code, 2)
        self.assertIn("depth 900", err)

    def test_unrelated_runtime_errors_propagate(self) -> None:
        with mock.patch(
            "backtrack_search.cli.solve_nqueens", side_effect=RuntimeError("bug")
        ):
            with self.assertRaises(RuntimeError):
                _run("nqueens", "--size", "4")


if __name__ == "__main__":
    unittest.main()
