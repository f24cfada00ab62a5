"""Generic choose / explore / un-choose search skeleton.

A ``SearchProblem`` owns the whole mutable search state: the partial solution
and whatever marks the feasibility check needs. The engine never copies it.
Each move is applied inside :func:`applied`, which undoes it on every way out
of the frame, so sibling branches always start from the same state and a
returning top-level search leaves the problem exactly as it found it.

Completed solutions are stored as snapshots taken by the problem at the moment
of completion; a snapshot must not share mutable structure with live state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field
from enum import Enum
import logging
import sys
from time import perf_counter
from typing import ContextManager, Generic, Iterable, Iterator, TypeVar

from .errors import InvalidInputError, StackExhaustionError
from .metrics import SearchStats

logger = logging.getLogger(__name__)

_STACK_MARGIN = 64

MoveT = TypeVar("MoveT")
SolutionT = TypeVar("SolutionT")


class Outcome(Enum):
    """What a frame reports back to its caller."""

    CONTINUE = "continue"
    STOP = "stop"
    EXHAUSTED = "exhausted"


class SearchMode(Enum):
    ALL = "all"
    FIRST = "first"


@dataclass(frozen=True)
class SearchConfig:
    mode: SearchMode = SearchMode.ALL
    max_solutions: int | None = None
    collect: bool = True

    def __post_init__(self) -> None:
        if self.max_solutions is not None and self.max_solutions < 1:
            raise InvalidInputError("max_solutions must be >= 1.")

    def limit(self) -> int | None:
        if self.mode is SearchMode.FIRST:
            return 1
        return self.max_solutions


@dataclass
class SearchResult(Generic[SolutionT]):
    solutions: list[SolutionT]
    stats: SearchStats
    outcome: Outcome = Outcome.EXHAUSTED

    @property
    def found(self) -> bool:
        return self.stats.solutions_found > 0

    def to_dict(self) -> dict[str, object]:
        return {
            "outcome": self.outcome.value,
            "solutions_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }


class SearchProblem(ABC, Generic[MoveT, SolutionT]):
    """State plus the extension points the engine drives.

    Subclasses implement ``is_complete``, ``candidates``, ``apply``, ``undo``
    and ``snapshot``; ``is_feasible``, ``is_dead_end`` and ``root`` have
    permissive defaults.
    """

    @abstractmethod
    def is_complete(self) -> bool:
        """Return True when the partial solution is a full solution."""

    @abstractmethod
    def candidates(self) -> Iterable[MoveT]:
        """Yield the moves to try from the current state, in order."""

    def is_feasible(self, move: MoveT) -> bool:
        """Local pruning check. Must not mutate state."""
        return True

    def is_dead_end(self) -> bool:
        """Return True when no extension of the current state can complete."""
        return False

    @abstractmethod
    def apply(self, move: MoveT) -> None:
        """Extend the state in place."""

    @abstractmethod
    def undo(self, move: MoveT) -> None:
        """Exact inverse of ``apply`` for the same move."""

    @abstractmethod
    def snapshot(self) -> SolutionT:
        """Return an immutable copy of the current solution."""

    def root(self) -> ContextManager[object]:
        """Scope held around the whole search, e.g. marking a start cell."""
        return nullcontext()


@contextmanager
def applied(problem: SearchProblem[MoveT, object], move: MoveT) -> Iterator[None]:
    problem.apply(move)
    try:
        yield
    finally:
        problem.undo(move)


def _stack_depth() -> int:
    # CPython frame walk, same call the logging module uses to find callers.
    frame = sys._getframe(1)
    depth = 0
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


class _Search(Generic[MoveT, SolutionT]):
    def __init__(
        self, problem: SearchProblem[MoveT, SolutionT], config: SearchConfig
    ) -> None:
        self.problem = problem
        self.config = config
        self.limit = config.limit()
        self.stats = SearchStats()
        self.solutions: list[SolutionT] = []
        # One interpreter frame per level, plus room for the problem's own
        # calls and for the undo handlers that run while unwinding.
        self.depth_budget = sys.getrecursionlimit() - _stack_depth() - _STACK_MARGIN

    def _record(self) -> Outcome:
        self.stats.solutions_found += 1
        if self.config.collect:
            self.solutions.append(self.problem.snapshot())
        if self.limit is not None and self.stats.solutions_found >= self.limit:
            return Outcome.STOP
        return Outcome.CONTINUE

    def explore(self, depth: int) -> Outcome:
        problem = self.problem
        self.stats.nodes_visited += 1
        if depth > self.stats.max_depth:
            self.stats.max_depth = depth
        if depth > self.depth_budget:
            raise StackExhaustionError(depth)

        if problem.is_complete():
            return self._record()
        if problem.is_dead_end():
            self.stats.pruned += 1
            return Outcome.EXHAUSTED

        outcome = Outcome.EXHAUSTED
        for move in problem.candidates():
            if not problem.is_feasible(move):
                self.stats.pruned += 1
                continue
            with applied(problem, move):
                child = self.explore(depth + 1)
            self.stats.backtracks += 1
            if child is Outcome.STOP:
                return Outcome.STOP
            if child is Outcome.CONTINUE:
                outcome = Outcome.CONTINUE
        return outcome


def search(
    problem: SearchProblem[MoveT, SolutionT], config: SearchConfig | None = None
) -> SearchResult[SolutionT]:
    """Run a depth-first backtracking search over ``problem``.

    In ``SearchMode.FIRST`` the search stops at the first completion; in
    ``SearchMode.ALL`` it exhausts the tree or stops at ``max_solutions``.
    With ``collect=False`` solutions are counted but not stored.

    Raises:
        StackExhaustionError: the recursion limit was hit. All moves applied
            up to that point have been undone when this propagates.
    """
    config = config or SearchConfig()
    runner = _Search(problem, config)
    logger.debug(
        "Starting %s search (mode=%s, max_solutions=%s)",
        type(problem).__name__,
        config.mode.value,
        config.max_solutions,
    )

    start = perf_counter()
    try:
        with problem.root():
            outcome = runner.explore(0)
    except StackExhaustionError:
        logger.error(
            "%s search exhausted the stack at depth %d",
            type(problem).__name__,
            runner.stats.max_depth,
        )
        raise
    except RecursionError as exc:
        logger.error(
            "%s search hit the recursion limit at depth %d",
            type(problem).__name__,
            runner.stats.max_depth,
        )
        raise StackExhaustionError(runner.stats.max_depth) from exc
    finally:
        runner.stats.elapsed_ms = (perf_counter() - start) * 1000

    logger.debug(
        "%s search finished: outcome=%s %s",
        type(problem).__name__,
        outcome.value,
        runner.stats.to_dict(),
    )
    return SearchResult(solutions=runner.solutions, stats=runner.stats, outcome=outcome)
