from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterable, Iterator, Sequence

from .errors import InvalidInputError
from .frame import SearchConfig, SearchMode, SearchProblem, search
from .metrics import SearchStats

logger = logging.getLogger(__name__)

DIGITS = tuple(range(1, 10))


class MovePolicy(Enum):
    ADVANCE_ONLY = "advance-only"
    REPEAT_ALLOWED = "repeat-allowed"


@dataclass
class CombinationResult:
    values: tuple[int, ...] | str
    solutions: list[tuple]
    stats: SearchStats

    def to_dict(self) -> dict[str, object]:
        return {
            "values": self.values if isinstance(self.values, str) else list(self.values),
            "solutions": [list(solution) for solution in self.solutions],
            "solutions_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }


def skip_equal_siblings(values: Sequence[int], start: int) -> Iterator[int]:
    """Yield indices from ``start`` on, skipping values equal to their left neighbour.

    ``values`` must be sorted so equal values are adjacent. Only the first
    index of each run of equal values is yielded, which is what keeps a
    duplicate-bearing input from producing the same combination twice.
    """
    for index in range(start, len(values)):
        if index > start and values[index] == values[index - 1]:
            continue
        yield index


class SubsetSumProblem(SearchProblem[int, tuple[int, ...]]):
    """Choose values from a sequence until they add up to ``target``.

    A move is an index into ``values``. Under ``ADVANCE_ONLY`` the next frame
    starts past the chosen index; under ``REPEAT_ALLOWED`` it starts at the
    chosen index, so the same value can be chosen again. With ``monotone`` the
    values must be ascending and the candidate loop stops at the first value
    larger than what remains.
    """

    def __init__(
        self,
        values: Sequence[int],
        target: int,
        *,
        policy: MovePolicy = MovePolicy.ADVANCE_ONLY,
        size: int | None = None,
        skip_duplicates: bool = False,
        monotone: bool = False,
    ) -> None:
        self.values = tuple(values)
        if (skip_duplicates or monotone) and list(self.values) != sorted(self.values):
            raise InvalidInputError("Values must be sorted ascending.")
        self.policy = policy
        self.size = size
        self.skip_duplicates = skip_duplicates
        self.monotone = monotone
        self.remaining = target
        self.cursor = 0
        self.current: list[int] = []
        self._cursors: list[int] = []

    def is_complete(self) -> bool:
        if self.remaining != 0:
            return False
        return self.size is None or len(self.current) == self.size

    def is_dead_end(self) -> bool:
        if self.remaining < 0 or self.cursor >= len(self.values):
            return True
        return self.size is not None and len(self.current) >= self.size

    def candidates(self) -> Iterable[int]:
        if self.skip_duplicates:
            indices: Iterable[int] = skip_equal_siblings(self.values, self.cursor)
        else:
            indices = range(self.cursor, len(self.values))
        for index in indices:
            if self.monotone and self.values[index] > self.remaining:
                break
            yield index

    def apply(self, move: int) -> None:
        value = self.values[move]
        self.current.append(value)
        self.remaining -= value
        self._cursors.append(self.cursor)
        self.cursor = move if self.policy is MovePolicy.REPEAT_ALLOWED else move + 1

    def undo(self, move: int) -> None:
        self.cursor = self._cursors.pop()
        self.remaining += self.values[move]
        self.current.pop()

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self.current)


class PowerSetProblem(SearchProblem[bool, tuple[int, ...]]):
    """Include/exclude each value in turn; every leaf is one subset.

    With ``target`` set, a frame completes as soon as the chosen values add up
    to it and is pruned once they overshoot, which only makes sense for
    non-negative values.
    """

    def __init__(self, values: Sequence[int], target: int | None = None) -> None:
        self.values = tuple(values)
        self.target = target
        self.remaining = target if target is not None else 0
        self.cursor = 0
        self.current: list[int] = []

    def is_complete(self) -> bool:
        if self.target is not None:
            return self.remaining == 0
        return self.cursor == len(self.values)

    def is_dead_end(self) -> bool:
        if self.target is not None:
            return self.remaining < 0 or self.cursor == len(self.values)
        return False

    def candidates(self) -> Iterable[bool]:
        # Excluding first lists the smaller subsets before their supersets.
        return (False, True)

    def apply(self, move: bool) -> None:
        if move:
            value = self.values[self.cursor]
            self.current.append(value)
            self.remaining -= value
        self.cursor += 1

    def undo(self, move: bool) -> None:
        self.cursor -= 1
        if move:
            self.remaining += self.current.pop()

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self.current)


def is_palindrome(text: str, start: int = 0, end: int | None = None) -> bool:
    """Two-pointer check of ``text[start:end]``."""
    left = start
    right = (len(text) if end is None else end) - 1
    while left < right:
        if text[left] != text[right]:
            return False
        left += 1
        right -= 1
    return True


class PalindromePartitionProblem(SearchProblem[int, tuple[str, ...]]):
    """Cut ``text`` into pieces that are all palindromes.

    A move is the end offset of the next piece, starting at the cursor.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.cursor = 0
        self.current: list[str] = []
        self._cursors: list[int] = []

    def is_complete(self) -> bool:
        return self.cursor == len(self.text)

    def candidates(self) -> Iterable[int]:
        return range(self.cursor + 1, len(self.text) + 1)

    def is_feasible(self, move: int) -> bool:
        return is_palindrome(self.text, self.cursor, move)

    def apply(self, move: int) -> None:
        self.current.append(self.text[self.cursor : move])
        self._cursors.append(self.cursor)
        self.cursor = move

    def undo(self, move: int) -> None:
        self.cursor = self._cursors.pop()
        self.current.pop()

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self.current)


def _check_target(target: int) -> None:
    if target < 0:
        raise InvalidInputError("Target must be >= 0.")


def _check_positive(values: Sequence[int]) -> None:
    if any(value <= 0 for value in values):
        raise InvalidInputError("Candidate values must be positive.")


def power_set(values: Sequence[int]) -> CombinationResult:
    problem = PowerSetProblem(values)
    result = search(problem)
    return CombinationResult(
        values=problem.values, solutions=result.solutions, stats=result.stats
    )


def subsequence_sum_exists(values: Sequence[int], target: int) -> bool:
    """Return True if some subsequence of ``values`` adds up to ``target``."""
    _check_target(target)
    if any(value < 0 for value in values):
        raise InvalidInputError("Values must be non-negative.")
    result = search(
        PowerSetProblem(values, target),
        SearchConfig(mode=SearchMode.FIRST, collect=False),
    )
    return result.found


def combination_sum(values: Sequence[int], target: int) -> CombinationResult:
    """All multisets of ``values`` adding up to ``target``; a value may repeat."""
    _check_target(target)
    _check_positive(values)
    ordered = sorted(values)
    problem = SubsetSumProblem(
        ordered,
        target,
        policy=MovePolicy.REPEAT_ALLOWED,
        skip_duplicates=True,
        monotone=True,
    )
    result = search(problem)
    return CombinationResult(
        values=tuple(values), solutions=result.solutions, stats=result.stats
    )


def combination_sum_unique(values: Sequence[int], target: int) -> CombinationResult:
    """Combinations using each position of ``values`` at most once, without repeats."""
    _check_target(target)
    _check_positive(values)
    problem = SubsetSumProblem(
        sorted(values),
        target,
        policy=MovePolicy.ADVANCE_ONLY,
        skip_duplicates=True,
        monotone=True,
    )
    result = search(problem)
    return CombinationResult(
        values=tuple(values), solutions=result.solutions, stats=result.stats
    )


def combination_sum_k(
    k: int, target: int, *, alphabet: Sequence[int] = DIGITS
) -> CombinationResult:
    """All ``k``-element sets of distinct ``alphabet`` values adding up to ``target``."""
    _check_target(target)
    if k < 1:
        raise InvalidInputError("k must be >= 1.")
    ordered = sorted(set(alphabet))
    _check_positive(ordered)
    if k > len(ordered):
        logger.debug("Rejecting k=%d for an alphabet of %d values", k, len(ordered))
        raise InvalidInputError(
            f"k={k} exceeds the {len(ordered)} available values."
        )
    problem = SubsetSumProblem(
        ordered,
        target,
        policy=MovePolicy.ADVANCE_ONLY,
        size=k,
        monotone=True,
    )
    result = search(problem)
    return CombinationResult(
        values=tuple(ordered), solutions=result.solutions, stats=result.stats
    )


def palindrome_partitions(text: str) -> CombinationResult:
    result = search(PalindromePartitionProblem(text))
    return CombinationResult(values=text, solutions=result.solutions, stats=result.stats)
