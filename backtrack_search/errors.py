"""Exceptions raised by the search engine and its solvers."""


class SearchError(Exception):
    """Base class for every error raised by backtrack_search."""


class InvalidInputError(SearchError, ValueError):
    """Input rejected before any search was attempted."""


class StackExhaustionError(SearchError, RuntimeError):
    """The search recursed deeper than the interpreter allows."""

    def __init__(self, depth: int) -> None:
        super().__init__(
            f"Search exceeded the interpreter recursion limit at depth {depth}."
        )
        self.depth = depth
