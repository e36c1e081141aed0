"""Deadlock detection and the banker's safety algorithm."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

MAX_PROCESSES = 10
MAX_RESOURCES = 10

Matrix = Sequence[Sequence[int]]


@dataclass(frozen=True)
class DetectionResult:
    """Which processes could finish, in order, and which are stuck."""

    finish_order: tuple[int, ...]
    deadlocked: tuple[int, ...]
    work: tuple[int, ...]

    @property
    def deadlock(self) -> bool:
        return bool(self.deadlocked)


@dataclass(frozen=True)
class SafetyResult:
    """Outcome of the banker's safety check."""

    safe: bool
    sequence: tuple[int, ...]
    need: tuple[tuple[int, ...], ...]
    work: tuple[int, ...]


def _check_shape(name: str, matrix: Matrix, rows: int, cols: int) -> None:
    if len(matrix) != rows or any(len(row) != cols for row in matrix):
        raise ValueError(f"{name} must be a {rows} x {cols} matrix")


def need_matrix(allocation: Matrix, maximum: Matrix) -> tuple[tuple[int, ...], ...]:
    """Return Max - Allocation for every process."""
    cols = len(allocation[0]) if allocation else 0
    _check_shape("allocation", allocation, len(allocation), cols)
    _check_shape("maximum", maximum, len(allocation), cols)
    return tuple(
        tuple(m - a for m, a in zip(max_row, alloc_row))
        for max_row, alloc_row in zip(maximum, allocation)
    )


def _reduce(
    available: Sequence[int], demand: Matrix, allocation: Matrix
) -> tuple[list[int], list[bool], list[int]]:
    """Finish every process whose demand fits the work vector, pass after pass."""
    work = list(available)
    finished = [False] * len(demand)
    order: list[int] = []
    progress = True
    while progress and not all(finished):
        progress = False
        for i, (wants, holds) in enumerate(zip(demand, allocation)):
            if finished[i] or any(w > have for w, have in zip(wants, work)):
                continue
            work = [have + h for have, h in zip(work, holds)]
            finished[i] = True
            order.append(i)
            progress = True
    return order, finished, work


def detect_deadlock(
    available: Sequence[int], allocated: Matrix, requested: Matrix
) -> DetectionResult:
    """Detect deadlock from current allocations and outstanding requests."""
    n, m = len(allocated), len(available)
    if n > MAX_PROCESSES or m > MAX_RESOURCES:
        raise ValueError(
            f"at most {MAX_PROCESSES} processes and {MAX_RESOURCES} resource types"
        )
    _check_shape("allocated", allocated, n, m)
    _check_shape("requested", requested, n, m)
    order, finished, work = _reduce(available, requested, allocated)
    stuck = tuple(i for i, done in enumerate(finished) if not done)
    return DetectionResult(tuple(order), stuck, tuple(work))


def bankers_safety(
    available: Sequence[int], allocation: Matrix, maximum: Matrix
) -> SafetyResult:
    """Run the banker's safety algorithm and find a safe sequence if one exists."""
    m = len(available)
    _check_shape("allocation", allocation, len(allocation), m)
    need = need_matrix(allocation, maximum) if allocation else ()
    order, finished, work = _reduce(available, need, allocation)
    safe = all(finished)
    return SafetyResult(
        safe=safe,
        sequence=tuple(order) if safe else (),
        need=need,
        work=tuple(work),
    )