"""Disk head scheduling: SSTF, SCAN and C-SCAN."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence, Union


class Direction(Enum):
    """Initial direction of the head sweep in SCAN."""

    CLOCKWISE = "C"
    ANTICLOCKWISE = "A"

    @classmethod
    def _missing_(cls, value: object) -> "Direction | None":
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


@dataclass(frozen=True)
class SeekStep:
    """One head movement and the number of tracks it crossed."""

    start: int
    end: int
    distance: int


@dataclass(frozen=True)
class SeekResult:
    """The head movements made while servicing a set of requests."""

    steps: tuple[SeekStep, ...]
    request_count: int

    @property
    def total(self) -> int:
        """Total number of tracks moved."""
        return sum(step.distance for step in self.steps)

    @property
    def order(self) -> tuple[int, ...]:
        """Tracks visited, in order."""
        return tuple(step.end for step in self.steps)

    def average(self) -> float:
        """Average seek distance per request."""
        if self.request_count == 0:
            raise ValueError("no track requests to average over")
        return self.total / self.request_count


def sstf(requests: Iterable[int], head: int) -> SeekResult:
    """Shortest seek time first; on equal distance the earlier request wins."""
    pending = list(requests)
    count = len(pending)
    steps: list[SeekStep] = []
    while pending:
        nearest = min(range(len(pending)), key=lambda k: abs(pending[k] - head))
        track = pending.pop(nearest)
        distance = abs(track - head)
        steps.append(SeekStep(head, track, distance))
        head = track
    return SeekResult(tuple(steps), count)


def cscan(requests: Iterable[int], head: int, disk_size: int) -> SeekResult:
    """Circular SCAN: sweep up to the last track, jump to track 0, sweep up again.

    The jump from the end back to track 0 is counted as head movement.
    """
    wanted = list(requests)
    tracks = sorted(wanted + [head, 0, disk_size - 1])
    pos = tracks.index(head)
    steps: list[SeekStep] = []

    def move(target: int) -> None:
        nonlocal head
        steps.append(SeekStep(head, target, abs(head - target)))
        head = target

    for track in tracks[pos:]:
        move(track)
    if tracks[0] == 0:
        move(0)
    for track in tracks[:pos]:
        move(track)
    return SeekResult(tuple(steps), len(wanted))


def scan(
    requests: Iterable[int], head: int, direction: Union[Direction, str]
) -> SeekResult:
    """SCAN (elevator): service requests one way from the head, then reverse.

    Distances are measured between neighbouring tracks in sorted order.
    """
    try:
        way = Direction(direction)
    except ValueError:
        raise ValueError("Invalid direction input! Please enter 'C' or 'A'.") from None
    wanted = list(requests)
    tracks = sorted(wanted + [head])
    start = tracks.index(head)
    steps = [SeekStep(tracks[start], tracks[start], 0)]

    def ascending(indices: Sequence[int]) -> None:
        for i in indices:
            steps.append(SeekStep(tracks[i - 1], tracks[i], tracks[i] - tracks[i - 1]))

    def descending(indices: Sequence[int]) -> None:
        for i in indices:
            steps.append(SeekStep(tracks[i + 1], tracks[i], tracks[i + 1] - tracks[i]))

    up = range(start + 1, len(tracks))
    down = range(start - 1, -1, -1)
    if way is Direction.CLOCKWISE:
        ascending(up)
        descending(down)
    else:
        descending(down)
        ascending(up)
    return SeekResult(tuple(steps), len(wanted))