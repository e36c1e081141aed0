"""Contiguous memory placement: first, next, best and worst fit."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain
from typing import Iterable, Optional

# Best fit ignores any block that would leave this much space or more unused.
BEST_FIT_LIMIT = 10000


@dataclass(frozen=True)
class Allocation:
    """Where one process was placed, if anywhere."""

    process: int
    size: int
    block: Optional[int]
    remaining: Optional[int]

    @property
    def allocated(self) -> bool:
        return self.block is not None

    def __str__(self) -> str:
        if self.block is None:
            return f"Process P{self.process + 1} could not be allocated."
        return (
            f"Process P{self.process + 1} (Size: {self.size}KB) allocated to "
            f"Block B{self.block + 1} (Remaining Block Size: {self.remaining}KB)"
        )


class MemoryState:
    """Memory blocks and the processes waiting to be placed in them.

    Next fit remembers the block it last used across calls, even after ``reset``.
    """

    def __init__(self, block_sizes: Iterable[int], process_sizes: Iterable[int]) -> None:
        self.block_sizes = tuple(block_sizes)
        self.process_sizes = tuple(process_sizes)
        self.blocks = list(self.block_sizes)
        self.allocated = [0] * len(self.process_sizes)
        self._last_block = 0

    def reset(self) -> None:
        """Restore every block to its original size and unplace every process."""
        self.blocks = list(self.block_sizes)
        self.allocated = [0] * len(self.process_sizes)

    def _place(self, process: int, block: Optional[int]) -> Allocation:
        size = self.process_sizes[process]
        if block is None:
            return Allocation(process, size, None, None)
        self.allocated[process] = size
        self.blocks[block] -= size
        return Allocation(process, size, block, self.blocks[block])

    def first_fit(self) -> list[Allocation]:
        """Place each process in the first block with enough room."""
        results = []
        for process, size in enumerate(self.process_sizes):
            block = next(
                (j for j, free in enumerate(self.blocks) if free >= size), None
            )
            results.append(self._place(process, block))
        return results

    def next_fit(self) -> list[Allocation]:
        """Search from the block used last, wrapping round to the start."""
        results = []
        count = len(self.blocks)
        for process, size in enumerate(self.process_sizes):
            start = self._last_block
            order = chain(range(start, count), range(0, start))
            block = next((j for j in order if self.blocks[j] >= size), None)
            if block is not None:
                self._last_block = block
            results.append(self._place(process, block))
        return results

    def best_fit(self) -> list[Allocation]:
        """Place each process in the block it fills most tightly."""
        results = []
        for process, size in enumerate(self.process_sizes):
            candidates = [
                (free - size, j)
                for j, free in enumerate(self.blocks)
                if free >= size and free - size < BEST_FIT_LIMIT
            ]
            block = min(candidates)[1] if candidates else None
            results.append(self._place(process, block))
        return results

    def worst_fit(self) -> list[Allocation]:
        """Place each process in the block that leaves the most room."""
        results = []
        for process, size in enumerate(self.process_sizes):
            candidates = [
                (free - size, -j) for j, free in enumerate(self.blocks) if free >= size
            ]
            block = -max(candidates)[1] if candidates else None
            results.append(self._place(process, block))
        return results

    def __str__(self) -> str:
        blocks = " ".join(
            f"Block B{j + 1} (Original Size: {original}KB, Remaining: {free}KB)"
            for j, (original, free) in enumerate(zip(self.block_sizes, self.blocks))
        )
        lines = ["Current Memory Block State:", blocks, "", "Process Allocations:"]
        for i, (size, given) in enumerate(zip(self.process_sizes, self.allocated)):
            if given > 0:
                lines.append(f"Process P{i + 1} (Size: {size}KB) allocated {given}KB")
            else:
                lines.append(f"Process P{i + 1} (Size: {size}KB) not allocated")
        return "\n".join(lines)