"""Page replacement simulations: FIFO, LRU and optimal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ossim.address_translation import _trunc_divmod

MAX_FRAMES = 10
MAX_ADDRESSES = 100

_HEADER = "Address\tPage#\tOffset\tFrame#\tPhysical Addr\tPage Fault\tFrame State"
_RULE = "-------------------------------------------------------------------------------"


@dataclass(frozen=True)
class Access:
    """One memory reference and the frame state after it."""

    address: int
    page: int
    offset: int
    frame: int
    physical_address: int
    fault: bool
    frames: tuple[Optional[int], ...]


@dataclass(frozen=True)
class PagingTrace:
    """Every reference made during a simulation."""

    accesses: tuple[Access, ...]
    num_frames: int
    page_size: int

    @property
    def page_faults(self) -> int:
        return sum(1 for a in self.accesses if a.fault)

    def render(self) -> str:
        """Return the trace as a tab-separated table followed by the fault total."""
        lines = ["", _HEADER, _RULE]
        for a in self.accesses:
            state = "".join(" -" if f is None else f" {f}" for f in a.frames)
            lines.append(
                f"{a.address}\t{a.page}\t{a.offset}\t{a.frame}\t"
                f"{a.physical_address}\t\t{'Yes' if a.fault else 'No'}\t\t[{state} ]"
            )
        lines.append("")
        lines.append(f"Total Page Faults: {self.page_faults}")
        return "\n".join(lines)


class _Fifo:
    def __init__(self, num_frames: int) -> None:
        self._next = 0
        self._size = num_frames

    def victim(self, frames: list[Optional[int]], step: int) -> int:
        chosen = self._next
        self._next = (self._next + 1) % self._size
        return chosen

    def touch(self, index: int, step: int) -> None:
        pass


class _Lru:
    def __init__(self, num_frames: int) -> None:
        self._last_used = [0] * num_frames

    def victim(self, frames: list[Optional[int]], step: int) -> int:
        if None in frames:
            return frames.index(None)
        return min(range(len(frames)), key=lambda i: self._last_used[i])

    def touch(self, index: int, step: int) -> None:
        self._last_used[index] = step + 1


class _Optimal:
    def __init__(self, pages: Sequence[int]) -> None:
        self._pages = list(pages)

    def victim(self, frames: list[Optional[int]], step: int) -> int:
        if None in frames:
            return frames.index(None)
        future = self._pages[step + 1:]
        farthest, chosen = step, None
        for i, page in enumerate(frames):
            if page not in future:
                return i
            next_use = future.index(page) + step + 1
            if next_use > farthest:
                farthest, chosen = next_use, i
        return 0 if chosen is None else chosen

    def touch(self, index: int, step: int) -> None:
        pass


def _prepare(
    addresses: Iterable[int], page_size: int, num_frames: int
) -> tuple[list[int], list[tuple[int, int]]]:
    addrs = list(addresses)
    if page_size <= 0:
        raise ValueError("page size must be positive")
    if not 1 <= num_frames <= MAX_FRAMES:
        raise ValueError(f"number of frames must be between 1 and {MAX_FRAMES}")
    if len(addrs) > MAX_ADDRESSES:
        raise ValueError(f"at most {MAX_ADDRESSES} addresses can be simulated")
    return addrs, [_trunc_divmod(a, page_size) for a in addrs]


def _simulate(
    addrs: list[int],
    split: list[tuple[int, int]],
    page_size: int,
    num_frames: int,
    policy: "_Fifo | _Lru | _Optimal",
) -> PagingTrace:
    frames: list[Optional[int]] = [None] * num_frames
    accesses: list[Access] = []
    for step, (address, (page, offset)) in enumerate(zip(addrs, split)):
        fault = page not in frames
        if fault:
            index = policy.victim(frames, step)
            frames[index] = page
        else:
            index = frames.index(page)
        policy.touch(index, step)
        accesses.append(
            Access(
                address=address,
                page=page,
                offset=offset,
                frame=index,
                physical_address=index * page_size + offset,
                fault=fault,
                frames=tuple(frames),
            )
        )
    return PagingTrace(tuple(accesses), num_frames, page_size)


def fifo(addresses: Iterable[int], page_size: int, num_frames: int) -> PagingTrace:
    """Replace the page that was loaded earliest."""
    addrs, split = _prepare(addresses, page_size, num_frames)
    return _simulate(addrs, split, page_size, num_frames, _Fifo(num_frames))


def lru(addresses: Iterable[int], page_size: int, num_frames: int) -> PagingTrace:
    """Fill empty frames first, then replace the least recently used page."""
    addrs, split = _prepare(addresses, page_size, num_frames)
    return _simulate(addrs, split, page_size, num_frames, _Lru(num_frames))


def optimal(addresses: Iterable[int], page_size: int, num_frames: int) -> PagingTrace:
    """Fill empty frames first, then replace the page used farthest in the future."""
    addrs, split = _prepare(addresses, page_size, num_frames)
    pages = [page for page, _ in split]
    return _simulate(addrs, split, page_size, num_frames, _Optimal(pages))