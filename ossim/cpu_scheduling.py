"""CPU scheduling algorithms producing per-process statistics and a Gantt chart."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable


@dataclass(frozen=True)
class Process:
    """A process submitted to a scheduler."""

    pid: int
    arrival: int
    burst: int
    priority: int = 0


@dataclass(frozen=True)
class ProcessResult:
    """Timing statistics of one process after scheduling."""

    process: Process
    waiting: int
    turnaround: int
    completion: int

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def arrival(self) -> int:
        return self.process.arrival

    @property
    def burst(self) -> int:
        return self.process.burst

    @property
    def priority(self) -> int:
        return self.process.priority


@dataclass(frozen=True)
class GanttChart:
    """Slices of CPU time: ``times[k]`` starts slice ``pids[k]``, the last time ends the chart."""

    pids: tuple[int, ...]
    times: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.times) != len(self.pids) + 1:
            raise ValueError("a Gantt chart needs exactly one more time than slices")

    def render(self) -> str:
        """Return the chart as the four-line text diagram."""
        rule = " " + "------" * len(self.pids)
        cells = "|" + "".join(f" P{pid} |" for pid in self.pids)
        marks = "\t".join(str(t) for t in self.times)
        return "\n".join([rule, cells, rule, marks])


@dataclass(frozen=True)
class Schedule:
    """The outcome of a scheduling run."""

    results: tuple[ProcessResult, ...]
    gantt: GanttChart

    def _mean(self, values: list[int]) -> float:
        if not values:
            raise ValueError("schedule has no processes")
        return sum(values) / len(values)

    def average_waiting(self) -> float:
        return self._mean([r.waiting for r in self.results])

    def average_turnaround(self) -> float:
        return self._mean([r.turnaround for r in self.results])


def _result(process: Process, completion: int) -> ProcessResult:
    turnaround = completion - process.arrival
    return ProcessResult(
        process=process,
        waiting=turnaround - process.burst,
        turnaround=turnaround,
        completion=completion,
    )


def _build(
    procs: list[Process],
    finished: dict[int, ProcessResult],
    pids: list[int],
    starts: list[int],
    end: int,
) -> Schedule:
    results = tuple(finished[i] for i in range(len(procs)))
    return Schedule(results, GanttChart(tuple(pids), tuple(starts) + (end,)))


def fcfs(processes: Iterable[Process]) -> Schedule:
    """First come, first served; ties on arrival go to the shorter burst.

    Results are listed in the order the processes ran.
    """
    order = sorted(processes, key=lambda p: (p.arrival, p.burst))
    time = 0
    results: list[ProcessResult] = []
    starts: list[int] = []
    for proc in order:
        time = max(time, proc.arrival)
        starts.append(time)
        time += proc.burst
        results.append(_result(proc, time))
    gantt = GanttChart(tuple(p.pid for p in order), tuple(starts) + (time,))
    return Schedule(tuple(results), gantt)


def _run_nonpreemptive(
    processes: Iterable[Process], key: Callable[[Process], object]
) -> Schedule:
    procs = list(processes)
    pending = list(range(len(procs)))
    finished: dict[int, ProcessResult] = {}
    pids: list[int] = []
    starts: list[int] = []
    time = 0
    while pending:
        ready = [i for i in pending if procs[i].arrival <= time]
        if not ready:
            time = min(procs[i].arrival for i in pending)
            continue
        chosen = min(ready, key=lambda i: key(procs[i]))
        proc = procs[chosen]
        pids.append(proc.pid)
        starts.append(time)
        time += proc.burst
        finished[chosen] = _result(proc, time)
        pending.remove(chosen)
    return _build(procs, finished, pids, starts, time)


def _run_preemptive(
    processes: Iterable[Process], key: Callable[[Process, int], object]
) -> Schedule:
    procs = list(processes)
    if any(p.burst < 1 for p in procs):
        raise ValueError("preemptive scheduling needs every burst to be positive")
    remaining = {i: p.burst for i, p in enumerate(procs)}
    finished: dict[int, ProcessResult] = {}
    pids: list[int] = []
    starts: list[int] = []
    time = 0
    while remaining:
        ready = [i for i in remaining if procs[i].arrival <= time]
        if not ready:
            time = min(procs[i].arrival for i in remaining)
            continue
        chosen = min(ready, key=lambda i: key(procs[i], remaining[i]))
        proc = procs[chosen]
        if not pids or pids[-1] != proc.pid:
            pids.append(proc.pid)
            starts.append(time)
        remaining[chosen] -= 1
        time += 1
        if remaining[chosen] == 0:
            del remaining[chosen]
            finished[chosen] = _result(proc, time)
    return _build(procs, finished, pids, starts, time)


def sjf(processes: Iterable[Process]) -> Schedule:
    """Non-preemptive shortest job first; results keep input order."""
    return _run_nonpreemptive(processes, lambda p: p.burst)


def srtf(processes: Iterable[Process]) -> Schedule:
    """Shortest remaining time first, preempting each time unit."""
    return _run_preemptive(processes, lambda p, left: left)


def priority_nonpreemptive(processes: Iterable[Process]) -> Schedule:
    """Non-preemptive priority scheduling; a lower number is a higher priority."""
    return _run_nonpreemptive(processes, lambda p: (p.priority, p.arrival))


def priority_preemptive(processes: Iterable[Process]) -> Schedule:
    """Preemptive priority scheduling, ties broken by remaining time then arrival."""
    return _run_preemptive(processes, lambda p, left: (p.priority, left, p.arrival))


def round_robin(processes: Iterable[Process], quantum: int) -> Schedule:
    """Round robin over all processes in input order, regardless of arrival."""
    if quantum < 1:
        raise ValueError("time quantum must be positive")
    procs = list(processes)
    remaining = [p.burst for p in procs]
    finished: dict[int, ProcessResult] = {}
    pids: list[int] = []
    starts: list[int] = []
    time = 0
    while any(left > 0 for left in remaining):
        for i, proc in enumerate(procs):
            if remaining[i] <= 0:
                continue
            pids.append(proc.pid)
            starts.append(time)
            run = min(quantum, remaining[i])
            time += run
            remaining[i] -= run
            if remaining[i] == 0:
                finished[i] = _result(proc, time)
    for i, proc in enumerate(procs):
        finished.setdefault(i, ProcessResult(proc, 0, 0, proc.arrival))
    return _build(procs, finished, pids, starts, time)