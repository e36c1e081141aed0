# ossim

Small, self-contained simulations of the algorithms taught in an operating
systems course. Each module returns plain Python objects (mostly frozen
dataclasses) that you can inspect, test or render as text.

## What is inside

| Module | Covers |
| --- | --- |
| `ossim.cpu_scheduling` | FCFS, SJF, SRTF, priority (preemptive and non-preemptive), round robin |
| `ossim.disk_scheduling` | SSTF, SCAN, C-SCAN |
| `ossim.page_replacement` | FIFO, LRU and optimal page replacement |
| `ossim.address_translation` | Paged and segmented address translation |
| `ossim.memory_placement` | First, next, best and worst fit placement |
| `ossim.deadlock` | Deadlock detection and the banker's safety algorithm |
| `ossim.concurrency` | Bounded buffer, readers-writer lock, producer/consumer, dining philosophers, readers/writers |
| `ossim.vm_phase1` | A card-driven machine with 100 words of memory and no paging |
| `ossim.vm_phase2` | A paged card-driven machine with time and line limits |
| `ossim.vm_paged` | A paged card-driven machine that allocates data pages on a valid page fault |

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Using the library

### CPU scheduling

```python
from ossim.cpu_scheduling import Process, fcfs, round_robin

procs = [Process(pid=1, arrival=0, burst=5), Process(pid=2, arrival=1, burst=3)]
schedule = fcfs(procs)
for result in schedule.results:
    print(result.pid, result.waiting, result.turnaround, result.completion)
print(schedule.average_waiting(), schedule.average_turnaround())
print(schedule.gantt.render())

print(round_robin(procs, quantum=2).gantt.render())
```

`sjf`, `srtf`, `priority_nonpreemptive` and `priority_preemptive` take the
same list of processes; for priority scheduling a lower `priority` number
wins. The preemptive schedulers require every burst to be positive, and
`round_robin` requires a positive quantum; both raise `ValueError` otherwise.

### Disk scheduling

```python
from ossim.disk_scheduling import sstf, scan, cscan, Direction

result = sstf([98, 183, 37, 122, 14, 124, 65, 67], head=53)
print(result.order, result.total, result.average())

print(scan([98, 183, 37], head=53, direction=Direction.CLOCKWISE).total)
print(scan([98, 183, 37], head=53, direction="a").total)   # "C"/"A", any case
print(cscan([98, 183, 37], head=53, disk_size=200).total)
```

C-SCAN counts the jump from the last track back to track 0 as head movement.
An unknown SCAN direction raises `ValueError`.

### Page replacement

```python
from ossim.page_replacement import fifo, lru, optimal

trace = fifo([0, 512, 1024, 0, 2048], page_size=512, num_frames=3)
print(trace.page_faults)
print(trace.render())
```

Between 1 and 10 frames and at most 100 addresses are accepted.

### Address translation

`TranslationError` (a `ValueError`) is raised when a page or segment number
is out of range, or an offset falls outside a segment's limit:

```python
from ossim.address_translation import (
    Segment, TranslationError, translate_paged, translate_segmented,
)

print(translate_paged(1030, page_size=512, page_table=[5, 2, 7]).physical_address)

try:
    translate_segmented(1, 500, [Segment(base=1400, limit=1000), Segment(base=6300, limit=400)])
except TranslationError as error:
    print(error)
```

### Memory placement

```python
from ossim.memory_placement import MemoryState

memory = MemoryState([100, 500, 200, 300, 600], [212, 417, 112, 426])
for allocation in memory.best_fit():
    print(allocation)
print(memory)
memory.reset()
```

`reset` restores the blocks and unplaces every process; next fit keeps the
block it used last across calls, even after a reset.

### Deadlock

```python
from ossim.deadlock import bankers_safety, detect_deadlock, need_matrix

allocation = [[0, 1, 0], [2, 0, 0], [3, 0, 2], [2, 1, 1], [0, 0, 2]]
maximum = [[7, 5, 3], [3, 2, 2], [9, 0, 2], [2, 2, 2], [4, 3, 3]]
print(need_matrix(allocation, maximum))
print(bankers_safety([3, 3, 2], allocation, maximum).sequence)

result = detect_deadlock([0, 0], [[1, 0], [0, 1]], [[0, 1], [1, 0]])
print(result.deadlock, result.deadlocked)
```

### Concurrency

`BoundedBuffer` and `ReadersWriterLock` are usable on their own. The
`run_producer_consumer(items, capacity)`, `run_dining_philosophers(count,
rounds)` and `run_readers_writers(num_readers, num_writers)` functions start
threads, wait for them to finish and return the log of events. Every run is
finite.

## Running the card-driven machines

A deck of cards holds one or more jobs: `$AMJ` starts a job, program cards
follow, `$DTA` starts execution (data cards follow and are read by `GD`),
and `$END` closes the job. Each command reads the deck from a file given as
its argument, `input.txt` by default, and prints progress messages:

```
ossim-phase1 [input] [-o OUTPUT] [--arithmetic] [--load-only]
ossim-phase2 [input] [-o OUTPUT] [--seed N]
ossim-paged  [input] [-o OUTPUT] [--seed N]
```

- `ossim-phase1` appends the job output to `output.txt` (or `-o`).
  `--arithmetic` enables the `AD` instruction; `--load-only` only loads the
  program cards and prints each job's memory image.
- `ossim-phase2` overwrites the output file, writes a termination report for
  each job and then prints a dump of memory.
- `ossim-paged` appends its output, including a report for each terminated job.

`--seed` makes the random placement of pages repeatable. The same machines
are available from Python as `Phase1Machine`, `Phase2Machine` and
`PagedMachine`; their `run(lines)` method returns the output text and leaves
the progress messages in `messages`. A malformed operand or a full memory
raises `ValueError` or `RuntimeError`, and runaway programs stop with
`RuntimeError` after 100,000 steps (set `max_steps` to change this).

## What it does not do

Only the card-driven machines have commands. The scheduling, paging,
placement, deadlock and concurrency simulations are a library: there is no
interactive prompt or menu for entering processes, requests or matrices,
so you call the functions from your own code.