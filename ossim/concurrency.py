"""Classic synchronisation problems run on threads."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Iterable, Optional

BUFFER_SIZE = 10
NUM_PHILOSOPHERS = 5


class BoundedBuffer:
    """A fixed-capacity FIFO guarded by empty/full semaphores and a mutex.

    ``on_event`` is called inside the critical section with ``"produced"``
    or ``"consumed"`` and the item.
    """

    def __init__(
        self,
        capacity: int = BUFFER_SIZE,
        on_event: Optional[Callable[[str, Any], None]] = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("buffer capacity must be positive")
        self.capacity = capacity
        self._items: deque[Any] = deque()
        self._mutex = threading.Lock()
        self._empty = threading.Semaphore(capacity)
        self._full = threading.Semaphore(0)
        self._on_event = on_event

    def put(self, item: Any) -> None:
        """Add an item, blocking while the buffer is full."""
        self._empty.acquire()
        with self._mutex:
            self._items.append(item)
            if self._on_event is not None:
                self._on_event("produced", item)
        self._full.release()

    def get(self) -> Any:
        """Remove the oldest item, blocking while the buffer is empty."""
        self._full.acquire()
        with self._mutex:
            item = self._items.popleft()
            if self._on_event is not None:
                self._on_event("consumed", item)
        self._empty.release()
        return item

    def __len__(self) -> int:
        with self._mutex:
            return len(self._items)


class ReadersWriterLock:
    """Many concurrent readers or one writer; readers take priority."""

    def __init__(self) -> None:
        self._resource = threading.Lock()
        self._count_lock = threading.Lock()
        self._readers = 0
        self._writing = False

    @property
    def readers(self) -> int:
        return self._readers

    def acquire_read(self) -> None:
        with self._count_lock:
            self._readers += 1
            if self._readers == 1:
                self._resource.acquire()

    def release_read(self) -> None:
        with self._count_lock:
            if self._readers == 0:
                raise RuntimeError("release_read without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._resource.release()

    def acquire_write(self) -> None:
        self._resource.acquire()
        self._writing = True

    def release_write(self) -> None:
        if not self._writing:
            raise RuntimeError("release_write without a matching acquire_write")
        self._writing = False
        self._resource.release()


def _run_all(threads: list[threading.Thread]) -> None:
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def run_producer_consumer(items: Iterable[Any], capacity: int = BUFFER_SIZE) -> list[str]:
    """Pass items from a producer thread to a consumer thread; return the event log."""
    work = list(items)
    log: list[str] = []

    def record(event: str, item: Any) -> None:
        if event == "produced":
            log.append(f"Producer produced: {item}")
        else:
            log.append(f"Consumer consumed: {item}")

    buffer = BoundedBuffer(capacity, on_event=record)

    def producer() -> None:
        for item in work:
            buffer.put(item)

    def consumer() -> None:
        for _ in work:
            buffer.get()

    _run_all([threading.Thread(target=producer), threading.Thread(target=consumer)])
    return log


def run_dining_philosophers(count: int = NUM_PHILOSOPHERS, rounds: int = 1) -> list[str]:
    """Let each philosopher eat ``rounds`` times; return the event log.

    Forks are picked up under a shared lock, so the table cannot deadlock.
    """
    if count < 2:
        raise ValueError("at least two philosophers are needed")
    if rounds < 0:
        raise ValueError("rounds must not be negative")
    forks = [threading.Semaphore(1) for _ in range(count)]
    pickup = threading.Lock()
    log: list[str] = []
    log_lock = threading.Lock()

    def say(message: str) -> None:
        with log_lock:
            log.append(message)

    def philosopher(pid: int) -> None:
        left, right = pid, (pid + 1) % count
        for _ in range(rounds):
            say(f"Philosopher {pid} is thinking.")
            say(f"Philosopher {pid} is hungry.")
            with pickup:
                forks[left].acquire()
                say(f"Philosopher {pid} picked the left fork: {left}")
                forks[right].acquire()
                say(f"Philosopher {pid} picked the right fork: {right}")
            say(f"Philosopher {pid} is eating.")
            forks[left].release()
            forks[right].release()
            say(f"Philosopher {pid} has finished eating and put down both forks.")

    _run_all([threading.Thread(target=philosopher, args=(i,)) for i in range(count)])
    return log


def run_readers_writers(num_readers: int, num_writers: int) -> list[str]:
    """Run reader and writer threads over a shared counter; return the event log."""
    if num_readers < 0 or num_writers < 0:
        raise ValueError("counts must not be negative")
    lock = ReadersWriterLock()
    shared = {"data": 0}
    log: list[str] = []
    log_lock = threading.Lock()

    def say(message: str) -> None:
        with log_lock:
            log.append(message)

    def reader(rid: int) -> None:
        lock.acquire_read()
        try:
            say(f"Reader {rid} is reading data: {shared['data']}")
        finally:
            lock.release_read()

    def writer(wid: int) -> None:
        lock.acquire_write()
        try:
            shared["data"] += 1
            say(f"Writer {wid} is writing data: {shared['data']}")
        finally:
            lock.release_write()

    threads = [threading.Thread(target=reader, args=(i,)) for i in range(1, num_readers + 1)]
    threads += [threading.Thread(target=writer, args=(i,)) for i in range(1, num_writers + 1)]
    _run_all(threads)
    return log