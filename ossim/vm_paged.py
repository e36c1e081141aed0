"""A paged card-driven machine that allocates data pages on a valid page fault.

Memory holds 300 four-character words in 30 frames of ten words. Each job
gets a page table in a random frame; every program card goes to a fresh
random frame. ``GD`` and ``SR`` may touch a page that does not exist yet,
which allocates it. Other references to a missing page end the job.
"""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator, Optional

from ossim.vm_phase1 import DEFAULT_MAX_STEPS, _program_words, _stoi

MEMORY_WORDS = 300
WORD_SIZE = 4
PAGE_WORDS = 10
FRAME_COUNT = MEMORY_WORDS // PAGE_WORDS
CARD_SIZE = 40
VIRTUAL_WORDS = 100
EMPTY = "\0"

_DIGITS = "0123456789"

_MESSAGES = {
    0: "No Error: Program executed successfully",
    1: "Error: Out of Data",
    2: "Error: Line Limit Exceeded",
    4: "Error: Operation Code Error",
    5: "Error: Operand Error",
    6: "Error: Invalid Page Fault",
}

_COSTS = {"GD": 2, "PD": 1, "LR": 1, "SR": 2, "CR": 1, "BT": 1}

Word = list[str]


def _field(card: str, start: int) -> int:
    """Read a four-digit header field by positional digit arithmetic."""
    return sum(
        (ord(ch) - 48) * weight
        for ch, weight in zip(card[start : start + 4], (1000, 100, 10, 1))
    )


def _frame_digits(frame: int) -> list[str]:
    return [chr(48 + frame // 10), chr(48 + frame % 10)]


@dataclass
class JobControlBlock:
    """Job identity, its time and line limits, and the counters against them."""

    job_id: int = 0
    ttl: int = 0
    tll: int = 0
    ttc: int = 0
    llc: int = 0


class PagedMachine:
    """The paged machine: memory, registers, interrupts and the current job."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_steps: Optional[int] = DEFAULT_MAX_STEPS,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.max_steps = max_steps
        self.messages: list[str] = []
        self.ra = 0
        self._output: list[str] = []
        self._cards: Iterator[str] = iter(())
        self._init()

    def _init(self) -> None:
        self.memory: list[Word] = [[EMPTY] * WORD_SIZE for _ in range(MEMORY_WORDS)]
        self.ir: Word = [EMPTY] * WORD_SIZE
        self.register: Word = [EMPTY] * WORD_SIZE
        self.toggle = True
        self.ic = 0
        self.si = 0
        self.pi = 0
        self.ti = 0
        self.pcb = JobControlBlock()
        self.ptr = -1
        self.pte = -1
        self.page_no = -1
        self._used = [False] * FRAME_COUNT
        self._table_next = 0
        self._page_fault_valid = False
        self.terminated = False

    # -- memory ----------------------------------------------------------

    def _word(self, index: int) -> Word:
        if not 0 <= index < MEMORY_WORDS:
            raise ValueError(f"memory address {index} out of range")
        return self.memory[index]

    def _allocate(self) -> int:
        if all(self._used):
            raise RuntimeError("no free memory frame")
        while True:
            frame = self.rng.randrange(FRAME_COUNT)
            if not self._used[frame]:
                self._used[frame] = True
                return frame

    def _address_map(self, va: int) -> int:
        if 0 <= va < VIRTUAL_WORDS:
            self.pte = self.ptr + va // PAGE_WORDS
            entry = self._word(self.pte)
            if entry[0] == "*":
                self.pi = 3
                self._mos()
            else:
                frame = _stoi("".join(entry[:2]))
                self.ra = frame * PAGE_WORDS + va % PAGE_WORDS
                return self.ra
        else:
            self.pi = 2
            self._mos()
        return self.page_no * PAGE_WORDS

    # -- master mode -----------------------------------------------------

    def _mos(self) -> None:
        ti, si, pi = self.ti, self.si, self.pi
        if ti == 0 and si == 1:
            self._read()
        elif ti == 0 and si == 2:
            self._write()
        elif ti == 0 and si == 3:
            self._terminate(0)
        elif ti == 2 and si == 1:
            self._terminate(3)
        elif ti == 2 and si == 2:
            self._write()
            self._terminate(3)
        elif ti == 2 and si == 3:
            self._terminate(0)
        elif ti == 0 and pi == 1:
            self._terminate(4)
        elif ti == 0 and pi == 2:
            self._terminate(5)
        elif ti == 0 and pi == 3:
            self._page_fault()
        elif ti == 2 and pi in (1, 2, 3):
            self._terminate(3)

    def _page_fault(self) -> None:
        if not self._page_fault_valid:
            self._terminate(6)
            return
        self.page_no = self._allocate()
        self._word(self.pte)[:2] = _frame_digits(self.page_no)
        self._table_next += 1
        self.pi = 0
        self.messages.append(f"Valid Page Fault:   Allocated Page Number: {self.page_no}")

    def _read(self) -> None:
        self.messages.append("Read function called")
        data = next(self._cards, "")
        if data.startswith("$END"):
            self._terminate(1)
            return
        data = data[:CARD_SIZE]
        address, end = self.ra, self.ra + PAGE_WORDS
        for start in range(0, len(data), WORD_SIZE):
            if address >= end:
                break
            chunk = data[start : start + WORD_SIZE]
            self._word(address)[:] = list(chunk.ljust(WORD_SIZE, EMPTY))
            address += 1
        self.si = 0

    def _write(self) -> None:
        self.messages.append("Write function called")
        self.pcb.llc += 1
        if self.pcb.llc > self.pcb.tll:
            self._terminate(2)
            return
        chars: list[str] = []
        for index in range(self.ra, self.ra + PAGE_WORDS):
            word = self._word(index)
            if EMPTY in word:
                chars.extend(word[: word.index(EMPTY)])
                break
            chars.extend(word)
        self.si = 0
        self._output.append("".join(chars) + "\n")

    def _terminate(self, code: int) -> None:
        self.terminated = True
        lines = [""]
        if code == 3:
            if self.ti == 2 and self.pi == 1:
                lines.append("Error: Operation Code Error")
            if self.ti == 2 and self.pi == 2:
                lines.append("Error: Operand Error")
            lines.append("Error: Time Limit Exceeded")
        else:
            lines.append(_MESSAGES[code])
        ir = "".join(ch for ch in self.ir if ch != EMPTY)
        lines.append(
            f"Job Id :{self.pcb.job_id}  IC: {self.ic}  IR: {ir}  "
            f"SI: {self.si}  PI: {self.pi}  TI: {self.ti}  "
            f"TLL: {self.pcb.tll}  LLC: {self.pcb.llc}  "
            f"TTL: {self.pcb.ttl}  TTC: {self.pcb.ttc}  "
        )
        self._output.append("\n".join(lines) + "\n\n\n")
        self.si = self.pi = self.ti = 0

    # -- slave mode ------------------------------------------------------

    def _simulate(self) -> None:
        op = "".join(self.ir[:2])
        if op in _COSTS:
            self.pcb.ttc += _COSTS[op]
        elif self.ir[0] == "H":
            self.pcb.ttc += 1
        if self.pcb.ttc >= self.pcb.ttl:
            self.ti = 2
            self._mos()

    def _operand(self) -> Optional[int]:
        tens, units = self.ir[2], self.ir[3]
        if tens in _DIGITS and units in _DIGITS:
            return int(tens + units)
        return None

    def _map_operand(self, fault_allowed: bool) -> bool:
        """Validate the operand and map it; report whether it was valid."""
        self._simulate()
        self._page_fault_valid = fault_allowed
        operand = self._operand()
        if operand is None:
            self.pi = 2
            self._mos()
            return False
        self.ra = self._address_map(operand)
        return True

    def _execute(self) -> None:
        steps = 0
        while not self.terminated:
            steps += 1
            if self.max_steps is not None and steps > self.max_steps:
                raise RuntimeError("step limit exceeded")
            self.ra = self._address_map(self.ic)
            if self.pi != 0:
                return
            self.ir = list(self._word(self.ra))
            self.ic += 1
            op = "".join(self.ir[:2])

            if op == "GD":
                if self._map_operand(True):
                    self.si = 1
                    self._mos()
            elif op == "PD":
                if self._map_operand(False):
                    self.si = 2
                    self._mos()
            elif self.ir[0] == "H" and self.ir[1] == EMPTY:
                self._simulate()
                self.si = 3
                self._mos()
                return
            elif op == "LR":
                if self._map_operand(False):
                    self.register = list(self._word(self.ra))
            elif op == "SR":
                if self._map_operand(True):
                    self._word(self.ra)[:] = list(self.register)
            elif op == "CR":
                if self._map_operand(False):
                    self.toggle = self._word(self.ra) == self.register
            elif op == "BT":
                self._simulate()
                self._page_fault_valid = False
                operand = self._operand()
                if operand is None:
                    self.pi = 2
                    self._mos()
                elif self.toggle:
                    self.ic = operand
            else:
                self.pi = 1
                self.si = 0
                self._mos()

    # -- loader ----------------------------------------------------------

    def _start_job(self, card: str) -> None:
        self._init()
        self.messages.append("New Job started")
        if len(card) < 16:
            raise ValueError(f"job card too short: {card!r}")
        self.pcb.job_id = _field(card, 4)
        self.pcb.ttl = _field(card, 8)
        self.pcb.tll = _field(card, 12)
        self.ptr = self._allocate() * PAGE_WORDS
        for row in self.memory[self.ptr : self.ptr + PAGE_WORDS]:
            row[:] = ["*"] * WORD_SIZE
        self.messages += [
            "",
            f"Allocated Page is for Page Table: {self.ptr // PAGE_WORDS}",
            f"jobID: {self.pcb.job_id}",
            f"TTL: {self.pcb.ttl}",
            f"TLL: {self.pcb.tll}",
        ]

    def _load_program_card(self, card: str) -> None:
        self.page_no = self._allocate()
        self._word(self.ptr + self._table_next)[:2] = _frame_digits(self.page_no)
        self._table_next += 1
        self.messages.append("Program Card loading")
        self.ic = self.page_no * PAGE_WORDS
        for word in islice(_program_words(card[:CARD_SIZE]), PAGE_WORDS):
            self.memory[self.ic] = list(word.ljust(WORD_SIZE, EMPTY))
            self.ic += 1

    def run(self, lines: Iterable[str]) -> str:
        """Process a deck of cards and return the text written as output."""
        self.messages = []
        self._output = []
        self._init()
        self._cards = (line.rstrip("\r\n") for line in lines)
        for card in self._cards:
            if card.startswith("$AMJ"):
                self._start_job(card)
            elif card.startswith("$DTA"):
                self.messages.append("Data card loading")
                self.ic = 0
                self._execute()
            elif card.startswith("$END"):
                self.messages.append("END of Job")
            else:
                self._load_program_card(card)
        return "".join(self._output)


def main(argv: Optional[list[str]] = None) -> int:
    """Run a card deck from a file, appending the job output to a file."""
    parser = argparse.ArgumentParser(
        prog="ossim-paged", description="Run jobs on the demand-paged card machine."
    )
    parser.add_argument("input", nargs="?", default="input.txt")
    parser.add_argument("-o", "--output", default="output.txt")
    parser.add_argument("--seed", type=int, default=None, help="seed for frame allocation")
    args = parser.parse_args(argv)
    try:
        with open(args.input, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError:
        print("Can't open input file", file=sys.stderr)
        return 1

    machine = PagedMachine(rng=random.Random(args.seed))
    try:
        output = machine.run(lines)
    except (ValueError, RuntimeError) as exc:
        for message in machine.messages:
            print(message)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for message in machine.messages:
        print(message)
    with open(args.output, "a", encoding="utf-8") as handle:
        handle.write(output)
    return 0