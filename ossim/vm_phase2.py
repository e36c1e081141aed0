"""A paged card-driven machine with 300 words of memory.

Each job gets a randomly placed page table; program cards and data pages
are placed in random free blocks of ten words. Time and line limits from
the ``$AMJ`` card are enforced and every job ends with a termination report.
"""

from __future__ import annotations

import argparse
import random
import re
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ossim.address_translation import _trunc_divmod
from ossim.vm_phase1 import DEFAULT_MAX_STEPS, _program_words

MEMORY_WORDS = 300
WORD_SIZE = 4
BLOCK_WORDS = 10
BLOCK_COUNT = MEMORY_WORDS // BLOCK_WORDS
CARD_SIZE = 40
VIRTUAL_WORDS = 100

SEPARATOR = "-----------------------------------------------------------------------------------"

ERRORS = (
    "No Error",
    "Out of Data",
    "Line Limit Exceeded",
    "Time Limit Exceeded",
    "Operation Code Error",
    "Operand Error",
    "Invalid Page Fault",
)

_OPCODES = ("GD", "PD", "LR", "SR", "CR", "BT")
_LINE_PIECE = re.compile(r"[^\n]*\n|[^\n]+")
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

Word = list[str]


def _split_cards(lines: Iterable[str]) -> Iterator[str]:
    """Cut input into the pieces a 40-character line reader would return."""
    for line in lines:
        for piece in _LINE_PIECE.findall(line):
            for start in range(0, len(piece), CARD_SIZE):
                yield piece[start : start + CARD_SIZE]


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _digits(number: int) -> list[str]:
    return [chr(number // 10 + 48), chr(number % 10 + 48)]


@dataclass
class ProcessControlBlock:
    """Job identity, its time and line limits, and the counters against them."""

    jid: int = 0
    ttl: int = 0
    tll: int = 0
    llc: int = 0
    ttc: int = 0


class Phase2Machine:
    """The paged machine: memory, registers, interrupts and the current job.

    Each line given to ``run`` is one card; a trailing newline is kept as
    part of the card, as it would be when read from a file.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_steps: Optional[int] = DEFAULT_MAX_STEPS,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.max_steps = max_steps
        self.messages: list[str] = []
        self.buffer = ""
        self._output: list[str] = []
        self._cards: list[str] = []
        self._pos = 0
        self._eof = False
        self._init()

    def _init(self) -> None:
        self.memory: list[Word] = [[" "] * WORD_SIZE for _ in range(MEMORY_WORDS)]
        self.ir: Word = [" "] * WORD_SIZE
        self.gr: Word = [" "] * WORD_SIZE
        self.pcb = ProcessControlBlock()
        self.ptr = 0
        self.ra = 0
        self.ic = 0
        self.si = 0
        self.ti = 0
        self.pi = 0
        self.toggle = 0

    # -- input -----------------------------------------------------------

    def _fgets(self) -> Optional[str]:
        if self._pos >= len(self._cards):
            self._eof = True
            return None
        card = self._cards[self._pos]
        self._pos += 1
        if self._pos == len(self._cards) and not card.endswith("\n"):
            self._eof = True
        return card

    # -- memory ----------------------------------------------------------

    def _word(self, index: int) -> Word:
        if not 0 <= index < MEMORY_WORDS:
            raise ValueError(f"memory address {index} out of range")
        return self.memory[index]

    def _block_free(self, block: int) -> bool:
        start = block * BLOCK_WORDS
        rows = self.memory[start : start + BLOCK_WORDS]
        return all(ch == " " for row in rows for ch in row)

    def _allocate(self) -> int:
        free = [b for b in range(BLOCK_COUNT) if self._block_free(b)]
        if not free:
            raise RuntimeError("no free memory block")
        return free[self.rng.randrange(len(free))]

    def _get_address(self) -> int:
        return (ord(self.ir[2]) - 48) * 10 + (ord(self.ir[3]) - 48)

    def _address_map(self, va: int) -> None:
        page, offset = _trunc_divmod(va, BLOCK_WORDS)
        if self._word(self.ptr + page)[0] == "*":
            self.pi = 3
            self._mos()
        if self.pi == 3:
            return
        entry = self._word(self.ptr + page)
        frame = (ord(entry[2]) - 48) * 10 + (ord(entry[3]) - 48)
        self.ra = frame * BLOCK_WORDS + offset

    # -- services --------------------------------------------------------

    def _read(self) -> None:
        self.si = 0
        self.pcb.ttc += 2
        if self._eof:
            return
        self.buffer = self._fgets() or ""
        if self.buffer.startswith("$END"):
            self._terminate(1)
            return
        if not self.buffer:
            return
        if not 0 <= self.ra < MEMORY_WORDS:
            return
        text = self.buffer[:CARD_SIZE].ljust(CARD_SIZE, "\0")
        for start in range(0, CARD_SIZE, WORD_SIZE):
            self._word(self.ra)[:] = list(text[start : start + WORD_SIZE])
            self.ra += 1

    def _write(self) -> None:
        self.si = 0
        address = self.ra
        if not 0 <= address < MEMORY_WORDS:
            return
        self.pcb.ttc += 1
        self.pcb.llc += 1
        if self.pcb.llc > self.pcb.tll:
            self._terminate(2)
            return
        chars: list[str] = []
        for index in range(address, address + BLOCK_WORDS):
            for ch in self._word(index):
                if ch == "\0":
                    break
                chars.append(ch)
        self._output.append("".join(chars))

    def _register_address(self, name: str) -> Optional[int]:
        address = self._get_address()
        if not 0 <= address < MEMORY_WORDS:
            self.messages.append(f"Error: Invalid memory address in {name}.")
            return None
        return address

    def _load_register(self) -> None:
        address = self._register_address("Load_register")
        if address is not None:
            self.gr = list(self.memory[address])

    def _store_register(self) -> None:
        address = self._register_address("Store_register")
        if address is not None:
            self.memory[address] = list(self.gr)

    def _compare_register(self) -> None:
        address = self._register_address("Compare_register")
        if address is not None:
            self.toggle = 1 if self.memory[address] == self.gr else 0

    def _branch_on_true(self) -> None:
        if self.toggle == 1:
            self.ic = self._get_address()

    def _terminate(self, first: Optional[int] = None, second: Optional[int] = None) -> None:
        normal = first is None and second is None
        lines = [
            SEPARATOR,
            "Program terminated normally" if normal else "Program terminated abnormally",
            "",
            f"Job ID: {self.pcb.jid}",
        ]
        lines += [f"Error: {ERRORS[code]}" for code in (first, second) if code is not None]
        lines += [
            f"IC: {self.ic}",
            f"TTC: {self.pcb.ttc}",
            f"LLC: {self.pcb.llc}",
            f"SI: {self.si}",
            f"TI: {self.ti}",
            f"PI: {self.pi}",
        ]
        self._output.append("\n".join(lines) + "\n")

    # -- master mode -----------------------------------------------------

    def _mos(self) -> None:
        if self.si == 1:
            if self.ti == 0 and self.pi == 0:
                self._read()
                self.si = 0
                return
            if self.ti == 2 and self.pi == 0:
                self._terminate(3)
                self.si = 0
                return
        elif self.si == 2:
            if self.ti == 0 and self.pi == 0:
                self._write()
                self.si = 0
                return
            if self.ti == 2 and self.pi == 0:
                self._write()
                self.si = 0
                self._terminate(3)
                return
        elif self.si == 3:
            if self.ti in (0, 2) and self.pi == 0:
                self._terminate()
                self.si = 0
                return

        if self.pi in (1, 2):
            code = 4 if self.pi == 1 else 5
            if self.ti == 0:
                self._terminate(code)
                return
            if self.ti == 2:
                self._terminate(3, code)
                return
        elif self.pi == 3:
            if self.ti == 0:
                self._page_fault()
                return
            if self.ti == 2:
                self._terminate(3)
                return

        if self.pi == 0 and self.si == 0 and self.ti == 2:
            self._terminate(3)

    def _page_fault(self) -> None:
        self.ra = self._get_address()
        op = "".join(self.ir[:2])
        page, _ = _trunc_divmod(self.ra, BLOCK_WORDS)
        if op in ("GD", "SR") and self._word(self.ptr + page)[0] == "*":
            block = self._allocate()
            self._word(self.ptr + page)[:] = ["0", "0"] + _digits(block)
            self._address_map(self._get_address())
            self.pi = 0
        else:
            self._terminate(6)

    # -- slave mode ------------------------------------------------------

    def _valid_opcode(self) -> bool:
        return "".join(self.ir[:2]) in _OPCODES or self.ir[0] == "H"

    def _fetch(self) -> None:
        self._address_map(self.ic)
        self.ir = list(self._word(self.ra))

    def _execute(self) -> None:
        steps = 0
        while self.ic < VIRTUAL_WORDS:
            steps += 1
            if self.max_steps is not None and steps > self.max_steps:
                raise RuntimeError("step limit exceeded")
            self._address_map(self.ic)
            if all(ch == " " for ch in self._word(self.ra)):
                self.ic += 1
                continue
            self.ir = list(self._word(self.ra))
            if not self._valid_opcode():
                self.pi = 1
                self._mos()
                return

            self.ic += 1
            self._fetch()
            if self.ir[0] in "0123456789":
                self.pi = 2
                self._mos()
                return
            self.ic -= 1
            self._fetch()

            if self.ir[0] != "H":
                self._address_map(self._get_address())
            if self.pi != 0:
                return
            self.ic += 1

            op = "".join(self.ir[:2])
            if op == "GD":
                self.si = 1
                self._mos()
            elif op == "PD":
                self.si = 2
                self._mos()
            elif op == "LR":
                self._load_register()
            elif op == "SR":
                self._store_register()
            elif op == "CR":
                self._compare_register()
            elif op == "BT":
                self._branch_on_true()
            elif self.ir[0] == "H":
                self.si = 3
                self._mos()
                return

            if self.pcb.ttc > self.pcb.ttl:
                self.ti = 2
                self._mos()
                return
            if self.pcb.llc > self.pcb.tll:
                return
            if self.buffer.startswith("$END"):
                return

    # -- loader ----------------------------------------------------------

    def _store_card(self, block: int, card: str) -> None:
        address = block * BLOCK_WORDS
        for word in _program_words(card):
            if address >= MEMORY_WORDS:
                break
            self.memory[address][: len(word)] = list(word)
            address += 1

    def run(self, lines: Iterable[str]) -> str:
        """Process a deck of cards and return the text written as output."""
        self.messages = []
        self._output = []
        self._cards = list(_split_cards(lines))
        self._pos = 0
        self._eof = False
        self.buffer = ""
        self._init()
        loading = False
        card_no = 0
        while (card := self._fgets()) is not None:
            if card.startswith("$AMJ"):
                self._init()
                self.pcb.jid = _atoi(card[4:8])
                self.pcb.ttl = _atoi(card[8:12])
                self.pcb.tll = _atoi(card[12:16])
                self.ptr = BLOCK_WORDS * self._allocate()
                for row in self.memory[self.ptr : self.ptr + BLOCK_WORDS]:
                    row[:] = ["*"] * WORD_SIZE
                card_no = self.ptr
                loading = True
            elif card.startswith("$DTA"):
                loading = False
                self.ic = 0
                self._execute()
            elif card.startswith("$END"):
                continue
            elif loading:
                block = self._allocate()
                self.memory[card_no] = ["0", "0"] + _digits(block)
                card_no += 1
                if card_no == self.ptr + BLOCK_WORDS:
                    card_no = self.ptr
                self._store_card(block, card)
        return "".join(self._output)

    def memory_dump(self) -> str:
        """Return every memory word, one per line, under a heading."""
        rows = "".join(f"[{i}] {''.join(word)}\n" for i, word in enumerate(self.memory))
        return "Memory Dump:\n" + rows


def main(argv: Optional[list[str]] = None) -> int:
    """Run a card deck from a file, write the job output and dump memory."""
    parser = argparse.ArgumentParser(
        prog="ossim-phase2", description="Run jobs on the paged card-driven machine."
    )
    parser.add_argument("input", nargs="?", default="input.txt")
    parser.add_argument("-o", "--output", default="output.txt")
    parser.add_argument("--seed", type=int, default=None, help="seed for block allocation")
    args = parser.parse_args(argv)
    try:
        with open(args.input, encoding="utf-8") as handle:
            lines = handle.readlines()
    except OSError:
        print("Failure: File not found!")
        return 1

    machine = Phase2Machine(rng=random.Random(args.seed))
    try:
        output = machine.run(lines)
    except (ValueError, RuntimeError) as exc:
        for message in machine.messages:
            print(message)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for message in machine.messages:
        print(message)
    with open(args.output, "w", encoding="utf-8") as handle:
        handle.write(output)
    print("\n" + machine.memory_dump(), end="")
    return 0