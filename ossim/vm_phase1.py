"""A card-driven virtual machine with 100 four-character words of memory.

Jobs are read from a deck of cards: ``$AMJ`` starts a job, program cards
are loaded into memory, ``$DTA`` starts execution (data cards follow and
are consumed by ``GD``), and ``$END`` closes the job.
"""

from __future__ import annotations

import argparse
import re
import sys
from typing import Iterable, Iterator, Optional

EMPTY = "\0"
MEMORY_WORDS = 100
WORD_SIZE = 4
BUFFER_SIZE = 40
WORDS_PER_BLOCK = 10
DEFAULT_MAX_STEPS = 100_000

_STOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

Word = list[str]


def _blank_memory() -> list[Word]:
    return [[EMPTY] * WORD_SIZE for _ in range(MEMORY_WORDS)]


def _card(line: str) -> str:
    """Strip the line ending and keep what fits in the card buffer."""
    return line.rstrip("\r\n")[:BUFFER_SIZE]


def _program_words(card: str) -> Iterator[str]:
    """Split a program card into words; an ``H`` always ends its word."""
    word = ""
    for ch in card:
        word += ch
        if ch == "H" or len(word) == WORD_SIZE:
            yield word
            word = ""
    if word:
        yield word


def _store_program_card(memory: list[Word], start: int, card: str) -> int:
    """Load a program card at ``start`` and return the next free word."""
    ic = start
    for word in _program_words(card):
        if ic >= MEMORY_WORDS:
            raise ValueError("program does not fit in memory")
        if word.endswith("H"):
            memory[ic][: len(word)] = list(word)
        else:
            memory[ic] = list(word.ljust(WORD_SIZE, EMPTY))
        ic += 1
    return ic


def _word_text(word: Word) -> str:
    return "".join(word)


def _stoi(text: str) -> int:
    """Parse a leading integer the way the machine's arithmetic does."""
    match = _STOI.match(text.split(EMPTY, 1)[0])
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return int(match.group(1))


class Phase1Machine:
    """The machine: memory, register ``R``, toggle ``C`` and counter ``IC``.

    With ``arithmetic`` set, the ``AD`` instruction adds the memory word
    to the register; otherwise ``AD`` is ignored like any unknown opcode.
    """

    def __init__(
        self, arithmetic: bool = False, max_steps: Optional[int] = DEFAULT_MAX_STEPS
    ) -> None:
        self.arithmetic = arithmetic
        self.max_steps = max_steps
        self.messages: list[str] = []
        self._cards: Iterator[str] = iter(())
        self._output: list[str] = []
        self._reset()

    def _reset(self) -> None:
        self.memory = _blank_memory()
        self.ir: Word = [EMPTY] * WORD_SIZE
        self.register: Word = [EMPTY] * WORD_SIZE
        self.ic = 0
        self.toggle = True

    def run(self, lines: Iterable[str]) -> str:
        """Process a deck of cards and return the text written as output."""
        self.messages = []
        self._output = []
        self._reset()
        self._cards = (_card(line) for line in lines)
        for card in self._cards:
            if card.startswith("$AMJ"):
                self._reset()
                self.messages.append("New Job started")
            elif card.startswith("$DTA"):
                self.messages.append("Data card loading")
                self.ic = 0
                self._execute()
            elif card.startswith("$END"):
                self.messages.append("END of Job")
            else:
                self.messages.append("Program Card loading")
                self.ic = _store_program_card(self.memory, self.ic, card)
        return "".join(self._output)

    def _block(self) -> int:
        digit = self.ir[2]
        if not digit.isdigit() or not digit.isascii():
            raise ValueError(f"invalid operand in {_word_text(self.ir)!r}")
        return int(digit) * WORDS_PER_BLOCK

    def _address(self) -> int:
        operand = "".join(self.ir[2:4])
        if not (operand.isascii() and operand.isdigit()):
            raise ValueError(f"invalid operand in {_word_text(self.ir)!r}")
        return int(operand)

    def _read(self) -> None:
        self.messages.append("Read function called")
        data = next(self._cards, "")
        address = self._block()
        for start in range(0, len(data), WORD_SIZE):
            chunk = data[start : start + WORD_SIZE]
            self.memory[address] = list(chunk.ljust(WORD_SIZE, EMPTY))
            address += 1

    def _write(self) -> None:
        self.messages.append("Write function called")
        start = self._block()
        text = "".join(
            ch
            for word in self.memory[start : start + WORDS_PER_BLOCK]
            for ch in word
            if ch != EMPTY
        )
        self._output.append(text + "\n")

    def _terminate(self) -> None:
        self.messages.append("Terminate called")
        self._output.append("\n\n")

    def _add(self) -> None:
        total = _stoi(_word_text(self.register)) + _stoi(
            _word_text(self.memory[self._address()])
        )
        self.register = list(str(total)[:WORD_SIZE].ljust(WORD_SIZE, " "))

    def _execute(self) -> None:
        steps = 0
        while self.ic < MEMORY_WORDS - 1 and self.memory[self.ic][0] != EMPTY:
            steps += 1
            if self.max_steps is not None and steps > self.max_steps:
                raise RuntimeError("step limit exceeded")
            self.ir = list(self.memory[self.ic])
            self.ic += 1
            op = "".join(self.ir[:2])
            if op == "GD":
                self._read()
            elif op == "PD":
                self._write()
            elif self.ir[0] == "H":
                self._terminate()
                return
            elif op == "LR":
                self.register = list(self.memory[self._address()])
            elif op == "SR":
                self.memory[self._address()] = list(self.register)
            elif op == "CR":
                self.toggle = self.memory[self._address()] == self.register
            elif op == "BT":
                if self.toggle:
                    self.ic = self._address()
            elif op == "AD" and self.arithmetic:
                self._add()


def load_cards(lines: Iterable[str]) -> list[tuple[str, ...]]:
    """Load the program cards of each job and return one memory image per job.

    Control cards are recognised but nothing is executed; every other card,
    data cards included, is loaded as program text. The load position carries
    on from one job to the next.
    """
    images: list[list[Word]] = []
    ic = 0
    for line in lines:
        card = _card(line)
        if card.startswith("$AMJ"):
            images.append(_blank_memory())
        elif card.startswith("$DTA") or card.startswith("$END"):
            continue
        else:
            if not images:
                images.append(_blank_memory())
            ic = _store_program_card(images[-1], ic, card)
    return [tuple(_word_text(word) for word in memory) for memory in images]


def main(argv: Optional[list[str]] = None) -> int:
    """Run a card deck from a file, appending the job output to a file."""
    parser = argparse.ArgumentParser(
        prog="ossim-phase1", description="Run jobs on the card-driven machine."
    )
    parser.add_argument("input", nargs="?", default="input.txt")
    parser.add_argument("-o", "--output", default="output.txt")
    parser.add_argument(
        "--arithmetic", action="store_true", help="enable the AD instruction"
    )
    parser.add_argument(
        "--load-only", action="store_true", help="only load cards and dump memory"
    )
    args = parser.parse_args(argv)
    try:
        with open(args.input, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError:
        print("Can't open input file", file=sys.stderr)
        return 1

    if args.load_only:
        try:
            images = load_cards(lines)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        for number, image in enumerate(images, 1):
            print(f"Job {number}")
            for index, word in enumerate(image):
                print(f"M[{index}]:{word.replace(EMPTY, ' ')}")
        return 0

    machine = Phase1Machine(arithmetic=args.arithmetic)
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