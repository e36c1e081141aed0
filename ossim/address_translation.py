"""Logical-to-physical address translation with paging and segmentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class TranslationError(ValueError):
    """A logical address that cannot be mapped to physical memory."""


def _trunc_divmod(a: int, b: int) -> tuple[int, int]:
    """Division truncating toward zero, with the remainder taking the dividend's sign."""
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return quotient, a - quotient * b


@dataclass(frozen=True)
class PageTranslation:
    """The steps of translating an address through a page table."""

    logical_address: int
    page_size: int
    page_number: int
    offset: int
    frame: int
    physical_address: int


@dataclass(frozen=True)
class Segment:
    """A segment table entry."""

    base: int
    limit: int


@dataclass(frozen=True)
class SegmentTranslation:
    """The steps of translating a (segment, offset) address."""

    segment: int
    offset: int
    base: int
    limit: int
    physical_address: int


def translate_paged(
    logical_address: int, page_size: int, page_table: Sequence[int]
) -> PageTranslation:
    """Translate a logical address using a page table of frame numbers."""
    if page_size <= 0:
        raise ValueError("page size must be positive")
    page_number, offset = _trunc_divmod(logical_address, page_size)
    if not 0 <= page_number < len(page_table):
        raise TranslationError(f"Page number {page_number} out of range!")
    frame = page_table[page_number]
    return PageTranslation(
        logical_address=logical_address,
        page_size=page_size,
        page_number=page_number,
        offset=offset,
        frame=frame,
        physical_address=frame * page_size + offset,
    )


def translate_segmented(
    segment: int, offset: int, segments: Sequence[Segment]
) -> SegmentTranslation:
    """Translate a segment number and offset using a segment table."""
    if not 0 <= segment < len(segments):
        raise TranslationError(f"Segment number {segment} out of range!")
    entry = segments[segment]
    if not 0 <= offset < entry.limit:
        raise TranslationError(
            f"Offset {offset} exceeds segment limit {entry.limit}! Segmentation fault."
        )
    return SegmentTranslation(
        segment=segment,
        offset=offset,
        base=entry.base,
        limit=entry.limit,
        physical_address=entry.base + offset,
    )