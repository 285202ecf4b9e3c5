"""Single byte-range resolution for documents of known length."""

from __future__ import annotations

from dataclasses import dataclass


class UnsatisfiableRange(Exception):
    """The requested range starts at or beyond the end of the document."""

    def __init__(self, total: int) -> None:
        super().__init__(f"Range not satisfiable for length {total}")
        self.total = total

    @property
    def content_range(self) -> str:
        return f"bytes */{self.total}"


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte range ``start..end``."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total: int) -> str:
        return f"bytes {self.start}-{self.end}/{total}"


def parse_byte_range(header: str | None, total: int) -> ByteRange | None:
    """Resolve a ``Range`` header against a document of ``total`` bytes.

    Only a single ``bytes`` range is honoured. Absent, malformed and
    multi-range headers return None, meaning the full document is served.

    Raises:
        UnsatisfiableRange: When the range selects no byte of the document
    """
    if not header:
        return None

    unit, _, range_set = header.partition("=")
    if unit.strip().lower() != "bytes" or "," in range_set:
        return None

    first, dash, last = range_set.strip().partition("-")
    if not dash or not (first.isdigit() or last.isdigit()):
        return None
    if (first and not first.isdigit()) or (last and not last.isdigit()):
        return None

    if not first:
        # Suffix range: the final N bytes
        suffix = int(last)
        if suffix == 0 or total == 0:
            raise UnsatisfiableRange(total)
        return ByteRange(start=max(total - suffix, 0), end=total - 1)

    start = int(first)
    if last and int(last) < start:
        return None
    if start >= total:
        raise UnsatisfiableRange(total)
    end = int(last) if last else total - 1
    return ByteRange(start=start, end=min(end, total - 1))
