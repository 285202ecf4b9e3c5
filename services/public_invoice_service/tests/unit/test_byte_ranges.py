"""Unit tests for single byte-range resolution."""

from __future__ import annotations

import pytest

from services.public_invoice_service.portal.byte_ranges import (
    ByteRange,
    UnsatisfiableRange,
    parse_byte_range,
)


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("bytes=0-99", ByteRange(0, 99)),
        ("bytes=100-", ByteRange(100, 999)),
        ("bytes=-100", ByteRange(900, 999)),
        ("bytes=-5000", ByteRange(0, 999)),
        ("bytes=990-2000", ByteRange(990, 999)),
        ("BYTES= 10-19", ByteRange(10, 19)),
    ],
)
def test_single_ranges(header: str, expected: ByteRange) -> None:
    assert parse_byte_range(header, 1000) == expected


@pytest.mark.parametrize(
    "header",
    [None, "", "bytes=0-9,20-29", "items=0-9", "bytes=abc", "bytes=9-0", "bytes=-", "bytes"],
)
def test_unusable_headers_mean_full_document(header: str | None) -> None:
    assert parse_byte_range(header, 1000) is None


@pytest.mark.parametrize("header", ["bytes=1000-", "bytes=5000-6000", "bytes=-0"])
def test_unsatisfiable_ranges(header: str) -> None:
    with pytest.raises(UnsatisfiableRange) as exc_info:
        parse_byte_range(header, 1000)

    assert exc_info.value.content_range == "bytes */1000"


def test_byte_range_length_and_content_range() -> None:
    byte_range = ByteRange(0, 99)

    assert byte_range.length == 100
    assert byte_range.content_range(1000) == "bytes 0-99/1000"


@pytest.mark.parametrize("header", ["bytes=100-", "bytes=1000-", "bytes=1000-2000"])
def test_range_starting_past_short_document_is_unsatisfiable(header: str) -> None:
    with pytest.raises(UnsatisfiableRange) as exc_info:
        parse_byte_range(header, 100)

    assert exc_info.value.content_range == "bytes */100"


def test_reversed_range_is_ignored_even_past_end() -> None:
    assert parse_byte_range("bytes=150-120", 100) is None
