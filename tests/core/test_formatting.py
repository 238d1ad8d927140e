"""Tests for core.formatting utilities."""

from __future__ import annotations

import pytest

from evtrace.core.formatting import (
    format_elapsed,
    format_ms,
    format_offset,
    iso_time,
    pad_hostname,
    pluralize,
    shorten_hostname,
)


class TestShortenHostname:
    def test_uuid_shortened(self) -> None:
        assert shorten_hostname("0b3a0e6c-3e2b-4a45-8a5c-6c2f1c7e8b9d") == "0b3a0e6c"

    def test_uppercase_uuid_shortened(self) -> None:
        assert shorten_hostname("0B3A0E6C-3E2B-4A45-8A5C-6C2F1C7E8B9D") == "0B3A0E6C"

    @pytest.mark.parametrize("hostname", ["headnode", "cn-1", "0b3a0e6c-3e2b"])
    def test_non_uuid_unchanged(self, hostname: str) -> None:
        assert shorten_hostname(hostname) == hostname

    def test_pad(self) -> None:
        assert pad_hostname("hn", 6) == "hn    "

    def test_pad_never_truncates(self) -> None:
        assert pad_hostname("a-long-hostname", 4) == "a-long-hostname"


class TestDurations:
    def test_format_ms_whole(self) -> None:
        assert format_ms(20.0) == "20ms"
        assert format_ms(7) == "7ms"

    def test_format_ms_fraction(self) -> None:
        assert format_ms(1.666) == "1.67ms"

    def test_format_elapsed_right_justified(self) -> None:
        assert format_elapsed(123) == "     123ms"
        assert format_elapsed(-5, width=4) == "  -5ms"

    def test_format_offset(self) -> None:
        assert format_offset(120) == "+120ms"
        assert format_offset(0) == "+0ms"
        assert format_offset(-3) == "-3ms"


class TestIsoTime:
    def test_epoch_ms(self) -> None:
        assert iso_time(1420070400000) == "2015-01-01T00:00:00.000Z"
        assert iso_time(1420070400123) == "2015-01-01T00:00:00.123Z"


class TestPluralize:
    def test_singular(self) -> None:
        assert pluralize(1, "request") == "1 request"

    def test_plural(self) -> None:
        assert pluralize(3, "request") == "3 requests"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "entry", "entries") == "2 entries"
