"""Tests for response capture and hex extraction."""

from __future__ import annotations

import pytest

from sam9boot.scanner import Response, capture_response, scan_hex

from monitor_sim import SimulatedMonitor, make_transport


def test_scan_extracts_marked_value() -> None:
    assert scan_hex(b"some text 0x1A2B more") == 0x1A2B


def test_burst_without_marker_is_responsive_without_value() -> None:
    response = Response.from_burst(b"\n\r>")
    assert response.count == 3
    assert response.responsive
    assert response.value is None
    assert not response.has_value


def test_empty_burst_is_unresponsive() -> None:
    response = Response.from_burst(b"")
    assert not response.responsive
    assert response.count == 0
    assert response.value is None


def test_true_zero_is_distinct_from_missing_marker() -> None:
    zero = Response.from_burst(b"0x00000000\n\r>")
    assert zero.has_value
    assert zero.value == 0


@pytest.mark.parametrize(
    "burst, expected",
    [
        (b"w300000,4#\n\r0xDEADBEEF\n\r>", 0xDEADBEEF),
        (b"00x12", 0x12),
        (b"0 x12", None),
        (b"0x", None),
        (b"0xzz", None),
        (b"0x 7f", 0x7F),
        (b"0x1ffffffff", 0xFFFFFFFF),
        (b"0x12 0x34", 0x12),
        (b"no marker here", None),
    ],
)
def test_scan_hex_matcher(burst: bytes, expected) -> None:
    assert scan_hex(burst) == expected


def test_capture_response_drains_one_burst() -> None:
    monitor = SimulatedMonitor()
    monitor.push(b"\n\r0x00000042\n\r>")
    response = capture_response(make_transport(monitor))
    assert response.raw == b"\n\r0x00000042\n\r>"
    assert response.value == 0x42
    assert not monitor.outbox


def test_capture_response_honours_limit() -> None:
    monitor = SimulatedMonitor()
    monitor.push(b"0123456789")
    response = capture_response(make_transport(monitor), limit=4)
    assert response.raw == b"0123"
    assert bytes(monitor.outbox) == b"456789"
