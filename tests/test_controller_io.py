import pytest

from psxcore.controller_io import ControllerIO

BASE = 0x1F801000


def _stat(cio):
    value = 0
    for index in range(4):
        value |= (cio.read_byte(BASE + 0x44 + index) & 0xFF) << (8 * index)
    return value


def _timer(cio):
    return _stat(cio) >> 11


def test_fresh_stat_reports_ready_bits():
    cio = ControllerIO()
    assert cio.read_byte(BASE + 0x44) == 0x7


def test_empty_rx_fifo_reads_zero():
    cio = ControllerIO()
    assert cio.read_byte(BASE + 0x40) == 0


def test_unknown_register_reads_zero():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x50, 0x42)
    assert cio.read_byte(BASE + 0x50) == 0


@pytest.mark.parametrize("low_offset", [0x48, 0x4A, 0x4E])
def test_halfword_registers_round_trip(low_offset):
    cio = ControllerIO()
    cio.write_byte(BASE + low_offset, 0x12)
    cio.write_byte(BASE + low_offset + 1, 0x34)
    assert cio.read_byte(BASE + low_offset) == 0x12
    assert cio.read_byte(BASE + low_offset + 1) == 0x34


def test_high_byte_write_keeps_low_byte():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x4A, 0x21)
    cio.write_byte(BASE + 0x4B, 0x43)
    cio.write_byte(BASE + 0x4B, 0x65)
    assert cio.read_byte(BASE + 0x4A) == 0x21
    assert cio.read_byte(BASE + 0x4B) == 0x65


def test_reads_are_signed_bytes():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x48, -16)
    assert cio.read_byte(BASE + 0x48) == -16
    cio.write_byte(BASE + 0x48, 0xF0)
    assert cio.read_byte(BASE + 0x48) == -16


def test_only_low_address_byte_is_decoded():
    cio = ControllerIO()
    cio.write_byte(0x48, 0x2A)
    assert cio.read_byte(BASE + 0x48) == 0x2A
    assert cio.read_byte(0xABCD48) == 0x2A


def test_baud_write_loads_timer():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x48, 2)
    cio.write_byte(BASE + 0x4E, 16)
    assert _timer(cio) == 16


def test_timer_counts_down_and_reloads():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x48, 2)
    cio.write_byte(BASE + 0x4E, 16)
    cio.append_sync_cycles(5)
    assert _timer(cio) == 11
    cio.append_sync_cycles(100)
    assert _timer(cio) == 16


def test_sync_cycles_accumulate_until_access():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x48, 2)
    cio.write_byte(BASE + 0x4E, 40)
    cio.append_sync_cycles(3)
    cio.append_sync_cycles(7)
    first = _timer(cio)
    assert first == 40 - 3 - 7
    assert _timer(cio) == first


def test_timer_update_preserves_low_stat_bits():
    cio = ControllerIO()
    cio.write_byte(BASE + 0x48, 2)
    cio.write_byte(BASE + 0x4E, 16)
    low_before = _stat(cio) & 0x7FF
    cio.append_sync_cycles(4)
    assert _stat(cio) & 0x7FF == low_before