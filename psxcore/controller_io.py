"""The controller and memory-card serial port registers."""

from __future__ import annotations

_WORD_MASK = 0xFFFFFFFF
_TIMER_MASK = 0x1FFFFF
_TIMER_SHIFT = 11
_STAT_LOW_MASK = 0x7FF
_STAT_READY_BITS = 0x7

JOY_RX_DATA = 0x40
JOY_TX_DATA = 0x40
JOY_STAT = 0x44
JOY_MODE = 0x48
JOY_CTRL = 0x4A
JOY_BAUD = 0x4E


def _to_signed(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _replace_byte(register: int, high: bool, value: int) -> int:
    """Replace the low or high byte of a 16-bit register."""
    value &= 0xFF
    if high:
        return (value << 8) | (register & 0xFF)
    return (register & 0xFF00) | value


class ControllerIO:
    """Byte-wide access to the JOY_* registers, with a baud rate timer.

    Addresses are decoded by their least significant byte only. Reads return
    signed 8-bit values; written values are taken modulo 256.
    """

    def __init__(self) -> None:
        self._rx_fifo: list[int] = []
        self.tx_data = 0
        self.baud = 0
        self.stat = 0
        self.mode = 0
        self.ctrl = 0
        self._pending_cycles = 0

    def append_sync_cycles(self, cycles: int) -> None:
        """Add cycles that the baud rate timer has to catch up on."""
        self._pending_cycles += cycles

    def read_byte(self, address: int) -> int:
        """Read one byte of a register, as a signed 8-bit value."""
        self._update_baud_timer()
        offset = address & 0xFF

        if offset == JOY_RX_DATA:
            return _to_signed(self._rx_fifo.pop(0)) if self._rx_fifo else 0
        if JOY_STAT <= offset <= JOY_STAT + 3:
            if offset == JOY_STAT:
                self.stat |= _STAT_READY_BITS
            return _to_signed(self.stat >> (8 * (offset - JOY_STAT)))
        halfwords = {
            JOY_MODE: self.mode,
            JOY_CTRL: self.ctrl,
            JOY_BAUD: self.baud,
        }
        base = offset & ~1
        if base in halfwords:
            return _to_signed(halfwords[base] >> (8 * (offset & 1)))
        return 0

    def write_byte(self, address: int, value: int) -> None:
        """Write one byte of a register."""
        self._update_baud_timer()
        offset = address & 0xFF
        high = bool(offset & 1)

        if offset == JOY_TX_DATA:
            self.tx_data = value & 0xFF
        elif offset in (JOY_MODE, JOY_MODE + 1):
            self.mode = _replace_byte(self.mode, high, value)
        elif offset in (JOY_CTRL, JOY_CTRL + 1):
            self.ctrl = _replace_byte(self.ctrl, high, value)
        elif offset in (JOY_BAUD, JOY_BAUD + 1):
            self.baud = _replace_byte(self.baud, high, value)
            self._set_timer(self._reload_value())

    @property
    def baud_timer(self) -> int:
        """The current baud rate timer value held in the upper stat bits."""
        return (self.stat >> _TIMER_SHIFT) & _TIMER_MASK

    def _reload_value(self) -> int:
        return self.baud * (self.mode & 0x3) // 2

    def _set_timer(self, timer: int) -> None:
        self.stat = (
            (timer << _TIMER_SHIFT) | (self.stat & _STAT_LOW_MASK)
        ) & _WORD_MASK

    def _update_baud_timer(self) -> None:
        timer = self.baud_timer - self._pending_cycles
        self._pending_cycles = 0
        if timer < 0:
            timer = self._reload_value()
        self._set_timer(timer)