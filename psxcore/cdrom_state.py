"""Status, mode and addressing helpers for the CD-ROM controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from psxcore.cue import MINUTE_BYTES, SECOND_BYTES, SECTOR_BYTES

WHOLE_SECTOR_SIZE = 0x924
DATA_SECTOR_SIZE = 0x800
WHOLE_SECTOR_SKIP = 12
DATA_SECTOR_SKIP = 24


def _signed_byte(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


@runtime_checkable
class InterruptSink(Protocol):
    """What the drive needs from the system to raise CD-ROM interrupts."""

    def set_cdrom_interrupt_enabled(self, enabled: bool) -> None:
        """Record whether the pending CD-ROM interrupt is enabled."""

    def set_cdrom_interrupt_delay(self, delay: int) -> None:
        """Record how many cycles to wait before the interrupt fires."""

    def set_cdrom_interrupt_number(self, number: int) -> None:
        """Record which CD-ROM interrupt is pending."""


@dataclass
class DriveStatus:
    """Flags that make up the drive's status byte."""

    cdda_playing: bool = False
    seeking: bool = False
    reading: bool = False
    id_error: bool = False
    seek_error: bool = False
    motor_on: bool = True
    command_error: bool = False

    def code(self, shell_open: bool) -> int:
        """Return the status byte as a signed 8-bit value."""
        bits = (
            (self.cdda_playing, 0x80),
            (self.seeking, 0x40),
            (self.reading, 0x20),
            (shell_open, 0x10),
            (self.id_error, 0x08),
            (self.seek_error, 0x04),
            (self.motor_on, 0x02),
            (self.command_error, 0x01),
        )
        value = 0
        for flag, bit in bits:
            if flag:
                value |= bit
        return _signed_byte(value)


@dataclass
class DriveMode:
    """Behaviour flags set through the Setmode command."""

    double_speed: bool = False
    xa_adpcm: bool = False
    whole_sector: bool = False
    ignore_bit: bool = False
    xa_filter: bool = False
    report_interrupts: bool = False
    auto_pause: bool = False
    allow_cdda: bool = False

    @classmethod
    def from_byte(cls, value: int) -> "DriveMode":
        """Decode a Setmode parameter byte."""
        flags = value & 0xFF
        return cls(
            double_speed=bool(flags & 0x80),
            xa_adpcm=bool(flags & 0x40),
            whole_sector=bool(flags & 0x20),
            ignore_bit=bool(flags & 0x10),
            xa_filter=bool(flags & 0x08),
            report_interrupts=bool(flags & 0x04),
            auto_pause=bool(flags & 0x02),
            allow_cdda=bool(flags & 0x01),
        )

    def sector_size(self) -> int:
        """Number of bytes delivered per sector read."""
        return WHOLE_SECTOR_SIZE if self.whole_sector else DATA_SECTOR_SIZE

    def sector_skip(self) -> int:
        """Number of leading sector bytes skipped before delivered data."""
        return WHOLE_SECTOR_SKIP if self.whole_sector else DATA_SECTOR_SKIP


def bcd_to_int(value: int) -> int:
    """Convert a packed BCD byte to its integer value."""
    value &= 0xFF
    return (value & 0xF) + ((value >> 4) & 0xF) * 10


def msf_to_position(minutes: int, seconds: int, frames: int) -> int:
    """Convert a minutes/seconds/frames address to a byte position."""
    return frames * SECTOR_BYTES + seconds * SECOND_BYTES + minutes * MINUTE_BYTES