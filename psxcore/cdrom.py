"""The CD-ROM controller: command, parameter, response and data ports."""

from __future__ import annotations

import logging
import os
from typing import Callable, Union

from psxcore.cd import CD
from psxcore.cdrom_state import (
    WHOLE_SECTOR_SIZE,
    DriveMode,
    DriveStatus,
    InterruptSink,
    bcd_to_int,
    msf_to_position,
)
from psxcore.cue import SECTOR_BYTES

_log = logging.getLogger(__name__)

_FIFO_DEPTH = 16
_INTERRUPT_DELAY = 16000
_GETID_LICENSED_MODE2 = (0x02, 0x00, 0x20, 0x00, 0x53, 0x43, 0x45, 0x45)
_TEST_VERSION = (0x99, 0x02, 0x01, 0xC3)  # 1999-02-01, controller vC3

GETSTAT = 0x01
SETLOC = 0x02
READN = 0x06
PAUSE = 0x09
INIT = 0x0A
DEMUTE = 0x0C
SETMODE = 0x0E
SEEKL = 0x15
TEST = 0x19
GETID = 0x1A
READTOC = 0x1E


def _to_signed(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


class CDROMDrive:
    """The CD-ROM module as seen through its four byte-wide ports."""

    def __init__(self, system: InterruptSink) -> None:
        self._system = system
        self._cd = CD()
        self._port_index = 0
        self._parameters: list[int] = []
        self._responses = bytearray(_FIFO_DEPTH)
        self._response_count = 0
        self._response_index = 0
        self._data = bytearray(WHOLE_SECTOR_SIZE)
        self._data_count = 0
        self._data_index = 0
        self._interrupt_enable = 0
        self._interrupt_flag = 0
        self._busy = False
        self._current_command = 0
        self._needs_second_response = False
        self.status = DriveStatus()
        self.mode = DriveMode()
        self.response_received = 0
        self._setloc_position = 0
        self._setloc_processed = False
        self._been_read = True

    # Public port interface

    def read_chunk(self, length: int) -> bytes:
        """Take ``length`` bytes from the data fifo, padding past its end."""
        if length < 0:
            raise ValueError("length must not be negative")
        start = self._data_index
        available = self._data_count - start
        if length > available:
            chunk = bytes(self._data[start:self._data_count])
            self._data_index = self._data_count
            chunk += bytes([self._fill_value()]) * (length - available)
        else:
            chunk = bytes(self._data[start:start + length])
            self._data_index += length
        self._been_read = True
        return chunk

    def load_cd(self, cue_path: Union[str, os.PathLike]) -> None:
        """Insert the disc described by a cue file; raises CueError on failure."""
        self._cd.load(cue_path)

    def read_1800(self) -> int:
        """Read the index/status register."""
        value = self._port_index & 0x3
        if not self._parameters:
            value |= 0x08
        if len(self._parameters) != _FIFO_DEPTH:
            value |= 0x10
        if self._response_count != 0:
            value |= 0x20
        if self._data_count != 0:
            value |= 0x40
        if self._busy:
            value |= 0x80
        return _to_signed(value)

    def read_1801(self) -> int:
        """Read the next response byte (mirrored on every port index)."""
        value = self._responses[self._response_index]
        self._response_index += 1
        if self._response_index == self._response_count:
            self._response_count = 0
        if self._response_index >= _FIFO_DEPTH:
            self._response_index = 0
        return _to_signed(value)

    def read_1802(self) -> int:
        """Read the next data fifo byte (mirrored on every port index)."""
        if self._data_index < self._data_count:
            value = self._data[self._data_index]
            self._data_index += 1
        else:
            value = self._fill_value()
        self._been_read = True
        return _to_signed(value)

    def read_1803(self) -> int:
        """Read the interrupt enable (even index) or flag (odd index) register."""
        if self._port_index in (0, 2):
            return _to_signed(self._interrupt_enable | 0xE0)
        return _to_signed(0xE0 | (self._interrupt_flag & 0x7))

    def set_interrupt_number(self, number: int) -> None:
        """Set the interrupt flag register directly."""
        self._interrupt_flag = number

    def write_1800(self, value: int) -> None:
        """Select the port index."""
        self._port_index = value & 0x3

    def write_1801(self, value: int) -> None:
        """Issue a command byte (index 0 only)."""
        if self._port_index != 0:
            return
        command = value & 0xFF
        if not self._busy:
            self._clear_responses()
            self._busy = True
            self._current_command = command
            self._execute(command, self._needs_second_response)
        elif command == PAUSE:
            self._current_command = command
            self._needs_second_response = False
            self._execute(command, False)

    def write_1802(self, value: int) -> None:
        """Push a parameter (index 0) or set interrupt enable bits (index 1)."""
        if self._port_index == 0:
            if len(self._parameters) < _FIFO_DEPTH:
                self._parameters.append(value & 0xFF)
        elif self._port_index == 1:
            self._interrupt_enable = value & 0x1F

    def write_1803(self, value: int) -> None:
        """Write the request register (index 0) or acknowledge interrupts (index 1)."""
        if self._port_index == 0:
            if not value & 0x80:
                self._data_index = 0
        elif self._port_index == 1:
            if value & 0x40:
                self._parameters.clear()
            self._interrupt_flag &= ~value & 0x1F
            self.response_received = 0
            if self._needs_second_response:
                self._clear_responses()
                self._execute(self._current_command, True)

    def status_code(self) -> int:
        """Return the drive's status byte as a signed 8-bit value."""
        return self.status.code(shell_open=self._cd.is_empty())

    # Internal helpers

    def _fill_value(self) -> int:
        return self._data[0x920] if self.mode.whole_sector else self._data[0x7F8]

    def _parameter(self, index: int) -> int:
        return self._parameters[index] if index < len(self._parameters) else 0

    def _clear_responses(self) -> None:
        self._responses = bytearray(_FIFO_DEPTH)
        self._response_count = 0
        self._response_index = 0

    def _clear_data(self) -> None:
        self._data = bytearray(WHOLE_SECTOR_SIZE)
        self._data_count = 0
        self._data_index = 0

    def _respond(self, *values: int) -> None:
        for value in values:
            self._responses[self._response_count] = value & 0xFF
            self._response_count += 1

    def _respond_status(self) -> None:
        self._respond(self.status_code())

    def _trigger_interrupt(self, number: int, delay: int = _INTERRUPT_DELAY) -> None:
        self._parameters.clear()
        enabled = number != 0 and (self._interrupt_enable & number) == number
        self._system.set_cdrom_interrupt_enabled(enabled)
        self._system.set_cdrom_interrupt_delay(delay)
        self._system.set_cdrom_interrupt_number(number)

    def _acknowledge(self, number: int, *, done: bool) -> None:
        """Finish a response phase with the given interrupt."""
        if done:
            self._busy = False
        self.response_received = number
        self._trigger_interrupt(number)

    def _execute(self, command: int, second: bool) -> None:
        table = self._SECOND_RESPONSES if second else self._FIRST_RESPONSES
        handler = table.get(command)
        if handler is None:
            if not second:
                _log.warning("unimplemented CD-ROM command: %02X", command)
            return
        handler(self, second)

    # Commands

    def _getstat(self, second: bool) -> None:
        self._respond_status()
        self._acknowledge(3, done=True)

    def _demute(self, second: bool) -> None:
        self._respond_status()
        self._acknowledge(3, done=True)

    def _setloc(self, second: bool) -> None:
        minutes = bcd_to_int(self._parameter(0))
        seconds = bcd_to_int(self._parameter(1))
        frames = bcd_to_int(self._parameter(2))
        self._setloc_position = msf_to_position(minutes, seconds, frames)
        self._setloc_processed = False
        self._respond_status()
        self._acknowledge(3, done=True)

    def _setmode(self, second: bool) -> None:
        self.mode = DriveMode.from_byte(self._parameter(0))
        self._respond_status()
        self._acknowledge(3, done=True)

    def _test(self, second: bool) -> None:
        parameter = self._parameter(0)
        self._parameters.clear()
        if parameter == 0x20:
            self._respond(*_TEST_VERSION)
            self._acknowledge(3, done=True)

    def _getid(self, second: bool) -> None:
        if not second:
            self._respond_status()
            self._needs_second_response = True
            self._acknowledge(3, done=False)
        else:
            self._respond(*_GETID_LICENSED_MODE2)
            self._needs_second_response = False
            self._acknowledge(2, done=True)

    def _init(self, second: bool) -> None:
        if not second:
            self.mode = DriveMode()
            self._respond_status()
            self._acknowledge(3, done=False)
            self._needs_second_response = True
        else:
            self._respond_status()
            self._acknowledge(2, done=True)
            self._needs_second_response = False

    def _pause(self, second: bool) -> None:
        if not second:
            self._respond_status()
            self._needs_second_response = True
            self._acknowledge(3, done=False)
        else:
            self.status.reading = False
            self.status.cdda_playing = False
            self._respond_status()
            self._needs_second_response = False
            self._acknowledge(2, done=True)

    def _readn(self, second: bool) -> None:
        if not second:
            self._respond_status()
            self.status.reading = True
            self._needs_second_response = True
            self._been_read = True
            self._acknowledge(3, done=False)
            return
        if self._been_read:
            self._clear_data()
            if self._setloc_processed:
                self._setloc_position += SECTOR_BYTES
            else:
                self._setloc_processed = True
            start = self._setloc_position + self.mode.sector_skip()
            for position in range(start, start + self.mode.sector_size()):
                self._data[self._data_count] = self._cd.read_byte(position) & 0xFF
                self._data_count += 1
            self._been_read = False
        self._respond_status()
        self._needs_second_response = True
        self.response_received = 0
        self._trigger_interrupt(1)

    def _readtoc(self, second: bool) -> None:
        if not second:
            self._respond_status()
            self._needs_second_response = True
            self._acknowledge(3, done=False)
        else:
            self._respond_status()
            self._acknowledge(2, done=True)
            self._needs_second_response = False

    def _seekl(self, second: bool) -> None:
        if not second:
            self._respond_status()
            self.status.seeking = True
            self._needs_second_response = True
            self._acknowledge(3, done=False)
        else:
            self._respond_status()
            self.status.seeking = False
            self._needs_second_response = False
            self._acknowledge(2, done=True)

    _FIRST_RESPONSES: dict[int, Callable[["CDROMDrive", bool], None]] = {
        GETSTAT: _getstat,
        SETLOC: _setloc,
        READN: _readn,
        PAUSE: _pause,
        INIT: _init,
        DEMUTE: _demute,
        SETMODE: _setmode,
        SEEKL: _seekl,
        TEST: _test,
        GETID: _getid,
        READTOC: _readtoc,
    }

    _SECOND_RESPONSES: dict[int, Callable[["CDROMDrive", bool], None]] = {
        READN: _readn,
        PAUSE: _pause,
        INIT: _init,
        SEEKL: _seekl,
        GETID: _getid,
        READTOC: _readtoc,
    }