# psxcore

Pure-Python models of several pieces of the original PlayStation hardware.
The package has no runtime dependencies.

## Modules

- `psxcore.cue` parses a CUE sheet that names a single BIN image.
  - `read_cue(path)` returns a `CueSheet`, which holds `bin_path` and a list of `Track`s.
    A relative BIN name is resolved against the cue file's directory.
  - The path must end in `.cue` or `.CUE`.
  - `FILE`, `TRACK`, `PREGAP` and `INDEX` lines are understood.
  - The track types are `TrackType.AUDIO` and `TrackType.MODE2_2352`.
  - Track layout includes the two-second lead-in and any pregaps.
  - `CueSheet.finish(bin_size)` closes the last track.
  - `parse_cue_time(line)` returns the `(minutes, seconds, frames)` at the end of a line.
- `psxcore.cd` provides `CD`, a disc backed by a memory-mapped BIN file.
  - `load(cue_path)` loads an image and replaces any previous one. If the load fails, the previous image stays loaded.
  - `read_byte(position)` returns the signed byte at a logical disc position. It returns `0` outside every track or when no disc is loaded.
  - `is_empty()` reports whether a disc is loaded.
  - `close()` releases the image. `CD` also works as a context manager.
- `psxcore.cdrom_state` holds the controller's helpers:
  - `DriveStatus` builds the status byte with `code(shell_open)`.
  - `DriveMode` decodes the Setmode byte with `DriveMode.from_byte`. Its `sector_size()` is `0x924` or `0x800`, and its `sector_skip()` is `12` or `24`.
  - `bcd_to_int` and `msf_to_position` convert addresses.
  - The `InterruptSink` protocol describes what the drive reports interrupts to.
- `psxcore.cdrom` provides `CDROMDrive`, the controller behind the four ports `0x1F801800`–`0x1F801803`.
  - `read_1800`…`read_1803` and `write_1800`…`write_1803` access the ports.
  - `read_chunk(length)` takes bytes from the data fifo, padding past its end.
  - `load_cd(cue_path)` inserts a disc.
  - `status_code()` returns the status byte.
  - `set_interrupt_number(number)` sets the interrupt flag register.
  - The commands handled are Getstat, Setloc, ReadN, Pause, Init, Demute, Setmode, SeekL, Test (`0x20`, version query), GetID and ReadTOC.
  - Other command numbers are logged as unimplemented.
- `psxcore.controller_io` provides `ControllerIO`, byte access to the `JOY_*` registers.
  - The registers are `JOY_RX_DATA`/`JOY_TX_DATA`, `JOY_STAT`, `JOY_MODE`, `JOY_CTRL` and `JOY_BAUD`. Addresses are decoded by their lowest byte.
  - It keeps a baud rate timer, which `append_sync_cycles(cycles)` advances.
- `psxcore.cop0` provides `Cop0`, the system control co-processor:
  - register reads and writes that honour read-only bits (`read_reg`, `write_reg`)
  - `reset` and `rfe`
  - the exception vectors
  - the cache-miss flag
  - fixed-segment address translation (`virtual_to_physical`, `is_cacheable`)
  - kernel-mode checks, data-cache isolation, reverse-endian mode and co-processor usability

Bytes read back from the CD, the CD-ROM ports and the controller registers are signed 8-bit values in the range -128 to 127.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from psxcore.cd import CD

with CD() as disc:
    disc.load("games/demo.cue")
    first = disc.read_byte(2352 * 150)
```

The CD-ROM drive needs an object that receives its interrupts. Any object with the three `InterruptSink` methods will do:

```python
from psxcore.cdrom import CDROMDrive

class Sink:
    def set_cdrom_interrupt_enabled(self, enabled): ...
    def set_cdrom_interrupt_delay(self, delay): ...
    def set_cdrom_interrupt_number(self, number): ...

drive = CDROMDrive(Sink())
drive.write_1800(0)       # select port index 0
drive.write_1801(0x01)    # Getstat
status = drive.read_1801()
```

`CueError` is raised for problems with a CUE sheet. It is also raised when the BIN file it names cannot be opened or mapped.

## What it does not do

This is a set of components, not a complete emulator.

- There is no CPU, GPU, sound, DMA or memory bus.
- There is no command to run and no window.
- Nothing drives the components by itself. A caller has to write to the ports and advance the timers.
- `ControllerIO` has no attached pads or memory cards, so its receive fifo never fills.
- The CD-ROM drive does not play audio and does not decode XA-ADPCM.
- ReadTOC only returns status bytes.

## Use

The components do not check their own state or lock against concurrent access. Drive them from a single thread.