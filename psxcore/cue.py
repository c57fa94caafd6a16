"""Parsing of CUE sheets that describe a single-file CD image."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Union

SECTOR_BYTES = 2352
SECOND_BYTES = 176400
MINUTE_BYTES = 10584000
INITIAL_GAP = SECTOR_BYTES * 150  # two-second lead-in

_PATH_SEPARATOR = "/"
_UTF8_BOM = b"\xef\xbb\xbf"


class CueError(Exception):
    """Raised when a cue sheet cannot be read or is malformed."""


class TrackType(IntEnum):
    """Kinds of track a cue sheet may declare."""

    AUDIO = 0
    MODE2_2352 = 1


@dataclass
class Track:
    """A track's byte range within the logical disc and its image offset."""

    number: int
    type: TrackType
    start: int
    offset: int
    end: int = -1

    def contains(self, position: int) -> bool:
        """Tell whether a logical byte position lies inside this track."""
        return self.start <= position <= self.end


@dataclass
class CueSheet:
    """The image file named by a cue sheet and the tracks laid out on it."""

    bin_path: str
    tracks: list[Track] = field(default_factory=list)

    def _add_track(
        self, track_type: TrackType, prev_end: int, start: int, gap: int
    ) -> None:
        if self.tracks:
            self.tracks[-1].end = prev_end
        self.tracks.append(
            Track(
                number=len(self.tracks) + 1,
                type=track_type,
                start=start,
                offset=gap,
            )
        )

    def finish(self, bin_size: int) -> None:
        """Close off the last track using the size of the image file."""
        if not self.tracks:
            raise CueError("no tracks found")
        last = self.tracks[-1]
        last.end = bin_size + last.offset - 1


def _atoi(text: str) -> int:
    """Read a leading decimal integer the way C's atoi does."""
    text = text.lstrip(" \t\n\r\v\f")
    sign = 1
    if text[:1] in ("+", "-"):
        if text[0] == "-":
            sign = -1
        text = text[1:]
    digits = []
    for ch in text:
        if not ("0" <= ch <= "9"):
            break
        digits.append(ch)
    return sign * int("".join(digits)) if digits else 0


def parse_cue_time(line: str) -> tuple[int, int, int]:
    """Return (minutes, seconds, frames) from the end of a PREGAP/INDEX line."""
    space = line.rfind(" ")
    if space == -1:
        raise CueError("no space before the time in PREGAP or INDEX line")
    stamp = line[space + 1:]
    head, sep, frames = stamp.rpartition(":")
    if not sep:
        raise CueError("malformed duration in PREGAP or INDEX line")
    minutes, sep, seconds = head.rpartition(":")
    if not sep:
        raise CueError("malformed duration in PREGAP or INDEX line")
    return _atoi(minutes), _atoi(seconds), _atoi(frames)


def _time_to_bytes(minutes: int, seconds: int, frames: int) -> int:
    return frames * SECTOR_BYTES + seconds * SECOND_BYTES + minutes * MINUTE_BYTES


def _trim(line: str) -> str:
    return line.strip(" \t")


def _check_path(cue_path: str) -> None:
    if not cue_path:
        raise CueError("provided CD path was empty")
    if len(cue_path) < 5:
        raise CueError(
            "provided CD path is too short to be a cue file of the form "
            "x.cue or x.CUE"
        )
    if not (cue_path.endswith(".cue") or cue_path.endswith(".CUE")):
        raise CueError("provided CD path was not a cue file")


def _read_lines(cue_path: str) -> Iterator[str]:
    try:
        with open(cue_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise CueError(f"couldn't open cue file {cue_path!r}") from exc
    if len(data) < 3:
        raise CueError("couldn't check cue file for UTF-8 BOM")
    if data.startswith(_UTF8_BOM):
        data = data[len(_UTF8_BOM):]
    text = data.decode("utf-8", errors="surrogateescape")
    return iter(text.split("\n"))


def _find_bin_path(lines: Iterator[str], cue_path: str) -> str:
    for raw in lines:
        line = _trim(raw)
        if not line.startswith("FILE"):
            continue
        first = line.find('"')
        last = line.rfind('"')
        if first == -1 or first == last:
            raise CueError("FILE line in cue file is malformed")
        bin_name = line[first + 1:last]
        separator = cue_path.rfind(_PATH_SEPARATOR)
        if separator != -1:
            bin_name = cue_path[: separator + 1] + bin_name
        return bin_name
    raise CueError("cue file has no FILE line")


def _track_type(line: str) -> TrackType:
    space = line.rfind(" ")
    if space == -1:
        raise CueError("malformed TRACK line")
    kind = line[space + 1:]
    if kind.startswith("AUDIO"):
        return TrackType.AUDIO
    if kind.startswith("MODE2/2352"):
        return TrackType.MODE2_2352
    raise CueError("unrecognised TRACK type")


def read_cue(cue_path: Union[str, os.PathLike]) -> CueSheet:
    """Parse a cue file into the image path and its track layout.

    Parsing of track entries stops at the first empty line or end of file.
    The last track is left open until ``CueSheet.finish`` is called.
    """
    cue_path = os.fspath(cue_path)
    _check_path(cue_path)
    lines = _read_lines(cue_path)
    sheet = CueSheet(bin_path=_find_bin_path(lines, cue_path))

    gap = INITIAL_GAP
    while True:
        raw = next(lines, "")
        if not raw:
            break
        line = _trim(raw)
        if not line.startswith("TRACK"):
            continue
        track_type = _track_type(line)

        raw = next(lines, "")
        if not raw:
            raise CueError("no INDEX or PREGAP line")
        line = _trim(raw)

        if line.startswith("PREGAP"):
            pregap = _time_to_bytes(*parse_cue_time(line))
            gap += pregap
            raw = next(lines, "")
            if not raw:
                raise CueError("no INDEX line after PREGAP line")
            start = _time_to_bytes(*parse_cue_time(_trim(raw))) + gap
            sheet._add_track(track_type, start - pregap - 1, start, gap)
        else:
            start = _time_to_bytes(*parse_cue_time(line)) + gap
            sheet._add_track(track_type, start - 1, start, gap)

    return sheet