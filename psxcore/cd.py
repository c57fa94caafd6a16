"""A compact disc backed by a cue sheet and a single binary image file."""

from __future__ import annotations

import mmap
import os
from typing import Optional, Union

from psxcore.cue import CueError, Track, read_cue


def _map_image(bin_path: str) -> mmap.mmap:
    try:
        with open(bin_path, "rb") as handle:
            size = os.fstat(handle.fileno()).st_size
            if size == 0:
                raise CueError(f"couldn't map empty bin file {bin_path!r}")
            return mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
    except OSError as exc:
        raise CueError(f"couldn't open or map bin file {bin_path!r}") from exc
    except ValueError as exc:
        raise CueError(f"couldn't map bin file {bin_path!r}") from exc


class CD:
    """A disc whose bytes are addressed by logical position across tracks.

    A freshly made disc holds no image. Loading a cue sheet maps the image
    it names; a failed load leaves any previously loaded image in place.
    """

    def __init__(self) -> None:
        self._mapping: Optional[mmap.mmap] = None
        self._tracks: list[Track] = []

    def is_empty(self) -> bool:
        """Tell whether no image is currently loaded."""
        return self._mapping is None

    def load(self, cue_path: Union[str, os.PathLike]) -> None:
        """Load the image described by a cue file, replacing any current one.

        Raises CueError if the cue sheet or its image cannot be used.
        """
        sheet = read_cue(cue_path)
        mapping = _map_image(sheet.bin_path)
        try:
            sheet.finish(len(mapping))
        except CueError:
            mapping.close()
            raise
        self.close()
        self._mapping = mapping
        self._tracks = sheet.tracks

    def read_byte(self, position: int) -> int:
        """Return the signed byte at a logical disc position, or 0 outside tracks."""
        if self._mapping is None:
            return 0
        for track in self._tracks:
            if track.contains(position):
                value = self._mapping[position - track.offset]
                return value - 256 if value >= 128 else value
        return 0

    def close(self) -> None:
        """Release the loaded image, leaving the disc empty."""
        if self._mapping is not None:
            self._mapping.close()
            self._mapping = None
        self._tracks = []

    def __enter__(self) -> "CD":
        return self

    def __exit__(self, *args) -> None:
        self.close()