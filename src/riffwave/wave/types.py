"""Python types for decoded ``.wav`` files.

These types provide a friendlier interface over the raw chunks, with
conversion to/from ``LIST``/``INFO`` entries for serialization.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from riffwave.riff import UnknownChunk
from riffwave.wave.chunks import FormatChunk, WaveChunk

logger = logging.getLogger(__name__)

CodingMode = Literal["raw-blob", "raw-buffer", "channels-fmt", "channels-float32"]
"""How the ``data`` chunk is exposed.

- ``raw-blob``: the payload as immutable ``bytes``.
- ``raw-buffer``: the payload as a mutable ``bytearray``.
- ``channels-fmt``: one array per channel in the native storage type
  (``uint8``, ``int16``, ``int32``, ``float16``, ``float32`` or ``float64``),
  values left in their raw range.
- ``channels-float32``: one ``float32`` array per channel, normalized to [-1, 1].
"""

CODING_MODES: tuple[CodingMode, ...] = ("raw-blob", "raw-buffer", "channels-fmt", "channels-float32")

# INFO entry keys
ICMT = "ICMT"
IART = "IART"
INAM = "INAM"
IPRD = "IPRD"
IPRT = "IPRT"
ICRD = "ICRD"
ISFT = "ISFT"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class TrackInfo:
    """Track metadata stored in the ``LIST``/``INFO`` chunk."""

    comment: str | None = None
    """Additional comment (``ICMT``)."""

    artist: str | None = None
    """Artist's name (``IART``)."""

    copyright_date: str | None = None
    """Copyright date, usually just a year (``ICRD``)."""

    track_name: str | None = None
    """Track title (``INAM``)."""

    album_name: str | None = None
    """Album title (``IPRD``)."""

    album_track_id: int | None = None
    """Track number on the album (``IPRT``)."""

    software: str | None = None
    """Software used to encode the file (``ISFT``)."""

    def to_list_entries(self) -> dict[str, str]:
        """Convert to ``INFO`` entries, leaving out empty fields."""
        entries: dict[str, str] = {}
        if self.comment:
            entries[ICMT] = self.comment
        if self.artist:
            entries[IART] = self.artist
        if self.track_name:
            entries[INAM] = self.track_name
        if self.album_name:
            entries[IPRD] = self.album_name
        if self.album_track_id is not None:
            entries[IPRT] = str(self.album_track_id)
        if self.copyright_date:
            entries[ICRD] = self.copyright_date
        if self.software:
            entries[ISFT] = self.software
        return entries

    @classmethod
    def from_list_entries(cls, entries: dict[str, str]) -> "TrackInfo":
        """Create from ``INFO`` entries. Empty entries are treated as absent."""
        return cls(
            comment=entries.get(ICMT) or None,
            artist=entries.get(IART) or None,
            copyright_date=entries.get(ICRD) or None,
            track_name=entries.get(INAM) or None,
            album_name=entries.get(IPRD) or None,
            album_track_id=_parse_track_id(entries.get(IPRT)),
            software=entries.get(ISFT) or None,
        )


def _parse_track_id(text: str | None) -> int | None:
    if not text:
        return None
    match = _LEADING_INT.match(text)
    if match is None:
        logger.warning("Ignoring IPRT entry without a track number: %r", text)
        return None
    return int(match.group(1))


@dataclass
class WaveFile:
    """A ``.wav`` file with its samples in one of the coding modes."""

    format: FormatChunk
    """The ``fmt `` chunk describing the samples."""

    info: TrackInfo | None
    """Track metadata, or ``None`` when the file has no ``LIST``/``INFO`` chunk."""

    data: Any
    """Sample data, in the representation selected by the coding mode."""

    unknowns: list[UnknownChunk] = field(default_factory=list)
    """Chunks with no codec, carried through unchanged."""

    extra_content: list[WaveChunk] = field(default_factory=list)
    """Typed chunks other than the ``fmt ``, ``data`` and ``INFO`` list in use,
    such as ``LIST``/``adtl`` cue labels. Written back after ``INFO``."""

    @property
    def num_samples(self) -> int:
        """Samples per channel, computed from the format and the data size."""
        if isinstance(self.data, (bytes, bytearray, memoryview)):
            block_align = self.format.channels * self.format.bits_per_channel // 8
            return len(self.data) // block_align if block_align else 0
        return len(self.data[0]) if len(self.data) else 0

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        if not self.format.sample_rate:
            return 0.0
        return self.num_samples / self.format.sample_rate
