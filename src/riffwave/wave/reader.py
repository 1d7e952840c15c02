"""WAVE file reader.

This module decodes ``.wav`` content into a :class:`WaveFile`, exposing the
``data`` chunk in the coding mode of the caller's choice.
"""

from pathlib import Path
from typing import Any

from riffwave.riff import RiffError, decode_riff
from riffwave.source import SourceLike
from riffwave.wave.chunks import (
    DATA_ID,
    FMT_ID,
    INFO_ID,
    LIST_ID,
    WAVE_CODECS,
    DataChunk,
    FormatChunk,
)
from riffwave.wave.samples import deinterleave, normalize, sample_domain
from riffwave.wave.types import CodingMode, TrackInfo, WaveFile


class MissingChunkError(RiffError):
    """A chunk every ``.wav`` file needs is absent."""


def decode_wav(
    source: SourceLike,
    mode: CodingMode,
    *,
    validate_header: bool = True,
    word_align: bool = False,
) -> WaveFile:
    """Decode ``.wav`` content into the representation of your choice.

    Use ``channels-float32`` to get samples ready for processing, or
    ``raw-blob`` to probe the format and metadata without touching the
    samples.

    Args:
        source: The ``.wav`` content, as a buffer or seekable binary file.
        mode: Coding mode for the ``data`` chunk.
        validate_header: Check that the data starts with ``RIFF``.
        word_align: Skip the pad byte following odd-length chunks.

    Returns:
        WaveFile with format, track info and data.

    Raises:
        MissingChunkError: If the ``fmt `` or ``data`` chunk is missing.
        UnsupportedFormatError: If samples are requested for an unsupported format.
        ValueError: If the mode is unknown.
    """
    file = decode_riff(
        source, WAVE_CODECS, validate_header=validate_header, word_align=word_align
    )
    fmt = next((c for c in file.content if c.id == FMT_ID), None)
    raw = next((c for c in file.content if c.id == DATA_ID), None)
    if fmt is None:
        raise MissingChunkError("Missing 'fmt ' chunk in provided .wav file")
    if raw is None:
        raise MissingChunkError("Missing 'data' chunk in provided .wav file")

    info_chunk = next(
        (c for c in file.content if c.id == LIST_ID and c.type == INFO_ID), None
    )
    info = TrackInfo.from_list_entries(info_chunk.entries) if info_chunk else None
    used = (fmt, raw, info_chunk)

    return WaveFile(
        format=fmt,
        info=info,
        data=_decode_data(raw, fmt, mode),
        unknowns=file.unknowns,
        extra_content=[c for c in file.content if not any(c is u for u in used)],
    )


def _decode_data(raw: DataChunk, fmt: FormatChunk, mode: CodingMode) -> Any:
    payload = bytes(raw.data)

    if mode == "raw-blob":
        return payload
    if mode == "raw-buffer":
        return bytearray(payload)
    if mode == "channels-fmt":
        return deinterleave(payload, fmt)
    if mode == "channels-float32":
        domain = sample_domain(fmt.audio_format, fmt.bits_per_channel)
        return [normalize(ch, domain) for ch in deinterleave(payload, fmt)]
    raise ValueError(f"Unknown output mode: {mode}")


def read_wav(
    path: Path | str,
    mode: CodingMode = "channels-float32",
    *,
    validate_header: bool = True,
    word_align: bool = False,
) -> WaveFile:
    """Load a ``.wav`` file from disk.

    Args:
        path: Path to the WAV file.
        mode: Coding mode for the ``data`` chunk.
        validate_header: Check that the file starts with ``RIFF``.
        word_align: Skip the pad byte following odd-length chunks.

    Raises:
        RiffError: If the file cannot be opened or is not a valid WAV file.
    """
    path = Path(path)

    try:
        f = open(path, "rb")
    except FileNotFoundError as e:
        raise RiffError(f"File not found: {path}") from e
    except OSError as e:
        raise RiffError(f"Cannot open file: {path}") from e

    with f:
        return decode_wav(f, mode, validate_header=validate_header, word_align=word_align)

