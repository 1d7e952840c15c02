"""WAVE file writer.

This module encodes a :class:`WaveFile` into ``.wav`` content, turning the
caller's sample representation back into interleaved ``data`` bytes.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from numpy.typing import ArrayLike

from riffwave.riff import RiffFile, encode_riff, payload_bytes
from riffwave.wave.chunks import (
    INFO_ID,
    WAVE_CODECS,
    WAVE_ID,
    DataChunk,
    FormatChunk,
    ListChunk,
    WaveChunk,
)
from riffwave.wave.samples import denormalize, interleave, sample_domain
from riffwave.wave.types import CodingMode, WaveFile
from riffwave.wave.validation import ValidationError, validate_format


def encode_wav(
    wav: WaveFile,
    mode: CodingMode,
    *,
    word_align: bool = False,
) -> bytes:
    """Encode audio into ``.wav`` content.

    Chunks are written as ``fmt ``, ``data``, then ``LIST``/``INFO`` when
    ``wav.info`` is set, then ``wav.extra_content``, followed by any unknown
    chunks.

    Args:
        wav: The audio data and ``.wav`` information.
        mode: Coding mode ``wav.data`` is in.
        word_align: Pad odd-length chunks with a zero byte.

    Returns:
        The complete ``.wav`` file as bytes.

    Raises:
        UnsupportedFormatError: If samples are given for an unsupported format.
        ValueError: If the mode is unknown or the channels don't match the format.
    """
    content: list[WaveChunk] = [
        wav.format,
        DataChunk(data=_encode_data(wav.data, wav.format, mode)),
    ]
    if wav.info is not None:
        content.append(ListChunk(type=INFO_ID, entries=wav.info.to_list_entries()))
    content.extend(wav.extra_content)

    file: RiffFile[WaveChunk] = RiffFile(
        type=WAVE_ID, content=content, unknowns=list(wav.unknowns)
    )
    return encode_riff(file, WAVE_CODECS, word_align=word_align)


def _encode_data(data: Any, fmt: FormatChunk, mode: CodingMode) -> bytes:
    if mode in ("raw-blob", "raw-buffer"):
        return payload_bytes(data)

    if mode == "channels-fmt":
        return interleave(data, fmt)
    if mode == "channels-float32":
        domain = sample_domain(fmt.audio_format, fmt.bits_per_channel)
        channels: Sequence[ArrayLike] = data
        return interleave([denormalize(ch, domain) for ch in channels], fmt)
    raise ValueError(f"Unknown input mode: {mode}")


def write_wav(
    path: Path | str,
    wav: WaveFile,
    mode: CodingMode = "channels-float32",
    *,
    word_align: bool = False,
    validate: bool = True,
) -> None:
    """Save a ``.wav`` file to disk.

    Args:
        path: Output file path.
        wav: The audio data and ``.wav`` information.
        mode: Coding mode ``wav.data`` is in.
        word_align: Pad odd-length chunks with a zero byte.
        validate: Whether to validate the format before writing.

    Raises:
        ValidationError: If validation fails and validate=True.
    """
    path = Path(path)

    if validate:
        result = validate_format(wav.format)
        if not result.valid:
            raise ValidationError(f"Format validation failed: {result.errors}", field="format")

    wav_bytes = encode_wav(wav, mode, word_align=word_align)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(wav_bytes)
