"""WAVE chunk codecs.

Codecs for the three chunks a ``.wav`` file is made of: ``fmt `` (how to
interpret the samples), ``LIST`` (textual metadata) and ``data`` (the raw
samples). :data:`WAVE_CODECS` plugs them into the generic RIFF walker.
"""

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Literal, TypeAlias

from riffwave.riff import (
    ChunkCodec,
    RiffError,
    TruncatedChunkError,
    decode_fourcc,
    encode_fourcc,
    payload_bytes,
)

# FourCC identifiers
WAVE_ID = "WAVE"
FMT_ID = "fmt "
LIST_ID = "LIST"
DATA_ID = "data"
INFO_ID = "INFO"

FMT_LAYOUT = struct.Struct("<HHIIHH")


class UnsupportedFormatError(RiffError):
    """Audio format or bit depth that cannot be decoded."""


class WaveAudioFormat(IntEnum):
    """Encoding of the samples in the ``data`` chunk."""

    PCM = 0x01
    """Integer samples: unsigned 8-bit, signed 16-bit or signed 32-bit."""

    FLOATS = 0x03
    """IEEE 754 samples: 16, 32 or 64-bit floats."""


@dataclass
class FormatChunk:
    """The ``fmt `` chunk, describing how the ``data`` chunk is laid out."""

    audio_format: WaveAudioFormat
    channels: int
    sample_rate: int

    byte_rate: int
    """Average bytes per second. Informational, never checked on decode."""

    block_align: int
    """Bytes per frame (one sample for every channel). Informational."""

    bits_per_channel: int
    id: Literal["fmt "] = FMT_ID

    @classmethod
    def for_samples(
        cls,
        audio_format: WaveAudioFormat,
        channels: int,
        sample_rate: int,
        bits_per_channel: int,
    ) -> "FormatChunk":
        """Build a format chunk, deriving ``byte_rate`` and ``block_align``."""
        block_align = channels * bits_per_channel // 8
        return cls(
            audio_format=audio_format,
            channels=channels,
            sample_rate=sample_rate,
            byte_rate=sample_rate * block_align,
            block_align=block_align,
            bits_per_channel=bits_per_channel,
        )


@dataclass
class ListChunk:
    """A ``LIST`` chunk holding 4-character keys mapped to text values."""

    type: str = INFO_ID
    entries: dict[str, str] = field(default_factory=dict)
    id: Literal["LIST"] = LIST_ID


@dataclass
class DataChunk:
    """The ``data`` chunk. Its payload is only meaningful next to a ``fmt `` chunk."""

    data: Any = b""
    id: Literal["data"] = DATA_ID


WaveChunk: TypeAlias = FormatChunk | ListChunk | DataChunk


def decode_format(payload: bytes) -> FormatChunk:
    if len(payload) < FMT_LAYOUT.size:
        raise TruncatedChunkError(f"fmt chunk too small ({len(payload)} bytes)")

    format_id, channels, sample_rate, byte_rate, block_align, bits = FMT_LAYOUT.unpack_from(
        payload
    )
    try:
        audio_format = WaveAudioFormat(format_id)
    except ValueError as e:
        raise UnsupportedFormatError(f"Unsupported audio data format: 0x{format_id:02x}") from e

    return FormatChunk(
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_channel=bits,
    )


def encode_format(chunk: FormatChunk) -> bytes:
    return FMT_LAYOUT.pack(
        chunk.audio_format,
        chunk.channels,
        chunk.sample_rate,
        chunk.byte_rate,
        chunk.block_align,
        chunk.bits_per_channel,
    )


def decode_list(payload: bytes) -> ListChunk:
    """Decode a ``LIST`` payload.

    Each entry is ``key | u32-LE size | text | NUL`` where ``size`` counts
    the NUL terminator, and the entry is padded to an even length.
    """
    if len(payload) < 4:
        raise TruncatedChunkError(f"LIST chunk too small ({len(payload)} bytes)")

    list_type = decode_fourcc(payload[:4])
    entries: dict[str, str] = {}
    pointer = 4

    while pointer < len(payload):
        if pointer + 8 > len(payload):
            raise TruncatedChunkError(f"Unexpected end of LIST chunk at offset {pointer}")

        name = decode_fourcc(payload[pointer : pointer + 4])
        size = struct.unpack_from("<I", payload, pointer + 4)[0]
        text = payload[pointer + 8 : pointer + 8 + size - 1]
        entries[name] = text.decode("utf-8", errors="replace")
        pointer += 8 + size + (size % 2)

    return ListChunk(type=list_type, entries=entries)


def encode_list(chunk: ListChunk) -> bytes:
    parts = [encode_fourcc(chunk.type, "LIST type")]

    for name, value in chunk.entries.items():
        if not value:
            continue
        key = encode_fourcc(name, "Entry name")
        encoded = value.encode("utf-8")
        size = len(encoded) + 1
        parts.extend([key, struct.pack("<I", size), encoded, b"\x00" * (1 + size % 2)])

    return b"".join(parts)


def decode_data(payload: bytes) -> DataChunk:
    return DataChunk(data=payload)


def encode_data(chunk: DataChunk) -> bytes:
    return payload_bytes(chunk.data)


FORMAT_CODEC: ChunkCodec[FormatChunk] = ChunkCodec(decode=decode_format, encode=encode_format)
LIST_CODEC: ChunkCodec[ListChunk] = ChunkCodec(decode=decode_list, encode=encode_list)
DATA_CODEC: ChunkCodec[DataChunk] = ChunkCodec(decode=decode_data, encode=encode_data)

WAVE_CODECS: dict[str, ChunkCodec[Any]] = {
    FMT_ID: FORMAT_CODEC,
    LIST_ID: LIST_CODEC,
    DATA_ID: DATA_CODEC,
}
"""Codecs for the chunks of a ``.wav`` file, keyed by chunk id."""
