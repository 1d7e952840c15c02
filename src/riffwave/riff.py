"""Generic RIFF container codec.

This module walks a RIFF container as a flat sequence of tagged,
length-prefixed chunks. It knows nothing about audio: interpreting a
chunk's payload is delegated to a :class:`ChunkCodec` looked up by the
chunk's FourCC in a registry. Chunks without a registered codec are kept
verbatim as :class:`UnknownChunk` records and written back unchanged.

Layout::

    "RIFF" | u32-LE size | type (4 chars) | chunk | chunk | ...

    chunk = id (4 chars) | u32-LE payload size | payload
"""

import logging
import struct
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeAlias, TypeVar

import numpy as np

from riffwave.source import SourceLike, as_source

logger = logging.getLogger(__name__)

# FourCC identifiers
RIFF_ID = b"RIFF"

FOURCC_ENCODING = "latin-1"


class RiffError(Exception):
    """Error reading or writing RIFF files."""


class HeaderError(RiffError):
    """The container does not start with the ``RIFF`` magic."""

    def __init__(self, index: int, expected: int, found: int | None) -> None:
        self.index = index
        self.expected = expected
        self.found = found
        found_text = "end of data" if found is None else f"0x{found:02x}"
        super().__init__(
            f"Invalid RIFF header (expecting file[{index}] == 0x{expected:02x}, "
            f"but found {found_text})"
        )


class ChunkLayoutError(RiffError):
    """A container type or chunk id is not a 4-character tag."""


class TruncatedChunkError(RiffError):
    """A chunk header runs past the end of the data."""


class MissingCodecError(RiffError):
    """A typed chunk has no codec registered for its id."""


class RiffChunk(Protocol):
    """Anything carrying a 4-character chunk id."""

    id: str


ChunkT = TypeVar("ChunkT", bound=RiffChunk)


@dataclass
class UnknownChunk:
    """A chunk with no registered codec, kept as opaque bytes."""

    id: str
    data: Any
    """Payload as ``bytes``; encode also accepts other bytes-likes, numpy arrays and ``str``."""


@dataclass(frozen=True)
class ChunkCodec(Generic[ChunkT]):
    """A pair of functions converting between a typed chunk and its payload bytes."""

    decode: Callable[[bytes], ChunkT]
    encode: Callable[[ChunkT], bytes]


ChunkCodecs: TypeAlias = Mapping[str, ChunkCodec[Any]]


@dataclass
class RiffFile(Generic[ChunkT]):
    """A decoded RIFF container."""

    type: str
    """Container type, ``WAVE`` for ``.wav`` files."""

    content: list[ChunkT] = field(default_factory=list)
    """Chunks decoded by a registered codec, in source order."""

    unknowns: list[UnknownChunk] = field(default_factory=list)
    """Chunks with no registered codec, in source order."""


def decode_fourcc(raw: bytes) -> str:
    """Decode a 4-byte tag into a 4-character string."""
    return raw.decode(FOURCC_ENCODING)


def encode_fourcc(tag: str, what: str = "Chunk ID") -> bytes:
    """Encode a 4-character tag, raising :class:`ChunkLayoutError` if it is not one."""
    if len(tag) != 4:
        raise ChunkLayoutError(f"{what} must have a length of 4 (found '{tag}')")
    try:
        return tag.encode(FOURCC_ENCODING)
    except UnicodeEncodeError as e:
        raise ChunkLayoutError(f"{what} must be a single-byte tag (found '{tag}')") from e


def payload_bytes(data: Any) -> bytes:
    """Flatten any supported payload representation into bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, np.ndarray):
        return data.tobytes()
    return bytes(memoryview(data).cast("B"))


def _chunk_record(chunk_id: bytes, payload: bytes, word_align: bool) -> list[bytes]:
    parts = [chunk_id, struct.pack("<I", len(payload)), payload]
    if word_align and len(payload) % 2:
        parts.append(b"\x00")
    return parts


def decode_riff(
    source: SourceLike,
    codecs: ChunkCodecs | None = None,
    *,
    validate_header: bool = True,
    word_align: bool = False,
) -> RiffFile[Any]:
    """Decode a RIFF container.

    Args:
        source: Content of the RIFF file, as a buffer or seekable binary file.
        codecs: Codecs to decode chunks with, keyed by chunk id. Without
            codecs every chunk ends up in ``unknowns``.
        validate_header: Check that the data starts with ``RIFF``.
        word_align: Skip the pad byte following odd-length chunks.
            Without it, a lone byte left after an odd-length chunk is
            still skipped as padding.

    Returns:
        ``RiffFile`` with known chunks decoded.

    Raises:
        HeaderError: If ``validate_header`` is set and the magic is wrong.
        TruncatedChunkError: If a header runs past the end of the data.
    """
    blob = as_source(source)
    codecs = codecs or {}

    if validate_header:
        magic = blob.read(0, len(RIFF_ID))
        for i, expected in enumerate(RIFF_ID):
            found = magic[i] if i < len(magic) else None
            if found != expected:
                raise HeaderError(i, expected, found)

    header = blob.read(4, 12)
    if len(header) < 8:
        raise TruncatedChunkError("Unexpected end of data reading RIFF header")

    size = struct.unpack("<I", header[:4])[0]
    riff_type = decode_fourcc(header[4:8])
    if size + 8 > blob.size:
        logger.warning(
            "RIFF size %d exceeds available data (%d bytes), clamping", size, blob.size - 8
        )

    content_raw = blob.slice(12, size + 8)
    content: list[Any] = []
    unknowns: list[UnknownChunk] = []
    pointer = 0
    last_size = 0

    while pointer < content_raw.size:
        if not word_align and last_size % 2 and content_raw.size - pointer == 1:
            logger.warning(
                "Skipping trailing pad byte after odd-length chunk at offset %d", 12 + pointer
            )
            break

        chunk_header = content_raw.read(pointer, pointer + 8)
        if len(chunk_header) < 8:
            raise TruncatedChunkError(
                f"Unexpected end of data reading chunk header at offset {12 + pointer}"
            )

        chunk_id = decode_fourcc(chunk_header[:4])
        chunk_size = struct.unpack("<I", chunk_header[4:8])[0]
        payload = content_raw.read(pointer + 8, pointer + 8 + chunk_size)
        if len(payload) < chunk_size:
            logger.warning(
                "Chunk '%s' declares %d bytes but only %d are present",
                chunk_id,
                chunk_size,
                len(payload),
            )

        last_size = chunk_size
        pointer += 8 + chunk_size
        if word_align:
            pointer += chunk_size % 2

        codec = codecs.get(chunk_id)
        logger.debug(
            "Chunk '%s' (%d bytes, %s)", chunk_id, chunk_size, "typed" if codec else "unknown"
        )
        if codec is not None:
            content.append(codec.decode(payload))
        else:
            unknowns.append(UnknownChunk(chunk_id, payload))

    return RiffFile(type=riff_type, content=content, unknowns=unknowns)


def encode_riff(
    file: RiffFile[Any],
    codecs: ChunkCodecs | None = None,
    *,
    word_align: bool = False,
) -> bytes:
    """Encode a RIFF container.

    Typed chunks are written first, in order, followed by the unknown
    chunks. Nothing is written if any chunk fails validation.

    Args:
        file: The container to encode.
        codecs: Codecs to encode the typed chunks in ``file.content``.
        word_align: Pad odd-length chunks with a zero byte.

    Returns:
        The complete RIFF file as bytes.

    Raises:
        ChunkLayoutError: If the type or a chunk id is not a 4-character tag.
        MissingCodecError: If a typed chunk has no codec.
    """
    codecs = codecs or {}
    parts = [encode_fourcc(file.type, "RIFF type")]

    for chunk in file.content:
        chunk_id = encode_fourcc(chunk.id)
        codec = codecs.get(chunk.id)
        if codec is None:
            raise MissingCodecError(f"No chunk codec for '{chunk.id}'")
        parts.extend(_chunk_record(chunk_id, codec.encode(chunk), word_align))

    for unknown in file.unknowns:
        chunk_id = encode_fourcc(unknown.id)
        parts.extend(_chunk_record(chunk_id, payload_bytes(unknown.data), word_align))

    body = b"".join(parts)
    return RIFF_ID + struct.pack("<I", len(body)) + body
