"""riffwave - RIFF/WAVE decoding and encoding.

This package decodes and encodes ``.wav`` files as a list of typed chunks
(``fmt ``, ``LIST``/``INFO``, ``data``) plus any unrecognized chunks, which
are carried through byte for byte. Samples can be exposed as raw bytes,
as native-typed channel arrays, or as normalized ``float32`` channels.

The generic RIFF walker lives in :mod:`riffwave.riff` and accepts any
registry of chunk codecs, so other RIFF types can be handled by
registering their own codecs.

Example Usage
-------------
>>> import numpy as np
>>> from riffwave import FormatChunk, TrackInfo, WaveAudioFormat, WaveFile
>>> from riffwave import decode_wav, encode_wav
>>>
>>> fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 2, 44100, 16)
>>> left = np.linspace(-1, 1, 64, dtype=np.float32)
>>> blob = encode_wav(
...     WaveFile(format=fmt, info=TrackInfo(artist="A"), data=[left, -left]),
...     "channels-float32",
... )
>>>
>>> wav = decode_wav(blob, "channels-float32")
>>> print(wav.info.artist, len(wav.data), wav.num_samples)
A 2 64
"""

from riffwave.riff import (
    ChunkCodec,
    ChunkLayoutError,
    HeaderError,
    MissingCodecError,
    RiffChunk,
    RiffError,
    RiffFile,
    TruncatedChunkError,
    UnknownChunk,
    decode_riff,
    encode_riff,
)
from riffwave.source import ByteSource
from riffwave.wave import (
    WAVE_CODECS,
    CodingMode,
    DataChunk,
    FormatChunk,
    ListChunk,
    MissingChunkError,
    SampleLayoutError,
    TrackInfo,
    UnsupportedFormatError,
    ValidationError,
    ValidationResult,
    WaveAudioFormat,
    WaveFile,
    decode_wav,
    encode_wav,
    read_wav,
    validate_format,
    validate_wave,
    write_wav,
)

__all__ = [
    # RIFF
    "RiffChunk",
    "RiffFile",
    "UnknownChunk",
    "ChunkCodec",
    "ByteSource",
    "decode_riff",
    "encode_riff",
    # WAVE
    "WaveAudioFormat",
    "FormatChunk",
    "ListChunk",
    "DataChunk",
    "WAVE_CODECS",
    "CodingMode",
    "TrackInfo",
    "WaveFile",
    "decode_wav",
    "encode_wav",
    "read_wav",
    "write_wav",
    # Validation
    "validate_format",
    "validate_wave",
    "ValidationResult",
    "ValidationError",
    # Errors
    "RiffError",
    "HeaderError",
    "ChunkLayoutError",
    "TruncatedChunkError",
    "MissingCodecError",
    "UnsupportedFormatError",
    "MissingChunkError",
    "SampleLayoutError",
]
