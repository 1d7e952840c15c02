"""WAVE chunk codecs, sample conversion, reader and writer.

This subpackage layers the ``.wav`` specifics on top of the generic RIFF
walker: the ``fmt ``, ``LIST`` and ``data`` codecs, the sample domain
table, and the coding modes used to expose the ``data`` chunk.
"""

from riffwave.wave.chunks import (
    DATA_CODEC,
    FORMAT_CODEC,
    LIST_CODEC,
    WAVE_CODECS,
    DataChunk,
    FormatChunk,
    ListChunk,
    UnsupportedFormatError,
    WaveAudioFormat,
    WaveChunk,
)
from riffwave.wave.reader import MissingChunkError, decode_wav, read_wav
from riffwave.wave.samples import SAMPLE_DOMAINS, SampleDomain, SampleLayoutError, sample_domain
from riffwave.wave.types import CodingMode, TrackInfo, WaveFile
from riffwave.wave.validation import (
    ValidationError,
    ValidationResult,
    validate_format,
    validate_wave,
)
from riffwave.wave.writer import encode_wav, write_wav

__all__ = [
    # Chunks
    "WaveAudioFormat",
    "FormatChunk",
    "ListChunk",
    "DataChunk",
    "WaveChunk",
    "FORMAT_CODEC",
    "LIST_CODEC",
    "DATA_CODEC",
    "WAVE_CODECS",
    # Samples
    "SampleDomain",
    "SAMPLE_DOMAINS",
    "sample_domain",
    # Types
    "CodingMode",
    "TrackInfo",
    "WaveFile",
    # Validation
    "ValidationError",
    "ValidationResult",
    "validate_format",
    "validate_wave",
    # Reader
    "decode_wav",
    "read_wav",
    # Writer
    "encode_wav",
    "write_wav",
    # Errors
    "UnsupportedFormatError",
    "MissingChunkError",
    "SampleLayoutError",
]
