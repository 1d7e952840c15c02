"""Sample domain table and interleaved sample conversion.

Samples in a ``data`` chunk are stored interleaved: for ``N`` channels the
flat element sequence holds sample ``i`` of channel ``c`` at ``i * N + c``.
The storage type and raw value range depend on the ``(audio format, bits
per channel)`` pair of the ``fmt `` chunk:

    ========  ====  ==================  ==========================
    format    bits  storage             raw range
    ========  ====  ==================  ==========================
    PCM       8     unsigned 8-bit      [0, 255]
    PCM       16    signed 16-bit       [-32768, 32767]
    PCM       32    signed 32-bit       [-2147483648, 2147483647]
    FLOATS    16    16-bit float        [-1, 1]
    FLOATS    32    32-bit float        [-1, 1]
    FLOATS    64    64-bit float        [-1, 1]
    ========  ====  ==================  ==========================

Normalized samples are always in [-1, 1], whatever the storage type.
"""

from collections.abc import Sequence
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from riffwave.riff import RiffError
from riffwave.wave.chunks import FormatChunk, UnsupportedFormatError, WaveAudioFormat


class SampleLayoutError(RiffError):
    """The ``data`` payload does not hold a whole number of frames."""


class SampleDomain(NamedTuple):
    """Storage type and raw value range for one sample encoding."""

    dtype: np.dtype[Any]
    raw_min: float
    raw_max: float


SAMPLE_DOMAINS: dict[WaveAudioFormat, dict[int, SampleDomain]] = {
    WaveAudioFormat.PCM: {
        8: SampleDomain(np.dtype("u1"), 0, 255),
        16: SampleDomain(np.dtype("<i2"), -32768, 32767),
        32: SampleDomain(np.dtype("<i4"), -2147483648, 2147483647),
    },
    WaveAudioFormat.FLOATS: {
        16: SampleDomain(np.dtype("<f2"), -1.0, 1.0),
        32: SampleDomain(np.dtype("<f4"), -1.0, 1.0),
        64: SampleDomain(np.dtype("<f8"), -1.0, 1.0),
    },
}


def sample_domain(audio_format: int, bits_per_channel: int) -> SampleDomain:
    """Look up the sample domain for a format, raising if it is unsupported."""
    try:
        domain = SAMPLE_DOMAINS[WaveAudioFormat(audio_format)].get(bits_per_channel)
    except ValueError as e:
        raise UnsupportedFormatError(
            f"Unsupported audio data format: 0x{audio_format:02x}"
        ) from e
    if domain is None:
        raise UnsupportedFormatError(f"Unsupported bits per channel: {bits_per_channel}")
    return domain


def deinterleave(payload: bytes, fmt: FormatChunk) -> list[NDArray[Any]]:
    """Split interleaved ``data`` bytes into one native-typed array per channel.

    Raises:
        UnsupportedFormatError: If the format has no sample domain.
        SampleLayoutError: If the payload is not a whole number of frames.
    """
    domain = sample_domain(fmt.audio_format, fmt.bits_per_channel)
    if fmt.channels < 1:
        raise SampleLayoutError(f"Format declares {fmt.channels} channels")

    frame_size = domain.dtype.itemsize * fmt.channels
    if len(payload) % frame_size:
        raise SampleLayoutError(
            f"data chunk length {len(payload)} is not a multiple of the frame size {frame_size}"
        )

    frames = np.frombuffer(payload, dtype=domain.dtype).reshape(-1, fmt.channels)
    native = domain.dtype.newbyteorder("=")
    return [np.ascontiguousarray(frames[:, ch], dtype=native) for ch in range(fmt.channels)]


def interleave(channels: Sequence[ArrayLike], fmt: FormatChunk) -> bytes:
    """Interleave per-channel arrays into ``data`` bytes of the format's storage type."""
    domain = sample_domain(fmt.audio_format, fmt.bits_per_channel)
    arrays = _check_channels(channels, fmt)
    frames = np.stack(arrays, axis=1)
    return frames.astype(domain.dtype).tobytes()


def normalize(raw: NDArray[Any], domain: SampleDomain) -> NDArray[np.float32]:
    """Map raw storage values onto [-1, 1]."""
    span = domain.raw_max - domain.raw_min
    values = (raw.astype(np.float64) - domain.raw_min) / span * 2 - 1
    return values.astype(np.float32)


def denormalize(samples: ArrayLike, domain: SampleDomain) -> NDArray[Any]:
    """Map [-1, 1] samples back onto the raw storage range.

    Integer encodings are rounded to the nearest step and clipped to the
    raw range.
    """
    span = domain.raw_max - domain.raw_min
    values = (np.asarray(samples, dtype=np.float64) + 1) / 2 * span + domain.raw_min
    if domain.dtype.kind in "iu":
        values = np.clip(np.rint(values), domain.raw_min, domain.raw_max)
    return values.astype(domain.dtype)


def quantization_step(domain: SampleDomain) -> float:
    """Size of one raw step in the normalized domain."""
    if domain.dtype.kind == "f":
        return float(np.finfo(domain.dtype).eps)
    return 2.0 / (domain.raw_max - domain.raw_min)


def _check_channels(channels: Sequence[ArrayLike], fmt: FormatChunk) -> list[NDArray[Any]]:
    if fmt.channels < 1:
        raise SampleLayoutError(f"Format declares {fmt.channels} channels")

    arrays = [np.asarray(ch) for ch in channels]
    if len(arrays) != fmt.channels:
        raise ValueError(f"Expected {fmt.channels} channels, got {len(arrays)}")

    num_samples = len(arrays[0])
    for i, arr in enumerate(arrays):
        if arr.ndim != 1:
            raise ValueError(f"Channel {i} should be 1D, got shape {arr.shape}")
        if len(arr) != num_samples:
            raise ValueError(f"Channel {i} has {len(arr)} samples, expected {num_samples}")
    return arrays
