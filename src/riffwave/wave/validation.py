"""Validation functions for WAVE format chunks and decoded RIFF containers.

Decoding is deliberately lenient about informational fields such as
``byte_rate`` and ``block_align``. These checks report inconsistencies as
warnings and structural problems as errors, without raising.
"""

from dataclasses import dataclass
from typing import Any

from riffwave.riff import RiffFile
from riffwave.wave.chunks import DATA_ID, FMT_ID, UnsupportedFormatError
from riffwave.wave.samples import sample_domain


class ValidationError(Exception):
    """Error during WAVE validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


def validate_format(fmt: Any) -> ValidationResult:
    """Validate a ``fmt `` chunk.

    Errors:
    - channels == 0
    - sample_rate == 0
    - no sample domain for (audio_format, bits_per_channel)

    Warnings:
    - block_align != channels * bits_per_channel / 8
    - byte_rate != sample_rate * block_align

    Args:
        fmt: The format chunk to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if fmt.channels < 1:
        errors.append(f"channels must be >= 1, got {fmt.channels}")

    if fmt.sample_rate == 0:
        errors.append("sample_rate must be > 0")

    try:
        sample_domain(fmt.audio_format, fmt.bits_per_channel)
    except UnsupportedFormatError as e:
        errors.append(str(e))

    expected_align = fmt.channels * fmt.bits_per_channel // 8
    if fmt.block_align != expected_align:
        warnings.append(f"block_align is {fmt.block_align}, expected {expected_align}")

    expected_rate = fmt.sample_rate * expected_align
    if fmt.byte_rate != expected_rate:
        warnings.append(f"byte_rate is {fmt.byte_rate}, expected {expected_rate}")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)


def validate_wave(file: RiffFile[Any]) -> ValidationResult:
    """Validate a container decoded with the WAVE codecs.

    Checks that ``fmt `` and ``data`` are present, that ``fmt `` comes
    first, and that the ``data`` payload holds a whole number of frames.

    Args:
        file: Container returned by ``decode_riff(..., WAVE_CODECS)``.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if file.type != "WAVE":
        errors.append(f"RIFF type is '{file.type}', expected 'WAVE'")

    ids = [chunk.id for chunk in file.content]
    fmt = next((c for c in file.content if c.id == FMT_ID), None)
    data = next((c for c in file.content if c.id == DATA_ID), None)

    if fmt is None:
        errors.append("Missing 'fmt ' chunk")
    if data is None:
        errors.append("Missing 'data' chunk")

    if fmt is not None and data is not None:
        if ids.index(DATA_ID) < ids.index(FMT_ID):
            warnings.append("'data' chunk comes before 'fmt ' chunk")

        format_result = validate_format(fmt)
        errors.extend(format_result.errors)
        warnings.extend(format_result.warnings)

        frame_size = fmt.channels * fmt.bits_per_channel // 8
        if frame_size and len(data.data) % frame_size:
            errors.append(
                f"data chunk length {len(data.data)} is not a multiple of "
                f"the frame size {frame_size}"
            )

    for unknown in file.unknowns:
        warnings.append(f"Unknown chunk '{unknown.id}' ({len(unknown.data)} bytes) kept as-is")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)
