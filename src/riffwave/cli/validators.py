SUPPORTED_BITS = (8, 16, 32, 64)


def validate_bits_per_channel(type_: object, bits: int) -> None:
    """Validate that bits is a storable sample width."""
    if bits not in SUPPORTED_BITS:
        raise ValueError(f"Bits per channel must be one of {', '.join(map(str, SUPPORTED_BITS))}")


def validate_track_number(type_: object, track: int | None) -> None:
    if track is not None and track < 0:
        raise ValueError("Track number must not be negative")
