import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any

from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from riffwave.cli.logging_setup import init_logging
from riffwave.cli.validators import validate_bits_per_channel, validate_track_number
from riffwave.riff import RiffError, decode_riff
from riffwave.wave import (
    WAVE_CODECS,
    DataChunk,
    FormatChunk,
    ListChunk,
    TrackInfo,
    UnsupportedFormatError,
    ValidationError,
    WaveAudioFormat,
    WaveFile,
    read_wav,
    sample_domain,
    validate_wave,
    write_wav,
)

app = App(name="riffwave", help="A utility for inspecting and rewriting RIFF/WAVE files")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def describe_format(fmt: FormatChunk) -> str:
    """One-line summary of a format chunk, e.g. ``PCM 16-bit, 2 ch, 44100 Hz``."""
    try:
        name = WaveAudioFormat(fmt.audio_format).name
    except ValueError:
        name = f"0x{fmt.audio_format:02x}"
    return f"{name} {fmt.bits_per_channel}-bit, {fmt.channels} ch, {fmt.sample_rate} Hz"


def _chunk_summary(chunk_id: str, payload: bytes) -> str:
    codec = WAVE_CODECS.get(chunk_id)
    if codec is None:
        return ""
    try:
        chunk = codec.decode(payload)
    except RiffError as e:
        return f"(undecodable: {e})"
    if isinstance(chunk, FormatChunk):
        return describe_format(chunk)
    if isinstance(chunk, ListChunk):
        return f"{chunk.type}: {', '.join(chunk.entries) or 'empty'}"
    return ""


@app.command
def info(
    file: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    word_align: bool = False,
    verbose: bool = False,
) -> int:
    """
    Display the format, duration and track metadata of a .wav file.

    Parameters
    ----------
    file: Path
        The path to the .wav file
    output_json: bool
        Output results as JSON (default: False)
    word_align: bool
        Expect a pad byte after odd-length chunks (default: False)
    verbose: bool
        Log every chunk as it is decoded
    """
    init_logging("debug" if verbose else None)

    if not file.exists():
        print_error(f"Error: File {file} does not exist")
        return 1

    try:
        wav = read_wav(file, "raw-blob", word_align=word_align)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    if output_json:
        results: dict[str, Any] = {
            "file": str(file),
            "format": {
                "audio_format": int(wav.format.audio_format),
                "channels": wav.format.channels,
                "sample_rate": wav.format.sample_rate,
                "byte_rate": wav.format.byte_rate,
                "block_align": wav.format.block_align,
                "bits_per_channel": wav.format.bits_per_channel,
            },
            "num_samples": wav.num_samples,
            "duration_seconds": wav.duration,
            "info": (
                {k: v for k, v in asdict(wav.info).items() if v is not None} if wav.info else None
            ),
            "unknown_chunks": [u.id for u in wav.unknowns],
        }
        console.print(json.dumps(results, indent=2), soft_wrap=True)
        return 0

    console.print(f"WAVE file: {file}")
    console.print(f"  Format: {describe_format(wav.format)}")
    console.print(f"  Samples per channel: {wav.num_samples:,}")
    console.print(f"  Duration: {wav.duration:.3f}s")

    if wav.info:
        console.print("  Track info:")
        for key, value in asdict(wav.info).items():
            if value is not None:
                console.print(f"    {key.replace('_', ' ').capitalize()}: {value}")

    if wav.unknowns:
        console.print(f"  Unknown chunks: {', '.join(repr(u.id) for u in wav.unknowns)}")

    return 0


@app.command
def chunks(
    file: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    word_align: bool = False,
    verbose: bool = False,
) -> int:
    """
    List every chunk of a RIFF file in the order it appears.

    Parameters
    ----------
    file: Path
        The path to the RIFF file
    output_json: bool
        Output results as JSON (default: False)
    word_align: bool
        Expect a pad byte after odd-length chunks (default: False)
    verbose: bool
        Log every chunk as it is decoded
    """
    init_logging("debug" if verbose else None)

    if not file.exists():
        print_error(f"Error: File {file} does not exist")
        return 1

    # Walk without codecs so every chunk keeps its position and raw size
    try:
        with open(file, "rb") as f:
            riff_file = decode_riff(f, word_align=word_align)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    rows = [
        {
            "id": chunk.id,
            "size": len(chunk.data),
            "known": chunk.id in WAVE_CODECS,
            "summary": _chunk_summary(chunk.id, chunk.data),
        }
        for chunk in riff_file.unknowns
    ]

    if output_json:
        console.print(json.dumps({"type": riff_file.type, "chunks": rows}, indent=2), soft_wrap=True)
        return 0

    console.print(f"[bold]RIFF type: {riff_file.type}[/bold]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Size", justify="right")
    table.add_column("Codec")
    table.add_column("Summary")

    for i, row in enumerate(rows):
        table.add_row(
            str(i),
            repr(row["id"]),
            f"{row['size']:,}",
            "wave" if row["known"] else "-",
            row["summary"],
        )

    console.print(table)
    return 0


@app.command
def validate(
    file: Path,
    strict: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    word_align: bool = False,
    verbose: bool = False,
) -> int:
    """
    Validate the structure of a .wav file.

    Checks the RIFF header, presence and order of the fmt and data chunks,
    format consistency and that the data chunk holds whole frames.

    Parameters
    ----------
    file: Path
        The path to the .wav file to validate
    strict: bool
        Treat warnings as errors (default: False)
    output_json: bool
        Output results as JSON (default: False)
    word_align: bool
        Expect a pad byte after odd-length chunks (default: False)
    verbose: bool
        Log every chunk as it is decoded
    """
    init_logging("debug" if verbose else None)

    results: dict[str, object] = {
        "file": str(file),
        "valid": True,
        "errors": [],
        "warnings": [],
    }

    if not file.exists():
        results["valid"] = False
        results["errors"] = [f"File not found: {file}"]
        if output_json:
            console.print(json.dumps(results, indent=2), soft_wrap=True)
        else:
            print_error(f"[FAIL] File not found: {file}")
        return 1

    try:
        with open(file, "rb") as f:
            riff_file = decode_riff(f, WAVE_CODECS, word_align=word_align)
    except RiffError as e:
        results["valid"] = False
        results["errors"] = [f"RIFF error: {e}"]
        if output_json:
            console.print(json.dumps(results, indent=2), soft_wrap=True)
        else:
            print_error(f"[FAIL] RIFF error: {e}")
        return 1

    result = validate_wave(riff_file)
    results["valid"] = result.valid
    results["errors"] = list(result.errors)
    results["warnings"] = list(result.warnings)

    # In strict mode, warnings become errors
    if strict and result.warnings:
        results["valid"] = False
        results["errors"] = result.errors + [f"Strict mode: {w}" for w in result.warnings]

    if output_json:
        console.print(json.dumps(results, indent=2), soft_wrap=True)
        return 0 if results["valid"] else 1

    if results["valid"]:
        print_success(f"[PASS] {file}")
        for warning in result.warnings:
            print_warning(f"  [WARN] {warning}")
    else:
        print_error(f"[FAIL] {file}")
        err_list = results.get("errors", [])
        if isinstance(err_list, list):
            for error in err_list:
                console.print(f"  {error}")

    return 0 if results["valid"] else 1


@app.command
def convert(
    source: Path,
    output: Path,
    bits: Annotated[int, Parameter(validator=validate_bits_per_channel)] = 16,
    use_float: Annotated[bool, Parameter(name=["--float"])] = False,
    word_align: bool = False,
    verbose: bool = False,
) -> int:
    """
    Re-quantize a .wav file to another sample encoding.

    Track metadata, other LIST chunks and unknown chunks are kept.

    Parameters
    ----------
    source: Path
        The .wav file to convert
    output: Path
        Where to write the converted file
    bits: int
        Bits per channel of the output (8, 16 or 32 for PCM; 16, 32 or 64 for floats)
    use_float: bool
        Store IEEE float samples instead of PCM integers
    word_align: bool
        Expect and write a pad byte after odd-length chunks (default: False)
    verbose: bool
        Log every chunk as it is decoded
    """
    init_logging("debug" if verbose else None)

    audio_format = WaveAudioFormat.FLOATS if use_float else WaveAudioFormat.PCM
    try:
        sample_domain(audio_format, bits)
    except UnsupportedFormatError as e:
        print_error(f"Error: {e} for {audio_format.name}")
        return 1

    try:
        wav = read_wav(source, "channels-float32", word_align=word_align)
    except RiffError as e:
        print_error(f"Error reading {source}: {e}")
        return 1

    fmt = FormatChunk.for_samples(
        audio_format, wav.format.channels, wav.format.sample_rate, bits
    )

    # Extra fmt and data chunks would describe the old encoding
    extra = [c for c in wav.extra_content if not isinstance(c, (FormatChunk, DataChunk))]

    try:
        write_wav(
            output,
            WaveFile(
                format=fmt,
                info=wav.info,
                data=wav.data,
                unknowns=wav.unknowns,
                extra_content=extra,
            ),
            "channels-float32",
            word_align=word_align,
        )
    except ValidationError as e:
        print_error(f"Error writing output: {e}")
        return 1

    print_success(f"Converted {source} -> {output}")
    console.print(f"  {describe_format(wav.format)} -> {describe_format(fmt)}")
    return 0


@app.command
def tag(
    file: Path,
    artist: str | None = None,
    title: str | None = None,
    album: str | None = None,
    track: Annotated[int | None, Parameter(validator=validate_track_number)] = None,
    comment: str | None = None,
    date: str | None = None,
    software: str | None = None,
    clear: bool = False,
    output: Path | None = None,
    word_align: bool = False,
    verbose: bool = False,
) -> int:
    """
    Set the LIST/INFO track metadata of a .wav file.

    Samples and every other chunk are copied unchanged.

    Parameters
    ----------
    file: Path
        The .wav file to tag
    artist: str | None
        Artist's name (IART)
    title: str | None
        Track title (INAM)
    album: str | None
        Album title (IPRD)
    track: int | None
        Track number on the album (IPRT)
    comment: str | None
        Comment (ICMT)
    date: str | None
        Copyright date (ICRD)
    software: str | None
        Encoding software (ISFT)
    clear: bool
        Drop existing metadata before applying the new values
    output: Path | None
        Where to write the tagged file (default: overwrite the input)
    word_align: bool
        Expect and write a pad byte after odd-length chunks (default: False)
    verbose: bool
        Log every chunk as it is decoded
    """
    init_logging("debug" if verbose else None)

    try:
        wav = read_wav(file, "raw-blob", word_align=word_align)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    info = TrackInfo() if clear or wav.info is None else wav.info
    updates = {
        "artist": artist,
        "track_name": title,
        "album_name": album,
        "album_track_id": track,
        "comment": comment,
        "copyright_date": date,
        "software": software,
    }
    for name, value in updates.items():
        if value is not None:
            setattr(info, name, value)

    destination = output or file
    write_wav(
        destination,
        WaveFile(
            format=wav.format,
            info=info,
            data=wav.data,
            unknowns=wav.unknowns,
            extra_content=wav.extra_content,
        ),
        "raw-blob",
        word_align=word_align,
        validate=False,
    )

    print_success(f"Tagged {destination}")
    for key, value in info.to_list_entries().items():
        console.print(f"  {key}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(app())
