"""Unit tests for riffwave.cli module."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import numpy as np
import pytest
from rich.logging import RichHandler

from riffwave.cli.commands import app, describe_format
from riffwave.cli.logging_setup import LOG_LEVEL_ENV, init_logging
from riffwave.riff import RiffFile, UnknownChunk, encode_riff
from riffwave.wave import (
    WAVE_CODECS,
    DataChunk,
    FormatChunk,
    ListChunk,
    TrackInfo,
    WaveAudioFormat,
    WaveFile,
    read_wav,
    write_wav,
)

STEREO_SINE = [
    np.sin(np.linspace(0, 2 * np.pi, 256, dtype=np.float32)) * 0.5,
    np.cos(np.linspace(0, 2 * np.pi, 256, dtype=np.float32)) * 0.5,
]


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Undo the handler and level changes every command makes."""
    logger = logging.getLogger("riffwave")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


@pytest.fixture
def wav_path(tmp_path: Path) -> Path:
    """A 16-bit stereo file with an artist tag."""
    path = tmp_path / "tone.wav"
    fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 2, 44100, 16)
    write_wav(path, WaveFile(format=fmt, info=TrackInfo(artist="Someone"), data=STEREO_SINE))
    return path


@pytest.fixture
def padded_path(tmp_path: Path) -> Path:
    """An 8-bit mono file with five samples, written with a pad byte after data."""
    fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 1, 8000, 8)
    riff = RiffFile(type="WAVE", content=[fmt, DataChunk(data=bytes([128, 129, 130, 131, 132]))])
    path = tmp_path / "padded.wav"
    path.write_bytes(encode_riff(riff, WAVE_CODECS, word_align=True))
    return path


@pytest.fixture
def partial_frame_path(tmp_path: Path) -> Path:
    """A stereo 16-bit file whose data chunk ends mid-frame."""
    fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 2, 44100, 16)
    riff = RiffFile(type="WAVE", content=[fmt, DataChunk(data=b"\x00" * 6)])
    path = tmp_path / "partial.wav"
    path.write_bytes(encode_riff(riff, WAVE_CODECS))
    return path


class TestCliInfo:
    """Test the info command functionality."""

    def test_info_valid_file(self, wav_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["info", str(wav_path)]) == 0

        out = capsys.readouterr().out
        assert "PCM 16-bit, 2 ch, 44100 Hz" in out
        assert "Samples per channel: 256" in out
        assert "Artist: Someone" in out

    def test_info_json(self, wav_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["info", str(wav_path), "--json"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results["format"]["channels"] == 2
        assert results["format"]["bits_per_channel"] == 16
        assert results["num_samples"] == 256
        assert results["info"] == {"artist": "Someone"}
        assert results["unknown_chunks"] == []

    def test_info_nonexistent_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["info", str(tmp_path / "missing.wav")]) == 1
        assert "does not exist" in capsys.readouterr().out

    def test_info_invalid_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "invalid.wav"
        path.write_bytes(b"not a valid wav file")

        assert app(["info", str(path)]) == 1
        assert "Invalid RIFF header" in capsys.readouterr().out


class TestCliChunks:
    """Test the chunks command functionality."""

    def test_chunks_json_lists_every_chunk_in_order(
        self, wav_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert app(["chunks", str(wav_path), "--json"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results["type"] == "WAVE"
        assert [c["id"] for c in results["chunks"]] == ["fmt ", "data", "LIST"]
        assert results["chunks"][1]["size"] == 256 * 2 * 2
        assert all(c["known"] for c in results["chunks"])

    def test_chunks_table(self, wav_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["chunks", str(wav_path)]) == 0

        out = capsys.readouterr().out
        assert "RIFF type: WAVE" in out
        assert "'fmt '" in out
        assert "'data'" in out

    def test_chunks_marks_unknown_ids(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 1, 8000, 8)
        riff = RiffFile(
            type="WAVE",
            content=[fmt, DataChunk(data=b"\x80\x80")],
            unknowns=[UnknownChunk("junk", b"\x00" * 4)],
        )
        path = tmp_path / "junk.wav"
        path.write_bytes(encode_riff(riff, WAVE_CODECS))

        assert app(["chunks", str(path), "--json"]) == 0

        rows = json.loads(capsys.readouterr().out)["chunks"]
        assert rows[-1] == {"id": "junk", "size": 4, "known": False, "summary": ""}


class TestCliValidate:
    """Test the validate command functionality."""

    def test_validate_valid_file(self, wav_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["validate", str(wav_path)]) == 0
        assert "[PASS]" in capsys.readouterr().out

    def test_validate_partial_frame(
        self, partial_frame_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert app(["validate", str(partial_frame_path)]) == 1
        assert "[FAIL]" in capsys.readouterr().out

    def test_validate_json(self, partial_frame_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["validate", str(partial_frame_path), "--json"]) == 1

        results = json.loads(capsys.readouterr().out)
        assert results["valid"] is False
        assert len(results["errors"]) == 1

    def test_validate_strict_turns_warnings_into_errors(self, tmp_path: Path) -> None:
        fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 1, 8000, 8)
        riff = RiffFile(
            type="WAVE",
            content=[fmt, DataChunk(data=b"\x80\x80")],
            unknowns=[UnknownChunk("junk", b"\x00" * 4)],
        )
        path = tmp_path / "junk.wav"
        path.write_bytes(encode_riff(riff, WAVE_CODECS))

        assert app(["validate", str(path)]) == 0
        assert app(["validate", str(path), "--strict"]) == 1

    def test_validate_nonexistent_file(self, tmp_path: Path) -> None:
        assert app(["validate", str(tmp_path / "missing.wav")]) == 1


class TestCliConvert:
    """Test the convert command functionality."""

    def test_convert_to_float(self, wav_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "float.wav"

        assert app(["convert", str(wav_path), str(output), "--bits", "32", "--float"]) == 0

        converted = read_wav(output)
        assert converted.format == FormatChunk.for_samples(WaveAudioFormat.FLOATS, 2, 44100, 32)
        assert converted.info == TrackInfo(artist="Someone")
        original = read_wav(wav_path)
        for a, b in zip(converted.data, original.data):
            np.testing.assert_array_equal(a, b)

    def test_convert_to_8_bit(self, wav_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "pcm8.wav"

        assert app(["convert", str(wav_path), str(output), "--bits", "8"]) == 0

        converted = read_wav(output)
        assert converted.format.bits_per_channel == 8
        np.testing.assert_allclose(converted.data[0], STEREO_SINE[0], atol=2 / 255)

    def test_convert_unsupported_combination(
        self, wav_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "float8.wav"

        assert app(["convert", str(wav_path), str(output), "--bits", "8", "--float"]) == 1
        assert "Unsupported bits per channel: 8" in capsys.readouterr().out
        assert not output.exists()

    def test_convert_invalid_bits(self, wav_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "pcm24.wav"

        with pytest.raises(SystemExit) as e:
            app(["convert", str(wav_path), str(output), "--bits", "24"])

        assert e.value.code == 1
        assert not output.exists()


class TestCliTag:
    """Test the tag command functionality."""

    def test_tag_merges_with_existing_info(self, wav_path: Path) -> None:
        before = read_wav(wav_path, "raw-blob")

        assert app(["tag", str(wav_path), "--title", "Tone", "--track", "3"]) == 0

        after = read_wav(wav_path, "raw-blob")
        assert after.info == TrackInfo(artist="Someone", track_name="Tone", album_track_id=3)
        assert after.data == before.data

    def test_tag_clear_to_output(self, wav_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "tagged.wav"

        assert app(["tag", str(wav_path), "--clear", "--album", "Demo", "--output", str(output)]) == 0

        assert read_wav(output, "raw-blob").info == TrackInfo(album_name="Demo")
        assert read_wav(wav_path, "raw-blob").info == TrackInfo(artist="Someone")

    def test_tag_keeps_other_list_chunks(self, tmp_path: Path) -> None:
        fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 1, 8000, 16)
        cues = ListChunk(type="adtl", entries={"labl": "intro"})
        riff = RiffFile(type="WAVE", content=[fmt, DataChunk(data=b"\x00\x00" * 4), cues])
        path = tmp_path / "cues.wav"
        path.write_bytes(encode_riff(riff, WAVE_CODECS))

        assert app(["tag", str(path), "--artist", "X"]) == 0

        wav = read_wav(path, "raw-blob")
        assert wav.info == TrackInfo(artist="X")
        assert wav.extra_content == [cues]
        assert b"adtl" in path.read_bytes()

    def test_convert_keeps_other_list_chunks(self, tmp_path: Path) -> None:
        fmt = FormatChunk.for_samples(WaveAudioFormat.PCM, 1, 8000, 16)
        cues = ListChunk(type="adtl", entries={"labl": "intro"})
        riff = RiffFile(type="WAVE", content=[fmt, DataChunk(data=b"\x00\x00" * 4), cues])
        path = tmp_path / "cues16.wav"
        path.write_bytes(encode_riff(riff, WAVE_CODECS))
        output = tmp_path / "cues8.wav"

        assert app(["convert", str(path), str(output), "--bits", "8"]) == 0

        assert read_wav(output, "raw-blob").extra_content == [cues]

    def test_tag_negative_track(self, wav_path: Path) -> None:
        with pytest.raises(SystemExit) as e:
            app(["tag", str(wav_path), "--track=-1"])

        assert e.value.code == 1


class TestCliWordAlign:
    """Files from writers that pad odd-length chunks."""

    def test_info_reads_padded_file(self, padded_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["info", str(padded_path)]) == 0
        assert "Samples per channel: 5" in capsys.readouterr().out

    def test_validate_padded_file(self, padded_path: Path) -> None:
        assert app(["validate", str(padded_path)]) == 0
        assert app(["validate", str(padded_path), "--word-align"]) == 0

    def test_chunks_with_word_align(self, padded_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert app(["chunks", str(padded_path), "--json", "--word-align"]) == 0

        rows = json.loads(capsys.readouterr().out)["chunks"]
        assert [(r["id"], r["size"]) for r in rows] == [("fmt ", 16), ("data", 5)]

    def test_tag_keeps_padding(self, padded_path: Path) -> None:
        assert app(["tag", str(padded_path), "--artist", "A", "--word-align"]) == 0

        wav = read_wav(padded_path, "raw-blob", word_align=True)
        assert wav.data == bytes([128, 129, 130, 131, 132])
        assert wav.info == TrackInfo(artist="A")
        assert padded_path.read_bytes()[44:50] == bytes([128, 129, 130, 131, 132, 0])

    def test_convert_with_word_align(self, padded_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "pcm16.wav"

        assert app(["convert", str(padded_path), str(output), "--word-align"]) == 0
        assert read_wav(output, "channels-fmt").num_samples == 5


class TestDescribeFormat:
    def test_unknown_audio_format(self) -> None:
        fmt = FormatChunk(
            audio_format=0xFE,
            channels=1,
            sample_rate=8000,
            byte_rate=16000,
            block_align=2,
            bits_per_channel=16,
        )

        assert describe_format(fmt) == "0xfe 16-bit, 1 ch, 8000 Hz"


class TestInitLogging:
    """Test the rich logging setup."""

    def test_level_from_argument(self) -> None:
        init_logging("debug")

        logger = logging.getLogger("riffwave")
        assert logger.level == logging.DEBUG
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "error")

        init_logging()
        init_logging()

        logger = logging.getLogger("riffwave")
        assert logger.level == logging.ERROR
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1

    def test_unknown_level_defaults_to_warning(self) -> None:
        init_logging("chatty")

        assert logging.getLogger("riffwave").level == logging.WARNING
