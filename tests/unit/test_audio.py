"""Unit tests for audio upload helpers."""

from __future__ import annotations

import os

import pytest

from poczytajmy.utils.audio import pick_audio_extension, temporary_recording


class TestPickAudioExtension:
    def test_filename_wins(self) -> None:
        assert pick_audio_extension("nagranie.M4A", "audio/webm") == "m4a"

    @pytest.mark.parametrize(
        ("mime", "ext"),
        [
            ("audio/webm", "webm"),
            ("audio/m4a", "m4a"),
            ("audio/mp4", "mp4"),
            ("audio/mpeg", "mp3"),
            ("audio/mp3", "mp3"),
            ("audio/wav", "wav"),
            ("audio/x-wav", "wav"),
            ("AUDIO/OGG", "ogg"),
        ],
    )
    def test_mime_table(self, mime: str, ext: str) -> None:
        assert pick_audio_extension("blob", mime) == ext

    def test_unknown_falls_back_to_dat(self) -> None:
        assert pick_audio_extension(None, "application/octet-stream") == "dat"
        assert pick_audio_extension("", None) == "dat"


class TestTemporaryRecording:
    def test_file_exists_inside_and_removed_after(self) -> None:
        with temporary_recording(b"RIFF....", "wav") as path:
            assert os.path.basename(path).startswith("rec-")
            assert path.endswith(".wav")
            with open(path, "rb") as f:
                assert f.read() == b"RIFF...."
        assert not os.path.exists(path)

    def test_removed_on_error(self) -> None:
        captured: list[str] = []
        with pytest.raises(RuntimeError):
            with temporary_recording(b"data", "webm") as path:
                captured.append(path)
                raise RuntimeError("provider exploded")
        assert not os.path.exists(captured[0])

    def test_already_deleted_file_is_fine(self) -> None:
        with temporary_recording(b"data", "ogg") as path:
            os.unlink(path)
        assert not os.path.exists(path)
