"""Audio upload helpers: extension detection and a self-cleaning temp file.

Whisper endpoints infer the container format from the file name, so the
upload is written to ``<tmp>/rec-<timestamp>.<ext>`` before transcription.
"""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from poczytajmy.utils.errors import LocalProcessingError

EXTENSION_BY_MIME: dict[str, str] = {
    "audio/webm": "webm",
    "audio/m4a": "m4a",
    "audio/mp4": "mp4",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/ogg": "ogg",
}

DEFAULT_EXTENSION = "dat"


def pick_audio_extension(filename: str | None, content_type: str | None) -> str:
    """Choose the temp-file extension for an upload.

    The original file name wins; the MIME type is the fallback, then ``dat``.
    """
    suffix = Path(filename or "").suffix.lstrip(".").lower()
    if suffix:
        return suffix
    return EXTENSION_BY_MIME.get((content_type or "").lower(), DEFAULT_EXTENSION)


@contextmanager
def temporary_recording(data: bytes, extension: str) -> Iterator[str]:
    """Write *data* to a temp file and yield its path.

    The file is removed when the block exits, on success and on error.
    """
    path = os.path.join(tempfile.gettempdir(), f"rec-{time.time_ns()}.{extension}")
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise LocalProcessingError(f"Could not write recording: {exc}") from exc

    try:
        yield path
    finally:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
