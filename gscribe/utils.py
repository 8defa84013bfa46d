"""File helpers and transcript output."""

from pathlib import Path

from .errors import PersistenceError
from .models import TranscriptionResult


def ensure_output_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def transcript_paths(audio_path: Path, output_dir: Path) -> tuple[Path, Path]:
    """Return the (json, text) output paths for an audio file."""
    stem = f"Transcription-{audio_path.stem}"
    return output_dir / f"{stem}.json", output_dir / f"{stem}.txt"


class FileOutputSink:
    """Writes transcripts to the local filesystem."""

    def write_json(self, result: TranscriptionResult, path: Path) -> Path:
        return self._write(path, result.model_dump_json(indent=2))

    def write_text(self, text: str, path: Path) -> Path:
        return self._write(path, text)

    def _write(self, path: Path, content: str) -> Path:
        try:
            ensure_output_dir(path.parent)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Unable to write {path}: {e}") from e
        return path
