"""Pytest configuration and fake collaborators."""

from pathlib import Path

import pytest

from gscribe.errors import CleanupError, PersistenceError, StagingError
from gscribe.models import (
    AudioEncoding,
    CodecKind,
    OperationStatus,
    RecognitionRequest,
    RecognizedWord,
    TranscriptionResult,
)


class ScriptedSpeech:
    """Speech provider that replays a fixed list of poll results."""

    def __init__(self, statuses, journal=None, error=None):
        self.statuses = list(statuses)
        self.journal = journal if journal is not None else []
        self.error = error
        self.submitted: list[RecognitionRequest] = []
        self.polls = 0

    async def submit(self, request):
        self.submitted.append(request)
        self.journal.append("submit")
        return "operations/1"

    async def poll_once(self, handle):
        assert handle == "operations/1"
        self.polls += 1
        self.journal.append("poll")
        if self.error is not None:
            raise self.error
        return self.statuses.pop(0)


class DummyStorage:
    def __init__(self, journal=None, *, exists=True, fail_upload=False, fail_delete=False):
        self.journal = journal if journal is not None else []
        self.exists = exists
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.calls: list[tuple] = []

    async def bucket_exists(self, bucket):
        self.calls.append(("bucket_exists", bucket))
        return self.exists

    async def create_bucket(self, bucket):
        self.calls.append(("create_bucket", bucket))
        self.exists = True

    async def upload(self, bucket, object_name, local_path):
        self.calls.append(("upload", bucket, object_name, local_path))
        self.journal.append("upload")
        if self.fail_upload:
            raise StagingError(f"Unable to upload {local_path} to bucket {bucket}")
        return f"gs://{bucket}/{object_name}"

    async def delete(self, bucket, object_name):
        self.calls.append(("delete", bucket, object_name))
        self.journal.append("delete")
        if self.fail_delete:
            raise CleanupError(f"Unable to delete gs://{bucket}/{object_name}")

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)


class DummyMetadata:
    def __init__(self, codec=CodecKind.WAVE, sample_rate=16000):
        self.codec = codec
        self.sample_rate = sample_rate

    def detect_codec(self, path: Path) -> CodecKind:
        return self.codec

    def detect_sample_rate(self, path: Path) -> int:
        return self.sample_rate


class MemorySink:
    def __init__(self, journal=None, fail=False):
        self.journal = journal if journal is not None else []
        self.fail = fail
        self.json: dict[Path, TranscriptionResult] = {}
        self.text: dict[Path, str] = {}

    def write_json(self, result, path):
        self.journal.append("write_json")
        if self.fail:
            raise PersistenceError(f"Unable to write {path}")
        self.json[path] = result
        return path

    def write_text(self, text, path):
        self.journal.append("write_text")
        if self.fail:
            raise PersistenceError(f"Unable to write {path}")
        self.text[path] = text
        return path


@pytest.fixture
def recognition_request():
    return RecognitionRequest(
        audio_location="gs://gcs-tool/sample.wav",
        encoding=AudioEncoding.LINEAR16,
        sample_rate_hz=16000,
    )


@pytest.fixture
def sample_words():
    """Diarized words: two speakers plus one unassigned word."""
    return [
        RecognizedWord(text="A", speaker_tag=1),
        RecognizedWord(text="hi", speaker_tag=1),
        RecognizedWord(text="there", speaker_tag=2),
        RecognizedWord(text="bye", speaker_tag=2),
        RecognizedWord(text="ok", speaker_tag=0),
        RecognizedWord(text="again", speaker_tag=1),
    ]


@pytest.fixture
def progress(sample_words):
    """Build a list of poll results ending in a successful terminal status."""

    def _build(*percents, words=None):
        statuses = [OperationStatus(percent_complete=p) for p in percents]
        statuses.append(
            OperationStatus(
                percent_complete=100,
                done=True,
                words=sample_words if words is None else words,
            )
        )
        return statuses

    return _build


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "interview.wav"
    path.write_bytes(b"RIFF....WAVEfmt ")
    return path


@pytest.fixture
def journal():
    return []
