"""Collaborator protocols the workflow depends on."""

from pathlib import Path
from typing import Any, Protocol

from ..models import CodecKind, OperationStatus, RecognitionRequest, TranscriptionResult


class SpeechProvider(Protocol):
    """Long-running speech recognition backend."""

    async def submit(self, request: RecognitionRequest) -> Any: ...

    async def poll_once(self, handle: Any) -> OperationStatus: ...


class StorageProvider(Protocol):
    """Object storage used to stage audio for the speech backend."""

    async def bucket_exists(self, bucket: str) -> bool: ...

    async def create_bucket(self, bucket: str) -> None: ...

    async def upload(self, bucket: str, object_name: str, local_path: Path) -> str: ...

    async def delete(self, bucket: str, object_name: str) -> None: ...


class MetadataReader(Protocol):
    def detect_codec(self, path: Path) -> CodecKind: ...

    def detect_sample_rate(self, path: Path) -> int: ...


class OutputSink(Protocol):
    def write_json(self, result: TranscriptionResult, path: Path) -> Path: ...

    def write_text(self, text: str, path: Path) -> Path: ...
