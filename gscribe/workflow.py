"""End-to-end transcription of a single audio file."""

import asyncio
import logging
import os
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path

from .config import WorkflowConfig
from .errors import (
    CleanupError,
    ConfigurationError,
    PersistenceError,
    RemoteOperationFailed,
    UnsupportedFormatError,
)
from .models import (
    AudioEncoding,
    ProgressEvent,
    RecognitionRequest,
    RecognizedWord,
    StagedAudio,
    TranscriptionResult,
    WorkflowOutcome,
    WorkflowState,
)
from .transcription.audio import encoding_for_codec
from .transcription.base import MetadataReader, OutputSink, SpeechProvider, StorageProvider
from .transcription.poller import RemoteOperationPoller
from .transcription.speakers import assemble_speaker_blocks, render_speaker_blocks
from .utils import transcript_paths

logger = logging.getLogger(__name__)


class TranscriptionWorkflow:
    """Validate, stage, transcribe, assemble, persist and clean up.

    Validation, format and staging failures are fatal and raised to the
    caller before any recognition job exists. A faulted recognition job or a
    failed write is logged and reported through the returned
    ``WorkflowOutcome``. Staged audio is always deleted once staging
    succeeded, whatever happens afterwards.
    """

    def __init__(
        self,
        config: WorkflowConfig,
        *,
        speech: SpeechProvider,
        metadata: MetadataReader,
        sink: OutputSink,
        storage: StorageProvider | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        on_progress: Callable[[ProgressEvent], None] | None = None,
    ) -> None:
        self.config = config
        self.speech = speech
        self.metadata = metadata
        self.sink = sink
        self.storage = storage
        self._sleep = sleep
        self._on_progress = on_progress
        self.state = WorkflowState.VALIDATING

    def _enter(self, state: WorkflowState) -> None:
        logger.debug("%s: %s -> %s", self.config.audio_path, self.state.value, state.value)
        self.state = state

    async def run(self) -> WorkflowOutcome:
        self._enter(WorkflowState.VALIDATING)
        try:
            encoding, sample_rate = self._validate()
            staged = await self._stage() if self.config.stage_audio else None
        except BaseException:
            self._enter(WorkflowState.FAILED)
            raise

        try:
            try:
                outcome = await self._transcribe_and_persist(staged, encoding, sample_rate)
            finally:
                if staged is not None:
                    await self._cleanup(staged)
        except BaseException:
            self._enter(WorkflowState.FAILED)
            raise

        self._enter(outcome.state)
        return outcome

    def _validate(self) -> tuple[AudioEncoding, int]:
        path = self.config.audio_path
        if not path.is_file():
            raise ConfigurationError(f"The audio file at path {path} does not exist.")
        if not os.access(path, os.R_OK):
            raise ConfigurationError(f"The audio file at path {path} is not readable.")

        for name in ("speech", "metadata", "sink"):
            if getattr(self, name) is None:
                raise ConfigurationError(f"The {name} service is not initialized.")
        if self.config.stage_audio and self.storage is None:
            raise ConfigurationError(
                f"Staging to bucket {self.config.bucket} requested but the storage service is not initialized."
            )

        codec = self.metadata.detect_codec(path)
        try:
            encoding = encoding_for_codec(codec)
        except UnsupportedFormatError:
            logger.error("The audio file at path %s has an unsupported codec %s.", path, codec.value)
            raise

        sample_rate = self.metadata.detect_sample_rate(path)
        if sample_rate <= 0:
            raise UnsupportedFormatError(f"Invalid sample rate {sample_rate} Hz for {path}.")

        logger.debug("%s: %s at %d Hz", path, encoding.value, sample_rate)
        return encoding, sample_rate

    async def _stage(self) -> StagedAudio:
        self._enter(WorkflowState.STAGING_AUDIO)
        path = self.config.audio_path
        bucket = self.config.bucket

        if not await self.storage.bucket_exists(bucket):
            await self.storage.create_bucket(bucket)
            logger.info("Bucket %s was created.", bucket)

        logger.info("Uploading audio to bucket %s.", bucket)
        object_name = f"{uuid.uuid4()}{path.suffix}"
        uri = await self.storage.upload(bucket, object_name, path)
        logger.info("Uploaded audio to %s.", uri)
        return StagedAudio(bucket=bucket, object_name=object_name, uri=uri)

    async def _transcribe_and_persist(
        self, staged: StagedAudio | None, encoding: AudioEncoding, sample_rate: int
    ) -> WorkflowOutcome:
        path = self.config.audio_path
        request = RecognitionRequest(
            audio_location=staged.uri if staged else str(path),
            encoding=encoding,
            sample_rate_hz=sample_rate,
            language_code=self.config.language_code,
            diarization_enabled=True,
            punctuation_enabled=self.config.punctuation_enabled,
        )

        self._enter(WorkflowState.TRANSCRIBING)
        try:
            words = await self._transcribe(request)
        except RemoteOperationFailed as e:
            logger.error("Transcription of %s failed: %s", path, e.message)
            return WorkflowOutcome(state=WorkflowState.FAILED, error=str(e))

        self._enter(WorkflowState.ASSEMBLING)
        result = TranscriptionResult(
            source_audio_path=str(path),
            source_audio_uri=staged.uri if staged else None,
            blocks=tuple(assemble_speaker_blocks(words)),
        )
        logger.info("Assembled %d speaker blocks for %s.", len(result.blocks), path)

        self._enter(WorkflowState.PERSISTING)
        try:
            output_paths = self._persist(result)
        except PersistenceError as e:
            logger.error("Writing the transcript of %s failed: %s", path, e)
            return WorkflowOutcome(state=WorkflowState.FAILED, result=result, error=str(e))

        return WorkflowOutcome(state=WorkflowState.DONE, result=result, output_paths=output_paths)

    async def _transcribe(self, request: RecognitionRequest) -> list[RecognizedWord]:
        path = self.config.audio_path
        poller = RemoteOperationPoller(
            self.speech, request, interval=self.config.poll_interval, sleep=self._sleep
        )

        logger.info("Transcription started for %s.", path)
        words: tuple[RecognizedWord, ...] = ()
        async for event in poller.start():
            if self._on_progress is not None:
                self._on_progress(event)
            if event.is_terminal:
                words = event.words
            else:
                logger.info("Transcription progress for %s: %d%%.", path, event.percent_complete)

        logger.info("Transcription completed for %s: %d words.", path, len(words))
        return list(words)

    def _persist(self, result: TranscriptionResult) -> list[Path]:
        json_path, text_path = transcript_paths(self.config.audio_path, self.config.output_dir)
        fmt = self.config.output_format

        written = []
        if fmt in ("json", "both"):
            written.append(self.sink.write_json(result, json_path))
        if fmt in ("text", "both"):
            written.append(self.sink.write_text(render_speaker_blocks(result.blocks), text_path))
        for p in written:
            logger.info("Wrote %s.", p)
        return written

    async def _cleanup(self, staged: StagedAudio) -> None:
        self._enter(WorkflowState.CLEANING_UP)
        try:
            await self.storage.delete(staged.bucket, staged.object_name)
        except CleanupError as e:
            logger.warning("Failed to delete uploaded audio %s: %s", staged.uri, e)
        else:
            logger.info("Deleted uploaded audio %s.", staged.uri)
