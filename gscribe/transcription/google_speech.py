"""Google Cloud Speech-to-Text long-running recognition."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from google.api_core.exceptions import GoogleAPIError
from google.api_core.operation import Operation
from google.auth.exceptions import GoogleAuthError
from google.cloud import speech

from ..errors import ConfigurationError, RemoteOperationFailed
from ..models import OperationStatus, RecognitionRequest, RecognizedWord

# Failures the SDK can surface: API errors, expired credentials, transport errors
_SDK_ERRORS = (GoogleAPIError, GoogleAuthError, OSError)


@dataclass
class _Job:
    operation: Operation
    request: RecognitionRequest


class GoogleSpeechProvider:
    """Speech provider backed by ``SpeechClient.long_running_recognize``."""

    def __init__(
        self,
        credentials_path: Path | None = None,
        *,
        client: speech.SpeechClient | None = None,
    ) -> None:
        if client is None:
            try:
                if credentials_path is not None:
                    client = speech.SpeechClient.from_service_account_file(str(credentials_path))
                else:
                    client = speech.SpeechClient()
            except (GoogleAuthError, ValueError, OSError) as e:
                raise ConfigurationError(f"Failed to start the speech service: {e}") from e
        self.client = client

    async def submit(self, request: RecognitionRequest) -> _Job:
        operation = await asyncio.to_thread(self._submit_sync, request)
        return _Job(operation=operation, request=request)

    async def poll_once(self, handle: _Job) -> OperationStatus:
        return await asyncio.to_thread(self._poll_sync, handle)

    def _submit_sync(self, request: RecognitionRequest) -> Operation:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[request.encoding.value],
            sample_rate_hertz=request.sample_rate_hz,
            language_code=request.language_code,
            enable_automatic_punctuation=request.punctuation_enabled,
            diarization_config=speech.SpeakerDiarizationConfig(
                enable_speaker_diarization=request.diarization_enabled,
            ),
        )

        location = request.audio_location
        if location.startswith("gs://"):
            audio = speech.RecognitionAudio(uri=location)
        else:
            audio = speech.RecognitionAudio(content=Path(location).read_bytes())

        try:
            return self.client.long_running_recognize(config=config, audio=audio)
        except _SDK_ERRORS as e:
            raise RemoteOperationFailed(
                f"Recognition request for {location} was rejected: {_describe(e)}"
            ) from e

    def _poll_sync(self, job: _Job) -> OperationStatus:
        operation = job.operation
        try:
            # done() refreshes the operation from the server
            done = operation.done()
        except _SDK_ERRORS as e:
            raise RemoteOperationFailed(f"Polling the recognition job failed: {_describe(e)}") from e

        metadata = operation.metadata
        percent = metadata.progress_percent if metadata is not None else 0
        percent = min(max(percent, 0), 100)
        if not done:
            return OperationStatus(percent_complete=percent)

        raw = operation.operation
        if raw.HasField("error"):
            message = raw.error.message or f"error code {raw.error.code}"
            return OperationStatus(percent_complete=percent, done=True, error=message)

        response = operation.result()
        return OperationStatus(
            percent_complete=100,
            done=True,
            words=_extract_words(response, diarized=job.request.diarization_enabled),
        )


def _describe(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def _extract_words(response, *, diarized: bool) -> list[RecognizedWord]:
    results = [r for r in response.results if r.alternatives]
    if not results:
        return []

    # With diarization the last result repeats every word with its speaker tag.
    if diarized:
        alternatives = [results[-1].alternatives[0]]
    else:
        alternatives = [r.alternatives[0] for r in results]

    return [
        RecognizedWord(text=w.word, speaker_tag=w.speaker_tag)
        for alt in alternatives
        for w in alt.words
    ]
