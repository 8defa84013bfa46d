"""Pydantic models for gscribe."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class AudioEncoding(str, Enum):
    LINEAR16 = "LINEAR16"
    FLAC = "FLAC"


class CodecKind(str, Enum):
    WAVE = "WAVE"
    FLAC = "FLAC"
    OTHER = "OTHER"


class RecognizedWord(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    speaker_tag: int = 0


class RecognitionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    audio_location: str
    encoding: AudioEncoding
    sample_rate_hz: int = Field(gt=0)
    language_code: str = "en-US"
    diarization_enabled: bool = True
    punctuation_enabled: bool = True


class OperationStatus(BaseModel):
    """One observation of a remote recognition job."""

    percent_complete: int = Field(default=0, ge=0, le=100)
    done: bool = False
    error: str | None = None
    words: list[RecognizedWord] = []

    @property
    def faulted(self) -> bool:
        return self.error is not None


class ProgressEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    percent_complete: int = Field(ge=0, le=100)
    is_terminal: bool = False
    words: tuple[RecognizedWord, ...] = ()


class SpeakerTextBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    speaker_tag: int
    text: str


class TranscriptionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_audio_path: str
    source_audio_uri: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    blocks: tuple[SpeakerTextBlock, ...] = ()


class StagedAudio(BaseModel):
    bucket: str
    object_name: str
    uri: str


class WorkflowState(str, Enum):
    VALIDATING = "validating"
    STAGING_AUDIO = "staging_audio"
    TRANSCRIBING = "transcribing"
    ASSEMBLING = "assembling"
    PERSISTING = "persisting"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


class WorkflowOutcome(BaseModel):
    state: WorkflowState
    result: TranscriptionResult | None = None
    output_paths: list[Path] = []
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is WorkflowState.DONE
