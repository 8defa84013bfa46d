"""Environment loading, defaults and the per-run configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

# Load .env from project root
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)


DEFAULT_BUCKET = "gcs-tool"
DEFAULT_LANGUAGE = "en-US"
DEFAULT_OUTPUT_DIR = Path("./output")
DEFAULT_LOG_FILE = Path("audit.log")
POLL_INTERVAL_SECONDS = 5.0
OUTPUT_FORMATS = ("json", "text", "both")


def get_credentials_path(explicit: Path | None = None) -> Path:
    """Resolve the service account file from the flag or the environment."""
    if explicit is not None:
        path = explicit
    else:
        value = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")
        if not value:
            raise ConfigurationError(
                "No credentials given. Pass --credentials or set "
                "GOOGLE_APPLICATION_CREDENTIALS in .env."
            )
        path = Path(value)

    path = path.expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Credentials file not found: {path}")
    return path


class WorkflowConfig(BaseModel):
    """Everything a single transcription run needs, passed in explicitly."""

    audio_path: Path
    credentials_path: Path | None = None
    bucket: str = DEFAULT_BUCKET
    language_code: str = DEFAULT_LANGUAGE
    output_dir: Path = DEFAULT_OUTPUT_DIR
    output_format: str = Field(default="both", pattern="^(json|text|both)$")
    stage_audio: bool = True
    punctuation_enabled: bool = True
    poll_interval: float = Field(default=POLL_INTERVAL_SECONDS, ge=0)
