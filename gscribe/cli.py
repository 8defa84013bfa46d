"""Typer CLI app: transcribe a file with Google Speech-to-Text."""

import asyncio
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from .config import (
    DEFAULT_BUCKET,
    DEFAULT_LANGUAGE,
    DEFAULT_LOG_FILE,
    DEFAULT_OUTPUT_DIR,
    OUTPUT_FORMATS,
    POLL_INTERVAL_SECONDS,
    WorkflowConfig,
    get_credentials_path,
)
from .errors import GscribeError
from .models import ProgressEvent, WorkflowOutcome
from .storage import GoogleStorageProvider
from .transcription.audio import SoundfileMetadataReader, is_audio_file
from .transcription.google_speech import GoogleSpeechProvider
from .utils import FileOutputSink
from .workflow import TranscriptionWorkflow

app = typer.Typer(help="gscribe: Google Cloud Speech-to-Text transcription tool")
console = Console()
logger = logging.getLogger("gscribe")


@app.callback()
def main() -> None:
    """Transcribe speaker-diarized audio with Google Cloud."""


def _setup_logging(verbose: bool, log_file: Path | None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def _build_workflow(config: WorkflowConfig) -> TranscriptionWorkflow:
    """Start the Google services; failures surface as ConfigurationError."""
    speech = GoogleSpeechProvider(config.credentials_path)
    storage = GoogleStorageProvider(config.credentials_path) if config.stage_audio else None

    def _report(event: ProgressEvent) -> None:
        if not event.is_terminal:
            console.print(f"  {event.percent_complete}% complete")

    return TranscriptionWorkflow(
        config,
        speech=speech,
        storage=storage,
        metadata=SoundfileMetadataReader(),
        sink=FileOutputSink(),
        on_progress=_report,
    )


@app.command()
def transcribe(
    audio: Path = typer.Argument(..., help="WAV or FLAC audio file to transcribe"),
    credentials: Path = typer.Option(
        None,
        "--credentials",
        "-c",
        help="Service account credentials.json (defaults to GOOGLE_APPLICATION_CREDENTIALS)",
    ),
    bucket: str = typer.Option(DEFAULT_BUCKET, "--bucket", "-b", help="Bucket used to stage the audio"),
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l", help="Language code of the audio"),
    output: Path = typer.Option(DEFAULT_OUTPUT_DIR, "--output", "-o", help="Output directory"),
    format: str = typer.Option("both", "--format", help="Output format: json, text, both"),
    no_stage: bool = typer.Option(
        False, "--no-stage", help="Send the file inline instead of staging it in a bucket"
    ),
    no_punctuation: bool = typer.Option(False, "--no-punctuation", help="Disable automatic punctuation"),
    poll_interval: float = typer.Option(
        POLL_INTERVAL_SECONDS, "--poll-interval", min=0, help="Seconds between job status polls"
    ),
    log_file: Path = typer.Option(DEFAULT_LOG_FILE, "--log-file", help="Audit log file, rotated daily"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Transcribe audio and write speaker-attributed JSON/text transcripts."""
    _setup_logging(verbose, log_file)

    if format not in OUTPUT_FORMATS:
        console.print(f"[red]Unsupported output format: {format}[/red]")
        raise typer.Exit(1)

    if not audio.exists():
        console.print(f"[red]File not found: {escape(str(audio))}[/red]")
        logger.error("The audio file at path %s does not exist.", audio)
        raise typer.Exit(1)

    if not is_audio_file(audio):
        console.print(f"[yellow]Unrecognized audio extension {audio.suffix}, trying anyway.[/yellow]")

    async def _run() -> WorkflowOutcome:
        config = WorkflowConfig(
            audio_path=audio,
            credentials_path=get_credentials_path(credentials),
            bucket=bucket,
            language_code=language,
            output_dir=output,
            output_format=format,
            stage_audio=not no_stage,
            punctuation_enabled=not no_punctuation,
            poll_interval=poll_interval,
        )
        workflow = _build_workflow(config)
        console.print(f"[bold]Transcribing:[/bold] {audio.name}")
        return await workflow.run()

    try:
        outcome = asyncio.run(_run())
    except GscribeError as e:
        logger.error("%s", e)
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not outcome.succeeded:
        console.print(f"[red]Transcription failed:[/red] {escape(outcome.error or '')}")
        raise typer.Exit(1)

    console.print(
        f"  [green]Done.[/green] {len(outcome.result.blocks)} speaker blocks."
    )
    for path in outcome.output_paths:
        console.print(f"[bold green]Output:[/bold green] {path}")


if __name__ == "__main__":
    app()
