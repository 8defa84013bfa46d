"""gscribe: speaker-attributed transcription with Google Cloud Speech-to-Text."""

__version__ = "0.1.0"
