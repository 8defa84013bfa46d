"""Exception hierarchy for gscribe."""


class GscribeError(Exception):
    """Base class for every error gscribe raises on purpose."""


class ConfigurationError(GscribeError):
    """Missing or invalid credentials, input path or collaborator."""


class UnsupportedFormatError(GscribeError):
    """Detected codec is outside the supported set."""


class StagingError(GscribeError):
    """Bucket creation or audio upload failed."""


class RemoteOperationFailed(GscribeError):
    """The remote recognition job reported a fault."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PersistenceError(GscribeError):
    """Writing a transcript to disk failed."""


class CleanupError(GscribeError):
    """Deleting the staged audio failed."""
