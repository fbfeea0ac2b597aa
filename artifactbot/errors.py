from typing import Optional


class ArtifactImportError(Exception):
    """Base class for failures of the artifact import operation.

    ``field`` and ``value`` name the offending input, when there is one, so
    the caller can report it back to the user.
    """

    kind = "Import error"

    def __init__(
        self, message: str, field: Optional[str] = None, value: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        if self.field is None:
            return self.message
        return f"{self.message} ({self.field}={self.value!r})"


class ConfigurationError(ArtifactImportError):
    kind = "Configuration error"


class JenkinsConnectionError(ArtifactImportError, ConnectionError):
    """Jenkins could not be reached, or refused our credentials."""

    kind = "Connection error"


class NotFoundError(ArtifactImportError):
    """The job, branch, build or alias does not resolve on the server."""

    kind = "Not found"


class DuplicateArtifactError(ArtifactImportError):
    kind = "Duplicate artifact"
