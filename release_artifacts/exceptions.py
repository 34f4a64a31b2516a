from typing import Optional


class ReleaseArtifactError(Exception):
    """Base release artifact exception."""

    pass


class ConfigurationError(ReleaseArtifactError):
    """Invalid or missing configuration."""

    pass


class NotFoundError(ReleaseArtifactError):
    """Workflow run or artifact not found."""

    pass


class AmbiguousArtifactError(ReleaseArtifactError):
    """More than one artifact matches a requested name."""

    pass


class RunTimeoutError(ReleaseArtifactError, TimeoutError):
    """Workflow run did not complete before the deadline."""

    pass


class RunFailedError(ReleaseArtifactError):
    """Workflow run completed without success."""

    def __init__(self, conclusion: Optional[str], run_id: Optional[int] = None):
        self.conclusion = conclusion
        self.run_id = run_id
        super().__init__(f"Workflow not successful conclusion={conclusion}")


class ExtractionError(ReleaseArtifactError):
    """Extraction tool missing or failed."""

    pass


class ExtractionVerificationError(ExtractionError):
    """Extraction finished but the expected output is absent."""

    pass
