"""
Exceptions raised by the refresh pipeline.

The HTTP layer maps every RefreshError to a 503 response carrying ``details``.
"""

INTERNAL_PROCESSING_DETAILS = "Internal processing during refresh"


class RefreshError(Exception):
    """Base exception for a failed refresh cycle."""

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


class UpstreamUnavailableError(RefreshError):
    """An upstream source could not be fetched or decoded."""

    def __init__(self, source: str):
        super().__init__(f"Could not fetch data from {source}")
        self.source = source


class RefreshProcessingError(RefreshError):
    """Merging, persisting or rendering failed. The cause is kept on ``__cause__`` only."""

    def __init__(self):
        super().__init__(INTERNAL_PROCESSING_DETAILS)


__all__ = [
    "INTERNAL_PROCESSING_DETAILS",
    "RefreshError",
    "RefreshProcessingError",
    "UpstreamUnavailableError",
]
