"""
Custom exception classes for content directives.

Malformed or missing directives are never errors; they resolve to "no
directive". These exceptions cover missing records and failing collaborators.
"""


class ContentDirectivesError(Exception):
    """Base exception for all content directive errors."""
    pass


# =============================================================================
# Content Errors
# =============================================================================

class ContentNotFoundError(ContentDirectivesError):
    """Raised when a referenced content item does not exist."""

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__(f"Content item {item_id} does not exist")


# =============================================================================
# External I/O Errors
# =============================================================================

class ExternalIOError(ContentDirectivesError):
    """Base exception for failures of persistence or the job queue."""
    pass


class ContentStoreError(ExternalIOError):
    """Raised when the content store cannot be read or written."""
    pass


class JobQueueError(ExternalIOError):
    """Raised when the job queue rejects or fails a submission."""
    pass
