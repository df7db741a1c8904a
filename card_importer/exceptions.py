"""
Custom exception hierarchy for the card importer.

Fatal errors (preconditions, timestamp resolution) abort the whole run.
File operation errors are local to one file and the run carries on.
"""


class CardImporterError(Exception):
    """Base exception for all card importer errors."""
    pass


class FatalPreconditionError(CardImporterError):
    """Raised when archive roots are missing or no cards/files were found."""
    pass


class MetadataExtractionError(CardImporterError):
    """Raised when no embedded capture date can be read from a file."""
    pass


class TimestampResolutionError(CardImporterError):
    """Raised when a file's capture time cannot be trusted or recovered."""
    pass


class FileOperationError(CardImporterError):
    """Raised when file copy/move operations fail."""
    pass
