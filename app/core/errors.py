"""Error taxonomy shared by the extractor, store, chains and API layer.

Every error carries the HTTP status it is surfaced with; ``app.main``
translates them into ``{"error": message}`` responses.
"""


class AppError(Exception):
    """Base class for errors with a defined HTTP mapping."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed client input."""

    status_code = 400


class FormatError(AppError):
    """Uploaded document does not carry the expected signature."""

    status_code = 400


class SizeLimitError(AppError):
    """Uploaded document exceeds the configured size limit."""

    status_code = 400

    def __init__(self, message: str, size: int = 0, limit: int = 0):
        super().__init__(message)
        self.size = size
        self.limit = limit


class RecordNotFoundError(AppError):
    """A referenced record does not exist."""

    status_code = 404


class ExtractionError(AppError):
    """Document parsing failed after the signature check passed."""

    status_code = 500


class AIServiceError(AppError):
    """The model call failed or returned content that is not a JSON object."""

    status_code = 502


class StoreError(AppError):
    """Invalid write against the record store."""

    status_code = 500


class ReferenceIntegrityError(StoreError):
    """A foreign reference on a new record does not resolve."""


class ConfigurationError(AppError):
    """Required settings are missing or invalid."""

    status_code = 500
