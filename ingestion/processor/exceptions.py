class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class UnsupportedFormatError(ProcessorError):
    """Raised when neither the MIME type nor the extension is recognized."""


class OversizeInputError(ProcessorError):
    """Raised when the input exceeds the configured size cap."""


class DecodeFailureError(ProcessorError):
    """Raised when image, PDF or word-processor bytes cannot be decoded."""


class EmptyExtractionError(ProcessorError):
    """Raised when every extraction tier produced no usable text."""


class CollaboratorUnavailableError(ProcessorError):
    """Raised when a required external collaborator is missing or unreachable."""
