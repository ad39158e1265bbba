class VisionError(Exception):
    """Raised when the remote vision model fails to transcribe an image."""


class VisionNetworkError(VisionError):
    """Raised when the vision provider call fails due to network/infrastructure issues."""


class VisionAuthError(VisionError):
    """Raised when the vision provider rejects the configured credentials."""


class VisionQueueError(VisionError):
    """Raised when the async vision queue cannot accept or return a job."""
