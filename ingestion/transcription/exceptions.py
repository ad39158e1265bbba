class TranscriptionError(Exception):
    """Raised when speech-to-text transcription fails."""
