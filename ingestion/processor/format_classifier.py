from pathlib import PurePosixPath
from typing import ClassVar

from ingestion.logging.logger import Log
from ingestion.processor.exceptions import UnsupportedFormatError
from ingestion.processor.models import FileKind

OCTET_STREAM = "application/octet-stream"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FormatClassifier:
    """Maps a declared MIME type (or the file extension) to a processing strategy."""

    EXTENSION_TO_MIME: ClassVar[dict[str, str]] = {
        ".md": "text/markdown",
        ".markdown": "text/markdown",
        ".txt": "text/plain",
        ".pdf": "application/pdf",
        ".docx": DOCX_MIME,
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".gif": "image/gif",
        ".bmp": "image/bmp",
        ".webp": "image/webp",
        ".mp3": "audio/mpeg",
        ".wav": "audio/wav",
        ".m4a": "audio/m4a",
        ".ogg": "audio/ogg",
        ".mp4": "video/mp4",
        ".webm": "video/webm",
    }

    MIME_TO_KIND: ClassVar[dict[str, FileKind]] = {
        "text/plain": FileKind.TEXT,
        "text/markdown": FileKind.TEXT,
        "image/jpeg": FileKind.IMAGE,
        "image/png": FileKind.IMAGE,
        "image/gif": FileKind.IMAGE,
        "image/bmp": FileKind.IMAGE,
        "image/webp": FileKind.IMAGE,
        "application/pdf": FileKind.PDF,
        DOCX_MIME: FileKind.DOCX,
        "audio/mpeg": FileKind.AUDIO_VIDEO,
        "audio/mp3": FileKind.AUDIO_VIDEO,
        "audio/wav": FileKind.AUDIO_VIDEO,
        "audio/x-wav": FileKind.AUDIO_VIDEO,
        "audio/mp4": FileKind.AUDIO_VIDEO,
        "audio/m4a": FileKind.AUDIO_VIDEO,
        "audio/x-m4a": FileKind.AUDIO_VIDEO,
        "audio/ogg": FileKind.AUDIO_VIDEO,
        "audio/webm": FileKind.AUDIO_VIDEO,
        "video/mp4": FileKind.AUDIO_VIDEO,
        "video/webm": FileKind.AUDIO_VIDEO,
        "video/ogg": FileKind.AUDIO_VIDEO,
    }

    def effective_mime_type(self, file_name: str, mime_type: str) -> str:
        """Resolve the generic octet-stream type through the extension table."""
        declared = (mime_type or OCTET_STREAM).split(";")[0].strip().lower()
        if declared != OCTET_STREAM:
            return declared
        extension = PurePosixPath(file_name.lower()).suffix
        inferred = self.EXTENSION_TO_MIME.get(extension)
        if inferred is None:
            return declared
        Log.debug(f"Inferred {inferred} from extension {extension}", file=file_name)
        return inferred

    def classify(self, file_name: str, mime_type: str) -> FileKind:
        """Return the processing strategy for a file.

        Raises:
            UnsupportedFormatError: if the MIME type is not recognized.
        """
        effective = self.effective_mime_type(file_name, mime_type)
        kind = self.MIME_TO_KIND.get(effective)
        if kind is None:
            raise UnsupportedFormatError(f"Unsupported file format: {mime_type or OCTET_STREAM}")
        return kind

    @staticmethod
    def file_type_label(mime_type: str) -> str:
        """Coarse file type used in metadata, even for unsupported inputs."""
        if mime_type.startswith("image/"):
            return "image"
        if mime_type == "application/pdf":
            return "pdf"
        if "wordprocessingml" in mime_type:
            return "docx"
        if mime_type.startswith("text/"):
            return "text"
        if mime_type.startswith(("audio/", "video/")):
            return "audio"
        return "unknown"
