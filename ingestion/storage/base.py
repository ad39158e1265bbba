from abc import ABC, abstractmethod

from ingestion.metadata.dedup import DeduplicationKey
from ingestion.metadata.models import NormalizedMetadata
from ingestion.processor.models import ProcessedDocument


class BaseDocumentSink(ABC):
    """Contract for the storage collaborator that persists processed documents.

    The sink owns the save/skip decision; this package never writes storage.
    """

    @abstractmethod
    async def save(
        self,
        document: ProcessedDocument,
        metadata: NormalizedMetadata,
        key: DeduplicationKey,
    ) -> bool:
        """Persist the document unless a matching one exists.

        Returns:
            True if the document was saved, False if it was a duplicate.
        """
