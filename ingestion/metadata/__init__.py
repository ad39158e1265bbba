from ingestion.metadata.dedup import DeduplicationKey
from ingestion.metadata.models import NormalizedMetadata, SessionType
from ingestion.metadata.normalizer import MetadataNormalizer, extract_normalized_metadata

__all__ = [
    "DeduplicationKey",
    "MetadataNormalizer",
    "NormalizedMetadata",
    "SessionType",
    "extract_normalized_metadata",
]
