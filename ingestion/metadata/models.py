from dataclasses import dataclass
from enum import Enum


class SessionType(str, Enum):
    ORDINARY = "ordinary"
    EXTRAORDINARY = "extraordinary"
    BUDGET = "budget"
    CONSTITUENT = "constituent"


@dataclass(frozen=True)
class NormalizedMetadata:
    """Bibliographic metadata derived from a document title and body."""

    session_number: int | None = None
    normalized_title: str | None = None
    publish_date: str | None = None  # ISO 8601 date
    document_number: str | None = None
    session_type: SessionType = SessionType.ORDINARY
