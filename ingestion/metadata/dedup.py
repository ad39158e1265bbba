import re
from dataclasses import dataclass


def _canonical_title(title: str | None) -> str | None:
    if not title:
        return None
    collapsed = re.sub(r"\s+", " ", title).strip().casefold()
    return collapsed or None


@dataclass(frozen=True)
class DeduplicationKey:
    """Identity of a document for the storage collaborator's save/skip decision.

    Two keys match on an exact source URL first, then on the case-insensitive
    normalized title together with the document type.
    """

    source_url: str | None = None
    normalized_title: str | None = None
    document_type: str | None = None

    @classmethod
    def build(
        cls,
        *,
        source_url: str | None,
        normalized_title: str | None,
        document_type: str | None,
    ) -> "DeduplicationKey":
        return cls(
            source_url=(source_url or "").strip() or None,
            normalized_title=_canonical_title(normalized_title),
            document_type=(document_type or "").strip().lower() or None,
        )

    def matches(self, other: "DeduplicationKey") -> bool:
        if self.source_url and self.source_url == other.source_url:
            return True
        return (
            self.normalized_title is not None
            and self.document_type is not None
            and self.normalized_title == other.normalized_title
            and self.document_type == other.document_type
        )
