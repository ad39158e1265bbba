"""Rule-based bibliographic metadata extraction for municipal documents.

Session numbers, dates, document numbers and session types are read from
the title plus the head of the body. Keyword and month-name matching runs
on an ICU Latin-ASCII-lowercase transliteration, so ``Budżetowa``,
``budzetowa`` and ``BUDŻETOWA`` all match the same rule.
"""

import re
from datetime import date
from functools import lru_cache
from typing import ClassVar

import icu  # type: ignore[import-untyped]

from ingestion.logging.logger import Log
from ingestion.metadata.models import NormalizedMetadata, SessionType
from ingestion.metadata.roman import parse_session_number

CONTENT_WINDOW = 1000
MIN_YEAR = 2000
MAX_YEAR = 2030

_MONTHS = {
    "stycznia": 1, "styczen": 1, "january": 1,
    "lutego": 2, "luty": 2, "february": 2,
    "marca": 3, "marzec": 3, "march": 3,
    "kwietnia": 4, "kwiecien": 4, "april": 4,
    "maja": 5, "maj": 5, "may": 5,
    "czerwca": 6, "czerwiec": 6, "june": 6,
    "lipca": 7, "lipiec": 7, "july": 7,
    "sierpnia": 8, "sierpien": 8, "august": 8,
    "wrzesnia": 9, "wrzesien": 9, "september": 9,
    "pazdziernika": 10, "pazdziernik": 10, "october": 10,
    "listopada": 11, "listopad": 11, "november": 11,
    "grudnia": 12, "grudzien": 12, "december": 12,
}


class MetadataNormalizer:
    """Pure pattern-based extractor; holds only immutable state."""

    _ICU_TRANSFORM: ClassVar[str] = "Any-Latin; Latin-ASCII; Lower"

    _ARABIC_SESSION_PATTERNS: ClassVar[tuple[re.Pattern[str], ...]] = (
        re.compile(r"sesj\w*\s+(?:nr\.?\s*)?(\d{1,3})\b", re.IGNORECASE),
        re.compile(r"sesj\w*\s+(?:\w+\s+){0,3}?nr\.?\s*(\d{1,3})\b", re.IGNORECASE),
        re.compile(r"\b(\d{1,3})\.?\s*sesj", re.IGNORECASE),
    )
    # Roman numerals must be uppercase so ordinary words never read as numbers.
    _ROMAN_SESSION_PATTERNS: ClassVar[tuple[re.Pattern[str], ...]] = (
        re.compile(r"(?i:sesj\w*)\s+(?:(?i:nr)\.?\s*)?([IVXLC]{1,10})\b(?!/)"),
        re.compile(r"\b([IVXLC]{1,10})\.?\s+(?i:sesj)"),
        re.compile(r"\b(?i:nr)\.?\s*([IVXLC]{1,10})\b(?!/)"),
    )
    _NUMERIC_DATE_PATTERNS: ClassVar[tuple[tuple[re.Pattern[str], tuple[int, int, int]], ...]] = (
        # (pattern, (day group, month group, year group))
        (re.compile(r"\b(\d{1,2})\.(\d{1,2})\.(\d{4})\b"), (1, 2, 3)),
        (re.compile(r"\b(\d{1,2})-(\d{1,2})-(\d{4})\b"), (1, 2, 3)),
        (re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"), (3, 2, 1)),
    )
    _NAMED_MONTH_DATE: ClassVar[re.Pattern[str]] = re.compile(r"\b(\d{1,2})\s+([a-z]+)\s+(\d{4})\b")
    _DOCUMENT_NUMBER_PATTERNS: ClassVar[tuple[re.Pattern[str], ...]] = (
        re.compile(r"\b([IVXLC]{1,10}/\d{1,5}/\d{2,4})\b"),
        re.compile(r"\b(?i:nr)\.?\s*(\d{1,5}/\d{1,5}/\d{2,4})\b"),
        re.compile(r"\b(?i:nr)\.?\s*(\d{1,5}/\d{4})\b"),
    )
    _SESSION_TYPE_RULES: ClassVar[tuple[tuple[re.Pattern[str], SessionType], ...]] = (
        (re.compile(r"nadzwyczajn|extraordinary"), SessionType.EXTRAORDINARY),
        (re.compile(r"budzetow|budget"), SessionType.BUDGET),
        (re.compile(r"inauguracyjn|konstytu|constituent"), SessionType.CONSTITUENT),
    )
    _BRANDING_SUFFIX: ClassVar[re.Pattern[str]] = re.compile(
        r"\s+[-–—]\s+(?:BIP|Biuletyn|Urz[aą]d|Gmin[ay]|Miast[oa]|Starostwo|System Rada)\b.*$",
        re.IGNORECASE,
    )
    _SESSION_PREFIX: ClassVar[re.Pattern[str]] = re.compile(
        r"\b(?:[IVXLC]{1,10}|\d{1,3})\.?\s+(?=(?i:sesj))"
    )
    _SESSION_PHRASE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?i:\bsesj\w*)(?:\s+(?:(?i:nr)\.?\s*)?(?:[IVXLC]{1,10}|\d{1,3})\b(?!/))?"
    )
    _SESSION_NR: ClassVar[re.Pattern[str]] = re.compile(
        r"\b(?i:nr)\.?\s*(?:[IVXLC]{1,10}|\d{1,3})\b(?!/)"
    )
    _EDGE_PUNCTUATION: ClassVar[str] = " -–—:,.|"

    def __init__(self) -> None:
        self._transliterator: icu.Transliterator = icu.Transliterator.createInstance(
            self._ICU_TRANSFORM
        )

    def extract(self, title: str, content: str = "") -> NormalizedMetadata:
        """Build NormalizedMetadata from a title and the head of the body."""
        text = f"{title}\n{content[:CONTENT_WINDOW]}"
        folded = self._fold(text)

        session_number = self.extract_session_number(title) or self.extract_session_number(text)
        metadata = NormalizedMetadata(
            session_number=session_number,
            normalized_title=self.normalize_title(title, session_number),
            publish_date=self.extract_publish_date(text, folded),
            document_number=self.extract_document_number(text),
            session_type=self.detect_session_type(folded),
        )
        Log.debug(
            "Metadata normalized",
            session=metadata.session_number,
            date=metadata.publish_date,
            number=metadata.document_number,
            type=metadata.session_type.value,
        )
        return metadata

    def extract_session_number(self, text: str) -> int | None:
        for patterns in (self._ARABIC_SESSION_PATTERNS, self._ROMAN_SESSION_PATTERNS):
            for pattern in patterns:
                for match in pattern.finditer(text):
                    number = parse_session_number(match.group(1))
                    if number is not None:
                        return number
        return None

    def extract_publish_date(self, text: str, folded: str | None = None) -> str | None:
        for pattern, (day_group, month_group, year_group) in self._NUMERIC_DATE_PATTERNS:
            for match in pattern.finditer(text):
                parsed = self._valid_date(
                    int(match.group(year_group)),
                    int(match.group(month_group)),
                    int(match.group(day_group)),
                )
                if parsed is not None:
                    return parsed
        folded = folded if folded is not None else self._fold(text)
        for match in self._NAMED_MONTH_DATE.finditer(folded):
            month = _MONTHS.get(match.group(2))
            if month is None:
                continue
            parsed = self._valid_date(int(match.group(3)), month, int(match.group(1)))
            if parsed is not None:
                return parsed
        return None

    def extract_document_number(self, text: str) -> str | None:
        for pattern in self._DOCUMENT_NUMBER_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(1)
        return None

    def detect_session_type(self, folded: str) -> SessionType:
        """Keyword-based session type; ``ordinary`` when no keyword matches."""
        for pattern, session_type in self._SESSION_TYPE_RULES:
            if pattern.search(folded):
                return session_type
        return SessionType.ORDINARY

    def normalize_title(self, title: str, session_number: int | None = None) -> str | None:
        """Strip site branding and rewrite the session phrase as ``Sesja N``."""
        cleaned = title.split(" | ")[0]
        cleaned = self._BRANDING_SUFFIX.sub("", cleaned)
        cleaned = self._collapse(cleaned)
        if session_number is None or not re.search(r"(?i:sesj)", cleaned):
            return cleaned or None

        rest = self._SESSION_PREFIX.sub("", cleaned)
        rest = self._SESSION_PHRASE.sub(" ", rest)
        rest = self._SESSION_NR.sub(" ", rest)
        rest = self._collapse(rest).strip(self._EDGE_PUNCTUATION)
        return f"Sesja {session_number} {rest}".strip()

    def _fold(self, text: str) -> str:
        return str(self._transliterator.transliterate(text))

    @staticmethod
    def _collapse(text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()

    @staticmethod
    def _valid_date(year: int, month: int, day: int) -> str | None:
        if not MIN_YEAR <= year <= MAX_YEAR:
            return None
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None


@lru_cache(maxsize=1)
def _default_normalizer() -> MetadataNormalizer:
    return MetadataNormalizer()


def extract_normalized_metadata(title: str, content: str = "") -> NormalizedMetadata:
    """Pure entry point: identical input always yields identical metadata."""
    return _default_normalizer().extract(title, content)
