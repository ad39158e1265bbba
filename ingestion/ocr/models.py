from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class OcrAttempt:
    """Text and confidence (0-100) produced by one OCR tier."""

    text: str
    confidence: float

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class PageState(str, Enum):
    """States of the per-page tier state machine."""

    START = "start"
    LOCAL_OCR = "local-ocr"
    VISION = "vision"
    SKIPPED_BLANK = "skipped-blank"
    ACCEPTED_LOCAL = "accepted-local"
    ACCEPTED_VISION = "accepted-vision"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES

    @property
    def is_accepted(self) -> bool:
        return self in (PageState.ACCEPTED_LOCAL, PageState.ACCEPTED_VISION)


_TERMINAL_STATES = frozenset(
    {
        PageState.SKIPPED_BLANK,
        PageState.ACCEPTED_LOCAL,
        PageState.ACCEPTED_VISION,
        PageState.FAILED,
    }
)


@dataclass(frozen=True)
class PageResult:
    """Outcome of one image or PDF page."""

    page_number: int
    state: PageState
    text: str = ""
    confidence: float | None = None
    engine: str | None = None
    error: str | None = None
