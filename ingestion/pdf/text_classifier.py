"""Decides whether a PDF's embedded text layer can be trusted.

Text-layer extraction fails silently: broken font Unicode maps, wrong
encoding tables and scanned pages with only a page-number overlay all come
back as "text". Every check below looks for one such failure; any single
hit sends the document to rasterization and OCR.
"""

import re
from dataclasses import dataclass

from ingestion.config.thresholds import TextLayerThresholds

_DEFAULT_THRESHOLDS = TextLayerThresholds()

_WHITESPACE = re.compile(r"\s+")
_PRINTABLE = re.compile(r"[\x20-\x7E\xA0-\xFF\u0100-\u017F\u2010-\u205E]")
_PAGE_ARTIFACT = re.compile(r"[-–—]{1,2}\s*\d+\s*(?:of|z|/)\s*\d+\s*[-–—]{1,2}", re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WORDS = re.compile(r"\w+")
_COMMON_PUNCTUATION = frozenset(".,;:!?()[]-–—\"'„”“/%§&+=*@#")


@dataclass(frozen=True)
class TextLayerVerdict:
    usable: bool
    reason: str | None = None


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def non_printable_ratio(text: str) -> float:
    if not text:
        return 0.0
    printable = len(_PRINTABLE.findall(text))
    return (len(text) - printable) / len(text)


def is_page_artifact_only(text: str, thresholds: TextLayerThresholds = _DEFAULT_THRESHOLDS) -> bool:
    """True when the text is nothing but ``-- N of M --`` page markers."""
    if not _PAGE_ARTIFACT.search(text):
        return False
    remainder = collapse_whitespace(_PAGE_ARTIFACT.sub(" ", text))
    return len(remainder) < thresholds.max_page_artifact_remainder


def garbled_reason(
    raw_text: str, text: str, thresholds: TextLayerThresholds = _DEFAULT_THRESHOLDS
) -> str | None:
    if re.search(f"\ufffd{{{thresholds.min_replacement_run},}}", text):
        return "replacement characters"
    if re.search(f"(.)\\1{{{thresholds.min_repeated_char_run - 1},}}", text):
        return "repeated characters"
    window = raw_text[: thresholds.control_char_window]
    if len(_CONTROL_CHARS.findall(window)) > thresholds.max_control_chars:
        return "control characters"
    if len(text) >= thresholds.special_char_min_length:
        letters = sum(1 for char in text if char.isalpha())
        special = sum(
            1
            for char in text
            if not char.isalnum() and not char.isspace() and char not in _COMMON_PUNCTUATION
        )
        if special > letters * thresholds.max_special_to_letter_ratio:
            return "special characters outnumber letters"
    return None


def has_too_few_common_words(
    text: str, thresholds: TextLayerThresholds = _DEFAULT_THRESHOLDS
) -> bool:
    if len(text) < thresholds.lexicon_min_length:
        return False
    hits = sum(1 for word in _WORDS.findall(text.lower()) if word in thresholds.lexicon)
    expected = len(text) / 100 * thresholds.min_lexicon_hits_per_100_chars
    return hits < expected


def has_repeated_patterns(
    text: str, thresholds: TextLayerThresholds = _DEFAULT_THRESHOLDS
) -> bool:
    if re.search(f"(.{{2,4}})\\1{{{thresholds.min_repeated_pattern_count - 1},}}", text):
        return True
    tokens = text.split()
    if len(tokens) <= thresholds.short_token_min_tokens:
        return False
    short = sum(1 for token in tokens if len(token) <= thresholds.short_token_length)
    return short / len(tokens) > thresholds.max_short_token_ratio


def classify_text_layer(
    raw_text: str,
    page_count: int,
    thresholds: TextLayerThresholds = _DEFAULT_THRESHOLDS,
) -> TextLayerVerdict:
    """Classify an extracted text layer as usable or not, with the first reason found."""
    text = collapse_whitespace(raw_text)

    if len(text) < thresholds.min_meaningful_length:
        return TextLayerVerdict(False, f"too short ({len(text)} chars)")
    if non_printable_ratio(text) > thresholds.max_non_printable_ratio:
        return TextLayerVerdict(False, "too many non-printable characters")
    if is_page_artifact_only(text, thresholds):
        return TextLayerVerdict(False, "only page-number artifacts")
    chars_per_page = len(text) / max(page_count, 1)
    if chars_per_page < thresholds.min_chars_per_page:
        return TextLayerVerdict(False, f"{chars_per_page:.0f} chars per page")
    reason = garbled_reason(raw_text, text, thresholds)
    if reason is not None:
        return TextLayerVerdict(False, f"garbled text: {reason}")
    if has_too_few_common_words(text, thresholds):
        return TextLayerVerdict(False, "too few common words")
    if has_repeated_patterns(text, thresholds):
        return TextLayerVerdict(False, "repeated patterns")
    return TextLayerVerdict(True)
