"""Empirically tuned heuristic thresholds.

The defaults were calibrated on Polish-language municipal documents
(council sessions, resolutions, protocols). Recalibrate them before using
the pipeline on a different language corpus.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QualityThresholds:
    """Cutoffs that turn continuous image statistics into flags."""

    low_contrast: float = 0.15
    very_low_contrast: float = 0.10
    dark_brightness: float = 80.0
    bright_brightness: float = 200.0
    blurry_sharpness: float = 0.3
    sharp_sharpness: float = 0.7
    noisy_level: float = 0.4
    very_noisy_level: float = 0.6
    blank_brightness: float = 250.0
    blank_contrast: float = 0.05
    sharpness_normalizer: float = 5000.0
    noise_normalizer: float = 30.0
    noise_window: int = 100
    noise_step: int = 3


@dataclass(frozen=True)
class TieringThresholds:
    """Acceptance rules for the local OCR tier."""

    min_local_text_length: int = 30
    assumed_vision_confidence: float = 90.0


DEFAULT_LEXICON: frozenset[str] = frozenset(
    {
        # Polish function words
        "i", "w", "z", "na", "do", "o", "od", "po", "za", "ze", "we", "a",
        "że", "się", "nie", "jest", "są", "to", "oraz", "lub", "przez",
        "dla", "jak", "jako", "który", "która", "które", "tym", "tego",
        "przy", "pod", "nad", "bez", "też", "także", "roku", "dnia",
        # municipal-governance vocabulary
        "rada", "rady", "radzie", "gmina", "gminy", "miasta", "miejskiej",
        "miejska", "sesja", "sesji", "uchwała", "uchwały", "uchwałę",
        "burmistrz", "burmistrza", "wójt", "wójta", "radny", "radnych",
        "porządek", "obrad", "protokół", "projekt", "budżet", "budżetu",
        "zarządzenie", "komisja", "komisji", "przewodniczący", "art",
        "ust", "pkt", "nr", "zł", "sprawie", "zmiany", "r",
        # English function words, so legitimate English text is not flagged
        "the", "and", "of", "to", "in", "is", "for", "on", "with", "by",
    }
)


@dataclass(frozen=True)
class TextLayerThresholds:
    """Rules deciding whether an embedded PDF text layer is usable."""

    min_meaningful_length: int = 300
    max_non_printable_ratio: float = 0.3
    max_page_artifact_remainder: int = 50
    min_chars_per_page: int = 100
    min_replacement_run: int = 3
    min_repeated_char_run: int = 10
    max_control_chars: int = 3
    control_char_window: int = 1000
    special_char_min_length: int = 100
    max_special_to_letter_ratio: float = 0.5
    lexicon_min_length: int = 200
    min_lexicon_hits_per_100_chars: float = 1.0
    min_repeated_pattern_count: int = 5
    short_token_length: int = 2
    max_short_token_ratio: float = 0.7
    short_token_min_tokens: int = 20
    lexicon: frozenset[str] = field(default=DEFAULT_LEXICON)
