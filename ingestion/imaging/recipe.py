"""Adaptive restoration planner: a pure decision table from stats to recipe.

Every rule is independent and they compose: a dark, blurry, noisy scan gets
a gamma lift, strong-but-damped sharpening and a median filter together.
"""

from dataclasses import dataclass

from ingestion.config.thresholds import QualityThresholds
from ingestion.imaging.quality import ImageQualityStats

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0
MM_PER_INCH = 25.4

_DEFAULT_THRESHOLDS = QualityThresholds()


@dataclass(frozen=True)
class RestorationRecipe:
    gamma: float = 1.0
    contrast_multiplier: float = 1.0
    brightness_offset: int = 0
    sharpen_sigma: float = 1.0
    sharpen_flat: float = 1.0
    sharpen_jagged: float = 2.0
    denoise_kernel: int = 0
    target_width: int = 2480
    target_height: int = 3508
    binarize_threshold: int | None = None

    @property
    def binarize(self) -> bool:
        return self.binarize_threshold is not None


def a4_pixels(dpi: int) -> tuple[int, int]:
    """Pixel size of an A4 page at the given resolution (2480x3508 at 300 DPI)."""
    return (
        round(A4_WIDTH_MM / MM_PER_INCH * dpi),
        round(A4_HEIGHT_MM / MM_PER_INCH * dpi),
    )


def plan_restoration(
    stats: ImageQualityStats,
    dpi: int = 300,
    thresholds: QualityThresholds = _DEFAULT_THRESHOLDS,
) -> RestorationRecipe:
    """Derive restoration parameters from image quality stats."""
    gamma = 1.0
    contrast_multiplier = 1.0
    brightness_offset = 0
    sharpen_sigma = 1.0
    sharpen_flat = 1.0
    sharpen_jagged = 2.0
    denoise_kernel = 0
    binarize_threshold = None

    if stats.is_dark:
        # gamma < 1 lifts shadows
        gamma = 0.7 + (stats.brightness / 255.0) * 0.3
        brightness_offset = round((128 - stats.brightness) * 0.3)
    elif stats.is_bright:
        span = 255.0 - thresholds.bright_brightness
        gamma = 1.0 + ((stats.brightness - thresholds.bright_brightness) / span) * 0.5
        brightness_offset = -round((stats.brightness - 128) * 0.2)
    gamma = min(max(gamma, 0.7), 1.5)

    if stats.is_low_contrast:
        contrast_multiplier = 1.2 + (thresholds.low_contrast - stats.contrast) * 2
        contrast_multiplier = min(max(contrast_multiplier, 1.2), 1.5)

    if stats.is_blurry:
        sharpen_sigma = 1.5 + (thresholds.blurry_sharpness - stats.sharpness) * 2
        sharpen_flat = 1.5
        sharpen_jagged = 3.0
    elif stats.sharpness > thresholds.sharp_sharpness:
        sharpen_sigma = 0.5
        sharpen_flat = 0.5
        sharpen_jagged = 1.0

    if stats.is_noisy:
        denoise_kernel = 5 if stats.noise_level > thresholds.very_noisy_level else 3
        # denoising runs before sharpening; damp sharpening so residual noise is not boosted
        sharpen_sigma = max(sharpen_sigma * 0.7, 0.5)

    if stats.is_low_contrast and stats.contrast < thresholds.very_low_contrast:
        binarize_threshold = round(stats.brightness * 0.9)

    target_width, target_height = a4_pixels(dpi)
    return RestorationRecipe(
        gamma=gamma,
        contrast_multiplier=contrast_multiplier,
        brightness_offset=brightness_offset,
        sharpen_sigma=sharpen_sigma,
        sharpen_flat=sharpen_flat,
        sharpen_jagged=sharpen_jagged,
        denoise_kernel=denoise_kernel,
        target_width=target_width,
        target_height=target_height,
        binarize_threshold=binarize_threshold,
    )
