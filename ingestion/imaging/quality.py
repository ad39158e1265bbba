"""Image quality analysis on raw pixel buffers.

Four measurements drive the restoration planner:

* brightness - mean pixel value across colour channels (0-255)
* contrast   - mean per-channel standard deviation / 128, clamped to 1
* sharpness  - mean squared 4-neighbour Laplacian over interior pixels,
               normalized by an empirical constant and clamped to 1
* noise      - median absolute difference between a pixel and the mean of
               its 4 neighbours, sampled on a sparse grid in the top-left
               window. The median keeps genuine edges from reading as noise.
"""

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image

from ingestion.config.thresholds import QualityThresholds
from ingestion.logging.logger import Log

_DEFAULT_THRESHOLDS = QualityThresholds()
_GRAYSCALE_MODES = frozenset({"1", "L", "LA", "I", "I;16", "F"})


@dataclass(frozen=True)
class ImageQualityStats:
    brightness: float
    contrast: float
    sharpness: float
    noise_level: float
    is_low_contrast: bool = False
    is_dark: bool = False
    is_bright: bool = False
    is_blurry: bool = False
    is_noisy: bool = False

    @classmethod
    def from_measurements(
        cls,
        brightness: float,
        contrast: float,
        sharpness: float,
        noise_level: float,
        thresholds: QualityThresholds = _DEFAULT_THRESHOLDS,
    ) -> "ImageQualityStats":
        return cls(
            brightness=brightness,
            contrast=contrast,
            sharpness=sharpness,
            noise_level=noise_level,
            is_low_contrast=contrast < thresholds.low_contrast,
            is_dark=brightness < thresholds.dark_brightness,
            is_bright=brightness > thresholds.bright_brightness,
            is_blurry=sharpness < thresholds.blurry_sharpness,
            is_noisy=noise_level > thresholds.noisy_level,
        )

    @classmethod
    def neutral(cls) -> "ImageQualityStats":
        """Stats used when the image cannot be decoded."""
        return cls(brightness=128.0, contrast=0.5, sharpness=0.5, noise_level=0.2)

    def is_blank(self, thresholds: QualityThresholds = _DEFAULT_THRESHOLDS) -> bool:
        return (
            self.brightness > thresholds.blank_brightness
            and self.contrast < thresholds.blank_contrast
        )


def measure_sharpness(
    gray: np.ndarray, thresholds: QualityThresholds = _DEFAULT_THRESHOLDS
) -> float:
    height, width = gray.shape
    if height < 3 or width < 3:
        return 0.0
    g = gray.astype(np.float64)
    laplacian = (
        -4.0 * g[1:-1, 1:-1]
        + g[:-2, 1:-1]
        + g[2:, 1:-1]
        + g[1:-1, :-2]
        + g[1:-1, 2:]
    )
    variance = float(np.mean(laplacian * laplacian))
    return min(variance / thresholds.sharpness_normalizer, 1.0)


def estimate_noise(
    gray: np.ndarray, thresholds: QualityThresholds = _DEFAULT_THRESHOLDS
) -> float:
    height, width = gray.shape
    ys = np.arange(1, min(height - 1, thresholds.noise_window), thresholds.noise_step)
    xs = np.arange(1, min(width - 1, thresholds.noise_window), thresholds.noise_step)
    if ys.size == 0 or xs.size == 0:
        return 0.0
    g = gray.astype(np.float64)
    center = g[np.ix_(ys, xs)]
    neighbours = (
        g[np.ix_(ys, xs - 1)]
        + g[np.ix_(ys, xs + 1)]
        + g[np.ix_(ys - 1, xs)]
        + g[np.ix_(ys + 1, xs)]
    ) / 4.0
    differences = np.sort(np.abs(center - neighbours).ravel())
    median = float(differences[differences.size // 2])
    return min(median / thresholds.noise_normalizer, 1.0)


def compute_stats(
    image: Image.Image, thresholds: QualityThresholds = _DEFAULT_THRESHOLDS
) -> ImageQualityStats:
    """Measure a decoded image. Alpha channels are ignored."""
    if image.mode in _GRAYSCALE_MODES:
        color = image.convert("L")
    else:
        color = image.convert("RGB")
    channels = np.asarray(color, dtype=np.float64)
    if channels.ndim == 2:
        channels = channels[:, :, np.newaxis]
    brightness = float(np.mean([channels[:, :, c].mean() for c in range(channels.shape[2])]))
    std_dev = float(np.mean([channels[:, :, c].std() for c in range(channels.shape[2])]))
    contrast = min(std_dev / 128.0, 1.0)

    gray = np.asarray(image.convert("L"), dtype=np.uint8)
    return ImageQualityStats.from_measurements(
        brightness=brightness,
        contrast=contrast,
        sharpness=measure_sharpness(gray, thresholds),
        noise_level=estimate_noise(gray, thresholds),
        thresholds=thresholds,
    )


def analyze_image(
    data: bytes, thresholds: QualityThresholds = _DEFAULT_THRESHOLDS
) -> ImageQualityStats:
    """Analyze encoded image bytes, degrading to neutral stats on decode failure."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            stats = compute_stats(image, thresholds)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        Log.warning(f"Image analysis failed, using neutral stats: {exc}")
        return ImageQualityStats.neutral()

    Log.debug(
        "Image stats",
        brightness=f"{stats.brightness:.1f}",
        contrast=f"{stats.contrast:.2f}",
        sharpness=f"{stats.sharpness:.2f}",
        noise=f"{stats.noise_level:.2f}",
    )
    return stats
