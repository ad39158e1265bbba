import io

from PIL import Image, ImageFilter, ImageOps

from ingestion.imaging.recipe import RestorationRecipe
from ingestion.logging.logger import Log

_NORMALIZE_CUTOFF = 1
_SHARPEN_THRESHOLD = 3


def _lookup(function) -> list[int]:  # type: ignore[no-untyped-def]
    return [min(255, max(0, round(function(value)))) for value in range(256)]


def apply_recipe(image: Image.Image, recipe: RestorationRecipe) -> Image.Image:
    """Apply a restoration recipe and return a new grayscale image.

    Order: grayscale, gamma, histogram normalization, denoise, linear
    contrast/brightness, sharpen, bounded resize, binarize. The median
    filter always runs before sharpening.
    """
    result = image.convert("L")

    if recipe.gamma != 1.0:
        gamma = recipe.gamma
        result = result.point(_lookup(lambda v: 255.0 * (v / 255.0) ** gamma))

    result = ImageOps.autocontrast(result, cutoff=_NORMALIZE_CUTOFF)

    if recipe.denoise_kernel > 0:
        result = result.filter(ImageFilter.MedianFilter(size=recipe.denoise_kernel))

    if recipe.contrast_multiplier != 1.0 or recipe.brightness_offset != 0:
        multiplier = recipe.contrast_multiplier
        offset = recipe.brightness_offset
        result = result.point(_lookup(lambda v: v * multiplier + offset))

    if recipe.sharpen_sigma > 0:
        percent = round(100 * (recipe.sharpen_flat + recipe.sharpen_jagged) / 2)
        result = result.filter(
            ImageFilter.UnsharpMask(
                radius=recipe.sharpen_sigma,
                percent=percent,
                threshold=_SHARPEN_THRESHOLD,
            )
        )

    if result.width > recipe.target_width or result.height > recipe.target_height:
        result = result.copy()
        result.thumbnail(
            (recipe.target_width, recipe.target_height), Image.Resampling.LANCZOS
        )

    if recipe.binarize_threshold is not None:
        threshold = recipe.binarize_threshold
        result = result.point(lambda v: 255 if v >= threshold else 0)

    return result


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def restore_image(data: bytes, recipe: RestorationRecipe) -> bytes:
    """Restore encoded image bytes for local OCR.

    Falls back to the original bytes when the image cannot be decoded, so
    the OCR engine still gets a chance to read it.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            restored = apply_recipe(image, recipe)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        Log.warning(f"Image restoration failed, using original image: {exc}")
        return data

    Log.debug(
        "Image restored",
        gamma=f"{recipe.gamma:.2f}",
        sharpen=f"{recipe.sharpen_sigma:.2f}",
        denoise=recipe.denoise_kernel,
        threshold=recipe.binarize_threshold,
    )
    return encode_png(restored)


def downscale_for_vision(data: bytes, max_dimension: int) -> bytes:
    """Shrink an unrestored image so its long side is at most ``max_dimension``.

    Never enlarges. Colour is kept because vision models can use it.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            scaled = image.convert("RGB") if image.mode not in ("RGB", "L") else image.copy()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        Log.warning(f"Vision downscale failed, sending original image: {exc}")
        return data

    original_size = scaled.size
    scaled.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    Log.debug(
        "Vision image prepared",
        original=f"{original_size[0]}x{original_size[1]}",
        scaled=f"{scaled.width}x{scaled.height}",
    )
    return encode_png(scaled)
