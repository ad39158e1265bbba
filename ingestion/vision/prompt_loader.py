from pathlib import Path

from ingestion.vision.exceptions import VisionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_vision_prompt(path: Path | None = None) -> str:
    """Load the fixed extraction instruction sent with every vision request.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled vision_ocr_prompt.txt.

    Raises:
        VisionError: if the file cannot be read or is empty.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "vision_ocr_prompt.txt"
    try:
        prompt = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise VisionError(f"Failed to load vision prompt: {exc}") from exc
    if not prompt:
        raise VisionError(f"Vision prompt is empty: {path}")
    return prompt
