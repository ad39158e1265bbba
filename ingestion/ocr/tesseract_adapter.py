import io

import pytesseract
from PIL import Image

from ingestion.ocr.base import BaseOcrEngine
from ingestion.ocr.exceptions import OcrEngineUnavailableError, OcrError
from ingestion.ocr.models import OcrAttempt


class TesseractAdapter(BaseOcrEngine):
    """Local OCR with Tesseract through pytesseract.

    Text is rebuilt from ``image_to_data`` so one engine run yields both the
    words and their confidences. Confidence is the mean of the word scores
    Tesseract reports (non-word boxes carry -1 and are ignored).
    """

    name = "tesseract"

    def __init__(self, tesseract_cmd: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_bytes: bytes, languages: str, dpi: int = 300) -> OcrAttempt:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                data = pytesseract.image_to_data(
                    image,
                    lang=languages,
                    config=f"--oem 1 --psm 3 --dpi {dpi}",
                    output_type=pytesseract.Output.DICT,
                )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrEngineUnavailableError(
                "Tesseract binary not found; install tesseract-ocr or set TESSERACT_CMD"
            ) from exc
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"tesseract recognition failed: {exc}") from exc

        return OcrAttempt(text=self._assemble_text(data), confidence=self._mean_confidence(data))

    @staticmethod
    def _assemble_text(data: dict[str, list]) -> str:  # type: ignore[type-arg]
        lines: dict[tuple[int, int, int], list[str]] = {}
        for index, word in enumerate(data["text"]):
            word = (word or "").strip()
            if not word:
                continue
            key = (data["block_num"][index], data["par_num"][index], data["line_num"][index])
            lines.setdefault(key, []).append(word)

        output: list[str] = []
        previous_block = None
        for (block, _, _), words in lines.items():
            if previous_block is not None and block != previous_block:
                output.append("")
            output.append(" ".join(words))
            previous_block = block
        return "\n".join(output).strip()

    @staticmethod
    def _mean_confidence(data: dict[str, list]) -> float:  # type: ignore[type-arg]
        scores = []
        for word, conf in zip(data["text"], data["conf"]):
            try:
                score = float(conf)
            except (TypeError, ValueError):
                continue
            if score >= 0 and (word or "").strip():
                scores.append(score)
        if not scores:
            return 0.0
        return sum(scores) / len(scores)
