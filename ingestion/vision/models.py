from dataclasses import dataclass


@dataclass(frozen=True)
class VisionJobResult:
    """Result of one vision job, as published by the queue worker."""

    success: bool
    text: str = ""
    confidence: float | None = None
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "VisionJobResult":
        confidence = payload.get("confidence")
        error = payload.get("error")
        return cls(
            success=bool(payload.get("success", False)),
            text=str(payload.get("text") or ""),
            confidence=float(confidence) if isinstance(confidence, (int, float)) else None,
            error=str(error) if error else None,
        )
