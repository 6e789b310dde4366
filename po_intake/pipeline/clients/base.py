"""TextDetector protocol and the deadline passed into every recognition call."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DetectedText:
    text: str
    confidence: float  # 0..100


class Deadline:
    """Absolute expiry on the monotonic clock.

    Backends read `remaining()` to size their own timeouts; the OCR executor
    cancels the call once it reaches zero.
    """

    def __init__(self, expires_at: float):
        self.expires_at = expires_at

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"


class TextDetector(Protocol):
    """Pixels in, text plus confidence out."""

    name: str

    async def detect_text(self, image_bytes: bytes, deadline: Deadline) -> DetectedText: ...

    async def aclose(self) -> None: ...
