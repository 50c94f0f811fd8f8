"""
OCR provider interface.

Defines the contract for extracting text from an image.
Implementations live in the host application (on-device OCR engines).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IOcrProvider(ABC):
    """Abstract interface for text recognition."""

    @abstractmethod
    async def recognize_text(self, image: bytes) -> str:
        """
        Recognize text in an image.

        Args:
            image: Encoded image bytes (PNG/JPEG)

        Returns:
            Recognized text, empty if nothing was found

        Raises:
            InfrastructureError: If recognition fails
        """
        pass
