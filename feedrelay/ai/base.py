from __future__ import annotations

from abc import ABC, abstractmethod


class AIConfigError(RuntimeError):
    """Raised when an AI backend is selected but not configured."""


class AIClient(ABC):
    """Abstract text-generation backend used by the content transforms."""

    @abstractmethod
    def generate(self, prompt: str, *, temperature: float = 0.2) -> str:
        """Return the model's text response for ``prompt``."""
