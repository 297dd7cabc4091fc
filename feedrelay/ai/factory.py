from __future__ import annotations

import os
from typing import Callable, Dict, Optional

from .base import AIClient


def _gemini() -> AIClient:
    from .gemini import GeminiClient  # lazy import

    return GeminiClient()


def _ollama() -> AIClient:
    from .ollama import OllamaClient  # lazy import

    return OllamaClient()


BACKENDS: Dict[str, Callable[[], AIClient]] = {
    "gemini": _gemini,
    "ollama": _ollama,
}
DEFAULT_BACKEND = "gemini"


def create_ai_client(*, backend: Optional[str] = None) -> AIClient:
    """Build the text-generation backend named by ``backend`` or PROCESSING_BACKEND.

    Raises ValueError for unknown names; backends raise AIConfigError when
    their credentials are missing.
    """
    selected = (backend or os.environ.get("PROCESSING_BACKEND") or DEFAULT_BACKEND).strip().lower()
    factory = BACKENDS.get(selected)
    if factory is None:
        raise ValueError(f"Unsupported PROCESSING_BACKEND '{selected}'. Use one of {sorted(BACKENDS)}.")
    return factory()
