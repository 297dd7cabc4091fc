from __future__ import annotations

import os

import requests

from .base import AIClient


class OllamaClient(AIClient):
    """Local model served by Ollama.

    Environment:
      - OLLAMA_HOST (default: http://localhost:11434)
      - OLLAMA_MODEL (default: llama3.1:8b-instruct)
      - OLLAMA_TIMEOUT seconds (default: 120); full articles are slow on CPU
    """

    def __init__(self) -> None:
        self.endpoint = os.environ.get("OLLAMA_HOST", "http://localhost:11434").rstrip("/") + "/api/generate"
        self.model = os.environ.get("OLLAMA_MODEL", "llama3.1:8b-instruct")
        self.timeout = float(os.environ.get("OLLAMA_TIMEOUT", "120"))

    def generate(self, prompt: str, *, temperature: float = 0.2) -> str:
        resp = requests.post(
            self.endpoint,
            json={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": temperature},
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        body = resp.json()
        return (body.get("response") or "").strip()
