"""Text-transform collaborator: AI reader-mode cleanup and summaries."""

from .base import AIClient, AIConfigError
from .factory import create_ai_client
from .transform import clean_content, summarize_content

__all__ = ["AIClient", "AIConfigError", "create_ai_client", "clean_content", "summarize_content"]
