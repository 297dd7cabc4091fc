"""Reader-mode cleanup and summaries backed by an AI client.

Both transforms take a content string and return a replacement string. They
never raise: a missing configuration or a failing backend produces a short
explanatory message instead, which the caller can display as-is.
"""

from __future__ import annotations

from typing import Optional

from ..utils.logging import get_logger
from .base import AIClient, AIConfigError
from .factory import create_ai_client
from .retry import with_retries

logger = get_logger("feedrelay.ai.transform")

CLEAN_INPUT_LIMIT = 30000
SUMMARY_INPUT_LIMIT = 15000

NOT_CONFIGURED_MESSAGE = "API key not configured. Cannot use AI features."
CLEAN_FAILED_MESSAGE = "Error connecting to AI service. Please try viewing raw mode."
CLEAN_EMPTY_MESSAGE = "Failed to generate clean content."
SUMMARY_FAILED_MESSAGE = "Summary failed."
SUMMARY_EMPTY_MESSAGE = "Could not summarize."

_CLEAN_PROMPT = """You are an advanced "Reader Mode" engine.
Take the raw HTML or text of an article from a feed or web page and convert it into clean, readable Markdown.

Rules:
1. Remove all ads, related posts, social sharing buttons and boilerplate navigation.
2. Keep the core article text intact.
3. Format with Markdown headers, bold text and lists.
4. Preserve relevant images as ![Image](url).
5. If the content looks truncated (e.g. ends with "Read more..."), end with: "> *[Content truncated in source]*".

Input Content:
{content}
"""

_SUMMARY_PROMPT = (
    "Summarize this article in 3 bullet points, in a casual, slightly cynical "
    "tech-enthusiast tone. Content: {content}"
)


def _resolve_client(client: Optional[AIClient]) -> AIClient:
    if client is not None:
        return client
    try:
        return create_ai_client()
    except ValueError as exc:
        raise AIConfigError(str(exc)) from exc


def _transform(
    content: str,
    *,
    prompt: str,
    limit: int,
    client: Optional[AIClient],
    failed_message: str,
    empty_message: str,
) -> str:
    try:
        ai = _resolve_client(client)
        text = with_retries(lambda: ai.generate(prompt.format(content=(content or "")[:limit])))
    except AIConfigError as exc:
        logger.info("AI transform unavailable: %s", exc)
        return NOT_CONFIGURED_MESSAGE
    except Exception as exc:  # noqa: BLE001 - transforms degrade to a message
        logger.warning("AI transform failed: %s", exc)
        return failed_message
    return text or empty_message


def clean_content(content: str, *, client: Optional[AIClient] = None) -> str:
    """Rewrite article HTML as clean Markdown."""
    return _transform(
        content,
        prompt=_CLEAN_PROMPT,
        limit=CLEAN_INPUT_LIMIT,
        client=client,
        failed_message=CLEAN_FAILED_MESSAGE,
        empty_message=CLEAN_EMPTY_MESSAGE,
    )


def summarize_content(content: str, *, client: Optional[AIClient] = None) -> str:
    """Summarize article content in three bullet points."""
    return _transform(
        content,
        prompt=_SUMMARY_PROMPT,
        limit=SUMMARY_INPUT_LIMIT,
        client=client,
        failed_message=SUMMARY_FAILED_MESSAGE,
        empty_message=SUMMARY_EMPTY_MESSAGE,
    )
