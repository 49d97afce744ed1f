"""Centralized helpers for Anthropic LLM calls."""

from __future__ import annotations

import logging

from anthropic import Anthropic

from src.leadermatch.config import settings

logger = logging.getLogger(__name__)


def call_llm_text(
    client: Anthropic,
    system: str | None,
    user: str,
    *,
    fast: bool = False,
    max_tokens: int = 1024,
    temperature: float = 0.7,
) -> str:
    model = settings.anthropic_fast_model if fast else settings.anthropic_model
    kwargs = {
        "model": model,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": [{"role": "user", "content": user}],
    }
    if system:
        kwargs["system"] = system
    resp = client.messages.create(**kwargs)
    if not resp.content:
        logger.warning("LLM returned no content (%s model)", model)
        return ""
    return resp.content[0].text.strip()
