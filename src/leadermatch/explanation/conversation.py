"""Conversation starters — commonalities to short suggested talking points.

The rule-based synthesizer is always available.  When a generative provider
is configured, callers may ask it for warmer, context-specific starters and
fall back to the rule-based ones whenever it returns ``None``.
"""

from __future__ import annotations

import logging

from src.leadermatch.errors import GenerationError, ProviderNotConfiguredError
from src.leadermatch.models import Commonality, ConversationContext, MatchType
from src.leadermatch.providers import GenerativeProvider, get_generative_provider

logger = logging.getLogger(__name__)

MAX_STARTERS = 3

_FALLBACK_STARTERS: dict[str, str] = {
    "high-affinity": "Share your current leadership challenges and wins",
    "strategic": (
        "Explore how your different perspectives could create value together"
    ),
}


def generate_conversation_starters(
    commonalities: list[Commonality], match_type: MatchType,
) -> list[str]:
    starters: list[str] = []

    for commonality in commonalities[:2]:
        text = commonality.description.lower()
        if commonality.category == "professional":
            if match_type == "high-affinity":
                topic = text.replace("both", "", 1).strip()
                starters.append(f"Discuss your shared experience with {topic}")
            else:
                starters.append(f"Learn how they approach {text}")
        elif commonality.category == "hobby":
            topic = text.replace("both enjoy", "", 1).strip()
            starters.append(f"Bond over your shared interest in {topic}")
        elif commonality.category == "values":
            starters.append(f"Explore your aligned values around {text}")

    if not starters:
        starters.append(_FALLBACK_STARTERS[match_type])

    return starters[:MAX_STARTERS]


# ---------------------------------------------------------------------------
# Generative variants
# ---------------------------------------------------------------------------

_STARTERS_SYSTEM_PROMPT = """\
You are a professional networking assistant for a leadership conference app.
Generate 2-3 short, warm, personable conversation starters for someone about
to meet a new connection.
Each starter should be 1 sentence, feel genuine (not corporate), and reference
specific shared context.
Return ONLY the starters, one per line. No numbering, no quotes.
"""

_SUMMARY_SYSTEM_PROMPT = """\
Summarize this professional profile in 2-3 sentences.
Be warm and highlight what makes this person interesting to connect with at a
leadership conference.
"""


def _build_starters_prompt(context: ConversationContext) -> str:
    parts = [
        f"Generate conversation starters for {context.user_name} "
        f"to use when meeting {context.match_name}.",
        f"Match type: {context.match_type}",
    ]
    if context.match_position:
        parts.append(f"Their role: {context.match_position}")
    if context.match_company:
        parts.append(f"Their company: {context.match_company}")
    parts.append(f"What they have in common: {'; '.join(context.commonalities)}")
    return "\n".join(parts)


def generate_conversation_starters_ai(
    context: ConversationContext,
    provider: GenerativeProvider | None = None,
) -> list[str] | None:
    """Ask the generative provider for starters; ``None`` means fall back."""
    provider = provider or get_generative_provider()
    if provider is None:
        return None

    try:
        text = provider.generate_text(
            _build_starters_prompt(context), _STARTERS_SYSTEM_PROMPT,
        )
    except (GenerationError, ProviderNotConfiguredError) as exc:
        logger.warning(
            "AI conversation starters failed for %s -> %s, falling back: %s",
            context.user_name, context.match_name, exc,
        )
        return None

    starters = [
        line.strip() for line in text.splitlines()
        if 10 < len(line.strip()) < 200
    ]
    return starters[:MAX_STARTERS] if starters else None


def generate_profile_summary(
    profile_text: str, provider: GenerativeProvider | None = None,
) -> str | None:
    provider = provider or get_generative_provider()
    if provider is None:
        return None

    try:
        return provider.generate_text(profile_text, _SUMMARY_SYSTEM_PROMPT)
    except (GenerationError, ProviderNotConfiguredError) as exc:
        logger.warning("AI profile summary failed: %s", exc)
        return None
