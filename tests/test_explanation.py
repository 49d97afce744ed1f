"""Unit tests for commonality text and conversation starters."""

from __future__ import annotations

from src.leadermatch.explanation import conversation
from src.leadermatch.explanation.commonalities import (
    describe_complement,
    describe_shared,
    format_value,
    rank_commonalities,
)
from src.leadermatch.explanation.conversation import (
    generate_conversation_starters,
    generate_conversation_starters_ai,
    generate_profile_summary,
)
from src.leadermatch.models import AttributeItem, Commonality, ConversationContext
from src.leadermatch.providers import AnthropicGenerativeProvider


def _item(attribute: str, value: str, weight: float = 0.9) -> AttributeItem:
    return AttributeItem(
        category="professional", attribute=attribute, value=value, weight=weight,
    )


def _context() -> ConversationContext:
    return ConversationContext(
        user_name="Ava",
        match_name="Ben",
        match_type="high-affinity",
        commonalities=["Both work in Technology", "Both enjoy Hiking"],
        match_position="VP Engineering",
        match_company="Northwind",
    )


class TestFormatting:
    def test_format_value(self):
        assert format_value("change-management") == "Change Management"
        assert format_value("c-suite") == "C Suite"

    def test_shared_template(self):
        assert describe_shared(_item("leadershipLevel", "vp")) == "Both at Vp level"

    def test_shared_fallback(self):
        item = _item("customInterests", "jazz-piano", 0.85)
        assert describe_shared(item) == "Shared: Jazz Piano"

    def test_complement_templates(self):
        assert describe_complement(
            _item("leadershipLevel", "c-suite"), "leadershipLevel", "director",
        ) == "Cross-level connection: C Suite ↔ Director"
        assert describe_complement(
            _item("organizationSize", "startup"), "organizationSize", "enterprise",
        ) == "Different scale perspectives: Startup vs Enterprise"
        assert describe_complement(
            _item("decisionMakingStyle", "decisive"), "decisionMakingStyle", "thoughtful",
        ) == "Complementary decision styles: Decisive + Thoughtful"

    def test_complement_fallback(self):
        assert describe_complement(
            _item("networkingGoals", "mentor"), "networkingGoals", "mentee",
        ) == "Complementary expertise: Mentor + Mentee"


class TestRankCommonalities:
    def test_dedup_keeps_heaviest(self):
        ranked = rank_commonalities([
            Commonality(category="hobby", description="Both enjoy Hiking", weight=0.7),
            Commonality(category="hobby", description="both enjoy hiking", weight=0.9),
        ])
        assert len(ranked) == 1
        assert ranked[0].weight == 0.9

    def test_truncates_to_five(self):
        ranked = rank_commonalities(
            Commonality(category="values", description=f"Value {i}", weight=i / 10)
            for i in range(8)
        )
        assert [c.description for c in ranked] == [
            "Value 7", "Value 6", "Value 5", "Value 4", "Value 3",
        ]


class TestConversationStarters:
    def test_professional_high_affinity(self):
        starters = generate_conversation_starters(
            [Commonality(category="professional", description="Both work in Technology", weight=0.9)],
            "high-affinity",
        )
        assert starters == ["Discuss your shared experience with work in technology"]

    def test_professional_strategic(self):
        starters = generate_conversation_starters(
            [Commonality(
                category="professional",
                description="Complementary industries: Technology + Finance",
                weight=0.72,
            )],
            "strategic",
        )
        assert starters == [
            "Learn how they approach complementary industries: technology + finance",
        ]

    def test_hobby_and_values(self):
        starters = generate_conversation_starters(
            [
                Commonality(category="hobby", description="Both enjoy Hiking", weight=0.7),
                Commonality(category="values", description="Both passionate about Education", weight=0.7),
            ],
            "high-affinity",
        )
        assert starters == [
            "Bond over your shared interest in hiking",
            "Explore your aligned values around both passionate about education",
        ]

    def test_only_top_two_used(self):
        commonalities = [
            Commonality(category="professional", description=f"Shared priority: P{i}", weight=0.9)
            for i in range(4)
        ]
        assert len(generate_conversation_starters(commonalities, "strategic")) == 2

    def test_fallback_when_empty(self):
        assert generate_conversation_starters([], "high-affinity") == [
            "Share your current leadership challenges and wins",
        ]
        assert generate_conversation_starters([], "strategic") == [
            "Explore how your different perspectives could create value together",
        ]

    def test_lifestyle_only_falls_back(self):
        starters = generate_conversation_starters(
            [Commonality(category="lifestyle", description="Energized by People", weight=0.75)],
            "strategic",
        )
        assert len(starters) == 1
        assert starters[0].startswith("Explore how your different perspectives")


class TestGenerativeStarters:
    def test_filters_and_caps(self, generative_provider_cls):
        provider = generative_provider_cls(reply=(
            "Hi\n"
            "Ask Ben how Northwind keeps its engineering teams shipping fast.\n"
            "1.\n"
            "Trade notes on your favourite hiking trails near the venue.\n"
            "Compare how you each built a culture of innovation.\n"
            "Ask what he reads to stay sharp as a technology leader.\n"
        ))
        starters = generate_conversation_starters_ai(_context(), provider)
        assert starters is not None
        assert len(starters) == 3
        assert all(10 < len(s) < 200 for s in starters)

    def test_prompt_includes_context(self, generative_provider_cls):
        provider = generative_provider_cls(reply="Ask about Northwind's roadmap this year.")
        generate_conversation_starters_ai(_context(), provider)
        prompt, system = provider.prompts[0]
        assert "Their role: VP Engineering" in prompt
        assert "Both work in Technology; Both enjoy Hiking" in prompt
        assert system

    def test_provider_failure_returns_none(self, generative_provider_cls):
        provider = generative_provider_cls(fail=True)
        assert generate_conversation_starters_ai(_context(), provider) is None

    def test_unusable_reply_returns_none(self, generative_provider_cls):
        provider = generative_provider_cls(reply="ok\nsure\n")
        assert generate_conversation_starters_ai(_context(), provider) is None

    def test_unconfigured_provider_returns_none(self):
        provider = AnthropicGenerativeProvider(api_key="")
        assert not provider.is_configured
        assert generate_conversation_starters_ai(_context(), provider) is None
        assert generate_profile_summary("Name: Ava", provider) is None

    def test_no_provider_returns_none(self, monkeypatch):
        monkeypatch.setattr(conversation, "get_generative_provider", lambda: None)
        assert generate_conversation_starters_ai(_context()) is None
        assert generate_profile_summary("Name: Ava") is None

    def test_profile_summary(self, generative_provider_cls):
        provider = generative_provider_cls(reply="Ava leads engineering at Lumen Labs.")
        assert generate_profile_summary("Name: Ava", provider) == (
            "Ava leads engineering at Lumen Labs."
        )
