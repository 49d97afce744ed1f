"""Integration-level tests — sample data through the orchestrator."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.leadermatch.cache import CacheKeys, ResultCache, invalidate_user_cache
from src.leadermatch.engine import (
    DATA_DIR,
    compute_all_matches,
    embed_profiles,
    get_matches,
    get_semantic_matches,
    load_sample_profiles,
)
from src.leadermatch.models import CandidateUser, EmbeddingProfile, Match, MatchedUser

NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def profiles():
    return load_sample_profiles()


@pytest.fixture
def store(clock):
    return ResultCache(clock=clock)


def _by_id(profiles, user_id):
    return next(p for p in profiles if p.id == user_id)


def _with_vector(user: CandidateUser, vector: list[float]) -> CandidateUser:
    return user.model_copy(update={"embedding": vector})


def test_sample_profiles_load(profiles):
    path = DATA_DIR / "sample_profiles.json"
    assert path.exists(), f"Missing {path}"
    with open(path) as f:
        raw = json.load(f)
    assert len(profiles) == len(raw) == 8
    assert len({p.id for p in profiles}) == 8
    assert all(p.profile.name for p in profiles)
    assert all(p.responses for p in profiles)


class TestGetMatches:
    def test_report_shape(self, profiles, store):
        user = _by_id(profiles, "user-ava")
        report = get_matches(user, profiles, store=store, now=NOW)
        ids = [m.matched_user_id for m in report.matches]
        assert report.user_id == "user-ava"
        assert report.source == "attributes"
        assert 0 < len(ids) <= 6
        assert "user-ava" not in ids
        assert len(set(ids)) == len(ids)
        assert report.metrics.high_affinity_count + report.metrics.strategic_count == len(ids)

    def test_served_from_cache(self, profiles, store):
        user = _by_id(profiles, "user-ava")
        first = get_matches(user, profiles, store=store, now=NOW)
        assert store.has(CacheKeys.matches("user-ava"))
        assert get_matches(user, [], store=store, now=NOW) is first

    def test_refresh_regenerates(self, profiles, store):
        user = _by_id(profiles, "user-ava")
        first = get_matches(user, profiles, store=store, now=NOW)
        second = get_matches(user, profiles, refresh=True, store=store, now=NOW)
        assert second is not first
        assert store.get(CacheKeys.matches("user-ava")) is second

    def test_cache_expires_after_ttl(self, profiles, store, clock):
        user = _by_id(profiles, "user-ava")
        first = get_matches(user, profiles, store=store, now=NOW)
        clock.advance(601)
        assert get_matches(user, profiles, store=store, now=NOW) is not first

    def test_invalidation(self, profiles, store):
        user = _by_id(profiles, "user-ava")
        first = get_matches(user, profiles, store=store, now=NOW)
        invalidate_user_cache("user-ava", store)
        assert get_matches(user, profiles, store=store, now=NOW) is not first

    def test_recent_matches_skipped(self, profiles, store):
        user = _by_id(profiles, "user-ava")
        first = get_matches(user, profiles, store=store, now=NOW)
        previous = first.matches
        second = get_matches(
            user, profiles, previous, refresh=True, store=store,
            now=NOW + timedelta(days=1),
        )
        previous_ids = {m.matched_user_id for m in previous}
        assert previous_ids.isdisjoint(m.matched_user_id for m in second.matches)


class TestSemanticMatches:
    def test_falls_back_when_unconfigured(self, profiles, store, embedding_provider_cls):
        user = _with_vector(_by_id(profiles, "user-ava"), [1.0, 0.0, 0.0])
        report = get_semantic_matches(
            user, profiles, provider=embedding_provider_cls(configured=False),
            store=store, now=NOW,
        )
        assert report.source == "attributes"
        assert report.matches

    def test_falls_back_without_user_vector(self, profiles, store, embedding_provider_cls):
        user = _by_id(profiles, "user-ava")
        report = get_semantic_matches(
            user, profiles, provider=embedding_provider_cls(), store=store, now=NOW,
        )
        assert report.source == "attributes"

    def test_ranked_by_similarity(self, profiles, store, embedding_provider_cls):
        vectors = {
            "user-ava": [1.0, 0.0, 0.0],
            "user-ben": [1.0, 0.0, 0.0],
            "user-carla": [1.0, 1.0, 0.0],
            "user-dev": [0.0, 1.0, 0.0],
        }
        pool = [_with_vector(p, vectors[p.id]) if p.id in vectors else p for p in profiles]
        user = _by_id(pool, "user-ava")

        report = get_semantic_matches(
            user, pool, provider=embedding_provider_cls(), store=store, now=NOW,
        )
        assert report.source == "embeddings"
        assert [m.matched_user_id for m in report.matches] == ["user-ben", "user-carla"]
        assert [m.type for m in report.matches] == ["high-affinity", "strategic"]
        assert report.matches[0].score == pytest.approx(1.0)
        assert report.matches[0].commonalities
        assert store.get(CacheKeys.matches("user-ava")) is report

    def test_recent_matches_excluded(self, profiles, store, embedding_provider_cls):
        pool = [_with_vector(p, [1.0, 0.0, 0.0]) for p in profiles]
        user = _by_id(pool, "user-ava")
        ben = _by_id(pool, "user-ben")
        recent = Match(
            id="match_old",
            user_id=user.id,
            matched_user_id=ben.id,
            matched_user=MatchedUser(id=ben.id, profile=ben.profile),
            type="high-affinity",
            score=0.9,
            generated_at=NOW - timedelta(days=3),
        )
        report = get_semantic_matches(
            user, pool, [recent], provider=embedding_provider_cls(),
            store=store, now=NOW,
        )
        ids = [m.matched_user_id for m in report.matches]
        assert "user-ben" not in ids
        assert "user-ava" not in ids
        assert len(ids) == 6

    def test_limit_and_threshold(self, profiles, store, embedding_provider_cls):
        pool = [_with_vector(p, [1.0, 0.0, 0.0]) for p in profiles]
        user = _by_id(pool, "user-ava")
        report = get_semantic_matches(
            user, pool, provider=embedding_provider_cls(), limit=2, store=store, now=NOW,
        )
        assert len(report.matches) == 2


class TestEmbedProfiles:
    def test_single_batch_call(self, profiles, embedding_provider_cls):
        provider = embedding_provider_cls()
        embedding_profiles = {
            p.id: EmbeddingProfile(
                name=p.profile.name,
                position=p.profile.position,
                company=p.profile.company,
                questionnaire_data=p.responses,
            )
            for p in profiles
        }
        vectors = embed_profiles(embedding_profiles, provider)
        assert list(vectors) == [p.id for p in profiles]
        assert all(len(v) == 3 for v in vectors.values())
        assert len(provider.calls) == 1

    def test_empty_input(self, embedding_provider_cls):
        provider = embedding_provider_cls()
        assert embed_profiles({}, provider) == {}
        assert provider.calls == []


class TestComputeAllMatches:
    def test_bad_vector_isolated(self, profiles, store, embedding_provider_cls):
        users = [
            _with_vector(p, [1.0, 0.0] if p.id == "user-dev" else [1.0, 0.0, 0.0])
            for p in profiles
        ]
        result = compute_all_matches(
            users, provider=embedding_provider_cls(), store=store, now=NOW,
        )
        assert result.total == 8
        assert result.failed == 1
        assert result.processed == result.total - 1
        assert not store.has(CacheKeys.matches("user-dev"))
        ava = store.get(CacheKeys.matches("user-ava"))
        assert ava.source == "embeddings"
        assert "user-dev" not in [m.matched_user_id for m in ava.matches]

    def test_users_without_vectors_skipped(self, profiles, store, embedding_provider_cls):
        users = [
            _with_vector(p, [1.0, 0.0, 0.0]) if p.id in ("user-ava", "user-ben") else p
            for p in profiles
        ]
        result = compute_all_matches(
            users, provider=embedding_provider_cls(), store=store, now=NOW,
        )
        assert (result.processed, result.failed, result.total) == (2, 0, 2)

    def test_empty(self, embedding_provider_cls):
        result = compute_all_matches([], provider=embedding_provider_cls())
        assert (result.processed, result.failed, result.total) == (0, 0, 0)
