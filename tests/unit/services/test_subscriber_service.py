"""Tests for SubscriberService."""

import asyncio

import pytest

from tempt_api.data.store import SUBSCRIBERS
from tempt_api.services.errors import NotFound, ValidationError


class TestSubscribe:
    def test_creates_record(self, subscribers, store):
        result = asyncio.run(subscribers.subscribe("a@x.com", name="Ann", origin="1.2.3.4"))

        assert not result.duplicate
        records = asyncio.run(store.load(SUBSCRIBERS))
        assert len(records) == 1
        assert records[0]["email"] == "a@x.com"
        assert records[0]["name"] == "Ann"
        assert records[0]["source"] == "website"
        assert records[0]["ip"] == "1.2.3.4"
        assert len(records[0]["id"]) == 16
        assert records[0]["subscribedAt"].endswith("Z")

    def test_same_email_twice_is_duplicate(self, subscribers, store):
        asyncio.run(subscribers.subscribe("a@x.com"))
        result = asyncio.run(subscribers.subscribe("a@x.com"))

        assert result.duplicate
        assert len(asyncio.run(store.load(SUBSCRIBERS))) == 1

    def test_dedup_is_case_insensitive_and_trimmed(self, subscribers, store):
        asyncio.run(subscribers.subscribe("A@Example.com"))
        result = asyncio.run(subscribers.subscribe("  a@example.com "))

        assert result.duplicate
        assert [r["email"] for r in asyncio.run(store.load(SUBSCRIBERS))] == ["a@example.com"]

    def test_invalid_email_rejected_without_write(self, subscribers, store):
        with pytest.raises(ValidationError):
            asyncio.run(subscribers.subscribe("nope"))
        assert not store.path_for(SUBSCRIBERS).exists()

    def test_source_and_name_are_capped(self, subscribers):
        result = asyncio.run(subscribers.subscribe("a@x.com", name="n" * 150, source=" s" * 40))

        assert len(result.subscriber.name) == 100
        assert len(result.subscriber.source) == 50

    def test_blank_name_stored_as_none(self, subscribers):
        result = asyncio.run(subscribers.subscribe("a@x.com", name="   "))
        assert result.subscriber.name is None

    def test_concurrent_duplicates_store_one_record(self, subscribers, store):
        async def scenario():
            return await asyncio.gather(*(subscribers.subscribe("a@x.com") for _ in range(10)))

        results = asyncio.run(scenario())

        assert sum(not r.duplicate for r in results) == 1
        assert len(asyncio.run(store.load(SUBSCRIBERS))) == 1


class TestRemove:
    def test_removes_by_email(self, subscribers):
        asyncio.run(subscribers.subscribe("a@x.com"))
        asyncio.run(subscribers.subscribe("b@x.com"))

        removed = asyncio.run(subscribers.remove_subscriber("A@X.com"))

        assert removed.email == "a@x.com"
        assert [s.email for s in asyncio.run(subscribers.list_subscribers())] == ["b@x.com"]

    def test_missing_email_is_not_found(self, subscribers):
        with pytest.raises(NotFound):
            asyncio.run(subscribers.remove_subscriber("ghost@x.com"))
