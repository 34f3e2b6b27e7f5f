"""Unit tests for RealtimeMergeService and ProfileCache."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from pawtalk.domain.model import CommentEvent, CommentThread
from pawtalk.domain.service import (
    CommentMutationService,
    ProfileCache,
    RealtimeMergeService,
)
from pawtalk.domain.value import CommentId
from pawtalk.persistence.repository.inmemory import InMemoryBackend, InMemoryCommentFeed
from tests.conftest import make_comment, make_post, make_profile
from tests.di import build_test_container
from tests.harness import create_env_fixture

# Unit test fixture - everything in memory
unit_env = create_env_fixture()


def make_event(post, author, content="hi", parent=None) -> CommentEvent:
    return CommentEvent(
        id=CommentId(uuid4()),
        post_id=post.id,
        author_id=author.id,
        content=content,
        created_at=datetime.now(timezone.utc),
        parent_id=parent.id if parent else None,
    )


class TestHandleEvent:
    """Tests for handle_event."""

    @pytest.mark.asyncio
    async def test_remote_comment_is_merged_with_author(self, unit_env):
        # Arrange
        service = await unit_env.get(RealtimeMergeService)
        backend = await unit_env.get(InMemoryBackend)
        alice = backend.add_profile(make_profile("alice"))
        post = make_post()
        thread = CommentThread(post, make_profile("viewer").id)

        # Act
        merged = await service.handle_event(thread, make_event(post, alice, "woof"))

        # Assert
        assert merged is not None
        assert merged.author.username == "alice"
        assert thread.store.all() == [merged]

    @pytest.mark.asyncio
    async def test_self_echo_is_dropped(self, unit_env):
        """The viewer's own comments arrive through the mutation path instead."""
        service = await unit_env.get(RealtimeMergeService)
        viewer = make_profile("viewer")
        post = make_post()
        thread = CommentThread(post, viewer.id)

        merged = await service.handle_event(thread, make_event(post, viewer))

        assert merged is None
        assert len(thread.store) == 0

    @pytest.mark.asyncio
    async def test_same_event_twice_yields_one_record(self, unit_env):
        # Arrange
        service = await unit_env.get(RealtimeMergeService)
        post = make_post()
        thread = CommentThread(post, None)
        event = make_event(post, make_profile("alice"))

        # Act
        await service.handle_event(thread, event)
        await service.handle_event(thread, event)

        # Assert
        assert len(thread.store) == 1

    @pytest.mark.asyncio
    async def test_unknown_author_gets_placeholder(self, unit_env):
        """An author whose profile can't be found shows as "Unknown"."""
        service = await unit_env.get(RealtimeMergeService)
        post = make_post()
        thread = CommentThread(post, None)

        merged = await service.handle_event(thread, make_event(post, make_profile("ghost")))

        assert merged.author.username == "Unknown"

    @pytest.mark.asyncio
    async def test_reply_to_reply_is_flattened_and_root_expanded(self, unit_env):
        # Arrange
        service = await unit_env.get(RealtimeMergeService)
        alice = make_profile("alice")
        post = make_post()
        root = make_comment(post, alice, "root")
        reply = make_comment(post, alice, "reply", parent=root, minutes=1)
        thread = CommentThread(post, None)
        thread.store.upsert(root)
        thread.store.upsert(reply)

        # Act
        merged = await service.handle_event(thread, make_event(post, alice, parent=reply))

        # Assert
        assert merged.parent_id == root.id
        assert root.id in thread.expansion

    @pytest.mark.asyncio
    async def test_closed_thread_is_not_touched(self, unit_env):
        service = await unit_env.get(RealtimeMergeService)
        post = make_post()
        thread = CommentThread(post, None)
        thread.close()

        merged = await service.handle_event(thread, make_event(post, make_profile("a")))

        assert merged is None
        assert len(thread.store) == 0

    @pytest.mark.asyncio
    async def test_failing_side_effect_does_not_undo_merge(self, unit_env):
        service = await unit_env.get(RealtimeMergeService)
        post = make_post()
        thread = CommentThread(post, None)

        def explode(_thread, _comment):
            raise RuntimeError("view gone")

        merged = await service.handle_event(
            thread, make_event(post, make_profile("a")), on_merged=explode
        )

        assert merged.id in thread.store


class TestSubscribe:
    """Tests for subscribe."""

    @pytest.mark.asyncio
    async def test_second_viewer_sees_comment_without_refresh(self):
        """Two views of one post: B shows A's new comment from the push alone."""
        # Arrange
        container = build_test_container()
        alice = make_profile("alice")
        bob = make_profile("bob")
        post = make_post()

        async with container() as view_a, container() as view_b:
            backend = await view_a.get(InMemoryBackend)
            backend.add_profile(alice)
            mutations_a = await view_a.get(CommentMutationService)
            realtime_b = await view_b.get(RealtimeMergeService)

            thread_a = CommentThread(post, alice.id)
            thread_b = CommentThread(post, bob.id)
            merged = []
            subscription = await realtime_b.subscribe(
                thread_b, on_merged=lambda _t, c: merged.append(c)
            )

            # Act
            c2 = await mutations_a.submit_comment(thread_a, alice, "C2 here")

            # Assert
            assert [c.id for c in thread_b.store.all()] == [c2.id]
            assert thread_b.store.get(c2.id).author.username == "alice"
            assert merged[0].id == c2.id

            await subscription.close()

        await container.close()

    @pytest.mark.asyncio
    async def test_closed_subscription_stops_delivery(self, unit_env):
        # Arrange
        service = await unit_env.get(RealtimeMergeService)
        feed = await unit_env.get(InMemoryCommentFeed)
        post = make_post()
        thread = CommentThread(post, None)
        subscription = await service.subscribe(thread)

        # Act
        await subscription.close()
        await feed.publish(make_event(post, make_profile("a")))

        # Assert
        assert subscription.is_open is False
        assert feed.subscriber_count(post.id) == 0
        assert len(thread.store) == 0


class TestProfileCache:
    """Tests for ProfileCache."""

    @pytest.mark.asyncio
    async def test_hit_skips_repository(self):
        repo = AsyncMock()
        cache = ProfileCache(repo)
        alice = make_profile("alice")
        cache.prime(alice)

        assert await cache.resolve(alice.id) == alice
        repo.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_lookup_is_not_cached(self):
        """A placeholder is returned, and the next call tries again."""
        # Arrange
        alice = make_profile("alice")
        repo = AsyncMock()
        repo.get.side_effect = [RuntimeError("down"), alice]
        cache = ProfileCache(repo)

        # Act
        first = await cache.resolve(alice.id)
        second = await cache.resolve(alice.id)

        # Assert
        assert first.username == "Unknown"
        assert second == alice
        assert alice.id in cache
