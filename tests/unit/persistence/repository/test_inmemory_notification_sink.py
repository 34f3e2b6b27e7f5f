"""Unit tests for InMemoryNotificationSink."""

from uuid import uuid4

import pytest

from pawtalk.domain.model import (
    GroupedNotification,
    IndividualNotification,
    NotificationData,
)
from pawtalk.domain.service import add_actor, summarize_actors
from pawtalk.domain.value import NotificationKind, PostId, UserId
from pawtalk.persistence.repository.inmemory import InMemoryNotificationSink


def grouped(recipient, post_id, actor_name, kind=NotificationKind.LIKE):
    return GroupedNotification(
        recipient_id=recipient,
        actor_id=UserId(uuid4()),
        kind=kind,
        post_id=post_id,
        actor_display_name=actor_name,
        preview_text="Beach day",
        deep_link=f"/event/{post_id}",
        fallback_title="Beach day",
    )


class TestGroupingWording:
    def test_one_two_and_many_actors(self):
        kind = NotificationKind.COMMENT

        assert summarize_actors(["Alex"], kind) == "Alex commented on your post"
        assert summarize_actors(["Alex", "Sam"], kind) == "Alex and Sam commented on your post"
        assert (
            summarize_actors(["Alex", "Sam", "Kim", "Lee"], NotificationKind.LIKE)
            == "Alex and 3 others liked your post"
        )

    def test_actor_added_once(self):
        assert add_actor(["Alex"], "Alex") == ["Alex"]
        assert add_actor(["Alex"], "Sam") == ["Alex", "Sam"]

    def test_no_actors_is_an_error(self):
        with pytest.raises(ValueError):
            summarize_actors([], NotificationKind.LIKE)


class TestSendGrouped:
    @pytest.mark.asyncio
    async def test_same_post_and_kind_collapse_into_one_entry(self):
        # Arrange
        sink = InMemoryNotificationSink()
        owner = UserId(uuid4())
        post_id = PostId(uuid4())

        # Act
        for name in ("Alex", "Sam", "Alex", "Kim"):
            await sink.send_grouped(grouped(owner, post_id, name))

        # Assert
        [entry] = sink.list_for(owner)
        assert entry.actors == ["Alex", "Sam", "Kim"]
        assert entry.body == "Alex and 2 others liked your post"

    @pytest.mark.asyncio
    async def test_different_kind_or_post_gets_own_entry(self):
        sink = InMemoryNotificationSink()
        owner = UserId(uuid4())
        post_id = PostId(uuid4())

        await sink.send_grouped(grouped(owner, post_id, "Alex"))
        await sink.send_grouped(grouped(owner, post_id, "Alex", NotificationKind.COMMENT))
        await sink.send_grouped(grouped(owner, PostId(uuid4()), "Alex"))

        assert len(sink.list_for(owner)) == 3

    @pytest.mark.asyncio
    async def test_new_actor_marks_read_entry_unread(self):
        # Arrange
        sink = InMemoryNotificationSink()
        owner = UserId(uuid4())
        post_id = PostId(uuid4())
        await sink.send_grouped(grouped(owner, post_id, "Alex"))
        sink.mark_all_read(owner)
        assert sink.unread_count(owner) == 0

        # Act
        await sink.send_grouped(grouped(owner, post_id, "Sam"))

        # Assert
        assert sink.unread_count(owner) == 1


class TestRetention:
    @pytest.mark.asyncio
    async def test_only_newest_entries_are_kept(self):
        # Arrange
        sink = InMemoryNotificationSink(retention=2)
        owner = UserId(uuid4())
        post_id = PostId(uuid4())

        # Act
        for title in ("one", "two", "three"):
            await sink.send_individual(
                IndividualNotification(
                    recipient_id=owner,
                    actor_id=UserId(uuid4()),
                    kind=NotificationKind.REPLY,
                    title=title,
                    body="...",
                    data=NotificationData(post_id=post_id, deep_link="/event/x"),
                )
            )

        # Assert
        assert [n.title for n in sink.list_for(owner)] == ["three", "two"]
