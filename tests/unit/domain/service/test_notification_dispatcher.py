"""Unit tests for NotificationDispatcher."""

from unittest.mock import AsyncMock

import pytest

from pawtalk.config import EngineSettings
from pawtalk.domain.model import NotificationIntent
from pawtalk.domain.service import NotificationDispatcher
from pawtalk.domain.value import CommentState, NotificationKind
from pawtalk.persistence.repository.inmemory import InMemoryNotificationSink
from tests.conftest import make_comment, make_post, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything in memory
unit_env = create_env_fixture()


class TestPreview:
    """Tests for preview text."""

    def test_short_text_is_kept(self):
        dispatcher = NotificationDispatcher(sink=AsyncMock(), settings=EngineSettings())
        assert dispatcher.preview("  Good   boy!  ") == "Good boy!"

    def test_long_text_is_cut_to_thirty_characters(self):
        """Cut at 30 characters and marked with an ellipsis."""
        dispatcher = NotificationDispatcher(sink=AsyncMock(), settings=EngineSettings())
        text = "This is a really long comment about my dog's walk"

        preview = dispatcher.preview(text)

        assert preview == text[:30] + "..."


class TestDispatch:
    """Tests for dispatch routing."""

    @pytest.mark.asyncio
    async def test_reply_is_individual_with_comment_deep_link(self, unit_env):
        """Individual notifications link to the exact comment."""
        # Arrange
        dispatcher = await unit_env.get(NotificationDispatcher)
        sink = await unit_env.get(InMemoryNotificationSink)
        u1 = make_profile("U1")
        u2 = make_profile("U2")
        post = make_post(owner=make_profile("owner"))
        root = make_comment(post, u1, "first")
        reply = make_comment(post, u2, "@U1 thanks!", parent=root, minutes=1)
        intents = [
            NotificationIntent(
                recipient_id=u1.id, kind=NotificationKind.REPLY, source_comment_id=reply.id
            )
        ]

        # Act
        delivered = await dispatcher.dispatch(intents, reply, post, u2)

        # Assert
        assert delivered == 1
        [stored] = sink.list_for(u1.id)
        assert stored.kind == NotificationKind.REPLY
        assert stored.title == "U2 replied to your comment"
        assert stored.body == "@U1 thanks!"
        assert stored.deep_link == f"/event/{post.id}?comment_id={reply.id}"

    @pytest.mark.asyncio
    async def test_root_comment_is_grouped(self, unit_env):
        """The owner's comment notification is aggregated per post."""
        # Arrange
        dispatcher = await unit_env.get(NotificationDispatcher)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        author = make_profile("sam")
        post = make_post(owner=owner, title="Beach day")
        comment = make_comment(post, author, "So cute")
        intents = [
            NotificationIntent(
                recipient_id=owner.id,
                kind=NotificationKind.COMMENT,
                source_comment_id=comment.id,
            )
        ]

        # Act
        await dispatcher.dispatch(intents, comment, post, author)

        # Assert
        [stored] = sink.list_for(owner.id)
        assert stored.kind == NotificationKind.COMMENT
        assert stored.title == "Beach day"
        assert stored.body == "sam commented on your post"
        assert stored.data["last_comment_preview"] == "So cute"

    @pytest.mark.asyncio
    async def test_pending_comment_is_never_dispatched(self, unit_env):
        dispatcher = await unit_env.get(NotificationDispatcher)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        post = make_post(owner=owner)
        pending = make_comment(post, make_profile("a"), state=CommentState.PENDING)
        intents = [
            NotificationIntent(
                recipient_id=owner.id,
                kind=NotificationKind.COMMENT,
                source_comment_id=pending.id,
            )
        ]

        delivered = await dispatcher.dispatch(intents, pending, post, pending.author)

        assert delivered == 0
        assert sink.list_for(owner.id) == []


class TestSend:
    """Tests for grouped and individual delivery."""

    @pytest.mark.asyncio
    async def test_self_action_is_skipped(self, unit_env):
        """Liking your own post sends nothing."""
        # Arrange
        dispatcher = await unit_env.get(NotificationDispatcher)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        post = make_post(owner=owner)

        # Act
        sent = await dispatcher.notify_post_like(post, owner)

        # Assert
        assert sent is False
        assert sink.list_for(owner.id) == []

    @pytest.mark.asyncio
    async def test_post_like_carries_like_action(self, unit_env):
        dispatcher = await unit_env.get(NotificationDispatcher)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        post = make_post(owner=owner)

        await dispatcher.notify_post_like(post, make_profile("fan"))

        [stored] = sink.list_for(owner.id)
        assert stored.deep_link == f"/event/{post.id}?action=like"
        assert stored.body == "fan liked your post"

    @pytest.mark.asyncio
    async def test_post_without_owner_is_skipped(self, unit_env):
        dispatcher = await unit_env.get(NotificationDispatcher)
        assert await dispatcher.notify_post_like(make_post(), make_profile("fan")) is False

    @pytest.mark.asyncio
    async def test_sink_failure_is_logged_not_raised(self):
        """Delivery is best-effort: a failing sink returns False."""
        # Arrange
        sink = AsyncMock()
        sink.send_individual.side_effect = RuntimeError("push service down")
        dispatcher = NotificationDispatcher(sink=sink, settings=EngineSettings())
        post = make_post()
        comment = make_comment(post, make_profile("author"))

        # Act
        sent = await dispatcher.notify_comment_like(comment, post, make_profile("fan"))

        # Assert
        assert sent is False
        sink.send_individual.assert_awaited_once()
