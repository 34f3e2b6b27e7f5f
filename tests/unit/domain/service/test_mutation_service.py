"""Unit tests for CommentMutationService."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from pawtalk.domain.error import (
    CommentWriteError,
    InvalidEditOperationError,
    NotFoundError,
    ValidationError,
)
from pawtalk.domain.model import CommentThread
from pawtalk.domain.repository import CommentRepository
from pawtalk.domain.service import CommentMutationService
from pawtalk.domain.value import CommentState, NotificationKind
from pawtalk.persistence.repository.inmemory import (
    InMemoryBackend,
    InMemoryNotificationSink,
)
from tests.conftest import make_comment, make_post, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything in memory
unit_env = create_env_fixture()


class TestSubmitComment:
    """Tests for submit_comment."""

    @pytest.mark.asyncio
    async def test_root_comment_is_confirmed_and_owner_notified(self, unit_env):
        """The provisional record is swapped for the durable one."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        backend = await unit_env.get(InMemoryBackend)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        author = make_profile("sam")
        post = make_post(owner=owner)
        changes = []
        thread = CommentThread(post, author.id, on_change=changes.append)

        # Act
        confirmed = await service.submit_comment(thread, author, "  Good dog  ")

        # Assert
        assert confirmed.state == CommentState.CONFIRMED
        assert confirmed.content == "Good dog"
        assert confirmed.id in backend.comments
        assert thread.store.all() == [confirmed]
        assert len(changes) >= 2
        [notification] = sink.list_for(owner.id)
        assert notification.kind == NotificationKind.COMMENT

    @pytest.mark.asyncio
    async def test_reply_to_reply_is_flattened_onto_root(self, unit_env):
        """Depth never exceeds two; the root is expanded."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        alice = make_profile("alice")
        bob = make_profile("bob")
        post = make_post()
        root = make_comment(post, alice, "root")
        reply = make_comment(post, bob, "reply", parent=root, minutes=1)
        thread = CommentThread(post, alice.id)
        thread.store.upsert(root)
        thread.store.upsert(reply)

        # Act
        confirmed = await service.submit_comment(thread, alice, "@bob yes", reply_target=reply)

        # Assert
        assert confirmed.parent_id == root.id
        assert root.id in thread.expansion
        assert [c.id for c in thread.replies_shown(root.id)] == [reply.id, confirmed.id]

    @pytest.mark.asyncio
    async def test_record_is_pending_while_create_is_in_flight(self, unit_env):
        """Until acknowledged the record is tagged PENDING."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)
        seen_states = []

        original_create = repo.create

        async def observe(**kwargs):
            seen_states.extend(c.state for c in thread.store.all())
            return await original_create(**kwargs)

        # Act
        with patch.object(repo, "create", side_effect=observe):
            await service.submit_comment(thread, author, "hello")

        # Assert
        assert seen_states == [CommentState.PENDING]
        assert [c.state for c in thread.store.all()] == [CommentState.CONFIRMED]

    @pytest.mark.asyncio
    async def test_failed_create_removes_provisional_record(self, unit_env):
        """A rejected create rolls back and surfaces a recoverable error."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)

        # Act & Assert
        with patch.object(repo, "create", side_effect=RuntimeError("timeout")):
            with pytest.raises(CommentWriteError, match="timeout"):
                await service.submit_comment(thread, author, "hello")

        assert len(thread.store) == 0

    @pytest.mark.asyncio
    async def test_empty_text_is_rejected(self, unit_env):
        service = await unit_env.get(CommentMutationService)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)

        with pytest.raises(ValidationError):
            await service.submit_comment(thread, author, "   ")

        assert len(thread.store) == 0

    @pytest.mark.asyncio
    async def test_reply_to_pending_comment_is_rejected(self, unit_env):
        service = await unit_env.get(CommentMutationService)
        author = make_profile("sam")
        post = make_post()
        pending = make_comment(post, author, state=CommentState.PENDING)
        thread = CommentThread(post, author.id)
        thread.store.upsert(pending)

        with pytest.raises(ValidationError):
            await service.submit_comment(thread, author, "hi", reply_target=pending)

    @pytest.mark.asyncio
    async def test_confirmation_after_close_still_notifies(self, unit_env):
        """A closed view is not touched, but the write's notifications still go out."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        author = make_profile("sam")
        thread = CommentThread(make_post(owner=owner), author.id)
        original_create = repo.create

        async def close_then_create(**kwargs):
            thread.close()
            return await original_create(**kwargs)

        # Act
        with patch.object(repo, "create", side_effect=close_then_create):
            confirmed = await service.submit_comment(thread, author, "bye")

        # Assert
        assert confirmed.id not in thread.store
        assert len(sink.list_for(owner.id)) == 1


class TestDeletePendingComment:
    """Deleting a comment whose create is still in flight."""

    @pytest.mark.asyncio
    async def test_pending_delete_makes_no_external_call(self, unit_env):
        """The comment disappears locally and is not re-added on confirmation."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        sink = await unit_env.get(InMemoryNotificationSink)
        owner = make_profile("owner")
        author = make_profile("sam")
        thread = CommentThread(make_post(owner=owner), author.id)
        gate = asyncio.Event()
        original_create = repo.create

        async def gated_create(**kwargs):
            await gate.wait()
            return await original_create(**kwargs)

        with (
            patch.object(repo, "create", side_effect=gated_create),
            patch.object(repo, "delete", new=AsyncMock()) as delete,
        ):
            submit = asyncio.create_task(service.submit_comment(thread, author, "oops"))
            await asyncio.sleep(0.01)
            [pending] = thread.store.all()
            assert pending.is_pending

            # Act
            await service.delete_comment(thread, pending.id)
            gate.set()
            await submit

        # Assert
        delete.assert_not_awaited()
        assert len(thread.store) == 0
        assert sink.list_for(owner.id) == []


class TestEditComment:
    """Tests for edit_comment."""

    @pytest.mark.asyncio
    async def test_edit_updates_text_and_timestamp(self, unit_env):
        # Arrange
        service = await unit_env.get(CommentMutationService)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)
        created = await service.submit_comment(thread, author, "helo")

        # Act
        edited = await service.edit_comment(thread, created.id, "hello")

        # Assert
        assert edited.content == "hello"
        assert edited.is_edited
        assert thread.store.get(created.id) == edited

    @pytest.mark.asyncio
    async def test_edit_of_pending_comment_is_rejected(self, unit_env):
        service = await unit_env.get(CommentMutationService)
        author = make_profile("sam")
        post = make_post()
        pending = make_comment(post, author, state=CommentState.PENDING)
        thread = CommentThread(post, author.id)
        thread.store.upsert(pending)

        with pytest.raises(InvalidEditOperationError):
            await service.edit_comment(thread, pending.id, "changed")

        assert thread.store.get(pending.id) == pending

    @pytest.mark.asyncio
    async def test_edit_of_unknown_comment_is_not_found(self, unit_env):
        service = await unit_env.get(CommentMutationService)
        post = make_post()
        ghost = make_comment(post, make_profile("sam"))

        with pytest.raises(NotFoundError):
            await service.edit_comment(CommentThread(post, None), ghost.id, "changed")

    @pytest.mark.asyncio
    async def test_failed_edit_rolls_back(self, unit_env):
        """The previous text comes back when the update is rejected."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)
        created = await service.submit_comment(thread, author, "original")

        # Act & Assert
        with patch.object(repo, "update", side_effect=RuntimeError("503")):
            with pytest.raises(CommentWriteError):
                await service.edit_comment(thread, created.id, "changed")

        assert thread.store.get(created.id) == created


class TestDeleteComment:
    """Tests for delete_comment."""

    @pytest.mark.asyncio
    async def test_delete_root_removes_replies(self, unit_env):
        # Arrange
        service = await unit_env.get(CommentMutationService)
        backend = await unit_env.get(InMemoryBackend)
        alice = make_profile("alice")
        bob = make_profile("bob")
        thread = CommentThread(make_post(), alice.id)
        root = await service.submit_comment(thread, alice, "root")
        await service.submit_comment(thread, bob, "reply", reply_target=root)

        # Act
        await service.delete_comment(thread, root.id)

        # Assert
        assert len(thread.store) == 0
        assert root.id not in thread.expansion
        assert root.id not in backend.comments

    @pytest.mark.asyncio
    async def test_failed_delete_restores_records(self, unit_env):
        """A rejected delete puts the comment back where it was."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        author = make_profile("sam")
        thread = CommentThread(make_post(), author.id)
        first = await service.submit_comment(thread, author, "first")
        second = await service.submit_comment(thread, author, "second")

        # Act & Assert
        with patch.object(repo, "delete", side_effect=RuntimeError("403")):
            with pytest.raises(CommentWriteError, match="delete"):
                await service.delete_comment(thread, first.id)

        assert [c.id for c in thread.store.all()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_reply_confirmed_during_failed_delete_is_restored_confirmed(
        self, unit_env
    ):
        """A reply whose create lands while its root's delete fails comes back durable."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        alice = make_profile("alice")
        bob = make_profile("bob")
        thread = CommentThread(make_post(), alice.id)
        root = await service.submit_comment(thread, alice, "root")
        create_gate = asyncio.Event()
        delete_gate = asyncio.Event()
        original_create = repo.create

        async def gated_create(**kwargs):
            await create_gate.wait()
            return await original_create(**kwargs)

        async def gated_failing_delete(comment_id):
            await delete_gate.wait()
            raise RuntimeError("403")

        with (
            patch.object(repo, "create", side_effect=gated_create),
            patch.object(repo, "delete", side_effect=gated_failing_delete),
        ):
            submit = asyncio.create_task(
                service.submit_comment(thread, bob, "reply", reply_target=root)
            )
            await asyncio.sleep(0.01)
            delete = asyncio.create_task(service.delete_comment(thread, root.id))
            await asyncio.sleep(0.01)
            assert len(thread.store) == 0

            # Act
            create_gate.set()
            reply = await submit
            delete_gate.set()
            with pytest.raises(CommentWriteError):
                await delete

        # Assert
        assert [c.id for c in thread.store.all()] == [root.id, reply.id]
        assert not any(c.is_pending for c in thread.store.all())
        assert thread.store.get(reply.id).parent_id == root.id
        assert root.id in thread.expansion

    @pytest.mark.asyncio
    async def test_reply_rejected_during_failed_delete_is_not_restored(self, unit_env):
        # Arrange
        service = await unit_env.get(CommentMutationService)
        repo = await unit_env.get(CommentRepository)
        alice = make_profile("alice")
        thread = CommentThread(make_post(), alice.id)
        root = await service.submit_comment(thread, alice, "root")
        create_gate = asyncio.Event()
        delete_gate = asyncio.Event()

        async def gated_failing_create(**kwargs):
            await create_gate.wait()
            raise RuntimeError("timeout")

        async def gated_failing_delete(comment_id):
            await delete_gate.wait()
            raise RuntimeError("403")

        with (
            patch.object(repo, "create", side_effect=gated_failing_create),
            patch.object(repo, "delete", side_effect=gated_failing_delete),
        ):
            submit = asyncio.create_task(
                service.submit_comment(thread, alice, "reply", reply_target=root)
            )
            await asyncio.sleep(0.01)
            delete = asyncio.create_task(service.delete_comment(thread, root.id))
            await asyncio.sleep(0.01)

            # Act
            create_gate.set()
            with pytest.raises(CommentWriteError):
                await submit
            delete_gate.set()
            with pytest.raises(CommentWriteError):
                await delete

        # Assert
        assert [c.id for c in thread.store.all()] == [root.id]


class TestTimestamps:
    @pytest.mark.asyncio
    async def test_local_timestamps_order_against_loaded_ones(self, unit_env):
        """Provisional and edit times are timezone-aware like backend times."""
        # Arrange
        service = await unit_env.get(CommentMutationService)
        author = make_profile("sam")
        post = make_post()
        loaded = make_comment(post, author, "loaded")
        thread = CommentThread(post, author.id)
        thread.store.upsert(loaded)
        seen = []
        repo = await unit_env.get(CommentRepository)
        original_create = repo.create

        async def observe(**kwargs):
            seen.extend(c for c in thread.store.all() if c.is_pending)
            return await original_create(**kwargs)

        # Act
        with patch.object(repo, "create", side_effect=observe):
            created = await service.submit_comment(thread, author, "new")
        edited = await service.edit_comment(thread, created.id, "newer")

        # Assert
        [provisional] = seen
        assert provisional.created_at > loaded.created_at
        assert edited.updated_at > loaded.created_at
