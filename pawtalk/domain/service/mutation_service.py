"""Optimistic comment mutations."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from pawtalk.domain.error import (
    CommentWriteError,
    InvalidEditOperationError,
    NotFoundError,
    ValidationError,
)
from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.repository import CommentRepository
from pawtalk.domain.value import CommentId, CommentState

from .base import Service
from .notification_dispatcher import NotificationDispatcher
from .target_resolver import NotificationTargetResolver


class CommentMutationService(Service):
    """Apply comment writes to a thread before the backing store confirms them.

    Every operation mutates the thread's store first so the view updates
    immediately, then issues one external write. A failed create or delete
    is rolled back; so is a failed edit. Store mutations that would run
    after the thread was closed are skipped.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        target_resolver: NotificationTargetResolver,
        dispatcher: NotificationDispatcher,
    ) -> None:
        """Initialize mutation service.

        Args:
            comment_repository: Comment repository (external writes)
            target_resolver: Resolves who to notify for a new comment
            dispatcher: Delivers the resolved notifications
        """
        self.comment_repository = comment_repository
        self.target_resolver = target_resolver
        self.dispatcher = dispatcher
        # Provisional ids deleted locally while their create was in flight
        self._withdrawn: set[CommentId] = set()
        # Provisional ids removed along with a comment whose delete is in
        # flight, mapped to the confirmed record once their create resolves
        self._held: dict[CommentId, Comment | None] = {}

    async def submit_comment(
        self,
        thread: CommentThread,
        author: AuthorProfile,
        content: str,
        reply_target: Comment | None = None,
    ) -> Comment:
        """Post a comment or reply.

        Steps:
        1. Flatten the parent onto the reply target's thread root
        2. Insert a PENDING record under a provisional id
        3. Expand the root for replies
        4. Create the comment in the backing store
        5. Swap the provisional record for the confirmed one
        6. Resolve and dispatch notifications

        Args:
            thread: The thread to post into
            author: The current user's profile
            content: Comment text
            reply_target: The comment the user chose to reply to

        Returns:
            The confirmed comment

        Raises:
            ValidationError: If the text is empty or the target is still pending
            CommentWriteError: If the backing store rejected the create
        """
        text = content.strip()
        if not text:
            raise ValidationError("Comment text cannot be empty")
        if reply_target is not None and reply_target.is_pending:
            raise ValidationError("Cannot reply to a comment that is still being posted")

        parent_id = reply_target.root_id if reply_target is not None else None
        provisional = Comment(
            id=CommentId(uuid4()),
            post_id=thread.post.id,
            author_id=author.id,
            author=author,
            content=text,
            parent_id=parent_id,
            created_at=datetime.now(timezone.utc),
            state=CommentState.PENDING,
        )

        with logfire.span(
            "comment_mutation.submit",
            post_id=str(thread.post.id),
            author_id=str(author.id),
            provisional_id=str(provisional.id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            thread.store.upsert(provisional)
            if parent_id is not None:
                thread.expansion.expand(parent_id)
            thread.changed()

            try:
                created = await self.comment_repository.create(
                    post_id=thread.post.id,
                    author_id=author.id,
                    content=text,
                    parent_id=parent_id,
                )
            except Exception as e:
                logfire.warn(
                    "Comment create failed, rolling back",
                    provisional_id=str(provisional.id),
                    error=str(e),
                )
                if thread.is_live:
                    thread.store.remove(provisional.id)
                    thread.changed()
                self._withdrawn.discard(provisional.id)
                raise CommentWriteError("create", str(provisional.id), str(e)) from e

            confirmed = provisional.model_copy(
                update={
                    "id": created.id,
                    "created_at": created.created_at,
                    "state": CommentState.CONFIRMED,
                }
            )

            if provisional.id in self._withdrawn:
                self._withdrawn.discard(provisional.id)
                if provisional.id in self._held:
                    self._held[provisional.id] = confirmed
                logfire.info(
                    "Comment confirmed after local delete, not notifying",
                    provisional_id=str(provisional.id),
                    comment_id=str(created.id),
                )
                return confirmed

            if thread.is_live:
                thread.store.replace_id(provisional.id, confirmed)
                thread.changed()

            logfire.info(
                "Comment confirmed",
                provisional_id=str(provisional.id),
                comment_id=str(confirmed.id),
                post_id=str(thread.post.id),
            )

            await self._notify(thread, confirmed, author, reply_target)
            return confirmed

    async def edit_comment(
        self,
        thread: CommentThread,
        comment_id: CommentId,
        new_content: str,
    ) -> Comment:
        """Edit a confirmed comment's text.

        Args:
            thread: The thread holding the comment
            comment_id: The comment ID
            new_content: Replacement text

        Returns:
            The edited comment

        Raises:
            NotFoundError: If the comment is not in the thread
            InvalidEditOperationError: If the comment is still pending
            ValidationError: If the new text is empty
            CommentWriteError: If the backing store rejected the update
        """
        current = thread.store.get(comment_id)
        if current is None:
            raise NotFoundError("Comment", str(comment_id))
        if current.is_pending:
            raise InvalidEditOperationError(
                "Cannot edit a comment that is still being posted"
            )
        text = new_content.strip()
        if not text:
            raise ValidationError("Comment text cannot be empty")

        with logfire.span(
            "comment_mutation.edit",
            comment_id=str(comment_id),
            text_length=len(text),
        ):
            edited = current.model_copy(
                update={"content": text, "updated_at": datetime.now(timezone.utc)}
            )
            thread.store.upsert(edited)
            thread.changed()

            try:
                updated_at = await self.comment_repository.update(comment_id, text)
            except Exception as e:
                logfire.warn(
                    "Comment update failed, rolling back",
                    comment_id=str(comment_id),
                    error=str(e),
                )
                # Only undo our own edit; a later write to the record wins
                if thread.is_live and thread.store.get(comment_id) == edited:
                    thread.store.upsert(current)
                    thread.changed()
                raise CommentWriteError("update", str(comment_id), str(e)) from e

            confirmed = edited.model_copy(update={"updated_at": updated_at})
            if thread.is_live and comment_id in thread.store:
                thread.store.upsert(confirmed)
                thread.changed()

            logfire.info("Comment edited", comment_id=str(comment_id))
            return confirmed

    async def delete_comment(self, thread: CommentThread, comment_id: CommentId) -> None:
        """Delete a comment (and, for a root, the replies shown under it).

        A pending comment only exists locally, so no external call is made
        for it.

        Raises:
            NotFoundError: If the comment is not in the thread
            CommentWriteError: If the backing store rejected the delete
        """
        current = thread.store.get(comment_id)
        if current is None:
            raise NotFoundError("Comment", str(comment_id))

        with logfire.span(
            "comment_mutation.delete",
            comment_id=str(comment_id),
            pending=current.is_pending,
        ):
            removed = thread.store.remove_with_replies(comment_id)
            withdrawn = {record.id for _, record in removed if record.is_pending}
            self._withdrawn.update(withdrawn)
            was_expanded = comment_id in thread.expansion
            if current.is_root:
                thread.expansion.collapse(comment_id)
            thread.changed()

            if current.is_pending:
                logfire.info("Pending comment withdrawn", comment_id=str(comment_id))
                return

            self._held.update(dict.fromkeys(withdrawn))
            try:
                await self.comment_repository.delete(comment_id)
            except Exception as e:
                logfire.warn(
                    "Comment delete failed, restoring",
                    comment_id=str(comment_id),
                    error=str(e),
                )
                restored = self._restorable(removed)
                self._withdrawn.difference_update(withdrawn)
                if thread.is_live:
                    thread.store.reinsert(restored)
                    if was_expanded:
                        thread.expansion.expand(comment_id)
                    thread.changed()
                raise CommentWriteError("delete", str(comment_id), str(e)) from e
            finally:
                for provisional_id in withdrawn:
                    self._held.pop(provisional_id, None)

            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                removed=len(removed),
            )

    def _restorable(
        self, removed: list[tuple[int, Comment]]
    ) -> list[tuple[int, Comment]]:
        """Records to put back after a failed delete.

        A pending record whose create resolved during the delete is replaced
        by its confirmed record; one whose create failed is dropped.
        """
        restored: list[tuple[int, Comment]] = []
        for position, record in removed:
            if record.is_pending and record.id not in self._withdrawn:
                confirmed = self._held.get(record.id)
                if confirmed is None:
                    continue
                record = confirmed
            restored.append((position, record))
        return restored

    async def _notify(
        self,
        thread: CommentThread,
        comment: Comment,
        author: AuthorProfile,
        reply_target: Comment | None,
    ) -> None:
        # Best-effort: the comment is already written
        try:
            intents = await self.target_resolver.resolve(
                comment, thread.post, reply_target
            )
            await self.dispatcher.dispatch(intents, comment, thread.post, author)
        except Exception as e:
            logfire.error(
                "Notification fan-out failed",
                comment_id=str(comment.id),
                error=str(e),
            )
