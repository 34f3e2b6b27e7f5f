"""Per-post comment thread state.

A ``CommentThread`` bundles everything one view holds for one post:

- ``CommentStore``: ordered records keyed by id, the single source of
  truth for rendering
- ``ThreadExpansion``: root ids whose replies are currently shown
- a liveness flag, cleared when the view is torn down so that late
  confirmations and pushes become no-ops

Store operations are synchronous. Coroutines mutate the store only
between awaits, so there are no races within one event loop tick.
"""

from collections.abc import Callable, Iterable, Iterator

from pawtalk.domain.model.comment import Comment
from pawtalk.domain.model.post import Post
from pawtalk.domain.value import CommentId, UserId


class CommentStore:
    """Ordered collection of comment records for one post.

    Iteration order is insertion order (oldest first). Overwriting an
    existing id keeps its position.
    """

    def __init__(self, records: Iterable[Comment] = ()) -> None:
        self._records: dict[CommentId, Comment] = {}
        for record in records:
            self.upsert(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, comment_id: object) -> bool:
        return comment_id in self._records

    def __iter__(self) -> Iterator[Comment]:
        return iter(list(self._records.values()))

    def all(self) -> list[Comment]:
        """All records, oldest first."""
        return list(self._records.values())

    def roots(self) -> list[Comment]:
        """Root comments, oldest first."""
        return [c for c in self._records.values() if c.parent_id is None]

    def by_parent(self, root_id: CommentId) -> list[Comment]:
        """Replies under a root, oldest first."""
        return [c for c in self._records.values() if c.parent_id == root_id]

    def get(self, comment_id: CommentId) -> Comment | None:
        return self._records.get(comment_id)

    def upsert(self, record: Comment) -> None:
        """Insert a record, or overwrite the one with the same id in place."""
        self._records[record.id] = record

    def remove(self, comment_id: CommentId) -> Comment | None:
        """Remove a record and return it, or None if it was absent."""
        return self._records.pop(comment_id, None)

    def remove_with_replies(
        self, comment_id: CommentId
    ) -> list[tuple[int, Comment]]:
        """Remove a record and any replies under it.

        Returns:
            Removed records with their former positions, in order
        """
        removed: list[tuple[int, Comment]] = []
        kept: dict[CommentId, Comment] = {}
        for index, (key, record) in enumerate(self._records.items()):
            if key == comment_id or record.parent_id == comment_id:
                removed.append((index, record))
            else:
                kept[key] = record
        self._records = kept
        return removed

    def reinsert(self, entries: Iterable[tuple[int, Comment]]) -> None:
        """Put previously removed records back at their former positions.

        Records whose id reappeared in the meantime are left as they are.
        """
        items = list(self._records.items())
        present = set(self._records)
        for index, record in sorted(entries, key=lambda entry: entry[0]):
            if record.id in present:
                continue
            items.insert(min(index, len(items)), (record.id, record))
            present.add(record.id)
        self._records = dict(items)

    def replace_id(self, old_id: CommentId, new_record: Comment) -> bool:
        """Swap the record stored under ``old_id`` for ``new_record``.

        The new record takes the old one's position. If ``new_record.id``
        is already present (an echo that arrived before the confirmation)
        that entry is dropped, keeping ids unique. Replies pointing at
        ``old_id`` are re-pointed at the new id.

        Returns:
            False if ``old_id`` is not in the store (nothing changed)
        """
        if old_id not in self._records:
            return False

        rebuilt: dict[CommentId, Comment] = {}
        for key, record in self._records.items():
            if key == old_id:
                rebuilt[new_record.id] = new_record
            elif key == new_record.id:
                continue
            elif record.parent_id == old_id:
                rebuilt[key] = record.model_copy(update={"parent_id": new_record.id})
            else:
                rebuilt[key] = record
        self._records = rebuilt
        return True

    def clear(self) -> None:
        self._records = {}


class ThreadExpansion:
    """Root comment ids whose replies are shown."""

    def __init__(self) -> None:
        self._expanded: set[CommentId] = set()

    def __contains__(self, root_id: object) -> bool:
        return root_id in self._expanded

    def expand(self, root_id: CommentId) -> None:
        self._expanded.add(root_id)

    def collapse(self, root_id: CommentId) -> None:
        self._expanded.discard(root_id)

    def toggle(self, root_id: CommentId) -> bool:
        """Flip a root's expansion and return the new state."""
        if root_id in self._expanded:
            self._expanded.discard(root_id)
            return False
        self._expanded.add(root_id)
        return True

    def is_expanded(self, root_id: CommentId) -> bool:
        return root_id in self._expanded

    def expanded(self) -> frozenset[CommentId]:
        return frozenset(self._expanded)


ChangeListener = Callable[["CommentThread"], None]


class CommentThread:
    """Comment state for one post as seen by one viewer."""

    def __init__(
        self,
        post: Post,
        viewer_id: UserId | None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self.post = post
        self.viewer_id = viewer_id
        self.store = CommentStore()
        self.expansion = ThreadExpansion()
        self.loaded = False
        self._live = True
        self._on_change = on_change

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def comment_count(self) -> int:
        """Visible comment count (roots and replies)."""
        return len(self.store)

    def replies_shown(self, root_id: CommentId) -> list[Comment]:
        """Replies under a root if it is expanded, otherwise nothing."""
        if root_id not in self.expansion:
            return []
        return self.store.by_parent(root_id)

    def reply_count(self, root_id: CommentId) -> int:
        return len(self.store.by_parent(root_id))

    def changed(self) -> None:
        """Tell the owning view that the thread changed."""
        if self._live and self._on_change is not None:
            self._on_change(self)

    def close(self) -> None:
        """Mark the thread dead; later store mutations are skipped."""
        self._live = False
