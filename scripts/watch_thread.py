#!/usr/bin/env python3
"""Watch a post's comment thread and print it whenever it changes.

Usage:
    python scripts/watch_thread.py <post_id> [<viewer_id> <viewer_username>]
"""

import asyncio
import sys
from uuid import UUID

import logfire

from pawtalk.application.session import ThreadViewHooks
from pawtalk.application.usecase.thread import OpenThreadRequest
from pawtalk.domain.model import AuthorProfile, CommentThread, Post
from pawtalk.domain.value import PostId, UserId
from pawtalk.interface.engine import CommentEngine


def render(thread: CommentThread) -> None:
    print(f"--- {thread.comment_count} comments ---")
    for root in thread.store.roots():
        print(f"{root.author.username}: {root.content}")
        for reply in thread.store.by_parent(root.id):
            print(f"    {reply.author.username}: {reply.content}")


async def watch(post_id: PostId, viewer: AuthorProfile | None) -> None:
    engine = CommentEngine.create()
    request = OpenThreadRequest(
        post=Post(id=post_id),
        viewer=viewer,
        hooks=ThreadViewHooks(on_change=render),
    )
    try:
        async with engine.open_thread(request) as session:
            for root in session.roots():
                session.toggle_replies(root.id)
            while True:
                await asyncio.sleep(3600)
    finally:
        await engine.aclose()


def main() -> int:
    if len(sys.argv) not in (2, 4):
        print(__doc__)
        return 2

    post_id = PostId(UUID(sys.argv[1]))
    viewer = None
    if len(sys.argv) == 4:
        viewer = AuthorProfile(id=UserId(UUID(sys.argv[2])), username=sys.argv[3])

    try:
        asyncio.run(watch(post_id, viewer))
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logfire.error(
            "Thread watcher failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
