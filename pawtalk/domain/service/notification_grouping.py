"""Grouped notification wording.

A grouped entry collects every actor who did the same thing to the same
post. Its body summarises them:

    Alex liked your post
    Alex and Sam liked your post
    Alex and 3 others liked your post

Actors are kept in first-seen order, each display name once.
"""

from pawtalk.domain.value import NotificationKind

GROUPED_ACTIONS = {
    NotificationKind.LIKE: "liked your post",
    NotificationKind.COMMENT: "commented on your post",
}


def add_actor(actors: list[str], name: str) -> list[str]:
    """Return the actor list with ``name`` appended unless already present."""
    if name in actors:
        return list(actors)
    return [*actors, name]


def summarize_actors(actors: list[str], kind: NotificationKind) -> str:
    """Build the "X and N others ..." body for a grouped entry."""
    if not actors:
        raise ValueError("A grouped notification needs at least one actor")
    action = GROUPED_ACTIONS.get(kind, "interacted with your post")
    if len(actors) == 1:
        return f"{actors[0]} {action}"
    if len(actors) == 2:
        return f"{actors[0]} and {actors[1]} {action}"
    return f"{actors[0]} and {len(actors) - 1} others {action}"
