"""Hardcoded placeholder users for assignee selection — configuration only."""

from __future__ import annotations

from goalboard.kanban.models import User

USERS: dict[str, User] = {
    "user1": User(id="user1", username="johndoe", display_name="John Doe", initials="JD"),
    "user2": User(id="user2", username="sarahm", display_name="Sarah Miller", initials="SM"),
}


def list_users() -> list[User]:
    return list(USERS.values())
