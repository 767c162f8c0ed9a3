"""Users service."""

from __future__ import annotations

from typing import Any

from .models import Page, User, UserCreateRequest, UserStatus, UserUpdateRequest
from .service import Service


class UsersService(Service):
    def list(
        self,
        status: UserStatus | None = None,
        limit: int | None = None,
        after: str | None = None,
        group_id: str | None = None,
    ) -> Page[User]:
        """One page of users. ``after`` is the ``next_marker`` of the previous page."""
        params: dict[str, Any] = {}
        if status:
            params["status"] = status.value
        if limit:
            params["limit"] = limit
        if after:
            params["after"] = after
        if group_id:
            params["group_id"] = group_id
        data = self._call("GET", "/users", "list_users", params=params or None)
        return Page.from_dict(data or {}, User.from_dict, items_key="data")

    def list_all(
        self, status: UserStatus | None = None, group_id: str | None = None
    ) -> list[User]:
        users: list[User] = []
        marker = None
        while True:
            page = self.list(status=status, after=marker, group_id=group_id)
            users.extend(page.items)
            if not page.next_marker or page.next_marker == marker:
                return users
            marker = page.next_marker

    def get(self, user_id: str) -> User:
        data = self._call("GET", f"/users/{user_id}", f"get_user({user_id})")
        return User.from_dict(data)

    def invite(self, request: UserCreateRequest) -> User:
        data = self._call("POST", "/users", f"invite_user({request.email})", json=request.to_dict())
        return User.from_dict(data)

    def update(self, user_id: str, request: UserUpdateRequest) -> User:
        """Update a user. Setting status DEACTIVATED is how active users are removed."""
        data = self._call("PUT", f"/users/{user_id}", f"update_user({user_id})", json=request.to_dict())
        return User.from_dict(data)

    def delete_pending(self, user_id: str) -> None:
        """Cancel an invitation. Only users in PENDING status can be deleted."""
        self._call("DELETE", f"/users/{user_id}", f"delete_pending_user({user_id})")
