from __future__ import annotations

from typing import Iterable, Protocol

from splitledger.models import MemberId


class MemberDirectory(Protocol):
    def has_group(self, group_id: str) -> bool: ...

    def is_member(self, group_id: str, user_id: MemberId) -> bool: ...

    def members_of(self, group_id: str) -> frozenset[MemberId]: ...


class UnknownGroupError(LookupError):
    pass


class NonMemberError(PermissionError):
    pass


def ensure_group(directory: MemberDirectory, group_id: str) -> None:
    if not directory.has_group(group_id):
        raise UnknownGroupError(f"Unknown group {group_id!r}")


def assert_group_member(directory: MemberDirectory, group_id: str, user_id: MemberId) -> None:
    if not directory.is_member(group_id, user_id):
        raise NonMemberError(f"{user_id!r} is not a member of group {group_id!r}")


class InMemoryDirectory:
    """Group membership kept in process memory.

    Stands in for the real user directory in tests and embedded setups.
    """

    def __init__(self) -> None:
        self._members: dict[str, set[MemberId]] = {}

    def add_group(self, group_id: str, members: Iterable[MemberId] = ()) -> None:
        self._members.setdefault(group_id, set()).update(members)

    def add_member(self, group_id: str, user_id: MemberId) -> None:
        ensure_group(self, group_id)
        self._members[group_id].add(user_id)

    def remove_member(self, group_id: str, user_id: MemberId) -> None:
        ensure_group(self, group_id)
        self._members[group_id].discard(user_id)

    def has_group(self, group_id: str) -> bool:
        return group_id in self._members

    def is_member(self, group_id: str, user_id: MemberId) -> bool:
        return user_id in self._members.get(group_id, ())

    def members_of(self, group_id: str) -> frozenset[MemberId]:
        ensure_group(self, group_id)
        return frozenset(self._members[group_id])
