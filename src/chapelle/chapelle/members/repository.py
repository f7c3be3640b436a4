from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    def list_all(self) -> Sequence[Member]:
        raise NotImplementedError

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def add(self, member: Member) -> str:
        """Insert a member; ``member.member_id`` is ignored and a new id is returned."""

        raise NotImplementedError

    def update(self, member: Member) -> None:
        raise NotImplementedError

    def delete_by_id(self, member_id: str) -> bool:
        raise NotImplementedError
