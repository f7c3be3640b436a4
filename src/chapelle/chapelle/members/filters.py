from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..core.constants import ALL_FILTER
from .model import Member


@dataclass(frozen=True)
class MemberFilter:
    """Filtres de la liste des fidèles; combinés en ET logique."""

    role_tag: Optional[str] = None
    ministry: Optional[str] = None
    search: str = ""

    @classmethod
    def from_args(cls, args) -> "MemberFilter":
        return cls(
            role_tag=args.get("fonction") or None,
            ministry=args.get("service") or None,
            search=(args.get("q") or "").strip(),
        )


def _active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL_FILTER


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def matches(member: Member, criteria: MemberFilter) -> bool:
    if _active(criteria.role_tag) and member.role_tag != criteria.role_tag:
        return False
    if _active(criteria.ministry) and member.ministry != criteria.ministry:
        return False

    if criteria.search:
        needle = criteria.search.lower()
        return (
            _contains(member.last_name, needle)
            or _contains(member.first_name, needle)
            or _contains(member.role_tag, needle)
            or _contains(member.ministry, needle)
        )
    return True


def filter_members(members: Iterable[Member], criteria: MemberFilter) -> List[Member]:
    return [m for m in members if matches(m, criteria)]


def available_tags(members: Iterable[Member]) -> tuple[list[str], list[str]]:
    """Distinct role tags and ministries present in the data, sorted."""

    roles: set[str] = set()
    ministries: set[str] = set()
    for m in members:
        if m.role_tag:
            roles.add(m.role_tag)
        if m.ministry:
            ministries.add(m.ministry)
    return sorted(roles), sorted(ministries)
