from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import UserAccount


class UserAccountRepository(Protocol):
    """Repository interface for user accounts.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, account_id: str) -> Optional[UserAccount]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[UserAccount]:
        raise NotImplementedError

    def create_account(self, *, name: str, email: str, password_hash: str, role: Role) -> str:
        raise NotImplementedError
