from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        """Insert a user; raises ConflictError when the email is taken."""

        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, email: str, role: Role) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        """Delete a user; presence records, tokens and notifications cascade."""

        raise NotImplementedError

    def list_page(self, page: PageRequest, *, role: Optional[Role] = None, search: Optional[str] = None) -> Page[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError
