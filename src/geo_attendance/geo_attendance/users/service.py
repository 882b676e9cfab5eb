from __future__ import annotations

import logging
from typing import Optional

from ..common.pagination import Page, PageRequest
from ..common.validators import require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def parse_role(value: Optional[str]) -> Optional[Role]:
    if value in (None, ""):
        return None
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Role is not valid")


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, page: PageRequest, *, role: Optional[Role] = None, search: Optional[str] = None) -> Page[User]:
        search = (search or "").strip() or None
        return self._users.list_page(page, role=role, search=search)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        user = self.get_user(user_id)

        new_name = require_non_empty(name, "Name") if name is not None else user.name
        new_email = require_email(email) if email is not None else user.email
        new_role = role or user.role

        if new_email != user.email:
            other = self._users.get_by_email(new_email)
            if other and other.user_id != user_id:
                raise ConflictError("Email is already registered")

        self._users.update_profile(user_id, name=new_name, email=new_email, role=new_role)
        logger.info("user updated user_id=%s role=%s", user_id, new_role.value)
        return self.get_user(user_id)

    def delete_user(self, *, current_user_id: int, user_id: int) -> None:
        if int(current_user_id) == int(user_id):
            raise ValidationError("You cannot delete your own account")

        self.get_user(user_id)
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("user deleted user_id=%s by=%s", user_id, current_user_id)
