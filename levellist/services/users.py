"""Account registration, profiles and role management."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

import structlog

from ..models import Completion, User
from .audit import AuditLog
from .context import Runtime, find_user, get_user, require_staff
from .errors import Forbidden, ValidationError
from .leaderboard import rank_of
from .titles import FREE_TITLE, Title, TitleEngine

logger = structlog.get_logger()

USERNAME_RE = re.compile(r"^[A-Za-z0-9(){}\[\]._\-?!]+$")
MIN_PASSWORD_LENGTH = 6
BIO_MAX_LENGTH = 250
SEARCH_LIMIT = 50


@dataclass
class Profile:
    user: User
    rank: Optional[int]
    title: Title
    eligible_titles: List[Title]
    completions: List[Completion]


class UserService:
    def __init__(self, runtime: Runtime, titles: TitleEngine, audit: AuditLog) -> None:
        self.runtime = runtime
        self.titles = titles
        self.audit = audit

    def _new_user(self, username: str, password: str, nationality: str, role: str = "user") -> User:
        return User(
            id=self.runtime.new_id(),
            username=username,
            password=password,
            role=role,
            nationality=nationality,
            created_at=self.runtime.clock(),
            equipped_title=FREE_TITLE,
        )

    def register(self, username: str, password: str, nationality: str) -> User:
        username = (username or "").strip()
        if not username or not password or not (nationality or "").strip():
            raise ValidationError("Please fill all fields")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not USERNAME_RE.match(username):
            raise ValidationError("Invalid username: no spaces; allowed chars (){}[] . _ - ? !")

        users = self.runtime.load_users()
        if find_user(users, username) is not None:
            raise ValidationError("Username already taken")

        user = self._new_user(username, password, nationality.strip())
        users.append(user)
        self.titles.commit_users(users, actor=username)
        logger.info("user_registered", username=username)
        return user

    def seed_if_empty(self, username: str, password: str, nationality: str) -> Optional[User]:
        """Create the head admin account when there are no users at all."""

        users = self.runtime.load_users()
        if users:
            return None
        admin = self._new_user(username, password, nationality, role="headadmin")
        self.runtime.save_users([admin])
        logger.info("head_admin_seeded", username=username)
        return admin

    def get(self, username: str) -> User:
        return get_user(self.runtime.load_users(), username)

    def profile(self, username: str) -> Profile:
        users = self.runtime.load_users()
        user = get_user(users, username)
        return Profile(
            user=user,
            rank=rank_of(users, user.username),
            title=self.titles.display_title(user, users),
            eligible_titles=self.titles.eligible_titles(user, users),
            completions=sorted(user.completed_records, key=lambda rec: rec.ts, reverse=True),
        )

    def update_profile(
        self,
        username: str,
        bio: Optional[str] = None,
        show_country: Optional[bool] = None,
    ) -> User:
        users = self.runtime.load_users()
        user = get_user(users, username)
        if bio is not None:
            user.bio = bio[:BIO_MAX_LENGTH]
        if show_country is not None:
            user.show_country = bool(show_country)
        self.titles.commit_users(users, actor=user.username)
        self.audit.record("edit_profile", user.username, user.username, {"showCountry": user.show_country})
        return user

    def change_password(
        self,
        username: str,
        current: str,
        new: str,
        confirm: Optional[str] = None,
    ) -> User:
        """Replace the password after checking the current one.

        ``confirm`` is optional; when given it must equal ``new``.
        """

        users = self.runtime.load_users()
        user = get_user(users, username)
        if current != user.password:
            raise Forbidden("Current password incorrect")
        if len(new or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
        if confirm is not None and confirm != new:
            raise ValidationError("New passwords do not match")

        user.password = new
        self.titles.commit_users(users, actor=user.username)
        self.audit.record("change_password", user.username, user.username)
        return user

    def search(self, moderator: str, query: str, limit: int = SEARCH_LIMIT) -> List[User]:
        """Case-insensitive substring match on usernames, for moderators."""

        users = self.runtime.load_users()
        require_staff(users, moderator)
        needle = (query or "").strip().casefold()
        return [user for user in users if needle in user.username.casefold()][:limit]

    def promote_to_mod(self, actor: str, username: str) -> User:
        users = self.runtime.load_users()
        admin = find_user(users, actor)
        if admin is None or admin.role != "headadmin":
            raise Forbidden("Only the Head Admin can promote moderators")
        target = get_user(users, username)
        if target.role != "user":
            return target
        target.role = "mod"
        self.titles.commit_users(users, actor=admin.username)
        self.audit.record("promote_to_mod", admin.username, target.username)
        return target


__all__ = ["Profile", "SEARCH_LIMIT", "USERNAME_RE", "UserService"]
