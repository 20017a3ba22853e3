"""
Explicit user context passed into the services.
Identity is resolved outside the application (hosting environment or
settings) and handed to every read and write.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from config import get_settings
from services.errors import NotAuthenticatedError


@dataclass(frozen=True)
class UserContext:
    """Who is asking and at what evaluation time."""
    user_id: Optional[str] = None
    as_of: datetime = field(default_factory=datetime.now)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


def require_user(ctx: UserContext) -> str:
    """Return the user id or raise NotAuthenticatedError."""
    if ctx is None or not ctx.is_authenticated:
        raise NotAuthenticatedError()
    return ctx.user_id


def context_from_settings(user_id: Optional[str] = None) -> UserContext:
    """Build a context from an explicit user id, falling back to the configured one."""
    return UserContext(user_id=user_id or get_settings().user_id)
