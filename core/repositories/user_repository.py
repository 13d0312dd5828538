"""User repository for authentication and user management."""

from datetime import datetime

from core.db import utcnow
from core.logging import get_logger
from core.models import TokenBlacklist, User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email.lower()).first()

    def get_by_external_id(self, external_id: str) -> User | None:
        """Get user by identity-provider ID."""
        return self.session.query(User).filter(User.external_id == external_id).first()

    def create_or_update(
        self,
        email: str,
        external_id: str | None = None,
        name: str | None = None,
        image: str | None = None,
    ) -> User:
        """
        Create or update a user from identity-provider data.

        Matches on external_id first, then email.
        """
        user = self.get_by_external_id(external_id) if external_id else None
        if user is None:
            user = self.get_by_email(email)

        if user:
            user.email = email.lower()
            if external_id:
                user.external_id = external_id
            if name:
                user.name = name
            if image:
                user.image = image
        else:
            user = User(email=email.lower(), external_id=external_id, name=name, image=image)
            self.session.add(user)
            logger.info("user_created", email_domain=email.split("@")[-1])

        self.session.flush()
        return user

    def set_role(self, user: User, role: str) -> User:
        user.role = role
        self.session.flush()
        return user


class TokenBlacklistRepository(BaseRepository[TokenBlacklist]):
    """Repository for managing blacklisted JWT tokens."""

    model = TokenBlacklist

    def is_blacklisted(self, token_jti: str) -> bool:
        """Check if a token JTI is blacklisted."""
        return self.exists_where(token_jti=token_jti)

    def blacklist_token(self, token_jti: str, expires_at: datetime) -> TokenBlacklist:
        """Add a token to the blacklist."""
        token = TokenBlacklist(token_jti=token_jti, expires_at=expires_at)
        self.session.add(token)
        self.session.flush()
        return token

    def cleanup_expired(self) -> int:
        """Remove expired tokens from blacklist."""
        result = (
            self.session.query(TokenBlacklist)
            .filter(TokenBlacklist.expires_at < utcnow())
            .delete()
        )
        self.session.flush()
        return result
