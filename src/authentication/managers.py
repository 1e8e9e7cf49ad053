"""Custom user manager handling bcrypt hashing and verification."""

import bcrypt
from django.contrib.auth.base_user import BaseUserManager

DEFAULT_ROLE = "member"
# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72


class UserManager(BaseUserManager):
    """Manager to create users with bcrypt password hashes."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        extra_fields["role"] = (extra_fields.get("role") or DEFAULT_ROLE).strip().lower()
        user = self.model(email=email, **extra_fields)
        user.password_hash = self.hash_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields):
        """Create a user with a bcrypt-hashed password and the default role."""
        if password is None:
            raise ValueError("Password must be provided")
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str, **extra_fields):
        """Create an administrator; the only elevated flag in this system is the role."""
        extra_fields["role"] = "admin"
        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def hash_password(raw_password: str) -> str:
        """Hash a raw password using bcrypt and return the utf-8 string."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(raw_password.encode(), salt)
        return hashed.decode()

    @staticmethod
    def check_password_hash(digest: str, raw_password: str) -> bool:
        """Verify a raw password against a stored bcrypt digest."""

        if not digest:
            return False
        return bcrypt.checkpw(raw_password.encode(), digest.encode("utf-8"))


__all__ = ["UserManager", "DEFAULT_ROLE", "MAX_PASSWORD_BYTES"]
