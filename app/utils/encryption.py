"""Encryption utilities for tokens sent to investors."""

import base64
import os

from cryptography.fernet import Fernet, InvalidToken
from loguru import logger

from app.utils.exceptions import SecurityError


class EncryptionService:
    """
    Encryption service for investor-facing tokens.

    Uses Fernet (symmetric encryption), output is URL-safe base64.
    """

    def __init__(self, encryption_key: str | None = None) -> None:
        """
        Initialize encryption service.

        Args:
            encryption_key: Base64-encoded Fernet key
        """
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.fernet: Fernet | None = None

        if encryption_key:
            try:
                self.fernet = Fernet(encryption_key.encode())
            except ValueError as e:
                logger.error(f"Invalid encryption key: {e}")
                if self.environment == "production":
                    raise SecurityError(
                        "Invalid encryption key in production environment."
                    ) from e
        elif self.environment == "production":
            raise SecurityError(
                "Encryption key not configured in production environment. "
                "Set ENCRYPTION_KEY in .env file."
            )

    @property
    def enabled(self) -> bool:
        """Check if a valid key is configured."""
        return self.fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext.

        Without a key (non-production only) the text is base64 encoded
        so links stay well-formed.

        Args:
            plaintext: Text to encrypt

        Returns:
            URL-safe token
        """
        if self.fernet is None:
            if self.environment == "production":
                raise SecurityError("Encryption must be enabled in production.")
            logger.warning("Encryption disabled - token is only base64 encoded (DEV ONLY)")
            return base64.urlsafe_b64encode(plaintext.encode()).decode()

        return self.fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, token: str) -> str:
        """
        Decrypt token produced by encrypt.

        Args:
            token: Encrypted token

        Returns:
            Decrypted text

        Raises:
            SecurityError: If token is invalid
        """
        if self.fernet is None:
            if self.environment == "production":
                raise SecurityError("Encryption must be enabled in production.")
            return base64.urlsafe_b64decode(token.encode()).decode()

        try:
            return self.fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            raise SecurityError("Decryption failed: invalid token") from e

    @staticmethod
    def generate_key() -> str:
        """
        Generate new Fernet key.

        Returns:
            Base64-encoded key
        """
        return Fernet.generate_key().decode()


# Singleton instance
_encryption_service: EncryptionService | None = None


def get_encryption_service() -> EncryptionService:
    """Get encryption service singleton, initializing it from settings."""
    global _encryption_service

    if _encryption_service is None:
        from app.config.settings import settings

        _encryption_service = EncryptionService(settings.encryption_key)

    return _encryption_service
