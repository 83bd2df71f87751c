"""
KYC service.

Builds investor links to the KYC provider.
"""

from app.config.settings import settings
from app.utils.encryption import EncryptionService, get_encryption_service


class KycService:
    """KYC link builder."""

    def __init__(
        self,
        encryption: EncryptionService | None = None,
        link_template: str | None = None,
    ) -> None:
        """
        Initialize KYC service.

        Args:
            encryption: Encryption service (defaults to singleton)
            link_template: Link with {token} placeholder (defaults to settings)
        """
        self.encryption = encryption or get_encryption_service()
        self.link_template = link_template or settings.kyc_link_template

    def get_kyc_token(self, email: str, kyc_id: str) -> str:
        """Encrypted token identifying investor and KYC request."""
        return self.encryption.encrypt(f"{email}:{kyc_id}")

    def get_kyc_link(self, email: str, kyc_id: str) -> str:
        """
        Build KYC link for investor.

        Args:
            email: Investor email
            kyc_id: KYC request id

        Returns:
            Link with the encrypted token substituted
        """
        return self.link_template.format(token=self.get_kyc_token(email, kyc_id))
