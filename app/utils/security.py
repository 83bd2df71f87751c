"""
Security utilities for masking investor data in logs.

Provides functions to safely mask:
- Emails
- Pay-in addresses
- Transaction ids
"""


def mask_email(email: str | None) -> str:
    """
    Mask email for logging: j***@example.com

    Args:
        email: Email to mask

    Returns:
        Masked email keeping first character and domain

    Examples:
        >>> mask_email("john.doe@example.com")
        'j***@example.com'
        >>> mask_email(None)
        '***'
    """
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.rpartition("@")
    if not local:
        return "***"
    return f"{local[0]}***@{domain}"


def mask_address(address: str | None) -> str:
    """
    Mask pay-in address for logging: 1A1zP1...DivfNa

    Args:
        address: Blockchain address to mask

    Returns:
        Masked address showing first 6 and last 4 characters

    Examples:
        >>> mask_address("0x1234567890abcdef1234567890abcdef12345678")
        '0x1234...5678'
        >>> mask_address("short")
        '***'
    """
    if not address or len(address) < 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"


def mask_tx_hash(tx_hash: str | None) -> str:
    """
    Mask transaction id for logging.

    Args:
        tx_hash: Transaction id to mask

    Returns:
        Masked id showing first 10 and last 6 characters
    """
    if not tx_hash or len(tx_hash) < 16:
        return "***"
    return f"{tx_hash[:10]}...{tx_hash[-6:]}"
