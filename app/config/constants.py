"""
Application constants.

Centralized constants for the application.
"""

# ========================================================================
# QUEUE CONSTANTS
# ========================================================================

# Inbound queues
TRANSACTION_QUEUE = "transaction"
BLOCKCHAIN_TRANSACTION_QUEUE = "blockchain-transaction"

# Outbound notification queues (consumed by the mailing service)
INVESTOR_NEW_TRANSACTION_QUEUE = "investor-new-transaction"
INVESTOR_KYC_REQUEST_QUEUE = "investor-kyc-request"
INVESTOR_NEED_MORE_INVESTMENT_QUEUE = "investor-need-more-investment"

# ========================================================================
# PROCESSING CONSTANTS
# ========================================================================

# Exchange rate service HTTP timeout (in seconds)
DEFAULT_EX_RATE_TIMEOUT_SECONDS = 10.0

# Redis list with the latest processed transactions
LATEST_TRANSACTIONS_KEY = "ico:latest_transactions"
DEFAULT_LATEST_TRANSACTIONS_LIMIT = 20

# Per-investor processing lock
INVESTOR_LOCK_KEY = "investor_tx:{email}"
DEFAULT_INVESTOR_LOCK_TIMEOUT_SECONDS = 60
INVESTOR_LOCK_BLOCKING_TIMEOUT = 10.0

# Referral code alphabet and collision retries
REFERRAL_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
REFERRAL_CODE_MAX_ATTEMPTS = 10

# Display precision used in notifications
TOKEN_DISPLAY_DECIMALS = 4

# Block explorer transaction links by currency
BLOCKCHAIN_EXPLORER_URLS = {
    "Bitcoin": "https://blockchainexplorer.lykke.com/transaction",
    "Ether": "https://etherscan.io/tx",
}
