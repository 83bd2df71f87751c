"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base

# Campaign Models
from app.models.campaign_info import CampaignInfo
from app.models.campaign_settings import CampaignSettingsRecord
from app.models.enums import (
    CampaignInfoType,
    CurrencyType,
    InvestorAttributeType,
    InvestorRefundReason,
)

# Investor Models
from app.models.investor import Investor
from app.models.investor_attribute import InvestorAttribute
from app.models.investor_refund import InvestorRefund
from app.models.investor_transaction import InvestorTransaction

__all__ = [
    # Base
    "Base",
    # Enums
    "CampaignInfoType",
    "CurrencyType",
    "InvestorAttributeType",
    "InvestorRefundReason",
    # Campaign Models
    "CampaignInfo",
    "CampaignSettingsRecord",
    # Investor Models
    "Investor",
    "InvestorAttribute",
    "InvestorRefund",
    "InvestorTransaction",
]
