"""
Model enums.

String enums stored as plain strings in the database.
"""

from enum import Enum


class CurrencyType(str, Enum):
    """Currency of an incoming investment."""

    BITCOIN = "Bitcoin"
    ETHER = "Ether"
    FIAT = "Fiat"

    @property
    def asset_name(self) -> str:
        """Asset ticker shown to investors."""
        return {
            CurrencyType.BITCOIN: "BTC",
            CurrencyType.ETHER: "ETH",
            CurrencyType.FIAT: "USD",
        }[self]

    @property
    def asset_pair(self) -> str | None:
        """USD pair used for exchange rates, None for fiat."""
        return {
            CurrencyType.BITCOIN: "BTCUSD",
            CurrencyType.ETHER: "ETHUSD",
        }.get(self)


class CampaignInfoType(str, Enum):
    """Names of campaign-wide ledger counters."""

    AMOUNT_INVESTED_BTC = "AmountInvestedBtc"
    AMOUNT_INVESTED_ETH = "AmountInvestedEth"
    AMOUNT_INVESTED_FIAT = "AmountInvestedFiat"
    AMOUNT_INVESTED_TOKEN = "AmountInvestedToken"
    AMOUNT_INVESTED_USD = "AmountInvestedUsd"

    @classmethod
    def for_currency(cls, currency: CurrencyType) -> "CampaignInfoType":
        """Counter accumulating raw amounts of the currency."""
        return {
            CurrencyType.BITCOIN: cls.AMOUNT_INVESTED_BTC,
            CurrencyType.ETHER: cls.AMOUNT_INVESTED_ETH,
            CurrencyType.FIAT: cls.AMOUNT_INVESTED_FIAT,
        }[currency]


class InvestorRefundReason(str, Enum):
    """Why an investment was rejected."""

    OUT_OF_DATES = "OutOfDates"
    PRE_SALE_TOKENS_SOLD_OUT = "PreSaleTokensSoldOut"
    TOKENS_SOLD_OUT = "TokensSoldOut"
    HARD_CAP_USD_EXCEEDED = "HardCapUsdExceeded"


class InvestorAttributeType(str, Enum):
    """Secondary lookup keys pointing to an investor email."""

    PAY_IN_BTC_ADDRESS = "PayInBtcAddress"
    PAY_IN_ETH_ADDRESS = "PayInEthAddress"
    REFERRAL_CODE = "ReferralCode"
    KYC_ID = "KycId"

    @classmethod
    def pay_in_address_for(cls, currency: CurrencyType) -> "InvestorAttributeType | None":
        """Pay-in address attribute for a blockchain currency."""
        return {
            CurrencyType.BITCOIN: cls.PAY_IN_BTC_ADDRESS,
            CurrencyType.ETHER: cls.PAY_IN_ETH_ADDRESS,
        }.get(currency)
