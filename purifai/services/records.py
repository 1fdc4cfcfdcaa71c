"""Asset record types: one dataclass per calculator.

Each record holds the financial facts a user entered for one asset class,
plus two cached fields shared by every class:

- calculated: whether the user has saved a computation
- zakat_amount: the due amount from the last save (a cache, recomputed on
  every save and never trusted for records that were not saved)

parse_record() is the boundary between raw JSON/SQLite payloads and these
types. Numeric fields are coerced permissively (anything unusable becomes
0), while unknown asset classes and unknown method/sub-type values are
rejected with InvalidRecordError so valuation never needs a fallback branch.
"""
import math
from dataclasses import dataclass, field, asdict, replace
from typing import ClassVar

from purifai.constants import (
    ASSET_CLASSES,
    CASH_ACCOUNT_TYPES,
    INSURANCE_POLICY_TYPES,
    SHARES_METHODS,
    DEFAULT_SHARES_METHOD,
    DEFAULT_ZAKATABLE_ASSET_RATIO,
    ETF_METHODS,
    DEFAULT_ETF_METHOD,
    MUTUAL_FUNDS_METHODS,
    DEFAULT_MUTUAL_FUNDS_METHOD,
    SUKUK_TYPES,
    DEFAULT_SUKUK_TYPE,
    PROPERTY_TYPES,
    DEFAULT_PROPERTY_TYPE,
    CRYPTO_TYPES,
    DEFAULT_CRYPTO_TYPE,
    NFT_TYPES,
    DEFAULT_NFT_TYPE,
    REIT_TYPES,
    DEFAULT_REIT_TYPE,
    ETC_TYPES,
    DEFAULT_ETC_TYPE,
    BUSINESS_CURRENT_ASSETS,
    BUSINESS_ADJUSTMENTS_REMOVE,
    BUSINESS_ADJUSTMENTS_ADD,
    BUSINESS_CURRENT_LIABILITIES,
    DEFAULT_MUSLIM_OWNERSHIP_PERCENTAGE,
)


class InvalidRecordError(ValueError):
    """Payload cannot be turned into an asset record."""
    pass


def to_number(value) -> float:
    """Coerce user input to a float. Missing, non-numeric and non-finite values become 0."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def finite_or_zero(number: float) -> float:
    """Totals that overflowed to inf or nan become 0."""
    return number if math.isfinite(number) else 0.0


def to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _text(payload: dict, key: str, default: str = '') -> str:
    value = payload.get(key)
    if value is None:
        return default
    return str(value)


def _choice(payload: dict, key: str, options: dict, default: str) -> str:
    value = payload.get(key)
    if value is None or value == '':
        return default
    if not isinstance(value, str) or value not in options:
        raise InvalidRecordError(
            f"Invalid {key}: {value}. Must be one of: {', '.join(options)}"
        )
    return value


def _exemptions(payload: dict) -> list:
    value = payload.get('exemptions')
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidRecordError('exemptions must be a list of condition ids')
    return [str(condition) for condition in value if condition not in (None, '')]


def _items(payload: dict, key: str, parser) -> list:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidRecordError(f'{key} must be a list')
    items = []
    for item in value:
        if not isinstance(item, dict):
            raise InvalidRecordError(f'{key} entries must be objects')
        items.append(parser(item))
    return items


def _cache_fields(payload: dict) -> dict:
    return {
        'calculated': to_bool(payload.get('calculated', False)),
        'zakat_amount': max(to_number(payload.get('zakat_amount')), 0.0),
    }


# ==================== LINE ITEMS ====================

@dataclass
class BankAccount:
    name: str = ''
    account_type: str = 'savings'
    lowest_balance_in_year: float = 0.0
    interest_earned: float = 0.0  # informational, never part of the zakatable sum

    @classmethod
    def from_dict(cls, payload: dict) -> 'BankAccount':
        return cls(
            name=_text(payload, 'name'),
            account_type=_choice(payload, 'account_type', CASH_ACCOUNT_TYPES, 'savings'),
            lowest_balance_in_year=to_number(payload.get('lowest_balance_in_year')),
            interest_earned=to_number(payload.get('interest_earned')),
        )


@dataclass
class InsurancePolicy:
    policy_name: str = ''
    policy_type: str = 'whole_life'
    surrender_value: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'InsurancePolicy':
        return cls(
            policy_name=_text(payload, 'policy_name'),
            policy_type=_choice(payload, 'policy_type', INSURANCE_POLICY_TYPES, 'whole_life'),
            surrender_value=to_number(payload.get('surrender_value')),
        )


@dataclass
class ShareHolding:
    company_name: str = ''
    number_of_shares: float = 0.0
    price_per_share: float = 0.0
    zakatable_asset_ratio: float = DEFAULT_ZAKATABLE_ASSET_RATIO

    @classmethod
    def from_dict(cls, payload: dict) -> 'ShareHolding':
        ratio = payload.get('zakatable_asset_ratio', DEFAULT_ZAKATABLE_ASSET_RATIO)
        return cls(
            company_name=_text(payload, 'company_name'),
            number_of_shares=to_number(payload.get('number_of_shares')),
            price_per_share=to_number(payload.get('price_per_share')),
            zakatable_asset_ratio=to_number(ratio),
        )


@dataclass
class UnitHolding:
    """A fund or ETC position: units held at a unit price."""
    name: str = ''
    number_of_units: float = 0.0
    price_per_unit: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'UnitHolding':
        return cls(
            name=_text(payload, 'name'),
            number_of_units=to_number(payload.get('number_of_units')),
            price_per_unit=to_number(payload.get('price_per_unit')),
        )

    @property
    def value(self) -> float:
        return self.number_of_units * self.price_per_unit


@dataclass
class LandHolding:
    name: str = ''
    market_value: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'LandHolding':
        return cls(
            name=_text(payload, 'name'),
            market_value=to_number(payload.get('market_value')),
        )


# ==================== RECORDS ====================

@dataclass
class AssetRecord:
    """Fields common to every asset record."""
    asset_class: ClassVar[str] = ''
    calculated: bool = False
    zakat_amount: float = 0.0

    @property
    def exemptions_selected(self) -> bool:
        return bool(getattr(self, 'exemptions', None))


@dataclass
class CashRecord(AssetRecord):
    asset_class: ClassVar[str] = 'cash'
    accounts: list = field(default_factory=list)
    total_deductible_debts: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'CashRecord':
        return cls(
            accounts=_items(payload, 'accounts', BankAccount.from_dict),
            total_deductible_debts=to_number(payload.get('total_deductible_debts')),
            **_cache_fields(payload),
        )


@dataclass
class GoldRecord(AssetRecord):
    asset_class: ClassVar[str] = 'gold'
    price_per_gram: float = 0.0
    personal_use_grams: float = 0.0
    investment_grams: float = 0.0
    include_personal_use: bool = False  # Hanafi view: jewellery is zakatable too

    @classmethod
    def from_dict(cls, payload: dict) -> 'GoldRecord':
        return cls(
            price_per_gram=to_number(payload.get('price_per_gram')),
            personal_use_grams=to_number(payload.get('personal_use_grams')),
            investment_grams=to_number(payload.get('investment_grams')),
            include_personal_use=to_bool(payload.get('include_personal_use', False)),
            **_cache_fields(payload),
        )


@dataclass
class InsuranceRecord(AssetRecord):
    asset_class: ClassVar[str] = 'insurance'
    policies: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'InsuranceRecord':
        return cls(
            policies=_items(payload, 'policies', InsurancePolicy.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class SharesRecord(AssetRecord):
    asset_class: ClassVar[str] = 'shares'
    calculation_method: str = DEFAULT_SHARES_METHOD
    holdings: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'SharesRecord':
        return cls(
            calculation_method=_choice(payload, 'calculation_method', SHARES_METHODS, DEFAULT_SHARES_METHOD),
            holdings=_items(payload, 'holdings', ShareHolding.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class ETFRecord(AssetRecord):
    asset_class: ClassVar[str] = 'etf'
    exemptions: list = field(default_factory=list)
    calculation_method: str = DEFAULT_ETF_METHOD
    holdings: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'ETFRecord':
        return cls(
            exemptions=_exemptions(payload),
            calculation_method=_choice(payload, 'calculation_method', ETF_METHODS, DEFAULT_ETF_METHOD),
            holdings=_items(payload, 'holdings', UnitHolding.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class MutualFundsRecord(AssetRecord):
    asset_class: ClassVar[str] = 'mutual_funds'
    exemptions: list = field(default_factory=list)
    calculation_method: str = DEFAULT_MUTUAL_FUNDS_METHOD
    holdings: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'MutualFundsRecord':
        return cls(
            exemptions=_exemptions(payload),
            calculation_method=_choice(
                payload, 'calculation_method', MUTUAL_FUNDS_METHODS, DEFAULT_MUTUAL_FUNDS_METHOD
            ),
            holdings=_items(payload, 'holdings', UnitHolding.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class SukukRecord(AssetRecord):
    asset_class: ClassVar[str] = 'sukuk'
    sukuk_type: str = DEFAULT_SUKUK_TYPE
    # al_ijarah
    rental_income_received: float = 0.0
    remaining_at_due_date: float = 0.0
    # al_musharakah
    sukuk_value: float = 0.0
    zakatable_asset_percentage: float = 0.0
    # al_mudharabah
    market_value: float = 0.0
    profit_share_received: float = 0.0
    # al_murabahah
    outstanding_receivable: float = 0.0
    # al_istisna
    total_income_from_goods: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'SukukRecord':
        return cls(
            sukuk_type=_choice(payload, 'sukuk_type', SUKUK_TYPES, DEFAULT_SUKUK_TYPE),
            rental_income_received=to_number(payload.get('rental_income_received')),
            remaining_at_due_date=to_number(payload.get('remaining_at_due_date')),
            sukuk_value=to_number(payload.get('sukuk_value')),
            zakatable_asset_percentage=to_number(payload.get('zakatable_asset_percentage')),
            market_value=to_number(payload.get('market_value')),
            profit_share_received=to_number(payload.get('profit_share_received')),
            outstanding_receivable=to_number(payload.get('outstanding_receivable')),
            total_income_from_goods=to_number(payload.get('total_income_from_goods')),
            **_cache_fields(payload),
        )


@dataclass
class InvestmentLandRecord(AssetRecord):
    asset_class: ClassVar[str] = 'investment_land'
    exemptions: list = field(default_factory=list)
    holdings: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'InvestmentLandRecord':
        return cls(
            exemptions=_exemptions(payload),
            holdings=_items(payload, 'holdings', LandHolding.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class InvestmentPropertyRecord(AssetRecord):
    asset_class: ClassVar[str] = 'investment_property'
    exemptions: list = field(default_factory=list)
    property_type: str = DEFAULT_PROPERTY_TYPE
    property_name: str = ''
    current_market_value: float = 0.0
    rental_income_on_hand: float = 0.0
    market_value_after_refurbishment: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'InvestmentPropertyRecord':
        return cls(
            exemptions=_exemptions(payload),
            property_type=_choice(payload, 'property_type', PROPERTY_TYPES, DEFAULT_PROPERTY_TYPE),
            property_name=_text(payload, 'property_name'),
            current_market_value=to_number(payload.get('current_market_value')),
            rental_income_on_hand=to_number(payload.get('rental_income_on_hand')),
            market_value_after_refurbishment=to_number(payload.get('market_value_after_refurbishment')),
            **_cache_fields(payload),
        )


@dataclass
class CryptoRecord(AssetRecord):
    asset_class: ClassVar[str] = 'crypto'
    exemptions: list = field(default_factory=list)
    crypto_type: str = DEFAULT_CRYPTO_TYPE
    crypto_name: str = ''
    market_value: float = 0.0
    zakatable_asset_ratio: float = 0.0  # security tokens only

    @classmethod
    def from_dict(cls, payload: dict) -> 'CryptoRecord':
        return cls(
            exemptions=_exemptions(payload),
            crypto_type=_choice(payload, 'crypto_type', CRYPTO_TYPES, DEFAULT_CRYPTO_TYPE),
            crypto_name=_text(payload, 'crypto_name'),
            market_value=to_number(payload.get('market_value')),
            zakatable_asset_ratio=to_number(payload.get('zakatable_asset_ratio')),
            **_cache_fields(payload),
        )


@dataclass
class NFTRecord(AssetRecord):
    asset_class: ClassVar[str] = 'nft'
    exemptions: list = field(default_factory=list)
    nft_type: str = DEFAULT_NFT_TYPE
    nft_name: str = ''
    market_value: float = 0.0
    underlying_asset_value: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'NFTRecord':
        return cls(
            exemptions=_exemptions(payload),
            nft_type=_choice(payload, 'nft_type', NFT_TYPES, DEFAULT_NFT_TYPE),
            nft_name=_text(payload, 'nft_name'),
            market_value=to_number(payload.get('market_value')),
            underlying_asset_value=to_number(payload.get('underlying_asset_value')),
            **_cache_fields(payload),
        )


@dataclass
class CommodityRecord(AssetRecord):
    asset_class: ClassVar[str] = 'commodity'
    exemptions: list = field(default_factory=list)
    commodity_name: str = ''
    premium_paid: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'CommodityRecord':
        return cls(
            exemptions=_exemptions(payload),
            commodity_name=_text(payload, 'commodity_name'),
            premium_paid=to_number(payload.get('premium_paid')),
            **_cache_fields(payload),
        )


@dataclass
class REITRecord(AssetRecord):
    asset_class: ClassVar[str] = 'reit'
    exemptions: list = field(default_factory=list)
    reit_type: str = DEFAULT_REIT_TYPE
    reit_name: str = ''
    number_of_units: float = 0.0
    price_per_unit: float = 0.0
    rental_income_on_hand: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'REITRecord':
        return cls(
            exemptions=_exemptions(payload),
            reit_type=_choice(payload, 'reit_type', REIT_TYPES, DEFAULT_REIT_TYPE),
            reit_name=_text(payload, 'reit_name'),
            number_of_units=to_number(payload.get('number_of_units')),
            price_per_unit=to_number(payload.get('price_per_unit')),
            rental_income_on_hand=to_number(payload.get('rental_income_on_hand')),
            **_cache_fields(payload),
        )


@dataclass
class ETCRecord(AssetRecord):
    asset_class: ClassVar[str] = 'etc'
    exemptions: list = field(default_factory=list)
    calculation_type: str = DEFAULT_ETC_TYPE
    holdings: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> 'ETCRecord':
        return cls(
            exemptions=_exemptions(payload),
            calculation_type=_choice(payload, 'calculation_type', ETC_TYPES, DEFAULT_ETC_TYPE),
            holdings=_items(payload, 'holdings', UnitHolding.from_dict),
            **_cache_fields(payload),
        )


@dataclass
class PrivateEquityRecord(AssetRecord):
    asset_class: ClassVar[str] = 'private_equity'
    exemptions: list = field(default_factory=list)
    company_name: str = ''
    investment_amount: float = 0.0
    company_book_value: float = 0.0
    zakatable_assets: float = 0.0
    company_liabilities: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict) -> 'PrivateEquityRecord':
        return cls(
            exemptions=_exemptions(payload),
            company_name=_text(payload, 'company_name'),
            investment_amount=to_number(payload.get('investment_amount')),
            company_book_value=to_number(payload.get('company_book_value')),
            zakatable_assets=to_number(payload.get('zakatable_assets')),
            company_liabilities=to_number(payload.get('company_liabilities')),
            **_cache_fields(payload),
        )


@dataclass
class BusinessRecord(AssetRecord):
    asset_class: ClassVar[str] = 'business'
    # Current assets
    bank_balance: float = 0.0
    cash_in_hand: float = 0.0
    fixed_deposit: float = 0.0
    prepaid_expenses: float = 0.0
    closing_stocks: float = 0.0
    trade_stocks: float = 0.0
    trade_debtors: float = 0.0
    loan_receivable: float = 0.0
    staff_welfare_fund: float = 0.0
    staff_loan: float = 0.0
    other_deposits: float = 0.0
    # Adjustments to remove
    bank_interest_received: float = 0.0
    late_payment_interest: float = 0.0
    utilities_deposit: float = 0.0
    bad_debts: float = 0.0
    obsolete_stocks: float = 0.0
    # Adjustments to add
    donations_last_quarter: float = 0.0
    fixed_assets_purchased: float = 0.0
    personal_drawings: float = 0.0
    # Current liabilities
    trade_creditors: float = 0.0
    financial_loans: float = 0.0
    accrued_expenses: float = 0.0
    income_tax_provision: float = 0.0
    overdraft: float = 0.0
    directors_fees: float = 0.0
    muslim_ownership_percentage: float = DEFAULT_MUSLIM_OWNERSHIP_PERCENTAGE

    @classmethod
    def from_dict(cls, payload: dict) -> 'BusinessRecord':
        amounts = {
            name: to_number(payload.get(name))
            for name in (
                BUSINESS_CURRENT_ASSETS
                + BUSINESS_ADJUSTMENTS_REMOVE
                + BUSINESS_ADJUSTMENTS_ADD
                + BUSINESS_CURRENT_LIABILITIES
            )
        }
        ownership = payload.get('muslim_ownership_percentage', DEFAULT_MUSLIM_OWNERSHIP_PERCENTAGE)
        return cls(
            muslim_ownership_percentage=to_number(ownership),
            **amounts,
            **_cache_fields(payload),
        )

    def group_total(self, names: tuple) -> float:
        return sum(getattr(self, name) for name in names)


RECORD_TYPES = {
    record_type.asset_class: record_type
    for record_type in (
        CashRecord,
        GoldRecord,
        InsuranceRecord,
        SharesRecord,
        ETFRecord,
        MutualFundsRecord,
        SukukRecord,
        InvestmentLandRecord,
        InvestmentPropertyRecord,
        CryptoRecord,
        NFTRecord,
        CommodityRecord,
        REITRecord,
        ETCRecord,
        PrivateEquityRecord,
        BusinessRecord,
    )
}


def parse_record(asset_class: str, payload: dict | None) -> AssetRecord:
    """Build a typed record for asset_class from a raw payload.

    Args:
        asset_class: One of ASSET_CLASSES
        payload: Dict of user-entered fields (None for a blank record)

    Returns:
        The matching AssetRecord subclass instance

    Raises:
        InvalidRecordError: unknown asset class, malformed structure, or an
            unknown method/sub-type value
    """
    record_type = RECORD_TYPES.get(asset_class)
    if record_type is None:
        raise InvalidRecordError(f'Unknown asset class: {asset_class}')
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidRecordError(f'{asset_class} record must be an object')
    return record_type.from_dict(payload)


def record_to_dict(record: AssetRecord) -> dict:
    data = asdict(record)
    data['asset_class'] = record.asset_class
    return data


def empty_records() -> dict:
    """One blank, uncalculated record per asset class."""
    return {asset_class: RECORD_TYPES[asset_class]() for asset_class in ASSET_CLASSES}


def with_cache(record: AssetRecord, zakat_amount: float) -> AssetRecord:
    """Copy of record marked calculated with a fresh zakat_amount cache."""
    return replace(record, calculated=True, zakat_amount=max(zakat_amount, 0.0))
