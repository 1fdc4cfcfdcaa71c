"""Per-asset-class valuation rules.

Each rule is a pure function mapping one typed record to the zakatable
asset value (and deductible debts) for that class:

- Cash: lowest balance held during the year, minus deductible debts
- Gold: zakatable grams x price (personal jewellery only if opted in)
- Insurance: surrender values
- Shares: market value, or value x zakatable asset ratio
- ETF / Mutual funds / ETC: units x price, with fund ratio methods
- Sukuk / Property / Crypto / NFT / REIT: one branch per sub-type
- Investment land / Commodity: market value / premium paid
- Private equity: investment x net zakatable assets / book value
- Business: AAOIFI working-capital method scaled by Muslim ownership

Classes listed in EXEMPTION_GATED_CLASSES are zeroed entirely when the user
has ticked any exemption condition.
"""
from dataclasses import dataclass

from purifai.constants import (
    EXEMPTION_GATED_CLASSES,
    FUND_ZAKATABLE_RATIO,
    BUSINESS_CURRENT_ASSETS,
    BUSINESS_ADJUSTMENTS_REMOVE,
    BUSINESS_ADJUSTMENTS_ADD,
    BUSINESS_CURRENT_LIABILITIES,
)
from .records import (
    finite_or_zero,
    AssetRecord,
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


@dataclass(frozen=True)
class Valuation:
    total_assets: float
    total_debts: float = 0.0
    zakatable_grams: float = 0.0  # gold only: the quantity compared against nisab


ZERO_VALUATION = Valuation(total_assets=0.0, total_debts=0.0)


def apply_exemptions(exemptions: list, valuation: Valuation) -> Valuation:
    """Zero the valuation when any exemption condition is selected.

    Exemption is absolute, never partial.
    """
    if exemptions:
        return ZERO_VALUATION
    return valuation


def value_cash(record: CashRecord) -> Valuation:
    # interest_earned is informational and excluded
    total = sum(account.lowest_balance_in_year for account in record.accounts)
    return Valuation(total_assets=total, total_debts=record.total_deductible_debts)


def zakatable_gold_grams(record: GoldRecord) -> float:
    if record.include_personal_use:
        return record.personal_use_grams + record.investment_grams
    return record.investment_grams


def value_gold(record: GoldRecord) -> Valuation:
    grams = zakatable_gold_grams(record)
    return Valuation(total_assets=grams * record.price_per_gram, zakatable_grams=grams)


def value_insurance(record: InsuranceRecord) -> Valuation:
    return Valuation(total_assets=sum(policy.surrender_value for policy in record.policies))


def value_shares(record: SharesRecord) -> Valuation:
    total = 0.0
    for holding in record.holdings:
        value = holding.number_of_shares * holding.price_per_share
        if record.calculation_method == 'market_value':
            total += value
        else:
            # asset_based and detailed: only the zakatable portion of the company
            total += value * holding.zakatable_asset_ratio
    return Valuation(total_assets=total)


def value_etf(record: ETFRecord) -> Valuation:
    total = 0.0
    for holding in record.holdings:
        if record.calculation_method == 'ratio_25':
            total += holding.value * FUND_ZAKATABLE_RATIO
        else:
            total += holding.value
    return Valuation(total_assets=total)


def value_mutual_funds(record: MutualFundsRecord) -> Valuation:
    if record.calculation_method == 'informational':
        return ZERO_VALUATION
    total = sum(holding.value for holding in record.holdings) * FUND_ZAKATABLE_RATIO
    return Valuation(total_assets=total)


SUKUK_RULES = {
    'al_ijarah': lambda r: r.remaining_at_due_date,
    'al_musharakah': lambda r: r.sukuk_value * r.zakatable_asset_percentage,
    'al_mudharabah': lambda r: r.market_value + r.profit_share_received,
    'al_murabahah': lambda r: r.outstanding_receivable,
    'al_istisna': lambda r: r.total_income_from_goods,
}


def value_sukuk(record: SukukRecord) -> Valuation:
    return Valuation(total_assets=SUKUK_RULES[record.sukuk_type](record))


def value_investment_land(record: InvestmentLandRecord) -> Valuation:
    return Valuation(total_assets=sum(holding.market_value for holding in record.holdings))


PROPERTY_RULES = {
    'bought_to_resell': lambda r: r.current_market_value,
    'rental_income': lambda r: r.rental_income_on_hand,
    'redevelop_resell': lambda r: r.market_value_after_refurbishment,
}


def value_investment_property(record: InvestmentPropertyRecord) -> Valuation:
    return Valuation(total_assets=PROPERTY_RULES[record.property_type](record))


CRYPTO_RULES = {
    'trading': lambda r: r.market_value,
    'security_tokens': lambda r: r.market_value * r.zakatable_asset_ratio,
    'asset_backed': lambda r: r.market_value,
}


def value_crypto(record: CryptoRecord) -> Valuation:
    return Valuation(total_assets=CRYPTO_RULES[record.crypto_type](record))


NFT_RULES = {
    'market_value': lambda r: r.market_value,
    'underlying_asset': lambda r: r.underlying_asset_value,
}


def value_nft(record: NFTRecord) -> Valuation:
    return Valuation(total_assets=NFT_RULES[record.nft_type](record))


def value_commodity(record: CommodityRecord) -> Valuation:
    return Valuation(total_assets=record.premium_paid)


REIT_RULES = {
    'unit_value': lambda r: r.number_of_units * r.price_per_unit,
    'rental_income': lambda r: r.rental_income_on_hand,
}


def value_reit(record: REITRecord) -> Valuation:
    return Valuation(total_assets=REIT_RULES[record.reit_type](record))


def value_etc(record: ETCRecord) -> Valuation:
    # calculation_type only changes the guidance shown to the user
    return Valuation(total_assets=sum(holding.value for holding in record.holdings))


def value_private_equity(record: PrivateEquityRecord) -> Valuation:
    net_zakatable = max(record.zakatable_assets - record.company_liabilities, 0.0)
    if record.company_book_value > 0:
        ratio = net_zakatable / record.company_book_value
    else:
        ratio = 0.0
    return Valuation(total_assets=record.investment_amount * ratio)


def value_business(record: BusinessRecord) -> Valuation:
    """Net working capital attributable to Muslim owners.

    Liabilities are already netted into total_assets; total_debts reports
    them separately for display only.
    """
    current_assets = record.group_total(BUSINESS_CURRENT_ASSETS)
    adjustments_remove = record.group_total(BUSINESS_ADJUSTMENTS_REMOVE)
    adjustments_add = record.group_total(BUSINESS_ADJUSTMENTS_ADD)
    current_liabilities = record.group_total(BUSINESS_CURRENT_LIABILITIES)

    ownership = min(max(record.muslim_ownership_percentage, 0.0), 100.0) / 100
    net_zakatable = (current_assets - adjustments_remove + adjustments_add - current_liabilities) * ownership
    return Valuation(total_assets=max(net_zakatable, 0.0), total_debts=current_liabilities)


VALUATION_RULES = {
    'cash': value_cash,
    'gold': value_gold,
    'insurance': value_insurance,
    'shares': value_shares,
    'etf': value_etf,
    'mutual_funds': value_mutual_funds,
    'sukuk': value_sukuk,
    'investment_land': value_investment_land,
    'investment_property': value_investment_property,
    'crypto': value_crypto,
    'nft': value_nft,
    'commodity': value_commodity,
    'reit': value_reit,
    'etc': value_etc,
    'private_equity': value_private_equity,
    'business': value_business,
}


def is_exempt(record: AssetRecord) -> bool:
    return record.asset_class in EXEMPTION_GATED_CLASSES and record.exemptions_selected


def valuate(record: AssetRecord) -> Valuation:
    """Value a record with its class rule, then apply the exemption filter.

    Sums of finite inputs can still overflow; such totals are reported as 0.
    """
    valuation = VALUATION_RULES[record.asset_class](record)
    valuation = Valuation(
        total_assets=finite_or_zero(valuation.total_assets),
        total_debts=finite_or_zero(valuation.total_debts),
        zakatable_grams=finite_or_zero(valuation.zakatable_grams),
    )
    if record.asset_class in EXEMPTION_GATED_CLASSES:
        valuation = apply_exemptions(record.exemptions, valuation)
    return valuation
