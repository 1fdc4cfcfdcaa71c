"""Shared constants for zakat calculation."""

# Zakat rate (2.5%), identical for every asset class
ZAKAT_RATE = 0.025

# Default nisab reference (SGD, reference date 2026-02-08)
DEFAULT_NISAB_MONETARY = 17230.10
DEFAULT_NISAB_GOLD_GRAMS = 86
DEFAULT_NISAB_GOLD_PRICE = 200.35
DEFAULT_NISAB_CURRENCY = 'SGD'
DEFAULT_NISAB_DATE = '2026-02-08'

# Asset classes, in display order
ASSET_CLASSES = (
    'cash',
    'gold',
    'insurance',
    'shares',
    'etf',
    'mutual_funds',
    'sukuk',
    'investment_land',
    'investment_property',
    'crypto',
    'nft',
    'commodity',
    'reit',
    'etc',
    'private_equity',
    'business',
)

# Classes where any selected exemption condition zeroes the valuation
EXEMPTION_GATED_CLASSES = frozenset({
    'etf',
    'mutual_funds',
    'investment_land',
    'investment_property',
    'crypto',
    'nft',
    'commodity',
    'reit',
    'etc',
    'private_equity',
})

# ============================================================
# Calculation methods and sub-types
# ============================================================

CASH_ACCOUNT_TYPES = {
    'savings': 'Savings',
    'current': 'Current',
    'fixed_deposit': 'Fixed deposit',
}

INSURANCE_POLICY_TYPES = {
    'endowment': 'Endowment',
    'whole_life': 'Whole life',
    'term_life': 'Term life',
    'health': 'Health',
    'auto': 'Auto',
}

SHARES_METHODS = {
    'market_value': 'Full market value',
    'asset_based': 'Zakatable assets only',
    'detailed': 'Detailed company balance sheet',
}
DEFAULT_SHARES_METHOD = 'market_value'
DEFAULT_ZAKATABLE_ASSET_RATIO = 0.3

ETF_METHODS = {
    'direct': 'Direct (2.5% of total value)',
    'ratio_25': '25% ratio (effective 0.625%)',
    'informational': 'Informational (crypto, sukuk and REIT underlyings)',
}
DEFAULT_ETF_METHOD = 'direct'

MUTUAL_FUNDS_METHODS = {
    'ratio_25': '25% ratio (effective 0.625%)',
    'informational': 'Informational only',
}
DEFAULT_MUTUAL_FUNDS_METHOD = 'ratio_25'

# Portion of fund value treated as zakatable under the ratio method
FUND_ZAKATABLE_RATIO = 0.25

SUKUK_TYPES = {
    'al_ijarah': 'Sukuk Al Ijarah (leasing)',
    'al_musharakah': 'Sukuk Al Musharakah (partnership)',
    'al_mudharabah': 'Sukuk Al Mudharabah (profit sharing)',
    'al_murabahah': 'Sukuk Al Murabahah (cost-plus sale)',
    'al_istisna': 'Sukuk Al Istisna (manufacturing)',
}
DEFAULT_SUKUK_TYPE = 'al_ijarah'

PROPERTY_TYPES = {
    'bought_to_resell': 'Bought to resell',
    'rental_income': 'Rental income',
    'redevelop_resell': 'Redevelop and resell',
}
DEFAULT_PROPERTY_TYPE = 'bought_to_resell'

CRYPTO_TYPES = {
    'trading': 'Crypto for trading',
    'security_tokens': 'Security tokens (dividends)',
    'asset_backed': 'Asset-backed tokens',
}
DEFAULT_CRYPTO_TYPE = 'trading'

NFT_TYPES = {
    'market_value': 'Market value',
    'underlying_asset': 'Underlying asset value',
}
DEFAULT_NFT_TYPE = 'market_value'

REIT_TYPES = {
    'unit_value': 'REIT unit value',
    'rental_income': 'Rental income',
}
DEFAULT_REIT_TYPE = 'unit_value'

# ETC type only changes guidance text, not the arithmetic
ETC_TYPES = {
    'market_value': 'Market value',
    'underlying_asset': 'Underlying zakatable asset',
}
DEFAULT_ETC_TYPE = 'market_value'

# Business balance-sheet groups (AAOIFI layout)
BUSINESS_CURRENT_ASSETS = (
    'bank_balance',
    'cash_in_hand',
    'fixed_deposit',
    'prepaid_expenses',
    'closing_stocks',
    'trade_stocks',
    'trade_debtors',
    'loan_receivable',
    'staff_welfare_fund',
    'staff_loan',
    'other_deposits',
)
BUSINESS_ADJUSTMENTS_REMOVE = (
    'bank_interest_received',
    'late_payment_interest',
    'utilities_deposit',
    'bad_debts',
    'obsolete_stocks',
)
BUSINESS_ADJUSTMENTS_ADD = (
    'donations_last_quarter',
    'fixed_assets_purchased',
    'personal_drawings',
)
BUSINESS_CURRENT_LIABILITIES = (
    'trade_creditors',
    'financial_loans',
    'accrued_expenses',
    'income_tax_provision',
    'overdraft',
    'directors_fees',
)
DEFAULT_MUSLIM_OWNERSHIP_PERCENTAGE = 100

# ============================================================
# Household
# ============================================================

RELATIONSHIPS = {
    'self': 'Self',
    'wife': 'Wife',
    'husband': 'Husband',
    'son': 'Son',
    'daughter': 'Daughter',
    'father': 'Father',
    'mother': 'Mother',
    'brother': 'Brother',
    'sister': 'Sister',
    'other': 'Other',
}
SELF_RELATIONSHIP = 'self'

# Payment processing fee quoted to the payment collaborator (2.39%)
PROCESSING_FEE_RATE = 0.0239
