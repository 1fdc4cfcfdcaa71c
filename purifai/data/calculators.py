"""Calculator catalog: display metadata and exemption conditions per asset class."""
from purifai.constants import (
    ASSET_CLASSES,
    EXEMPTION_GATED_CLASSES,
    SHARES_METHODS,
    ETF_METHODS,
    MUTUAL_FUNDS_METHODS,
    SUKUK_TYPES,
    PROPERTY_TYPES,
    CRYPTO_TYPES,
    NFT_TYPES,
    REIT_TYPES,
    ETC_TYPES,
)

CALCULATORS = {
    'cash': {
        'name': 'Cash',
        'icon': 'dollar-sign',
        'description': 'Pay Zakat on your bank accounts, cash, and savings',
        'color': '#6366F1',
    },
    'gold': {
        'name': 'Gold',
        'icon': 'box',
        'description': 'Pay Zakat on Gold (Physical or Fractional)',
        'color': '#F59E0B',
    },
    'insurance': {
        'name': 'Insurance',
        'icon': 'shield',
        'description': 'Zakat on the surrender value of the insurance',
        'color': '#8B5CF6',
    },
    'shares': {
        'name': 'Shares',
        'icon': 'trending-up',
        'description': 'Pay Zakat on shares of companies',
        'color': '#10B981',
    },
    'etf': {
        'name': 'Exchange-Traded Funds',
        'icon': 'activity',
        'description': 'Pay Zakat on Exchange-Traded Funds',
        'color': '#3B82F6',
    },
    'mutual_funds': {
        'name': 'Mutual Funds',
        'icon': 'pie-chart',
        'description': 'Pay Zakat on Mutual Funds and Unit Trusts',
        'color': '#EC4899',
    },
    'sukuk': {
        'name': 'Sukuk',
        'icon': 'file-text',
        'description': 'Pay Zakat on Islamic Bonds (Sukuk)',
        'color': '#14B8A6',
    },
    'investment_land': {
        'name': 'Investment Land',
        'icon': 'map-pin',
        'description': 'Pay Zakat on land held as trading stock',
        'color': '#F97316',
    },
    'investment_property': {
        'name': 'Investment Property',
        'icon': 'home',
        'description': 'Pay Zakat on property held for resale or rental income',
        'color': '#EF4444',
    },
    'crypto': {
        'name': 'Crypto Asset',
        'icon': 'cpu',
        'description': 'Pay Zakat on cryptocurrency and digital tokens',
        'color': '#06B6D4',
    },
    'nft': {
        'name': 'Non-Fungible Tokens',
        'icon': 'image',
        'description': 'Pay Zakat on NFTs based on type and underlying asset',
        'color': '#A855F7',
    },
    'commodity': {
        'name': 'Commodity Investing',
        'icon': 'package',
        'description': 'Pay Zakat on commodity investments and premiums',
        'color': '#84CC16',
    },
    'reit': {
        'name': 'Real Estate Investment Trusts',
        'icon': 'grid',
        'description': 'Pay Zakat on REIT units or rental income',
        'color': '#0EA5E9',
    },
    'etc': {
        'name': 'Exchange-Traded Commodities',
        'icon': 'box',
        'description': 'Pay Zakat on Exchange-Traded Commodities',
        'color': '#D946EF',
    },
    'private_equity': {
        'name': 'Private Equity',
        'icon': 'briefcase',
        'description': 'Pay Zakat on Private Equity and Startup Investments',
        'color': '#059669',
    },
    'business': {
        'name': 'Business',
        'icon': 'clipboard',
        'description': 'Zakat on Business based on AAOIFI Shariah Standards',
        'color': '#4338CA',
    },
}

# Conditions the user may tick to declare a holding exempt.
# Any selected condition exempts the whole record.
EXEMPTION_CONDITIONS = {
    'etf': {
        'no_zakatable_assets': 'There are no zakatable assets inside the Exchange-Traded Fund',
        'below_nisab': 'Your ownership share does not reach the nisab',
        'long_term_hold': 'You hold the Exchange-Traded Fund long-term, with no trading or liquidity',
        'value_drops': 'The Exchange-Traded Fund loses value or drops significantly',
    },
    'mutual_funds': {
        'no_zakatable_assets': 'There are no zakatable assets inside the fund',
        'below_nisab': 'Your ownership share does not reach the nisab',
        'long_term_hold': 'You hold the fund long-term, with no trading or liquidity',
    },
    'investment_land': {
        'personal_use': 'The land is bought for personal use',
        'passive_investment': 'The land is kept only as a store of value or passive investment',
        'no_rental_income': 'The land generates no rental income',
    },
    'investment_property': {
        'store_of_value': 'The property is kept only as a store of value',
        'personal_use': 'The property is for personal use',
        'rental_no_building_zakat': 'A rental property: no zakat on the building itself',
    },
    'crypto': {
        'security_non_zakatable': 'Holding a Security token whose underlying asset is non-zakatable',
        'utility_tokens': 'Holding utility/platform tokens for actual use in a system',
        'asset_backed_non_zakatable': 'Holding an asset-backed token whose underlying asset is non-zakatable',
        'governance_tokens': 'Holding governance tokens just for voting rights',
    },
    'nft': {
        'non_zakatable_underlying': 'Buy an NFT just to hold with non-zakatable underlying asset',
        'license_only': 'NFT only grants access or a license, not actual ownership',
    },
    'commodity': {
        'personal_use': 'The commodity is held for personal use, not for trade',
    },
    'reit': {
        'long_term_income': 'Hold REIT units for long-term income (not for trading)',
        'not_shariah_compliant': 'REIT structure is not Shariah-compliant',
    },
    'etc': {
        'long_term_non_zakatable': 'Hold ETC for long-term investment (not for trade)',
    },
    'private_equity': {
        'no_net_zakatable': 'The startup has no net zakatable assets',
        'below_nisab': 'Your ownership share does not reach the nisab',
        'continuous_losses': 'The startup is continuously making losses',
    },
}

CALCULATION_OPTIONS = {
    'shares': SHARES_METHODS,
    'etf': ETF_METHODS,
    'mutual_funds': MUTUAL_FUNDS_METHODS,
    'sukuk': SUKUK_TYPES,
    'investment_property': PROPERTY_TYPES,
    'crypto': CRYPTO_TYPES,
    'nft': NFT_TYPES,
    'reit': REIT_TYPES,
    'etc': ETC_TYPES,
}


def is_valid_asset_class(asset_class: str) -> bool:
    """Check if asset class is one of the 16 supported calculators."""
    return asset_class in CALCULATORS


def get_calculator_name(asset_class: str) -> str:
    return CALCULATORS[asset_class]['name']


def get_calculators() -> list[dict]:
    """Get the ordered calculator catalog for API consumers."""
    return [
        {
            'id': asset_class,
            'name': CALCULATORS[asset_class]['name'],
            'icon': CALCULATORS[asset_class]['icon'],
            'description': CALCULATORS[asset_class]['description'],
            'color': CALCULATORS[asset_class]['color'],
            'exemption_gated': asset_class in EXEMPTION_GATED_CLASSES,
            'exemption_conditions': [
                {'id': condition_id, 'label': label}
                for condition_id, label in EXEMPTION_CONDITIONS.get(asset_class, {}).items()
            ],
            'options': [
                {'value': value, 'label': label}
                for value, label in CALCULATION_OPTIONS.get(asset_class, {}).items()
            ],
        }
        for asset_class in ASSET_CLASSES
    ]
