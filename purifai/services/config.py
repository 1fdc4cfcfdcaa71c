"""Configuration service for nisab defaults and app settings."""
import os

from purifai.constants import (
    DEFAULT_NISAB_MONETARY,
    DEFAULT_NISAB_GOLD_GRAMS,
    DEFAULT_NISAB_GOLD_PRICE,
    DEFAULT_NISAB_CURRENCY,
    DEFAULT_NISAB_DATE,
)


def _get_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return float(default)
    return float(value)


def get_nisab_monetary() -> float:
    """Get the monetary nisab threshold.

    Controlled by NISAB_MONETARY_AMOUNT env var (default: 17230.10).
    """
    return _get_float('NISAB_MONETARY_AMOUNT', DEFAULT_NISAB_MONETARY)


def get_nisab_gold_weight() -> float:
    """Get the gold nisab weight in grams.

    Controlled by NISAB_GOLD_WEIGHT_GRAMS env var (default: 86).
    """
    return _get_float('NISAB_GOLD_WEIGHT_GRAMS', DEFAULT_NISAB_GOLD_GRAMS)


def get_nisab_gold_price() -> float:
    """Get the reference gold price per gram.

    Controlled by NISAB_GOLD_PRICE_PER_GRAM env var (default: 200.35).
    """
    return _get_float('NISAB_GOLD_PRICE_PER_GRAM', DEFAULT_NISAB_GOLD_PRICE)


def get_nisab_currency() -> str:
    return os.environ.get('NISAB_CURRENCY', DEFAULT_NISAB_CURRENCY).upper()


def get_nisab_reference_date() -> str:
    """Get the date the configured nisab values were published (YYYY-MM-DD)."""
    return os.environ.get('NISAB_REFERENCE_DATE', DEFAULT_NISAB_DATE)


def get_db_name() -> str:
    """Get the SQLite file name inside DATA_DIR."""
    return os.environ.get('PURIFAI_DB_NAME', 'purifai.sqlite')


def get_default_self_name() -> str:
    """Name given to the household's self member when none is supplied."""
    return os.environ.get('PURIFAI_SELF_NAME', 'Self')


def get_nisab_config() -> dict:
    """Get complete nisab configuration."""
    return {
        'monetary_threshold': get_nisab_monetary(),
        'gold_weight_threshold': get_nisab_gold_weight(),
        'gold_price_per_gram': get_nisab_gold_price(),
        'currency': get_nisab_currency(),
        'updated_date': get_nisab_reference_date(),
    }
