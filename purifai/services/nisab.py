"""Nisab reference values shared by every calculator."""
import logging
from dataclasses import dataclass
from typing import Optional

from .config import get_nisab_config
from .time_provider import TimeProvider, get_today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NisabReference:
    """Minimum-threshold values every valuation is compared against."""
    monetary_threshold: float      # currency amount
    gold_weight_threshold: float   # grams
    gold_price_per_gram: float     # currency per gram
    currency: str = 'SGD'
    updated_date: Optional[str] = None  # YYYY-MM-DD

    def __post_init__(self):
        if self.monetary_threshold <= 0:
            raise ValueError(f"Monetary nisab must be positive, got {self.monetary_threshold}")
        if self.gold_weight_threshold <= 0:
            raise ValueError(f"Gold nisab weight must be positive, got {self.gold_weight_threshold}")

    def to_dict(self) -> dict:
        return {
            'monetary_threshold': self.monetary_threshold,
            'gold_weight_threshold': self.gold_weight_threshold,
            'gold_price_per_gram': self.gold_price_per_gram,
            'gold_threshold_value': round(self.gold_weight_threshold * self.gold_price_per_gram, 2),
            'currency': self.currency,
            'updated_date': self.updated_date,
        }


def get_default_nisab() -> NisabReference:
    """Build the startup nisab reference from configuration."""
    return NisabReference(**get_nisab_config())


def get_thresholds(nisab: NisabReference) -> dict:
    """Return the three threshold values calculators read."""
    return {
        'monetary': nisab.monetary_threshold,
        'gold_weight': nisab.gold_weight_threshold,
        'gold_price': nisab.gold_price_per_gram,
    }


def update_nisab(
    monetary: float,
    gold_weight: float,
    gold_price: float,
    currency: Optional[str] = None,
    time_provider: Optional[TimeProvider] = None,
) -> NisabReference:
    """Overwrite all three nisab values and stamp today's date.

    Args:
        monetary: New monetary threshold
        gold_weight: New gold weight threshold in grams
        gold_price: New gold price per gram
        currency: Currency label (defaults to configured currency)
        time_provider: Optional TimeProvider for the update stamp

    Returns:
        The new NisabReference
    """
    nisab = NisabReference(
        monetary_threshold=float(monetary),
        gold_weight_threshold=float(gold_weight),
        gold_price_per_gram=float(gold_price),
        currency=(currency or get_nisab_config()['currency']).upper(),
        updated_date=get_today(time_provider).isoformat(),
    )
    logger.info(
        f"Nisab updated: monetary={nisab.monetary_threshold} "
        f"gold_weight={nisab.gold_weight_threshold}g gold_price={nisab.gold_price_per_gram}"
    )
    return nisab
