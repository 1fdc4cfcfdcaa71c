"""Zakat determination service."""
import logging
from dataclasses import dataclass

from purifai.constants import ZAKAT_RATE
from .nisab import NisabReference
from .records import AssetRecord, finite_or_zero, with_cache
from .valuation import valuate, is_exempt

logger = logging.getLogger(__name__)

# Ratio below which a result is reported as "below" rather than "near" nisab
NEAR_NISAB_RATIO = 0.90


@dataclass(frozen=True)
class CalculationSummary:
    """Derived result of one calculator. Never stored, rebuilt on every read."""
    asset_class: str
    total_assets: float
    total_debts: float
    net_assets: float
    is_above_nisab: bool
    zakat_due: float
    nisab_metric: str          # 'grams' for gold, 'monetary' otherwise
    nisab_quantity: float      # value compared against the threshold
    nisab_threshold: float
    exempt: bool = False


def determine(
    total_assets: float,
    total_debts: float,
    nisab: NisabReference,
    asset_class: str,
    zakatable_grams: float = 0.0,
) -> CalculationSummary:
    """Apply the nisab comparison and the 2.5% rate to a valuation.

    Gold is the only class whose nisab is measured in mass: its zakatable
    grams are compared with the gold weight threshold, independent of the
    gold price. Every other class compares net assets with the monetary
    threshold.
    """
    net_assets = finite_or_zero(total_assets - total_debts)

    if asset_class == 'gold':
        nisab_metric = 'grams'
        nisab_quantity = zakatable_grams
        nisab_threshold = nisab.gold_weight_threshold
    else:
        nisab_metric = 'monetary'
        nisab_quantity = net_assets
        nisab_threshold = nisab.monetary_threshold

    is_above_nisab = nisab_quantity >= nisab_threshold
    zakat_due = net_assets * ZAKAT_RATE if is_above_nisab else 0.0

    return CalculationSummary(
        asset_class=asset_class,
        total_assets=total_assets,
        total_debts=total_debts,
        net_assets=net_assets,
        is_above_nisab=is_above_nisab,
        zakat_due=zakat_due,
        nisab_metric=nisab_metric,
        nisab_quantity=nisab_quantity,
        nisab_threshold=nisab_threshold,
    )


def exempt_summary(asset_class: str, nisab: NisabReference) -> CalculationSummary:
    return CalculationSummary(
        asset_class=asset_class,
        total_assets=0.0,
        total_debts=0.0,
        net_assets=0.0,
        is_above_nisab=False,
        zakat_due=0.0,
        nisab_metric='monetary',
        nisab_quantity=0.0,
        nisab_threshold=nisab.monetary_threshold,
        exempt=True,
    )


def calculate_record(record: AssetRecord, nisab: NisabReference) -> CalculationSummary:
    """Value a record and determine its zakat against the current nisab."""
    if is_exempt(record):
        logger.debug(f"{record.asset_class} exempt via {record.exemptions}")
        return exempt_summary(record.asset_class, nisab)

    valuation = valuate(record)
    summary = determine(
        valuation.total_assets,
        valuation.total_debts,
        nisab,
        record.asset_class,
        zakatable_grams=valuation.zakatable_grams,
    )
    logger.debug(
        f"{record.asset_class}: assets={summary.total_assets} debts={summary.total_debts} "
        f"above_nisab={summary.is_above_nisab} zakat={summary.zakat_due}"
    )
    return summary


def save_calculation(record: AssetRecord, nisab: NisabReference) -> tuple[AssetRecord, CalculationSummary]:
    """Recompute a record and overwrite its zakat_amount cache.

    Returns:
        Tuple of (record marked calculated, fresh summary)
    """
    summary = calculate_record(record, nisab)
    return with_cache(record, summary.zakat_due), summary


def nisab_status(summary: CalculationSummary) -> dict:
    """Progress towards nisab for display (ratio clamped 0-1)."""
    if summary.nisab_threshold > 0:
        raw_ratio = summary.nisab_quantity / summary.nisab_threshold
        display_ratio = min(max(raw_ratio, 0), 1)
    else:
        raw_ratio = 0
        display_ratio = 0

    if summary.is_above_nisab:
        status = 'above'
    elif raw_ratio < NEAR_NISAB_RATIO:
        status = 'below'
    else:
        status = 'near'

    difference = abs(summary.nisab_quantity - summary.nisab_threshold)
    unit = 'g' if summary.nisab_metric == 'grams' else ''
    if summary.is_above_nisab:
        difference_text = f"{round(difference, 2)}{unit} above nisab"
    else:
        difference_text = f"{round(difference, 2)}{unit} more to reach nisab"

    return {
        'metric': summary.nisab_metric,
        'threshold': round(summary.nisab_threshold, 2),
        'ratio': round(display_ratio, 4),
        'status': status,
        'difference': round(difference, 2),
        'difference_text': difference_text,
    }


def summary_to_dict(summary: CalculationSummary) -> dict:
    """Render a summary for JSON responses (rounded to 2 dp at this edge only)."""
    return {
        'asset_class': summary.asset_class,
        'total_assets': round(summary.total_assets, 2),
        'total_debts': round(summary.total_debts, 2),
        'net_assets': round(summary.net_assets, 2),
        'above_nisab': summary.is_above_nisab,
        'zakat_due': round(summary.zakat_due, 2),
        'zakat_rate': ZAKAT_RATE,
        'exempt': summary.exempt,
        'nisab': nisab_status(summary),
    }
