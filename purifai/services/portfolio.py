"""Aggregation of asset records into member totals and portfolio views."""
import logging
from dataclasses import dataclass, field

from purifai.constants import ASSET_CLASSES, PROCESSING_FEE_RATE
from purifai.data.calculators import CALCULATORS, get_calculator_name
from .records import AssetRecord
from .valuation import valuate

logger = logging.getLogger(__name__)


@dataclass
class MemberContribution:
    member_id: str
    member_name: str
    asset_value: float
    zakat_amount: float


@dataclass
class PortfolioItem:
    asset_class: str
    name: str
    icon: str
    color: str
    asset_value: float
    zakat_amount: float

    def to_dict(self) -> dict:
        return {
            'asset_class': self.asset_class,
            'name': self.name,
            'icon': self.icon,
            'color': self.color,
            'asset_value': round(self.asset_value, 2),
            'zakat_amount': round(self.zakat_amount, 2),
        }


@dataclass
class FamilyPortfolioItem(PortfolioItem):
    member_contributions: list = field(default_factory=list)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['member_contributions'] = [
            {
                'member_id': c.member_id,
                'member_name': c.member_name,
                'asset_value': round(c.asset_value, 2),
                'zakat_amount': round(c.zakat_amount, 2),
            }
            for c in self.member_contributions
        ]
        return data


def _ordered(records: dict) -> list:
    """Records in calculator display order, skipping missing classes."""
    return [records[asset_class] for asset_class in ASSET_CLASSES if records.get(asset_class) is not None]


def total_zakat(records: dict) -> float:
    """Sum the cached zakat_amount of every calculated record."""
    return sum(record.zakat_amount for record in _ordered(records) if record.calculated)


def get_asset_value(record: AssetRecord | None) -> float:
    """Zakatable asset value of a saved record, re-derived from its fields."""
    if record is None or not record.calculated:
        return 0.0
    return valuate(record).total_assets


def _blank_item(asset_class: str, item_type=PortfolioItem, **extra):
    meta = CALCULATORS[asset_class]
    return item_type(
        asset_class=asset_class,
        name=meta['name'],
        icon=meta['icon'],
        color=meta['color'],
        asset_value=0.0,
        zakat_amount=0.0,
        **extra,
    )


def get_portfolio_data(records: dict) -> list[PortfolioItem]:
    """Portfolio for one member, sorted by asset value descending.

    Records that are not calculated or have no positive value are skipped.
    """
    items = []
    for record in _ordered(records):
        asset_value = get_asset_value(record)
        if asset_value <= 0:
            continue
        item = _blank_item(record.asset_class)
        item.asset_value = asset_value
        item.zakat_amount = record.zakat_amount
        items.append(item)

    items.sort(key=lambda item: item.asset_value, reverse=True)
    return items


def get_family_portfolio_data(records_by_member: dict, members: list) -> list[FamilyPortfolioItem]:
    """Portfolio summed across members, with per-member contributions.

    Args:
        records_by_member: Dict of member_id -> {asset_class: AssetRecord}
        members: Ordered list of ZakatMember (or objects with id and name)

    Returns:
        FamilyPortfolioItem list sorted by summed asset value descending
    """
    item_map = {}

    for member in members:
        records = records_by_member.get(member.id)
        if not records:
            continue

        for record in _ordered(records):
            asset_value = get_asset_value(record)
            if asset_value <= 0:
                continue

            item = item_map.get(record.asset_class)
            if item is None:
                item = _blank_item(record.asset_class, FamilyPortfolioItem, member_contributions=[])
                item_map[record.asset_class] = item

            item.asset_value += asset_value
            item.zakat_amount += record.zakat_amount
            item.member_contributions.append(MemberContribution(
                member_id=member.id,
                member_name=member.name,
                asset_value=asset_value,
                zakat_amount=record.zakat_amount,
            ))

    items = list(item_map.values())
    items.sort(key=lambda item: item.asset_value, reverse=True)
    logger.debug(f"Family portfolio: {len(items)} asset classes across {len(members)} members")
    return items


def get_family_summary(records_by_member: dict, members: list) -> dict:
    """Per-member zakat totals and the household total."""
    member_totals = []
    for member in members:
        records = records_by_member.get(member.id) or {}
        member_totals.append({
            'member_id': member.id,
            'member_name': member.name,
            'relationship': member.relationship,
            'total_zakat_due': round(total_zakat(records), 2),
        })
    household_total = sum(
        total_zakat(records_by_member.get(member.id) or {}) for member in members
    )
    return {
        'members': member_totals,
        'total_zakat_due': round(household_total, 2),
    }


def quote_processing_fee(amount: float) -> dict:
    """Processing fee quote for paying a zakat amount."""
    fee = amount * PROCESSING_FEE_RATE
    return {
        'zakat_amount': round(amount, 2),
        'processing_fee_rate': PROCESSING_FEE_RATE,
        'processing_fee': round(fee, 2),
        'total_to_pay': round(amount + fee, 2),
    }


def get_payable_breakdown(records: dict) -> dict:
    """Per-class zakat amounts a member can pay, plus the member total.

    Only calculated records with a positive cached amount are payable.
    """
    items = [
        {
            'asset_class': record.asset_class,
            'name': get_calculator_name(record.asset_class),
            'zakat_amount': round(record.zakat_amount, 2),
        }
        for record in _ordered(records)
        if record.calculated and record.zakat_amount > 0
    ]
    total = total_zakat(records)
    return {
        'items': items,
        'total_zakat_due': round(total, 2),
        'payment': quote_processing_fee(total),
    }
