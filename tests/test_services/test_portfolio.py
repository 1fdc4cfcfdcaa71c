"""Tests for member and family aggregation."""
import pytest

from purifai.services.calc import save_calculation
from purifai.services.family import ZakatMember
from purifai.services.portfolio import (
    total_zakat,
    get_asset_value,
    get_portfolio_data,
    get_family_portfolio_data,
    get_family_summary,
    get_payable_breakdown,
    quote_processing_fee,
)
from purifai.services.records import parse_record, empty_records


def _saved(asset_class, payload, nisab):
    record, _ = save_calculation(parse_record(asset_class, payload), nisab)
    return record


@pytest.fixture
def member_records(nisab):
    """Cash above nisab, gold below nisab, an unsaved ETF and an exempt crypto."""
    records = empty_records()
    records['cash'] = _saved('cash', {'accounts': [{'lowest_balance_in_year': 20000}]}, nisab)
    records['gold'] = _saved('gold', {'investment_grams': 50, 'price_per_gram': 200.35}, nisab)
    records['etf'] = parse_record('etf', {'holdings': [{'number_of_units': 100, 'price_per_unit': 10}]})
    records['crypto'] = _saved('crypto', {'market_value': 50000, 'exemptions': ['utility_tokens']}, nisab)
    return records


@pytest.fixture
def members():
    return [
        ZakatMember(id='self_1', name='Yusuf', relationship='self', created_at='2026-02-08T00:00:00+00:00'),
        ZakatMember(id='member_2', name='Aisha', relationship='wife', created_at='2026-02-08T00:00:00+00:00'),
    ]


class TestTotalZakat:

    def test_sums_calculated_records(self, member_records):
        assert total_zakat(member_records) == pytest.approx(500.0)

    def test_ignores_uncalculated_cache(self):
        records = empty_records()
        records['cash'] = parse_record('cash', {'calculated': False, 'zakat_amount': 999})
        assert total_zakat(records) == 0.0

    def test_empty(self):
        assert total_zakat({}) == 0.0
        assert total_zakat(empty_records()) == 0.0


class TestGetAssetValue:

    def test_uncalculated_is_zero(self, member_records):
        assert get_asset_value(member_records['etf']) == 0.0

    def test_none_is_zero(self):
        assert get_asset_value(None) == 0.0

    def test_gross_value_before_debts(self, nisab):
        record = _saved('cash', {'accounts': [{'lowest_balance_in_year': 20000}], 'total_deductible_debts': 4000}, nisab)
        assert get_asset_value(record) == 20000.0

    def test_exempt_record_is_zero(self, member_records):
        assert get_asset_value(member_records['crypto']) == 0.0


class TestPortfolio:

    def test_skips_zero_values_and_sorts_descending(self, member_records):
        items = get_portfolio_data(member_records)

        assert [item.asset_class for item in items] == ['cash', 'gold']
        assert items[0].asset_value == 20000.0
        assert items[0].zakat_amount == pytest.approx(500.0)
        assert items[1].asset_value == pytest.approx(10017.5)
        assert items[1].zakat_amount == 0.0

    def test_items_carry_display_metadata(self, member_records):
        data = get_portfolio_data(member_records)[0].to_dict()
        assert data['name'] == 'Cash'
        assert data['color'].startswith('#')
        assert data['icon']

    def test_empty_records(self):
        assert get_portfolio_data(empty_records()) == []


class TestFamilyPortfolio:

    def test_sums_members_and_lists_contributions(self, nisab, member_records, members):
        wife_records = empty_records()
        wife_records['cash'] = _saved('cash', {'accounts': [{'lowest_balance_in_year': 30000}]}, nisab)
        wife_records['business'] = _saved('business', {'bank_balance': 5000}, nisab)

        items = get_family_portfolio_data({'self_1': member_records, 'member_2': wife_records}, members)

        assert [item.asset_class for item in items] == ['cash', 'gold', 'business']
        cash = items[0]
        assert cash.asset_value == 50000.0
        assert cash.zakat_amount == pytest.approx(1250.0)
        assert [c.member_name for c in cash.member_contributions] == ['Yusuf', 'Aisha']
        assert cash.member_contributions[1].asset_value == 30000.0

    def test_member_without_records_is_skipped(self, member_records, members):
        items = get_family_portfolio_data({'self_1': member_records}, members)
        assert all(len(item.member_contributions) == 1 for item in items)

    def test_to_dict_includes_contributions(self, member_records, members):
        items = get_family_portfolio_data({'self_1': member_records}, members)
        data = items[0].to_dict()
        assert data['member_contributions'][0]['member_id'] == 'self_1'

    def test_family_summary(self, nisab, member_records, members):
        wife_records = empty_records()
        wife_records['cash'] = _saved('cash', {'accounts': [{'lowest_balance_in_year': 30000}]}, nisab)

        summary = get_family_summary({'self_1': member_records, 'member_2': wife_records}, members)

        assert summary['total_zakat_due'] == 1250.0
        assert [m['total_zakat_due'] for m in summary['members']] == [500.0, 750.0]


class TestPayable:

    def test_breakdown_lists_positive_amounts(self, member_records):
        breakdown = get_payable_breakdown(member_records)
        assert breakdown['items'] == [{'asset_class': 'cash', 'name': 'Cash', 'zakat_amount': 500.0}]
        assert breakdown['total_zakat_due'] == 500.0

    def test_processing_fee(self):
        quote = quote_processing_fee(500.0)
        assert quote['processing_fee'] == pytest.approx(11.95)
        assert quote['total_to_pay'] == pytest.approx(511.95)


class TestFamilyMatchesIndividual:
    """A one-member family portfolio equals that member's own portfolio."""

    @pytest.mark.parametrize('asset_class', ['cash', 'gold', 'etf', 'crypto'])
    def test_single_member_per_class(self, member_records, members, asset_class):
        individual = {item.asset_class: item for item in get_portfolio_data(member_records)}
        family = {
            item.asset_class: item
            for item in get_family_portfolio_data({'self_1': member_records}, members[:1])
        }

        assert set(family) == set(individual)
        if asset_class in individual:
            assert family[asset_class].asset_value == individual[asset_class].asset_value
            assert family[asset_class].zakat_amount == individual[asset_class].zakat_amount

    def test_single_member_order(self, member_records, members):
        individual = [item.asset_class for item in get_portfolio_data(member_records)]
        family = [item.asset_class for item in get_family_portfolio_data({'self_1': member_records}, members[:1])]
        assert family == individual
