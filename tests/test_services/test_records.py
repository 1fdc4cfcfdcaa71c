"""Tests for asset record parsing."""
import pytest

from purifai.constants import ASSET_CLASSES
from purifai.services.records import (
    InvalidRecordError,
    RECORD_TYPES,
    to_number,
    to_bool,
    parse_record,
    record_to_dict,
    empty_records,
    with_cache,
    CashRecord,
    BankAccount,
    GoldRecord,
    SharesRecord,
    ETFRecord,
    BusinessRecord,
)


class TestToNumber:
    """Tests for permissive numeric coercion."""

    def test_numbers_pass_through(self):
        assert to_number(12) == 12.0
        assert to_number(12.5) == 12.5

    def test_numeric_strings_are_parsed(self):
        """Form input arrives as text."""
        assert to_number('1500.50') == 1500.5
        assert to_number('  20000 ') == 20000.0

    def test_missing_and_garbage_become_zero(self):
        assert to_number(None) == 0.0
        assert to_number('') == 0.0
        assert to_number('abc') == 0.0
        assert to_number([1, 2]) == 0.0
        assert to_number({'value': 1}) == 0.0

    def test_non_finite_becomes_zero(self):
        assert to_number(float('nan')) == 0.0
        assert to_number(float('inf')) == 0.0
        assert to_number('-inf') == 0.0

    def test_oversized_integer_becomes_zero(self):
        """JSON integers of any size are accepted by the parser; too large for a float is unusable."""
        assert to_number(10 ** 400) == 0.0
        assert to_number(-(10 ** 400)) == 0.0

    def test_oversized_numeric_string_becomes_zero(self):
        assert to_number('1' + '0' * 400) == 0.0

    def test_bool_is_one_or_zero(self):
        assert to_number(True) == 1.0
        assert to_number(False) == 0.0


class TestToBool:

    def test_string_flags(self):
        assert to_bool('true') is True
        assert to_bool('on') is True
        assert to_bool('false') is False
        assert to_bool('') is False

    def test_plain_values(self):
        assert to_bool(True) is True
        assert to_bool(0) is False


class TestParseRecord:
    """Tests for the payload boundary parser."""

    def test_registry_covers_every_asset_class(self):
        assert set(RECORD_TYPES) == set(ASSET_CLASSES)
        assert len(RECORD_TYPES) == 16

    def test_parse_cash(self):
        record = parse_record('cash', {
            'accounts': [
                {'name': 'DBS', 'account_type': 'savings', 'lowest_balance_in_year': '20000', 'interest_earned': 12},
            ],
            'total_deductible_debts': 500,
        })

        assert isinstance(record, CashRecord)
        assert record.accounts == [
            BankAccount(name='DBS', account_type='savings', lowest_balance_in_year=20000.0, interest_earned=12.0)
        ]
        assert record.total_deductible_debts == 500.0
        assert record.calculated is False
        assert record.zakat_amount == 0.0

    def test_none_payload_gives_blank_record(self):
        record = parse_record('gold', None)
        assert record == GoldRecord()

    def test_oversized_integer_does_not_raise(self):
        record = parse_record('cash', {'accounts': [{'lowest_balance_in_year': 10 ** 400}]})
        assert record.accounts[0].lowest_balance_in_year == 0.0

    def test_bad_numbers_do_not_raise(self):
        record = parse_record('gold', {'investment_grams': 'lots', 'price_per_gram': None})
        assert record.investment_grams == 0.0
        assert record.price_per_gram == 0.0

    def test_unknown_asset_class_rejected(self):
        with pytest.raises(InvalidRecordError, match='Unknown asset class'):
            parse_record('silver', {})

    def test_unknown_sub_type_rejected(self):
        with pytest.raises(InvalidRecordError, match='sukuk_type'):
            parse_record('sukuk', {'sukuk_type': 'al_salam'})

    def test_unknown_method_rejected(self):
        with pytest.raises(InvalidRecordError, match='calculation_method'):
            parse_record('etf', {'calculation_method': 'ratio_50'})

    def test_non_string_sub_type_rejected(self):
        with pytest.raises(InvalidRecordError):
            parse_record('crypto', {'crypto_type': ['trading']})

    def test_invalid_record_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_record('nft', {'nft_type': 'collectible'})

    def test_non_dict_payload_rejected(self):
        with pytest.raises(InvalidRecordError):
            parse_record('cash', ['not', 'a', 'record'])

    def test_line_items_must_be_objects(self):
        with pytest.raises(InvalidRecordError):
            parse_record('cash', {'accounts': [100, 200]})

    def test_exemptions_must_be_a_list(self):
        with pytest.raises(InvalidRecordError, match='exemptions'):
            parse_record('etf', {'exemptions': 'below_nisab'})

    def test_empty_exemption_entries_dropped(self):
        record = parse_record('etf', {'exemptions': ['below_nisab', '', None]})
        assert record.exemptions == ['below_nisab']

    def test_defaults(self):
        """Blank choices fall back to each calculator's default method."""
        assert parse_record('shares', {}).calculation_method == 'market_value'
        assert parse_record('etf', {'calculation_method': ''}).calculation_method == 'direct'
        assert parse_record('mutual_funds', {}).calculation_method == 'ratio_25'
        assert parse_record('sukuk', {}).sukuk_type == 'al_ijarah'
        assert parse_record('investment_property', {}).property_type == 'bought_to_resell'
        assert parse_record('crypto', {}).crypto_type == 'trading'
        assert parse_record('nft', {}).nft_type == 'market_value'
        assert parse_record('reit', {}).reit_type == 'unit_value'
        assert parse_record('etc', {}).calculation_type == 'market_value'
        assert parse_record('business', {}).muslim_ownership_percentage == 100.0

    def test_share_holding_default_ratio(self):
        record = parse_record('shares', {'holdings': [{'company_name': 'Acme', 'number_of_shares': 10}]})
        assert isinstance(record, SharesRecord)
        assert record.holdings[0].zakatable_asset_ratio == 0.3

    def test_cache_fields_parsed(self):
        record = parse_record('cash', {'calculated': True, 'zakat_amount': '125.5'})
        assert record.calculated is True
        assert record.zakat_amount == 125.5

    def test_negative_cached_amount_clamped(self):
        record = parse_record('cash', {'calculated': True, 'zakat_amount': -10})
        assert record.zakat_amount == 0.0

    def test_business_fields(self):
        record = parse_record('business', {'bank_balance': 1000, 'trade_creditors': '250'})
        assert isinstance(record, BusinessRecord)
        assert record.bank_balance == 1000.0
        assert record.trade_creditors == 250.0


class TestRecordToDict:

    def test_includes_asset_class_tag(self):
        data = record_to_dict(ETFRecord())
        assert data['asset_class'] == 'etf'
        assert data['exemptions'] == []

    def test_nested_items_become_dicts(self):
        record = parse_record('cash', {'accounts': [{'name': 'OCBC', 'lowest_balance_in_year': 10}]})
        data = record_to_dict(record)
        assert data['accounts'][0]['name'] == 'OCBC'
        assert data['accounts'][0]['lowest_balance_in_year'] == 10.0

    def test_stored_form_parses_back(self):
        record = parse_record('etf', {
            'exemptions': ['long_term_hold'],
            'calculation_method': 'ratio_25',
            'holdings': [{'name': 'SPY', 'number_of_units': 3, 'price_per_unit': 500}],
            'calculated': True,
            'zakat_amount': 9.38,
        })
        assert parse_record('etf', record_to_dict(record)) == record


class TestEmptyRecords:

    def test_one_blank_record_per_class(self):
        records = empty_records()
        assert list(records) == list(ASSET_CLASSES)
        assert all(not record.calculated for record in records.values())
        assert all(record.zakat_amount == 0.0 for record in records.values())


class TestWithCache:

    def test_marks_calculated_and_overwrites_amount(self):
        record = CashRecord(calculated=False, zakat_amount=99.0)
        cached = with_cache(record, 500.0)
        assert cached.calculated is True
        assert cached.zakat_amount == 500.0
        # Original is untouched
        assert record.zakat_amount == 99.0

    def test_negative_amount_clamped(self):
        assert with_cache(CashRecord(), -5.0).zakat_amount == 0.0
