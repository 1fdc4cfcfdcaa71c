"""API routes for calculators, nisab, household members and portfolios."""
from flask import Blueprint, jsonify, request, current_app

from purifai.db import get_db
from purifai.constants import ZAKAT_RATE, RELATIONSHIPS
from purifai.data.calculators import get_calculators, is_valid_asset_class
from purifai.services.calc import calculate_record, save_calculation, summary_to_dict
from purifai.services.family import (
    FamilyError,
    MemberNotFoundError,
)
from purifai.services.nisab import update_nisab
from purifai.services.portfolio import (
    total_zakat,
    get_portfolio_data,
    get_family_portfolio_data,
    get_family_summary,
    get_payable_breakdown,
)
from purifai.services.records import InvalidRecordError, parse_record, record_to_dict
from purifai.services.repository import (
    load_records_or_empty,
    load_all_records,
    save_record,
    delete_record,
    clear_member_records,
    load_household,
    save_household,
    load_nisab,
    save_nisab,
)
from purifai.services.valuation import valuate

api_bp = Blueprint('api', __name__)


def _error(message: str, status: int):
    return jsonify({'error': message}), status


def _json_object():
    """Parsed JSON body; {} when absent, None when it is not an object."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        return None
    return body


def _family_error_status(error: FamilyError) -> int:
    if isinstance(error, MemberNotFoundError):
        return 404
    return 400


def _record_response(record, nisab) -> dict:
    valuation = valuate(record)
    return {
        'record': record_to_dict(record),
        'asset_value': round(valuation.total_assets, 2),
        'summary': summary_to_dict(calculate_record(record, nisab)),
    }


@api_bp.route('/calculators')
def calculators():
    """Return the 16 calculators with exemption conditions and method options."""
    calculator_list = get_calculators()
    return jsonify({
        'calculators': calculator_list,
        'count': len(calculator_list),
        'zakat_rate': ZAKAT_RATE,
    })


@api_bp.route('/nisab')
def get_nisab():
    """Return the current nisab reference."""
    nisab = load_nisab(get_db())
    return jsonify({**nisab.to_dict(), 'zakat_rate': ZAKAT_RATE})


@api_bp.route('/nisab', methods=['PUT'])
def put_nisab():
    """Overwrite the nisab reference (admin action).

    Body:
        {"monetary_threshold": 17230.10, "gold_weight_threshold": 86,
         "gold_price_per_gram": 200.35, "currency": "SGD"}
    """
    body = _json_object()
    if body is None:
        return _error('Request body must be a JSON object', 400)

    values = {}
    for key in ('monetary_threshold', 'gold_weight_threshold', 'gold_price_per_gram'):
        value = body.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _error(f'{key} is required and must be a number', 400)
        values[key] = value

    currency = body.get('currency')
    if currency is not None and not isinstance(currency, str):
        return _error('currency must be a string', 400)

    try:
        nisab = update_nisab(
            values['monetary_threshold'],
            values['gold_weight_threshold'],
            values['gold_price_per_gram'],
            currency=currency,
        )
    except ValueError as e:
        return _error(str(e), 400)

    save_nisab(get_db(), nisab)
    current_app.logger.info(f"Nisab reference replaced, dated {nisab.updated_date}")
    return jsonify({**nisab.to_dict(), 'zakat_rate': ZAKAT_RATE})


@api_bp.route('/calculate/<asset_class>', methods=['POST'])
def calculate(asset_class):
    """Preview the zakat for one calculator without saving.

    Body is the record payload for the asset class, e.g. for cash:
    {
        "accounts": [{"name": "DBS", "account_type": "savings", "lowest_balance_in_year": 20000}],
        "total_deductible_debts": 0
    }
    """
    if not is_valid_asset_class(asset_class):
        return _error(f'Unknown asset class: {asset_class}', 404)

    body = _json_object()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    try:
        record = parse_record(asset_class, body)
    except InvalidRecordError as e:
        current_app.logger.warning(f"Rejected {asset_class} payload: {e}")
        return _error(str(e), 400)

    return jsonify(_record_response(record, load_nisab(get_db())))


# ==================== MEMBERS ====================

@api_bp.route('/members')
def list_members():
    """Return the household with relationship options."""
    household = load_household(get_db())
    return jsonify({
        **household.to_dict(),
        'relationships': [{'value': value, 'label': label} for value, label in RELATIONSHIPS.items()],
    })


@api_bp.route('/members', methods=['POST'])
def add_member():
    """Add a family member. Body: {"name": "Aisha", "relationship": "wife"}"""
    body = _json_object()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    db = get_db()
    household = load_household(db)
    try:
        member = household.add_member(body.get('name', ''), body.get('relationship', 'other'))
    except FamilyError as e:
        return _error(str(e), _family_error_status(e))

    save_household(db, household)
    return jsonify(member.to_dict()), 201


@api_bp.route('/members/<member_id>', methods=['PATCH'])
def update_member(member_id):
    """Rename a member and/or change their relationship."""
    body = _json_object()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    db = get_db()
    household = load_household(db)
    try:
        member = household.get_member(member_id)
        if 'name' in body:
            household.rename_member(member_id, body['name'])
        if 'relationship' in body:
            household.update_relationship(member_id, body['relationship'])
    except FamilyError as e:
        return _error(str(e), _family_error_status(e))

    save_household(db, household)
    return jsonify(member.to_dict())


@api_bp.route('/members/<member_id>', methods=['DELETE'])
def remove_member(member_id):
    """Remove a member together with all their asset records."""
    db = get_db()
    household = load_household(db)
    try:
        household.remove_member(member_id)
    except FamilyError as e:
        return _error(str(e), _family_error_status(e))

    removed = clear_member_records(db, member_id)
    save_household(db, household)
    current_app.logger.info(f"Removed member {member_id} and {removed} asset records")
    return jsonify(household.to_dict())


@api_bp.route('/members/<member_id>/activate', methods=['POST'])
def activate_member(member_id):
    """Make a member the household's active member."""
    db = get_db()
    household = load_household(db)
    try:
        household.switch_member(member_id)
    except FamilyError as e:
        return _error(str(e), _family_error_status(e))

    save_household(db, household)
    return jsonify(household.to_dict())


# ==================== ASSET RECORDS ====================

def _require_member(db, member_id: str):
    household = load_household(db)
    return household.get_member(member_id)


@api_bp.route('/members/<member_id>/records')
def member_records(member_id):
    """Return all 16 records of a member with live summaries."""
    db = get_db()
    try:
        _require_member(db, member_id)
    except MemberNotFoundError as e:
        return _error(str(e), 404)

    nisab = load_nisab(db)
    records = load_records_or_empty(db, member_id)
    return jsonify({
        'member_id': member_id,
        'records': {
            asset_class: _record_response(record, nisab)
            for asset_class, record in records.items()
        },
        'total_zakat_due': round(total_zakat(records), 2),
    })


@api_bp.route('/members/<member_id>/records/<asset_class>')
def get_member_record(member_id, asset_class):
    """Return one record with its live summary."""
    if not is_valid_asset_class(asset_class):
        return _error(f'Unknown asset class: {asset_class}', 404)

    db = get_db()
    try:
        _require_member(db, member_id)
    except MemberNotFoundError as e:
        return _error(str(e), 404)

    records = load_records_or_empty(db, member_id)
    return jsonify(_record_response(records[asset_class], load_nisab(db)))


@api_bp.route('/members/<member_id>/records/<asset_class>', methods=['PUT'])
def put_member_record(member_id, asset_class):
    """Save a calculator: recompute zakat and overwrite the cached amount."""
    if not is_valid_asset_class(asset_class):
        return _error(f'Unknown asset class: {asset_class}', 404)

    db = get_db()
    try:
        _require_member(db, member_id)
    except MemberNotFoundError as e:
        return _error(str(e), 404)

    body = _json_object()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    try:
        record = parse_record(asset_class, body)
    except InvalidRecordError as e:
        current_app.logger.warning(f"Rejected {asset_class} record for {member_id}: {e}")
        return _error(str(e), 400)

    nisab = load_nisab(db)
    saved, summary = save_calculation(record, nisab)
    save_record(db, member_id, saved)

    records = load_records_or_empty(db, member_id)
    return jsonify({
        **_record_response(saved, nisab),
        'total_zakat_due': round(total_zakat(records), 2),
    })


@api_bp.route('/members/<member_id>/records/<asset_class>', methods=['DELETE'])
def clear_member_record(member_id, asset_class):
    """Reset one calculator to a blank, uncalculated record."""
    if not is_valid_asset_class(asset_class):
        return _error(f'Unknown asset class: {asset_class}', 404)

    db = get_db()
    try:
        _require_member(db, member_id)
    except MemberNotFoundError as e:
        return _error(str(e), 404)

    delete_record(db, member_id, asset_class)
    records = load_records_or_empty(db, member_id)
    return jsonify({
        **_record_response(records[asset_class], load_nisab(db)),
        'total_zakat_due': round(total_zakat(records), 2),
    })


# ==================== PORTFOLIOS ====================

@api_bp.route('/members/<member_id>/summary')
def member_summary(member_id):
    """Total zakat, portfolio and payable breakdown for one member."""
    db = get_db()
    try:
        member = _require_member(db, member_id)
    except MemberNotFoundError as e:
        return _error(str(e), 404)

    records = load_records_or_empty(db, member_id)
    portfolio = get_portfolio_data(records)
    return jsonify({
        'member': member.to_dict(),
        'total_zakat_due': round(total_zakat(records), 2),
        'total_asset_value': round(sum(item.asset_value for item in portfolio), 2),
        'portfolio': [item.to_dict() for item in portfolio],
        'payable': get_payable_breakdown(records),
    })


@api_bp.route('/family/portfolio')
def family_portfolio():
    """Portfolio aggregated over every household member."""
    db = get_db()
    household = load_household(db)
    records_by_member = load_all_records(db, household.members)
    portfolio = get_family_portfolio_data(records_by_member, household.members)
    return jsonify({
        'portfolio': [item.to_dict() for item in portfolio],
        'total_asset_value': round(sum(item.asset_value for item in portfolio), 2),
        **get_family_summary(records_by_member, household.members),
    })
