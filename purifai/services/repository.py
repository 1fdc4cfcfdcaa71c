"""SQLite-backed storage for asset records, household and nisab.

Every call takes the connection and the member id explicitly; nothing here
reads a "current member" from global state.
"""
import json
import logging
import sqlite3

from purifai.constants import ASSET_CLASSES
from .family import Household, ZakatMember
from .nisab import NisabReference, get_default_nisab
from .records import AssetRecord, parse_record, record_to_dict, empty_records

logger = logging.getLogger(__name__)

CURRENT_MEMBER_KEY = 'current_member_id'


# ==================== ASSET RECORDS ====================

def load_records(db: sqlite3.Connection, member_id: str) -> dict | None:
    """Load the full set of 16 records for a member.

    Returns:
        Dict of asset_class -> AssetRecord (blank records for classes never
        saved), or None if the member has no stored records at all.
    """
    rows = db.execute(
        'SELECT asset_class, data FROM asset_records WHERE member_id = ?',
        (member_id,)
    ).fetchall()
    if not rows:
        return None

    records = empty_records()
    for row in rows:
        if row['asset_class'] not in records:
            logger.warning(f"Ignoring stored record with unknown asset class {row['asset_class']}")
            continue
        records[row['asset_class']] = parse_record(row['asset_class'], json.loads(row['data']))
    return records


def load_records_or_empty(db: sqlite3.Connection, member_id: str) -> dict:
    records = load_records(db, member_id)
    return records if records is not None else empty_records()


def save_record(db: sqlite3.Connection, member_id: str, record: AssetRecord) -> None:
    db.execute(
        '''
        INSERT OR REPLACE INTO asset_records (member_id, asset_class, data, updated_at)
        VALUES (?, ?, ?, datetime('now'))
        ''',
        (member_id, record.asset_class, json.dumps(record_to_dict(record)))
    )
    db.commit()
    logger.info(f"Saved {record.asset_class} record for member {member_id}")


def save_records(db: sqlite3.Connection, member_id: str, records: dict) -> None:
    """Persist a member's full record set in one transaction."""
    db.executemany(
        '''
        INSERT OR REPLACE INTO asset_records (member_id, asset_class, data, updated_at)
        VALUES (?, ?, ?, datetime('now'))
        ''',
        [
            (member_id, asset_class, json.dumps(record_to_dict(records[asset_class])))
            for asset_class in ASSET_CLASSES
            if records.get(asset_class) is not None
        ]
    )
    db.commit()


def delete_record(db: sqlite3.Connection, member_id: str, asset_class: str) -> None:
    db.execute(
        'DELETE FROM asset_records WHERE member_id = ? AND asset_class = ?',
        (member_id, asset_class)
    )
    db.commit()


def clear_member_records(db: sqlite3.Connection, member_id: str) -> int:
    cursor = db.execute('DELETE FROM asset_records WHERE member_id = ?', (member_id,))
    db.commit()
    return cursor.rowcount


def load_all_records(db: sqlite3.Connection, members: list) -> dict:
    """member_id -> record set, for family aggregation."""
    return {member.id: load_records_or_empty(db, member.id) for member in members}


# ==================== HOUSEHOLD ====================

def load_household(db: sqlite3.Connection) -> Household:
    rows = db.execute(
        'SELECT id, name, relationship, created_at FROM members ORDER BY position, created_at'
    ).fetchall()
    members = [
        ZakatMember(
            id=row['id'],
            name=row['name'],
            relationship=row['relationship'],
            created_at=row['created_at'],
        )
        for row in rows
    ]
    current = db.execute('SELECT value FROM meta WHERE key = ?', (CURRENT_MEMBER_KEY,)).fetchone()
    return Household(members=members, current_member_id=current['value'] if current else '')


def save_household(db: sqlite3.Connection, household: Household) -> None:
    """Write the member list and active member id.

    Rows for members no longer in the household are deleted, and their asset
    records go with them (ON DELETE CASCADE).
    """
    member_ids = [member.id for member in household.members]
    if member_ids:
        placeholders = ','.join('?' for _ in member_ids)
        db.execute(f'DELETE FROM members WHERE id NOT IN ({placeholders})', member_ids)
    else:
        db.execute('DELETE FROM members')

    db.executemany(
        '''
        INSERT INTO members (id, name, relationship, position, created_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            name = excluded.name,
            relationship = excluded.relationship,
            position = excluded.position
        ''',
        [
            (member.id, member.name, member.relationship, position, member.created_at)
            for position, member in enumerate(household.members)
        ]
    )
    db.execute(
        "INSERT OR REPLACE INTO meta (key, value, updated_at) VALUES (?, ?, datetime('now'))",
        (CURRENT_MEMBER_KEY, household.current_member_id)
    )
    db.commit()


# ==================== NISAB ====================

def load_nisab(db: sqlite3.Connection) -> NisabReference:
    """Load the stored nisab, falling back to configured defaults."""
    row = db.execute(
        '''
        SELECT monetary_threshold, gold_weight_threshold, gold_price_per_gram, currency, updated_date
        FROM nisab WHERE id = 1
        '''
    ).fetchone()
    if row is None:
        return get_default_nisab()
    return NisabReference(
        monetary_threshold=row['monetary_threshold'],
        gold_weight_threshold=row['gold_weight_threshold'],
        gold_price_per_gram=row['gold_price_per_gram'],
        currency=row['currency'],
        updated_date=row['updated_date'],
    )


def save_nisab(db: sqlite3.Connection, nisab: NisabReference) -> None:
    db.execute(
        '''
        INSERT OR REPLACE INTO nisab
            (id, monetary_threshold, gold_weight_threshold, gold_price_per_gram, currency, updated_date, updated_at)
        VALUES (1, ?, ?, ?, ?, ?, datetime('now'))
        ''',
        (
            nisab.monetary_threshold,
            nisab.gold_weight_threshold,
            nisab.gold_price_per_gram,
            nisab.currency,
            nisab.updated_date,
        )
    )
    db.commit()


def seed_nisab(db: sqlite3.Connection) -> bool:
    """Store the configured nisab if none is stored yet. Returns True if seeded."""
    exists = db.execute('SELECT 1 FROM nisab WHERE id = 1').fetchone()
    if exists:
        return False
    save_nisab(db, get_default_nisab())
    logger.info('Seeded nisab reference from configuration')
    return True
