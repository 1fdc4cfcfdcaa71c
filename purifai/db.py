"""SQLite database connection management for household and asset records."""
import os
import sqlite3
from flask import current_app, g

from purifai.services.config import get_db_name


def get_db_path() -> str:
    """Get the path to the SQLite database file."""
    data_dir = current_app.config.get('DATA_DIR', os.path.join(os.path.dirname(__file__), '..', 'data'))
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, get_db_name())


def get_db() -> sqlite3.Connection:
    """Get a database connection, creating one if needed for this request."""
    if 'db' not in g:
        g.db = sqlite3.connect(get_db_path())
        g.db.row_factory = sqlite3.Row
        g.db.execute('PRAGMA foreign_keys = ON')
    return g.db


def close_db(e=None):
    """Close the database connection at end of request."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """Initialize the database with schema."""
    db = get_db()
    db.executescript(get_schema())
    db.commit()


def get_schema() -> str:
    """Return the database schema SQL."""
    return '''
-- Household members; exactly one row has relationship 'self'
CREATE TABLE IF NOT EXISTS members (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    relationship TEXT NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_members_position ON members(position);

-- One row per (member, asset class); data holds the record as JSON
CREATE TABLE IF NOT EXISTS asset_records (
    member_id TEXT NOT NULL REFERENCES members(id) ON DELETE CASCADE,
    asset_class TEXT NOT NULL,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (member_id, asset_class)
);

-- Current nisab reference (single row)
CREATE TABLE IF NOT EXISTS nisab (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    monetary_threshold REAL NOT NULL,
    gold_weight_threshold REAL NOT NULL,
    gold_price_per_gram REAL NOT NULL,
    currency TEXT NOT NULL,
    updated_date TEXT,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Metadata (active member id, schema markers)
CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
'''


def init_app(app):
    """Register database functions with Flask app and ensure database exists."""
    app.teardown_appcontext(close_db)

    with app.app_context():
        # CREATE IF NOT EXISTS keeps this idempotent
        db = get_db()
        db.executescript(get_schema())
        db.commit()
