"""SQLite-backed business directory store.

Persists businesses, offers and events to a local SQLite database at
``data/directory.db``.  Uses ``aiosqlite`` for async I/O.  Only rows with
``status = 'approved'`` are ever returned; the tier column is authoritative
and is read as-is.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from localscout.interfaces.business_store import IBusinessStore
from localscout.models.business import BusinessRecord, BusinessTier, Event, Offer
from localscout.utils.errors import DataSourceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/directory.db")

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS businesses (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    city             TEXT NOT NULL,
    tier             TEXT NOT NULL DEFAULT 'unclaimed',
    status           TEXT NOT NULL DEFAULT 'approved',
    raw_category     TEXT NOT NULL DEFAULT '',
    system_category  TEXT NOT NULL DEFAULT '',
    display_category TEXT NOT NULL DEFAULT '',
    tagline          TEXT NOT NULL DEFAULT '',
    description      TEXT NOT NULL DEFAULT '',
    latitude         REAL,
    longitude        REAL,
    rating           REAL,
    review_count     INTEGER NOT NULL DEFAULT 0,
    opening_hours    TEXT,
    address          TEXT NOT NULL DEFAULT '',
    town             TEXT NOT NULL DEFAULT '',
    phone            TEXT NOT NULL DEFAULT '',
    website          TEXT NOT NULL DEFAULT '',
    logo             TEXT NOT NULL DEFAULT '',
    images           TEXT NOT NULL DEFAULT '[]'
);
""",
    """\
CREATE TABLE IF NOT EXISTS offers (
    id          TEXT PRIMARY KEY,
    business_id TEXT NOT NULL REFERENCES businesses(id),
    city        TEXT NOT NULL,
    name        TEXT NOT NULL,
    value       TEXT NOT NULL DEFAULT '',
    status      TEXT NOT NULL DEFAULT 'approved'
);
""",
    """\
CREATE TABLE IF NOT EXISTS events (
    id          TEXT PRIMARY KEY,
    business_id TEXT NOT NULL REFERENCES businesses(id),
    city        TEXT NOT NULL,
    title       TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    event_type  TEXT NOT NULL DEFAULT 'Other',
    event_date  TEXT NOT NULL,
    start_time  TEXT,
    end_time    TEXT,
    location    TEXT NOT NULL DEFAULT '',
    ticket_url  TEXT,
    image_url   TEXT,
    status      TEXT NOT NULL DEFAULT 'approved'
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_businesses_city_tier ON businesses(city, tier);",
    "CREATE INDEX IF NOT EXISTS idx_offers_city ON offers(city, status);",
    "CREATE INDEX IF NOT EXISTS idx_events_city_date ON events(city, event_date);",
]

_BUSINESS_COLUMNS = (
    "id", "name", "city", "tier", "status", "raw_category", "system_category",
    "display_category", "tagline", "description", "latitude", "longitude",
    "rating", "review_count", "opening_hours", "address", "town", "phone",
    "website", "logo", "images",
)
_OFFER_COLUMNS = ("id", "business_id", "city", "name", "value", "status")
_EVENT_COLUMNS = (
    "id", "business_id", "city", "title", "description", "event_type",
    "event_date", "start_time", "end_time", "location", "ticket_url",
    "image_url", "status",
)


def _upsert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT OR REPLACE INTO {table} ({', '.join(columns)}) VALUES ({placeholders});"


def _row_to_business(row: Mapping[str, Any]) -> BusinessRecord:
    data = dict(row)
    data.pop("status", None)
    hours = data.get("opening_hours")
    if hours:
        try:
            data["opening_hours"] = json.loads(hours)
        except json.JSONDecodeError:
            # Free-text hours ("Open 24 hours") are stored verbatim.
            data["opening_hours"] = hours
    data["images"] = json.loads(data.get("images") or "[]")
    return BusinessRecord.model_validate(data)


class SQLiteBusinessStore(IBusinessStore):
    """SQLite-backed directory reads (and seeding helpers)."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("directory_db_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # IBusinessStore implementation
    # ------------------------------------------------------------------

    async def fetch_tier(self, city: str, tier: BusinessTier) -> list[BusinessRecord]:
        rows = await self._fetch_all(
            f"SELECT {', '.join(_BUSINESS_COLUMNS)} FROM businesses "
            "WHERE city = ? AND tier = ? AND status = 'approved' ORDER BY name",
            (city.lower(), tier.value),
        )
        return [_row_to_business(r) for r in rows]

    async def fetch_offers(
        self,
        city: str,
        business_ids: list[str] | None = None,
        limit: int = 10,
    ) -> list[Offer]:
        sql = (
            "SELECT o.id, o.business_id, b.name AS business_name, o.name, o.value, o.status, o.city "
            "FROM offers o JOIN businesses b ON b.id = o.business_id "
            "WHERE o.city = ? AND o.status = 'approved' AND b.status = 'approved'"
        )
        params: list[Any] = [city.lower()]
        if business_ids is not None:
            if not business_ids:
                return []
            sql += f" AND o.business_id IN ({', '.join('?' for _ in business_ids)})"
            params.extend(business_ids)
        sql += " ORDER BY b.tier = 'paid' DESC, o.rowid LIMIT ?"
        params.append(limit)

        rows = await self._fetch_all(sql, tuple(params))
        return [Offer.model_validate(dict(r)) for r in rows]

    async def count_offers(self, city: str) -> dict[str, int]:
        rows = await self._fetch_all(
            "SELECT business_id, COUNT(*) AS n FROM offers "
            "WHERE city = ? AND status = 'approved' GROUP BY business_id",
            (city.lower(),),
        )
        return {r["business_id"]: r["n"] for r in rows}

    async def fetch_events(
        self,
        city: str,
        on_date: date | None = None,
        from_date: date | None = None,
        limit: int = 5,
    ) -> list[Event]:
        sql = (
            "SELECT e.id, e.business_id, b.name AS business_name, e.title, e.description, "
            "e.event_type, e.event_date, e.start_time, e.end_time, e.location, "
            "e.ticket_url, e.image_url, e.status, e.city "
            "FROM events e JOIN businesses b ON b.id = e.business_id "
            "WHERE e.city = ? AND e.status = 'approved'"
        )
        params: list[Any] = [city.lower()]
        if on_date is not None:
            sql += " AND e.event_date = ?"
            params.append(on_date.isoformat())
        elif from_date is not None:
            sql += " AND e.event_date >= ?"
            params.append(from_date.isoformat())
        sql += " ORDER BY e.event_date, e.start_time LIMIT ?"
        params.append(limit)

        rows = await self._fetch_all(sql, tuple(params))
        return [Event.model_validate(dict(r)) for r in rows]

    async def get_business(self, business_id: str) -> BusinessRecord | None:
        rows = await self._fetch_all(
            f"SELECT {', '.join(_BUSINESS_COLUMNS)} FROM businesses WHERE id = ? AND status = 'approved'",
            (business_id,),
        )
        return _row_to_business(rows[0]) if rows else None

    def get_provider_name(self) -> str:
        return "sqlite"

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    async def seed(self, payload: Mapping[str, Any]) -> dict[str, int]:
        """Upsert ``businesses``, ``offers`` and ``events`` from *payload*.

        Returns the number of rows written per table.
        """
        businesses = [self._business_row(b) for b in payload.get("businesses", [])]
        offers = [self._simple_row(o, _OFFER_COLUMNS, {"value": "", "status": "approved"}) for o in payload.get("offers", [])]
        events = [
            self._simple_row(
                e,
                _EVENT_COLUMNS,
                {"description": "", "event_type": "Other", "location": "", "status": "approved"},
            )
            for e in payload.get("events", [])
        ]

        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.executemany(_upsert_sql("businesses", _BUSINESS_COLUMNS), businesses)
                await db.executemany(_upsert_sql("offers", _OFFER_COLUMNS), offers)
                await db.executemany(_upsert_sql("events", _EVENT_COLUMNS), events)
                await db.commit()
        except aiosqlite.Error as exc:
            raise DataSourceError(
                message=f"SQLite seed failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        counts = {"businesses": len(businesses), "offers": len(offers), "events": len(events)}
        logger.info("directory_seeded", path=str(self._db_path), **counts)
        return counts

    async def seed_from_json(self, path: str | Path) -> dict[str, int]:
        """Load a JSON fixture file and :meth:`seed` it."""
        with Path(path).open(encoding="utf-8") as fh:
            payload = json.load(fh)
        return await self.seed(payload)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch_all(self, sql: str, params: tuple[Any, ...]) -> list[aiosqlite.Row]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise DataSourceError(
                message=f"SQLite read failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @staticmethod
    def _business_row(raw: Mapping[str, Any]) -> tuple[Any, ...]:
        record = BusinessRecord.model_validate(raw)
        hours = record.opening_hours
        if isinstance(hours, dict):
            hours = json.dumps(hours)
        values = record.model_dump()
        values.update(
            city=record.city.lower(),
            tier=record.tier.value,
            status=raw.get("status", "approved"),
            opening_hours=hours,
            images=json.dumps(record.images),
        )
        return tuple(values[c] for c in _BUSINESS_COLUMNS)

    @staticmethod
    def _simple_row(
        raw: Mapping[str, Any],
        columns: tuple[str, ...],
        defaults: Mapping[str, Any],
    ) -> tuple[Any, ...]:
        values = {**defaults, **raw}
        values["city"] = str(values.get("city", "")).lower()
        return tuple(values.get(c) for c in columns)
