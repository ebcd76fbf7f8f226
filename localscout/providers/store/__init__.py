"""Structured directory store adapters.

One concrete implementation of IBusinessStore
(localscout/interfaces/business_store.py):
    - SQLiteBusinessStore: aiosqlite, businesses / offers / events tables
"""

from localscout.providers.store.sqlite_business_store import SQLiteBusinessStore

__all__ = ["SQLiteBusinessStore"]
