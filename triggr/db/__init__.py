"""Database engine and sessions."""

from triggr.db.database import AsyncSessionLocal, Base, engine, get_db, init_db

__all__ = ["AsyncSessionLocal", "Base", "engine", "get_db", "init_db"]
