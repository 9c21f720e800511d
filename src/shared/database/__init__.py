from .database import Database, Transaction
from .engine import create_database_engine, close_database_engine

__all__ = [
    "Database",
    "Transaction",
    "create_database_engine",
    "close_database_engine",
]
