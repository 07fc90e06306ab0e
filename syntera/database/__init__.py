"""
Database Module
"""
from .models import Base, User, Message, Feedback, SalesRecord
from .connection import init_database, close_database, get_db, get_db_dependency
from .results import Ok, Err, StoreErrorKind, StoreResult

__all__ = [
    "Base",
    "User",
    "Message",
    "Feedback",
    "SalesRecord",
    "init_database",
    "close_database",
    "get_db",
    "get_db_dependency",
    "Ok",
    "Err",
    "StoreErrorKind",
    "StoreResult",
]
