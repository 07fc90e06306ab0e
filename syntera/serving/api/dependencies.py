"""
Shared route dependencies
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from syntera.database.connection import get_db_dependency
from syntera.database.store import RecordStore


async def get_record_store(db: AsyncSession = Depends(get_db_dependency)) -> RecordStore:
    return RecordStore(db)
