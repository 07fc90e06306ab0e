"""
Demo Data Seeding

Creates a demo business account in the ``Sales`` category with a daily sales
history, plus a demo consumer, so the dashboard has rows to show.

Usage:
    python -m syntera.database.seed --days 30
    syntera-seed --days 30 --seed 7
"""

import argparse
import asyncio
import random
from datetime import timedelta
from typing import List, Optional

import structlog

from syntera.config.logging import configure_logging
from syntera.database.connection import close_database, get_db, init_database
from syntera.database.models import SalesRecord, User, UserType, utc_now
from syntera.database.results import Err
from syntera.database.store import RecordStore
from syntera.schemas import SalesRecordCreate, UserCreate

logger = structlog.get_logger(__name__)

DEMO_BUSINESS = UserCreate(
    business_name="Syntera Demo Store",
    email="demo-business@syntera.example",
    password="demo123",
    type=UserType.BUSINESS,
    category="Sales",
)

DEMO_CONSUMER = UserCreate(
    username="demo_consumer",
    email="demo-consumer@syntera.example",
    password="12345678",
    type=UserType.CONSUMER,
    unique_code="DEMO",
    whatsapp="+10000000000",
)


async def ensure_user(store: RecordStore, data: UserCreate) -> User:
    """Return the existing account for the email, creating it if missing."""
    existing = await store.get_user_by_email(data.email)
    if isinstance(existing, Err):
        raise RuntimeError(existing.message)
    if existing.value is not None:
        logger.info("Demo user already present", email=data.email)
        return existing.value

    created = await store.create_user(data)
    if isinstance(created, Err):
        raise RuntimeError(created.message)
    logger.info("Demo user created", email=data.email, user_id=created.value.id)
    return created.value


def generate_daily_sales(business_id: str, days: int, rng: random.Random) -> List[SalesRecordCreate]:
    """One observation per day, oldest first. Amounts are in cents."""
    records = []
    for _ in range(days):
        conversions = rng.randint(80, 220)
        avg_order_value = rng.randint(4_500, 12_000)
        records.append(SalesRecordCreate(
            business_id=business_id,
            revenue=conversions * avg_order_value,
            conversions=conversions,
            avg_order_value=avg_order_value,
        ))
    return records


async def seed_sales_history(store: RecordStore, business_id: str, days: int, seed: Optional[int] = None) -> List[SalesRecord]:
    rng = random.Random(seed)
    today = utc_now().replace(hour=12, minute=0, second=0, microsecond=0)
    inserted = []

    for offset, data in enumerate(generate_daily_sales(business_id, days, rng)):
        observed_at = today - timedelta(days=days - 1 - offset)
        result = await store.create_sales_record(data, date=observed_at)
        if isinstance(result, Err):
            raise RuntimeError(result.message)
        inserted.append(result.value)

    logger.info("Sales history seeded", business_id=business_id, records=len(inserted))
    return inserted


async def main(days: int, seed: Optional[int]) -> None:
    configure_logging()
    logger.info("Starting database seeding...")
    await init_database()

    try:
        async with get_db() as db:
            store = RecordStore(db)
            business = await ensure_user(store, DEMO_BUSINESS)
            await ensure_user(store, DEMO_CONSUMER)
            await seed_sales_history(store, business.id, days, seed)
        logger.info("Database seeding completed successfully!")
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        raise
    finally:
        await close_database()


def cli() -> None:
    parser = argparse.ArgumentParser(description="Seed Syntera demo data")
    parser.add_argument("--days", type=int, default=30, help="Days of sales history (default: 30)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args()

    asyncio.run(main(args.days, args.seed))


if __name__ == "__main__":
    cli()
