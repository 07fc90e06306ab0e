"""
Sales API Endpoints

Stored sales observations for a business, passed through as recorded.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from syntera.database.store import RecordStore
from syntera.schemas import SalesRecordCreate, SalesRecordRead
from syntera.serving.api.dependencies import get_record_store
from syntera.serving.api.errors import unwrap

router = APIRouter()


@router.get("/{business_id}", response_model=List[SalesRecordRead])
async def list_sales(
    business_id: str,
    store: RecordStore = Depends(get_record_store),
) -> List[SalesRecordRead]:
    """All records for a business, newest first by date."""
    records = unwrap(await store.list_sales_by_business(business_id), "Failed to fetch sales data")
    return [SalesRecordRead.model_validate(r) for r in records]


@router.get("/{business_id}/latest", response_model=Optional[SalesRecordRead])
async def latest_sales(
    business_id: str,
    store: RecordStore = Depends(get_record_store),
) -> Optional[SalesRecordRead]:
    """Most recent record, or ``null`` when the business has none."""
    record = unwrap(
        await store.get_latest_sales_record(business_id),
        "Failed to fetch latest sales data",
    )
    if record is None:
        return None
    return SalesRecordRead.model_validate(record)


@router.post("", response_model=SalesRecordRead)
async def create_sales(
    payload: SalesRecordCreate,
    store: RecordStore = Depends(get_record_store),
) -> SalesRecordRead:
    record = unwrap(await store.create_sales_record(payload), "Failed to create sales data")
    return SalesRecordRead.model_validate(record)
