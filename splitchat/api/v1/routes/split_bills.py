from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from splitchat.db.session import get_db
from splitchat.schemas.split_bill import SplitBill, SplitBillCreate, SplitBillList, SplitBillStats
from splitchat.services.split_bill_services import (
    create_split_bill, get_split_bill, mark_paid, reject_split_bill,
    list_user_split_bills, list_group_split_bills, get_split_bill_stats
)
from splitchat.core.dependencies import get_current_user
from splitchat.core.exceptions import SplitBillError

router = APIRouter()

@router.post("/", response_model=SplitBill, status_code=201)
async def add_split_bill(data: SplitBillCreate, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    try:
        return await create_split_bill(db, data, current_user)
    except SplitBillError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/", response_model=SplitBillList)
async def my_split_bills(
    status: Literal["pending", "settled"] | None = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await list_user_split_bills(db, current_user, status=status, limit=limit, offset=offset)

@router.get("/stats", response_model=SplitBillStats)
async def split_bill_stats(
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await get_split_bill_stats(db, current_user)

@router.get("/group/{group_id}", response_model=SplitBillList)
async def group_split_bills(
    group_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await list_group_split_bills(db, group_id, current_user, limit=limit, offset=offset)

@router.get("/{split_bill_id}", response_model=SplitBill)
async def fetch(
    split_bill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await get_split_bill(db, split_bill_id, current_user)

@router.patch("/{split_bill_id}/mark-paid", response_model=SplitBill)
async def pay(split_bill_id: int, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    try:
        return await mark_paid(db, split_bill_id, current_user)
    except SplitBillError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.patch("/{split_bill_id}/reject", response_model=SplitBill)
async def reject(split_bill_id: int, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    try:
        return await reject_split_bill(db, split_bill_id, current_user)
    except SplitBillError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
