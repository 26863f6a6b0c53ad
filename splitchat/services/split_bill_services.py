import logging
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, case
from fastapi import HTTPException
from splitchat.models.split_bill import SplitBill
from splitchat.models.split_participant import SplitParticipant
from splitchat.schemas import split_bill as schemas
from splitchat.core import split_engine
from splitchat.core.config import settings
from splitchat.core.exceptions import SelfOnlySplit
from splitchat.core.utils import qround

logger = logging.getLogger(__name__)

async def _load_bill(db: AsyncSession, split_bill_id: int) -> SplitBill:
    q = (
        select(SplitBill)
        .where(SplitBill.id == split_bill_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    bill = res.scalar_one_or_none()

    if not bill:
        raise HTTPException(404, "Split bill not found")

    return bill

def _is_member(bill: SplitBill, user_id: str) -> bool:
    return bill.created_by == user_id or any(p.user_id == user_id for p in bill.participants)

async def create_split_bill(db: AsyncSession, data: schemas.SplitBillCreate, created_by: str):
    split_engine.validate_create(data)

    user_ids = [str(p.user_id) for p in data.participants]

    # Direct bills need somebody other than the creator to owe money
    if not data.group_id and all(uid == created_by for uid in user_ids):
        raise SelfOnlySplit()

    now = datetime.now(timezone.utc)
    bill = SplitBill(
        description=data.description.strip(),
        total_amount=qround(Decimal(str(data.total_amount))),
        currency=data.currency or settings.DEFAULT_CURRENCY,
        created_by=created_by,
        group_id=data.group_id,
        split_type=data.split_type,
        category=data.category or "Other",
        notes=data.notes,
    )

    for position, p in enumerate(data.participants):
        # The creator fronted the money, so their own share starts paid
        is_creator = str(p.user_id) == created_by
        bill.participants.append(SplitParticipant(
            position=position,
            user_id=str(p.user_id),
            amount=qround(Decimal(str(p.amount))),
            is_paid=is_creator,
            is_rejected=False,
            paid_at=now if is_creator else None,
        ))

    if all(p.is_paid for p in bill.participants):
        bill.is_settled = True
        bill.settled_at = now

    db.add(bill)
    await db.commit()

    logger.info("Split bill %s created by %s (%s participants)", bill.id, created_by, len(user_ids))
    return schemas.SplitBill.model_validate(await _load_bill(db, bill.id))

async def get_split_bill(db: AsyncSession, split_bill_id: int, user_id: str):
    bill = await _load_bill(db, split_bill_id)

    if not _is_member(bill, user_id):
        raise HTTPException(403, "Access denied")

    return schemas.SplitBill.model_validate(bill)

async def _apply_transition(db: AsyncSession, split_bill_id: int, user_id: str, transition):
    bill = await _load_bill(db, split_bill_id)
    current = schemas.SplitBill.model_validate(bill)

    updated = transition(current, user_id)

    if updated is current:
        return current

    for row, p in zip(bill.participants, updated.participants):
        row.is_paid = p.is_paid
        row.is_rejected = p.is_rejected
        row.paid_at = p.paid_at
        row.rejected_at = p.rejected_at

    if updated.is_settled and not bill.is_settled:
        bill.settled_at = datetime.now(timezone.utc)
    bill.is_settled = updated.is_settled
    bill.is_cancelled = updated.is_cancelled

    await db.commit()

    return schemas.SplitBill.model_validate(await _load_bill(db, split_bill_id))

async def mark_paid(db: AsyncSession, split_bill_id: int, user_id: str):
    return await _apply_transition(db, split_bill_id, user_id, split_engine.mark_paid)

async def reject_split_bill(db: AsyncSession, split_bill_id: int, user_id: str):
    return await _apply_transition(db, split_bill_id, user_id, split_engine.reject)

def _user_filter(user_id: str):
    participant_q = select(SplitParticipant.split_bill_id).where(SplitParticipant.user_id == user_id)
    return or_(SplitBill.created_by == user_id, SplitBill.id.in_(participant_q))

async def list_user_split_bills(
    db: AsyncSession,
    user_id: str,
    status: str | None = None,
    limit: int = 20,
    offset: int = 0
):
    conditions = [_user_filter(user_id)]

    if status == "settled":
        conditions.append(SplitBill.is_settled == True)
    elif status == "pending":
        conditions.append(SplitBill.is_settled == False)

    count_q = select(func.count(SplitBill.id)).where(*conditions)
    total = (await db.execute(count_q)).scalar() or 0

    q = (
        select(SplitBill)
        .where(*conditions)
        .order_by(SplitBill.created_at.desc(), SplitBill.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)

    return schemas.SplitBillList(
        total=total,
        split_bills=[schemas.SplitBill.model_validate(b) for b in res.scalars().all()]
    )

async def list_group_split_bills(
    db: AsyncSession,
    group_id: str,
    user_id: str,
    limit: int = 20,
    offset: int = 0
):
    q = (
        select(SplitBill)
        .where(SplitBill.group_id == group_id)
        .order_by(SplitBill.created_at.desc(), SplitBill.id.desc())
    )
    res = await db.execute(q)
    bills = res.scalars().all()

    # Without a membership table, having a stake in any of the group's bills grants access
    if bills and not any(_is_member(b, user_id) for b in bills):
        raise HTTPException(403, "Access denied")

    page = bills[offset:offset + limit]
    return schemas.SplitBillList(
        total=len(bills),
        split_bills=[schemas.SplitBill.model_validate(b) for b in page]
    )

async def get_recent_group_split_bills(db: AsyncSession, group_id: str, limit: int = 10):
    q = (
        select(SplitBill)
        .where(SplitBill.group_id == group_id)
        .order_by(SplitBill.created_at.desc(), SplitBill.id.desc())
        .limit(limit)
    )
    res = await db.execute(q)
    return [schemas.SplitBill.model_validate(b) for b in res.scalars().all()]

async def get_split_bill_stats(db: AsyncSession, user_id: str):
    user_filter = _user_filter(user_id)

    overview_q = select(
        func.coalesce(func.sum(SplitBill.total_amount), 0),
        func.count(SplitBill.id),
        func.coalesce(func.sum(case((SplitBill.is_settled == True, 1), else_=0)), 0),
    ).where(user_filter)
    total_amount, count, settled = (await db.execute(overview_q)).one()

    category_q = (
        select(SplitBill.category, func.sum(SplitBill.total_amount), func.count(SplitBill.id))
        .where(user_filter)
        .group_by(SplitBill.category)
        .order_by(func.sum(SplitBill.total_amount).desc())
    )
    category_rows = (await db.execute(category_q)).all()

    recent_q = (
        select(SplitBill)
        .where(user_filter)
        .order_by(SplitBill.created_at.desc(), SplitBill.id.desc())
        .limit(5)
    )
    recent = (await db.execute(recent_q)).scalars().all()

    return schemas.SplitBillStats(
        overview=schemas.StatsOverview(
            total_amount=qround(Decimal(str(total_amount))),
            count=count,
            settled=int(settled),
            pending=count - int(settled),
        ),
        by_category=[
            schemas.CategoryTotal(category=cat, amount=qround(Decimal(str(amt))), count=n)
            for cat, amt, n in category_rows
        ],
        recent_activity=[schemas.RecentSplitBill.model_validate(b) for b in recent],
    )
