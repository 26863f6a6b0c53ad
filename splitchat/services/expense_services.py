import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from splitchat.models.expense import Expense
from splitchat.core.utils import qround
from decimal import Decimal
from fastapi import HTTPException

logger = logging.getLogger(__name__)

async def create_expense(db: AsyncSession, data, user_id: str, split_bill_id: int | None = None):
    expense = Expense(
        user_id=user_id,
        group_id=data.group_id,
        amount=qround(Decimal(str(data.amount))),
        description=data.description,
        category=data.category or "Other",
        split_bill_id=split_bill_id,
        is_deleted=False
    )
    db.add(expense)
    await db.commit()
    await db.refresh(expense)

    logger.info("Expense %s recorded for %s: %s (%s)", expense.id, user_id, expense.amount, expense.category)
    return expense

async def delete_expense(db: AsyncSession, user_id: str, expense_id: int):
    q = select(Expense).where(Expense.id == expense_id, Expense.is_deleted == False)
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    # Authorization: only the owner can delete
    if expense.user_id != user_id:
        raise HTTPException(403, "You cannot delete this expense")

    expense.is_deleted = True
    await db.commit()

    return {"status": "deleted"}

async def get_my_expenses(
    db: AsyncSession,
    user_id: str,
    limit: int | None = None,
    exclude_split_bills: bool = False
):
    q = (
        select(Expense)
        .where(Expense.user_id == user_id, Expense.is_deleted == False)
        .order_by(Expense.created_at.desc(), Expense.id.desc())
    )

    if exclude_split_bills:
        q = q.where(Expense.split_bill_id.is_(None))

    if limit:
        q = q.limit(limit)

    res = await db.execute(q)
    return res.scalars().all()

async def get_group_expenses(
    db: AsyncSession,
    group_id: str,
    limit: int = 10,
    exclude_split_bills: bool = False
):
    q = (
        select(Expense)
        .where(Expense.group_id == group_id, Expense.is_deleted == False)
        .order_by(Expense.created_at.desc(), Expense.id.desc())
    )

    if exclude_split_bills:
        q = q.where(Expense.split_bill_id.is_(None))

    q = q.limit(limit)

    res = await db.execute(q)
    return res.scalars().all()

async def get_category_totals(
    db: AsyncSession,
    user_id: str
):
    q = (
        select(
            Expense.category,
            func.coalesce(func.sum(Expense.amount), 0),
            func.count(Expense.id)
        )
        .where(Expense.user_id == user_id, Expense.is_deleted == False)
        .group_by(Expense.category)
        .order_by(func.sum(Expense.amount).desc())
    )

    res = await db.execute(q)
    rows = res.all()

    total = Decimal("0")
    categories = []

    for category, amount, count in rows:
        amt = qround(Decimal(str(amount)))
        total += amt

        categories.append({
            "category": category,
            "total": str(amt),
            "count": count
        })

    return {
        "total_spent": str(qround(total)),
        "categories": categories
    }
