import logging
from collections import defaultdict
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from splitchat.core import command_parser, split_engine
from splitchat.core.config import settings
from splitchat.core.exceptions import InvalidPercentages
from splitchat.core.utils import qround, unique_in_order
from splitchat.schemas.command import CommandRequest, CommandResult, CategoryBreakdown
from splitchat.schemas.expense import ExpenseCreate, ExpenseOut
from splitchat.schemas.split_bill import ParticipantIn, SplitBillCreate
from splitchat.services import expense_services, split_bill_services

logger = logging.getLogger(__name__)

CURRENCY_SIGNS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}

PREDICT_WINDOW = 30
SUMMARY_LIMIT = 10

def _money(amount: Decimal) -> str:
    sign = CURRENCY_SIGNS.get(settings.DEFAULT_CURRENCY)
    return f"{sign}{amount}" if sign else f"{amount} {settings.DEFAULT_CURRENCY}"

async def execute_command(db: AsyncSession, data: CommandRequest, user_id: str) -> CommandResult:
    parsed = command_parser.parse(data.message)
    logger.debug("Message from %s parsed as %s", user_id, parsed.type)

    if parsed.type == "split":
        return await _execute_split(db, parsed.data, data, user_id)
    if parsed.type == "expense":
        return await _execute_expense(db, parsed.data, data, user_id)
    if parsed.type == "predict":
        return await _execute_predict(db, user_id)
    if parsed.type == "summary":
        return await _execute_summary(db, data.group_id, user_id)

    return CommandResult(type="unknown", executed=False, data={})

def build_split_participants(parsed: dict, data: CommandRequest, user_id: str):
    """Share out a parsed @split between the people it concerns.

    A direct chat puts the whole amount on the other person. A group chat
    splits between the creator and every distinct mention.
    """
    amount = parsed["amount"]

    if data.recipient_id and not data.group_id:
        return [ParticipantIn(user_id=data.recipient_id, amount=amount)]

    others = [m for m in unique_in_order(parsed["participants"]) if m != user_id]
    if not others:
        raise HTTPException(400, "No participants mentioned for split bill")

    users = [user_id] + others

    if parsed["splitType"] == "percentage":
        percentages = command_parser.extract_percentages(data.message)
        if len(percentages) != len(users):
            raise InvalidPercentages()
        shares = split_engine.split_by_percentage(amount, percentages)
    else:
        shares = split_engine.split_equally(amount, len(users))

    return [ParticipantIn(user_id=uid, amount=share) for uid, share in zip(users, shares)]

async def _execute_split(db: AsyncSession, parsed: dict, data: CommandRequest, user_id: str):
    participants = build_split_participants(parsed, data, user_id)
    is_direct = bool(data.recipient_id and not data.group_id)
    category = parsed.get("category", command_parser.DEFAULT_CATEGORY)

    bill = await split_bill_services.create_split_bill(
        db,
        SplitBillCreate(
            description=parsed["description"],
            total_amount=parsed["amount"],
            participants=participants,
            split_type="equal" if is_direct else parsed["splitType"],
            category=category,
            group_id=data.group_id,
        ),
        created_by=user_id
    )

    result = {"split_bill": bill}

    # Group bills also show up in the group's expense feed
    if data.group_id:
        expense = await expense_services.create_expense(
            db,
            ExpenseCreate(
                description=parsed["description"],
                amount=bill.total_amount,
                category=category,
                group_id=data.group_id,
            ),
            user_id,
            split_bill_id=bill.id
        )
        result["expense"] = ExpenseOut.model_validate(expense)

    return CommandResult(type="split", executed=True, data=result)

async def _split_expense(db: AsyncSession, parsed: dict, data: CommandRequest, user_id: str):
    others = [m for m in unique_in_order(parsed.get("participants", [])) if m != user_id]
    if not others:
        raise HTTPException(400, "No participants mentioned for split expense")

    users = [user_id] + others
    shares = split_engine.split_equally(parsed["amount"], len(users))

    return await split_bill_services.create_split_bill(
        db,
        SplitBillCreate(
            description=f"{parsed['description']} (split expense)",
            total_amount=parsed["amount"],
            participants=[ParticipantIn(user_id=uid, amount=share) for uid, share in zip(users, shares)],
            split_type="equal",
            category=parsed["category"],
            group_id=data.group_id,
        ),
        created_by=user_id
    )

async def _execute_expense(db: AsyncSession, parsed: dict, data: CommandRequest, user_id: str):
    bill = None
    # --split only means something inside a group
    if parsed.get("split") and data.group_id:
        bill = await _split_expense(db, parsed, data, user_id)

    expense = await expense_services.create_expense(
        db,
        ExpenseCreate(
            description=parsed["description"],
            amount=parsed["amount"],
            category=parsed["category"],
            group_id=data.group_id,
        ),
        user_id,
        split_bill_id=bill.id if bill else None
    )

    result = {"expense": ExpenseOut.model_validate(expense)}
    if bill:
        result["split_bill"] = bill

    return CommandResult(type="expense", executed=True, data=result)

async def _execute_predict(db: AsyncSession, user_id: str):
    expenses = await expense_services.get_my_expenses(db, user_id, limit=PREDICT_WINDOW)

    if not expenses:
        return CommandResult(
            type="predict",
            executed=True,
            data={
                "prediction": "You don't have enough expense data yet. "
                              "Start tracking your expenses to get spending predictions!",
                "breakdown": []
            }
        )

    totals = defaultdict(lambda: Decimal("0"))
    counts = defaultdict(int)
    for e in expenses:
        category = e.category or "Other"
        totals[category] += Decimal(str(e.amount))
        counts[category] += 1

    total = sum(totals.values(), Decimal("0"))
    average = qround(total / len(expenses))

    breakdown = sorted(
        (CategoryBreakdown(category=c, total=qround(t), count=counts[c]) for c, t in totals.items()),
        key=lambda b: b.total,
        reverse=True
    )
    top = breakdown[0]

    prediction = (
        f"Based on your last {len(expenses)} expenses, you spend an average of "
        f"{_money(average)} per transaction. "
        f"{top.category} is your biggest category at {_money(top.total)}."
    )

    return CommandResult(
        type="predict",
        executed=True,
        data={
            "prediction": prediction,
            "average": average,
            "total": qround(total),
            "breakdown": breakdown
        }
    )

async def _execute_summary(db: AsyncSession, group_id: str | None, user_id: str):
    if group_id:
        expenses = await expense_services.get_group_expenses(
            db, group_id, limit=SUMMARY_LIMIT, exclude_split_bills=True
        )
        bills = await split_bill_services.get_recent_group_split_bills(db, group_id, limit=SUMMARY_LIMIT)
    else:
        expenses = await expense_services.get_my_expenses(
            db, user_id, limit=SUMMARY_LIMIT, exclude_split_bills=True
        )
        bills = (await split_bill_services.list_user_split_bills(db, user_id, limit=SUMMARY_LIMIT)).split_bills

    transactions = [
        {
            "type": "expense",
            "description": e.description or "Unknown expense",
            "amount": qround(Decimal(str(e.amount))),
            "by": e.user_id,
            "category": e.category or "Other",
            "date": e.created_at
        }
        for e in expenses
    ] + [
        {
            "type": "split",
            "description": b.description,
            "amount": b.total_amount,
            "by": b.created_by,
            "category": b.category,
            "date": b.created_at,
            "is_settled": b.is_settled,
            "participants": [
                {"user_id": p.user_id, "amount": p.amount, "is_paid": p.is_paid}
                for p in b.participants
            ]
        }
        for b in bills
    ]

    transactions.sort(key=lambda t: (t["date"] is not None, t["date"]), reverse=True)

    expense_total = qround(sum((Decimal(str(e.amount)) for e in expenses), Decimal("0")))
    split_total = qround(sum((b.total_amount for b in bills), Decimal("0")))

    return CommandResult(
        type="summary",
        executed=True,
        data={
            "transactions": transactions[:SUMMARY_LIMIT],
            "totals": {
                "expenses": expense_total,
                "split_bills": split_total,
                "total": expense_total + split_total
            }
        }
    )
