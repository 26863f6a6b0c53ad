from decimal import Decimal

import pytest
from fastapi import HTTPException

from splitchat.core.exceptions import InvalidAmount, InvalidPercentages
from splitchat.schemas.command import CommandRequest
from splitchat.services import expense_services
from splitchat.services.command_services import build_split_participants, execute_command


async def test_group_split_includes_creator(db):
    result = await execute_command(
        db, CommandRequest(message="@split Dinner ₹120 @alice @bob", group_id="g1"), "carol"
    )

    assert result.type == "split"
    assert result.executed is True

    bill = result.data["split_bill"]
    assert bill.group_id == "g1"
    assert [(p.user_id, p.amount, p.is_paid) for p in bill.participants] == [
        ("carol", Decimal("40.00"), True),
        ("alice", Decimal("40.00"), False),
        ("bob", Decimal("40.00"), False),
    ]


async def test_direct_split_puts_full_amount_on_recipient(db):
    result = await execute_command(
        db, CommandRequest(message="@split Movie 250", recipient_id="alice"), "carol"
    )

    bill = result.data["split_bill"]
    assert bill.group_id is None
    assert [(p.user_id, p.amount) for p in bill.participants] == [("alice", Decimal("250.00"))]
    assert bill.created_by == "carol"


async def test_group_split_without_mentions(db):
    with pytest.raises(HTTPException) as exc:
        await execute_command(db, CommandRequest(message="@split Dinner 120", group_id="g1"), "carol")
    assert exc.value.status_code == 400


def test_split_shares_leftover_cents():
    participants = build_split_participants(
        {"amount": Decimal("100"), "participants": ["alice", "bob"], "splitType": "equal"},
        CommandRequest(message="@split Dinner 100 @alice @bob", group_id="g1"),
        "carol",
    )
    assert [p.amount for p in participants] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]


def test_self_mention_and_repeats_are_folded():
    participants = build_split_participants(
        {"amount": Decimal("90"), "participants": ["carol", "alice", "alice"], "splitType": "equal"},
        CommandRequest(message="@split Taxi 90 @carol @alice @alice", group_id="g1"),
        "carol",
    )
    assert [p.user_id for p in participants] == ["carol", "alice"]


async def test_percentage_split(db):
    result = await execute_command(
        db, CommandRequest(message="@split Trip 200 @alice 60% 40%", group_id="g1"), "carol"
    )

    bill = result.data["split_bill"]
    assert bill.split_type == "percentage"
    assert [p.amount for p in bill.participants] == [Decimal("120.00"), Decimal("80.00")]


async def test_percentage_split_must_total_100(db):
    with pytest.raises(InvalidPercentages):
        await execute_command(
            db, CommandRequest(message="@split Trip 200 @alice 60% 60%", group_id="g1"), "carol"
        )


async def test_expense_command_records_expense(db):
    result = await execute_command(
        db, CommandRequest(message="@addexpense Coffee ₹25 category:Food", group_id="g1"), "carol"
    )

    assert result.type == "expense"
    expense = result.data["expense"]
    assert expense.amount == Decimal("25.00")
    assert expense.category == "Food"
    assert expense.group_id == "g1"

    mine = await expense_services.get_my_expenses(db, "carol")
    assert len(mine) == 1


async def test_predict_without_history(db):
    result = await execute_command(db, CommandRequest(message="@predict"), "carol")

    assert result.type == "predict"
    assert "enough expense data" in result.data["prediction"]


async def test_predict_with_history(db):
    for message in ("@addexpense Lunch 200 cat:Food", "@addexpense Taxi 100 cat:Transport", "@addexpense Dinner 300 cat:Food"):
        await execute_command(db, CommandRequest(message=message), "carol")

    result = await execute_command(db, CommandRequest(message="@predict"), "carol")

    assert result.data["average"] == Decimal("200.00")
    assert result.data["breakdown"][0].category == "Food"
    assert result.data["breakdown"][0].total == Decimal("500.00")
    assert "last 3 expenses" in result.data["prediction"]
    assert "₹200.00" in result.data["prediction"]


async def test_summary_for_group(db):
    await execute_command(db, CommandRequest(message="@addexpense Snacks 50", group_id="g1"), "carol")
    await execute_command(db, CommandRequest(message="@split Dinner 120 @alice", group_id="g1"), "carol")
    await execute_command(db, CommandRequest(message="@addexpense Other 999", group_id="g2"), "carol")

    result = await execute_command(db, CommandRequest(message="@summary", group_id="g1"), "alice")

    assert result.type == "summary"
    assert {t["type"] for t in result.data["transactions"]} == {"expense", "split"}
    assert result.data["totals"] == {
        "expenses": Decimal("50.00"),
        "split_bills": Decimal("120.00"),
        "total": Decimal("170.00"),
    }


async def test_plain_message_does_nothing(db):
    result = await execute_command(db, CommandRequest(message="see you at 8"), "carol")

    assert result.type == "unknown"
    assert result.executed is False


async def test_group_split_records_group_expense(db):
    result = await execute_command(
        db, CommandRequest(message="@split Dinner 120 @alice #food", group_id="g1"), "carol"
    )

    bill = result.data["split_bill"]
    expense = result.data["expense"]
    assert bill.category == "Food"
    assert expense.split_bill_id == bill.id
    assert expense.amount == Decimal("120.00")
    assert expense.category == "Food"
    assert expense.group_id == "g1"


async def test_direct_split_records_no_expense(db):
    result = await execute_command(
        db, CommandRequest(message="@split Movie 250", recipient_id="alice"), "carol"
    )

    assert "expense" not in result.data
    assert await expense_services.get_my_expenses(db, "carol") == []


async def test_expense_with_split_flag_creates_split_bill(db):
    result = await execute_command(
        db, CommandRequest(message="@addexpense Cab 300 #Transport --split @alice @bob", group_id="g1"), "carol"
    )

    bill = result.data["split_bill"]
    expense = result.data["expense"]
    assert bill.description == "Cab (split expense)"
    assert bill.category == "Transport"
    assert [(p.user_id, p.amount, p.is_paid) for p in bill.participants] == [
        ("carol", Decimal("100.00"), True),
        ("alice", Decimal("100.00"), False),
        ("bob", Decimal("100.00"), False),
    ]
    assert expense.split_bill_id == bill.id
    assert expense.category == "Transport"


async def test_split_flag_outside_a_group_only_records_expense(db):
    result = await execute_command(db, CommandRequest(message="@addexpense Cab 300 -s @alice"), "carol")

    assert "split_bill" not in result.data
    assert result.data["expense"].split_bill_id is None


async def test_split_flag_without_mentions(db):
    with pytest.raises(HTTPException) as exc:
        await execute_command(
            db, CommandRequest(message="@addexpense Cab 300 --split", group_id="g1"), "carol"
        )
    assert exc.value.status_code == 400
    assert await expense_services.get_my_expenses(db, "carol") == []


async def test_amount_too_small_to_split(db):
    with pytest.raises(InvalidAmount) as exc:
        await execute_command(
            db, CommandRequest(message="@split x 0.01 @alice @bob", group_id="g1"), "carol"
        )
    assert exc.value.kind == "share_too_small"
