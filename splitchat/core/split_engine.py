"""
Split bill rules: validation of a proposed bill, share computation, and the
per-participant payment/rejection transitions.

Every function here is pure. Transitions return a new `SplitBill` and leave
the one passed in untouched; persistence is the caller's job.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from splitchat.core.exceptions import (
    AmountMismatch,
    BillAlreadySettled,
    CannotRejectOwnBill,
    DuplicateParticipant,
    InvalidAmount,
    InvalidParticipant,
    InvalidPercentages,
    MissingDescription,
    NoParticipants,
    ParticipantAlreadyPaid,
    ParticipantNotFound,
    ParticipantRejected,
    ShareTooSmall,
)
from splitchat.core.utils import TOLERANCE, qfloor, qround, to_decimal
from splitchat.schemas.split_bill import SplitBill, SplitBillCreate

logger = logging.getLogger(__name__)


def validate_create(data: SplitBillCreate) -> None:
    if not data.description or not data.description.strip():
        raise MissingDescription()

    # Amounts are stored to the cent, so the rules below see the stored values
    total = to_decimal(data.total_amount)
    if total is not None:
        total = qround(total)
    if total is None or total <= 0:
        raise InvalidAmount()

    if not data.participants:
        raise NoParticipants()

    amounts: List[Decimal] = []
    for p in data.participants:
        amount = to_decimal(p.amount)
        if amount is not None:
            amount = qround(amount)
        if not p.user_id or not str(p.user_id).strip() or amount is None or amount <= 0:
            raise InvalidParticipant()
        amounts.append(amount)

    user_ids = [str(p.user_id) for p in data.participants]
    if len(user_ids) != len(set(user_ids)):
        raise DuplicateParticipant()

    participant_total = sum(amounts, Decimal("0"))
    if abs(total - participant_total) > TOLERANCE:
        logger.warning("Amount mismatch: total=%s participants=%s", total, participant_total)
        raise AmountMismatch(total, participant_total)


def compute_equal_share(total_amount, participant_count: int) -> Decimal:
    if participant_count <= 0:
        raise NoParticipants()
    return qround(Decimal(str(total_amount)) / participant_count)


def _check_shares(shares: List[Decimal]) -> None:
    if any(s <= 0 for s in shares):
        raise ShareTooSmall()


def split_equally(total_amount, participant_count: int) -> List[Decimal]:
    """Equal shares that add up to the total to the cent.

    Leftover cents go one each to the first shares, e.g. 100 over 3 gives
    [33.34, 33.33, 33.33].
    """
    if participant_count <= 0:
        raise NoParticipants()

    total = qround(Decimal(str(total_amount)))
    base = qfloor(total / participant_count)
    remainder = int((total - base * participant_count) / Decimal("0.01"))

    shares = [
        base + Decimal("0.01") if i < remainder else base
        for i in range(participant_count)
    ]
    _check_shares(shares)
    return shares


def split_by_percentage(total_amount, percentages) -> List[Decimal]:
    if not percentages:
        raise NoParticipants()

    pcts = [to_decimal(p) for p in percentages]
    if any(p is None or p <= 0 for p in pcts) or abs(sum(pcts) - Decimal("100")) > TOLERANCE:
        raise InvalidPercentages()

    total = qround(Decimal(str(total_amount)))
    shares = [qround(total * p / Decimal("100")) for p in pcts[:-1]]
    # last share takes whatever rounding left over
    shares.append(total - sum(shares, Decimal("0")))
    _check_shares(shares)
    return shares


def is_settled(bill: SplitBill) -> bool:
    return bill.is_settled


def is_cancelled(bill: SplitBill) -> bool:
    return bill.is_cancelled


def _find_participant(bill: SplitBill, user_id: str) -> int:
    for index, p in enumerate(bill.participants):
        if p.user_id == str(user_id):
            return index
    raise ParticipantNotFound()


def mark_paid(bill: SplitBill, user_id: str, now: datetime | None = None) -> SplitBill:
    index = _find_participant(bill, user_id)
    participant = bill.participants[index]

    if participant.is_paid:
        return bill

    if participant.is_rejected:
        raise ParticipantRejected()

    updated = bill.model_copy(deep=True)
    paid = updated.participants[index]
    paid.is_paid = True
    paid.paid_at = now or datetime.now(timezone.utc)

    logger.info("Split bill %s: %s marked paid (settled=%s)", bill.id, user_id, updated.is_settled)
    return updated


def reject(bill: SplitBill, user_id: str, now: datetime | None = None) -> SplitBill:
    index = _find_participant(bill, user_id)
    participant = bill.participants[index]

    if participant.is_rejected:
        return bill

    if str(user_id) == bill.created_by:
        raise CannotRejectOwnBill()

    if bill.is_settled:
        raise BillAlreadySettled()

    if participant.is_paid:
        raise ParticipantAlreadyPaid()

    updated = bill.model_copy(deep=True)
    rejected = updated.participants[index]
    rejected.is_rejected = True
    rejected.rejected_at = now or datetime.now(timezone.utc)

    logger.info("Split bill %s: %s rejected (cancelled=%s)", bill.id, user_id, updated.is_cancelled)
    return updated
